"""Beam search framework (beam), rectangle geometry (geometry) and a beam search rectangle packer (packing)."""

__version__ = "0.1.1"
__all__ = ["beam", "geometry", "packing"]