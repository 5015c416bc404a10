"""Rectangles, positioned items and groups of positioned rectangles."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, Iterable, Iterator, List, Optional, Protocol, Tuple, TypeVar


class _Shape(Protocol):
    @property
    def w(self) -> int: ...

    @property
    def h(self) -> int: ...

    def area(self) -> int: ...

    def fill_area(self) -> int: ...


_U64_MAX = (1 << 64) - 1


def _round_to_unsigned(value: float) -> int:
    """Round half away from zero and saturate into an unsigned 64-bit range."""
    if math.isnan(value) or value <= 0:
        return 0
    if math.isinf(value):
        return _U64_MAX
    whole = math.floor(value)
    if value - whole >= 0.5:
        whole += 1
    return min(int(whole), _U64_MAX)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle of a given width and height."""

    w: int
    h: int

    def area(self) -> int:
        """Return ``w * h``."""
        return self.w * self.h

    def fill_area(self) -> int:
        """A rectangle is completely filled: same as :meth:`area`."""
        return self.w * self.h


T = TypeVar("T", bound=_Shape)


@dataclass(frozen=True)
class Placement(Generic[T]):
    """An item positioned at ``(x, y)``."""

    x: int
    y: int
    item: T

    @property
    def w(self) -> int:
        return self.item.w

    @property
    def h(self) -> int:
        return self.item.h

    def area(self) -> int:
        return self.item.area()

    def fill_area(self) -> int:
        return self.item.fill_area()

    def _order_key(self) -> int:
        # smallest y first, then smallest x
        return self.x | (self.y << 8)

    def __lt__(self, other: "Placement") -> bool:
        return self._order_key() < other._order_key()

    def __le__(self, other: "Placement") -> bool:
        return self._order_key() <= other._order_key()

    def __gt__(self, other: "Placement") -> bool:
        return self._order_key() > other._order_key()

    def __ge__(self, other: "Placement") -> bool:
        return self._order_key() >= other._order_key()

    def overlaps(self, rhs: "Placement") -> bool:
        """Return whether the two placed items share a region of positive area."""
        l_x = self.x + self.item.w
        l_y = self.y + self.item.h
        r_x = rhs.x + rhs.item.w
        r_y = rhs.y + rhs.item.h
        return rhs.x < l_x and r_x > self.x and rhs.y < l_y and r_y > self.y

    def split_n(self, rhs: "Placement") -> Optional["Placement[Rect]"]:
        """Part of this region before ``rhs`` along the positive ``y`` direction."""
        if rhs.y > self.y:
            return Placement(self.x, self.y, Rect(self.item.w, max(0, rhs.y - self.y)))
        return None

    def split_s(self, rhs: "Placement") -> Optional["Placement[Rect]"]:
        """Part of this region past ``rhs`` along the ``y`` direction."""
        rhs_end = rhs.y + rhs.item.h
        own_end = self.y + self.item.h
        if rhs_end < own_end:
            return Placement(self.x, rhs_end, Rect(self.item.w, max(0, own_end - rhs_end)))
        return None

    def split_e(self, rhs: "Placement") -> Optional["Placement[Rect]"]:
        """Part of this region before ``rhs`` along the positive ``x`` direction."""
        if rhs.x > self.x:
            return Placement(self.x, self.y, Rect(max(0, rhs.x - self.x), self.item.h))
        return None

    def split_w(self, rhs: "Placement") -> Optional["Placement[Rect]"]:
        """Part of this region past ``rhs`` along the ``x`` direction."""
        rhs_end = rhs.x + rhs.item.w
        own_end = self.x + self.item.w
        if rhs_end < own_end:
            return Placement(rhs_end, self.y, Rect(max(0, own_end - rhs_end), self.item.h))
        return None

    def subtract(self, rhs: "Placement") -> List["Placement[Rect]"]:
        """Return the non-empty free regions left after removing ``rhs``."""
        parts = (self.split_n(rhs), self.split_s(rhs), self.split_e(rhs), self.split_w(rhs))
        return [p for p in parts if p is not None and p.item.area() > 0]

    def placed_rects(self) -> Iterator["Placement[Rect]"]:
        """Yield the rectangles of a placed group in absolute coordinates."""
        for p in self.item.rects:
            yield Placement(self.x + p.x, self.y + p.y, p.item)


@dataclass(frozen=True, init=False)
class RectGroup:
    """Rectangles positioned relative to a common origin."""

    rects: Tuple[Placement[Rect], ...]
    _w: int = field(init=False, repr=False, compare=False)
    _h: int = field(init=False, repr=False, compare=False)
    _fill: int = field(init=False, repr=False, compare=False)

    def __init__(self, rects: Iterable[Placement[Rect]] = ()) -> None:
        rects = tuple(rects)
        object.__setattr__(self, "rects", rects)
        if rects:
            width = max(p.x + p.w for p in rects) - min(p.x for p in rects)
            height = max(p.y + p.h for p in rects) - min(p.y for p in rects)
        else:
            width = height = 0
        object.__setattr__(self, "_w", width)
        object.__setattr__(self, "_h", height)
        object.__setattr__(self, "_fill", sum(p.item.area() for p in rects))

    @property
    def w(self) -> int:
        return self._w

    @property
    def h(self) -> int:
        return self._h

    def area(self) -> int:
        """Area of the bounding box."""
        return self._w * self._h

    def fill_area(self) -> int:
        """Sum of the areas of the member rectangles."""
        return self._fill

    def score(self, space: Placement[Rect], avg_high: float) -> int:
        """Score this group for the given free space; lower is better."""
        return space.area() - self.area() + _round_to_unsigned(avg_high)

    def combine(self, other: "RectGroup") -> Tuple["RectGroup", "RectGroup"]:
        """Return ``other`` joined to the right of and below this group."""
        beside = RectGroup(
            self.rects + tuple(Placement(p.x + self._w, p.y, p.item) for p in other.rects)
        )
        below = RectGroup(
            self.rects + tuple(Placement(p.x, p.y + self._h, p.item) for p in other.rects)
        )
        return beside, below