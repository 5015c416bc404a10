[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "beampack"
version = "0.1.1"
description = "Beam search framework and a beam search rectangle packing algorithm"
requires-python = ">=3.10"
keywords = ["beam search", "heuristic", "packing", "strip packing", "texture atlas", "algorithm"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["beampack"]

[tool.pytest.ini_options]
addopts = "-ra"
