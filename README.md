# beampack

A small beam search framework and a rectangle packing algorithm built on it.
It is a pure Python library with no dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Beam search

`beampack.beam` provides an abstract `Node` and a `Beam` that drives the search.

A `Node` subclass implements:

- `has_fulfilled()`: whether the node meets the goal;
- `expand(branch)`: an iterable of successor nodes. `branch` is the branching
  factor the beam was built with. Raise `BranchExhausted` when there are none;
- `evaluate()`: an integer score, lower is better;
- optionally `inflate()`, which reshapes the node so that it can be expanded
  again. The default raises `TypeError`;
- optionally `estimate(branch)`, which suggests how many slots the beam should
  hold. The default returns `None`, so the beam width decides.

A subclass must be constructible with no arguments. The beam fills any slots
the root could not populate with such default nodes.

`Beam(root, width, branch)` expands the root once to fill its slots. It raises
`ValueError` if `width` is less than 1, if `branch` is negative, or if the root
produces no successors.

- `cycle()` expands every node and replaces it with its lowest-scoring
  successor. A node that raises `BranchExhausted` stays as it is. If every node
  raised `BranchExhausted`, the cycle raises `Exhausted`. Both errors derive
  from `BeamError`.
- `has_fulfilled()` tells whether any node meets the goal.
- `nodes()` yields only the nodes that meet the goal.
- `extend()` calls `inflate()` on every node.

```python
from beampack.beam import Beam, Exhausted

beam = Beam(root, width=10, branch=10)
while not beam.has_fulfilled():
    try:
        beam.cycle()
    except Exhausted:
        break

if beam.has_fulfilled():
    best = min(beam.nodes(), key=lambda node: node.evaluate())
```

## Rectangle packing

`beampack.geometry` holds the shapes. All of them are immutable.

- `Rect(w, h)` is a box, with `area()` and `fill_area()`. Both return `w * h`.
- `Placement(x, y, item)` is an item at a position. It has:
  - `w`, `h`, `area()` and `fill_area()`, all taken from the item;
  - `overlaps(other)`, which is true when the two share a region of positive area;
  - the directional splits `split_n`, `split_s`, `split_e` and `split_w`;
  - `subtract(other)`, which returns the non-empty free regions left after
    removing `other`;
  - `placed_rects()`, which yields the member rectangles of a placed group in
    absolute coordinates.

  Placements sort by smallest `y` first, then smallest `x`.
- `RectGroup(rects)` is a set of placements laid out together as one block.
  - `area()` is the area of its bounding box.
  - `fill_area()` is the sum of its members' areas.
  - `combine(other)` returns two groups: `other` joined to the right of this
    group, and `other` joined below it.
  - `score(space, avg_high)` ranks the group for a free space.

`beampack.packing.BspaNode` is a beam search node that packs boxes into a strip
of a fixed width:

```python
from beampack.beam import Beam, Exhausted
from beampack.geometry import Rect
from beampack.packing import BspaNode

small, large = Rect(8, 8), Rect(16, 16)
root = BspaNode.create([small, small, small, small, large], width=32,
                       combinations=1000, fill_rate=1.0)

beam = Beam(root, width=10, branch=10)
while not beam.has_fulfilled():
    try:
        beam.cycle()
    except Exhausted:
        break

best = min(beam.nodes(), key=lambda node: node.evaluate())
for block in best.blocks():
    for placed in block.placed_rects():
        print(placed.x, placed.y, placed.item.w, placed.item.h)
```

The arguments to `BspaNode.create` work as follows:

- `combinations` caps how many pairwise combined blocks are prepared up front.
- `fill_rate` is the lowest fill ratio a block may have.
- The starting height is the total box area divided by `width`, rounded down.

When the boxes do not fit in that height, `cycle()` eventually raises
`Exhausted`. At that point:

1. Call `beam.extend()`. This inflates every node, growing its top free spaces
   so that the remaining boxes fit.
2. Keep cycling until `beam.has_fulfilled()` is true.

When Python runs without `-O`, every expanded node is checked with
`check_expanded()` and every inflated node with `check_inflated()`. Either
check raises `AssertionError` if the node is inconsistent.

## What it does not do

`beampack` is a library only. It has no command-line program. It does not read
box lists from files, and it does not render or save packed layouts as images.
The caller takes the placements from `BspaNode.blocks()` and uses them.