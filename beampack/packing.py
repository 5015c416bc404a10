"""Rectangle packing driven by beam search."""

from __future__ import annotations

import itertools
import math
from collections import Counter
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .beam import BranchExhausted, Node
from .geometry import Placement, Rect, RectGroup

_U32_MAX = (1 << 32) - 1


def _round_half_away(value: float) -> int:
    """Round half away from zero, mapping NaN and negatives to zero."""
    if math.isnan(value) or value <= 0:
        return 0
    whole = math.floor(value)
    if value - whole >= 0.5:
        whole += 1
    return int(whole)


def _as_u32(value: int) -> int:
    if not 0 <= value <= _U32_MAX:
        raise OverflowError(f"{value} does not fit into 32 bits")
    return value


@lru_cache(maxsize=8192)
def _box_counts(group: RectGroup) -> Counter:
    """How many rectangles of each kind a group holds."""
    return Counter(p.item for p in group.rects)


def _fill_ratio(group: RectGroup) -> float:
    area = group.area()
    return group.fill_area() / area if area else math.nan


def _fits(boxes: Mapping[Rect, int], group: RectGroup) -> bool:
    used = _box_counts(group)
    return all(count >= used.get(kind, 0) for kind, count in boxes.items())


class BspaNode(Node):
    """A partial packing: free spaces, placed blocks and what is left to place."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        spaces: Iterable[Placement[Rect]] = (),
        blocks: Iterable[Placement[RectGroup]] = (),
        boxes: Optional[Mapping[Rect, int]] = None,
        block_pool: Iterable[RectGroup] = (),
    ) -> None:
        self.spaces: List[Placement[Rect]] = list(spaces)
        self._blocks: List[Placement[RectGroup]] = list(blocks)
        self.boxes: Dict[Rect, int] = dict(boxes or {})
        self.block_pool: List[RectGroup] = list(block_pool)

    @classmethod
    def create(
        cls,
        boxes: Iterable[Rect],
        width: int,
        combinations: int,
        fill_rate: float,
    ) -> "BspaNode":
        """Build a root node packing ``boxes`` into a container ``width`` wide.

        ``combinations`` caps how many pairwise combined blocks are generated
        and ``fill_rate`` is the minimum filled fraction of any block.
        """
        counts: Dict[Rect, int] = {}
        for box in boxes:
            counts[box] = counts.get(box, 0) + 1

        total = sum(kind.area() * count for kind, count in counts.items())
        height = total // width

        base = [
            group
            for kind, count in counts.items()
            for cols in range(1, count + 1)
            for rows in range(1, count // cols + 1)
            for group in (
                RectGroup(
                    Placement(x * kind.w, y * kind.h, kind)
                    for x in range(cols)
                    for y in range(rows)
                ),
            )
            if _fill_ratio(group) >= fill_rate
        ]

        def combined() -> Iterator[RectGroup]:
            for lhs, rhs in itertools.product(base, repeat=2):
                for group in lhs.combine(rhs):
                    if (
                        group.w <= width
                        and group.h <= height
                        and _fits(counts, group)
                        and _fill_ratio(group) >= fill_rate
                    ):
                        yield group

        pool = list(itertools.islice(combined(), combinations))
        pool.extend(base)

        return cls(
            spaces=[Placement(0, 0, Rect(width, height))],
            boxes=counts,
            block_pool=pool,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BspaNode):
            return NotImplemented
        return (
            self.spaces == other.spaces
            and self._blocks == other._blocks
            and self.boxes == other.boxes
            and self.block_pool == other.block_pool
        )

    def __repr__(self) -> str:
        return (
            f"BspaNode(spaces={self.spaces!r}, blocks={self._blocks!r}, "
            f"boxes={self.boxes!r}, block_pool=<{len(self.block_pool)} groups>)"
        )

    def blocks(self) -> Tuple[Placement[RectGroup], ...]:
        """The blocks placed so far."""
        return tuple(self._blocks)

    @property
    def w(self) -> int:
        """Width of the bounding box of the placed blocks."""
        xmin = min(p.x for p in self._blocks)
        xmax = max(p.x + p.w for p in self._blocks)
        return xmax - xmin

    @property
    def h(self) -> int:
        """Height of the bounding box of the placed blocks."""
        ymin = min(p.y for p in self._blocks)
        ymax = max(p.y + p.h for p in self._blocks)
        return ymax - ymin

    def area(self) -> int:
        """Area of the bounding box of the placed blocks."""
        return self.w * self.h

    def fill_area(self) -> int:
        """Sum of the areas of the placed blocks."""
        return sum(p.item.area() for p in self._blocks)

    def has_fulfilled(self) -> bool:
        return self != BspaNode() and sum(self.boxes.values()) == 0

    def expand(self, branch: int) -> Iterator["BspaNode"]:
        space, pool = self._prepare(branch)
        return self._successors(space, pool)

    def _successors(self, space: Placement[Rect], pool: List[RectGroup]) -> Iterator["BspaNode"]:
        for block in pool:
            child = self._advance(space, block)
            if __debug__:
                child.check_expanded()
            yield child

    def evaluate(self) -> int:
        remaining = sum(self.boxes.values())
        weighted = sum(kind.h * count for kind, count in self.boxes.items())
        avg_high = weighted / remaining if remaining else math.nan
        heuristic = remaining + _round_half_away(avg_high)
        slack = self.area() - self.fill_area()
        return (_as_u32(heuristic) << 32) | _as_u32(slack)

    def inflate(self) -> None:
        fallback = self.w
        xmax = max((s.x + s.w for s in self.spaces), default=fallback)
        ymax = self.h

        probe_spaces = [
            Placement(s.x, s.y, Rect(s.w, _U32_MAX - s.y)) if s.y + s.h >= ymax else s
            for s in self.spaces
        ]
        if not any(s.y + s.h >= ymax and s.w >= xmax for s in probe_spaces):
            probe_spaces.append(Placement(0, ymax, Rect(xmax, _U32_MAX - ymax)))

        probe = BspaNode(probe_spaces, self._blocks, self.boxes, self.block_pool)
        while True:
            try:
                space, pool = probe._prepare(1)
            except BranchExhausted:
                break
            probe = probe._advance(space, pool[-1])
        grow = probe.h - self.h

        spaces = [
            Placement(s.x, s.y, Rect(s.w, ymax + grow - s.y)) if s.y + s.h >= ymax else s
            for s in self.spaces
        ]
        if not any(s.y + s.h >= ymax and s.w >= xmax for s in spaces):
            spaces.append(Placement(0, ymax, Rect(xmax, grow)))
        self.spaces = spaces

        if __debug__:
            self.check_inflated()

    def estimate(self, branch: int) -> Optional[int]:
        try:
            _, pool = self._prepare(branch)
        except BranchExhausted:
            return None
        return len(pool)

    def check_expanded(self) -> None:
        """Raise :class:`AssertionError` if an expanded node is inconsistent."""
        for lhs, rhs in itertools.combinations(self._blocks, 2):
            if lhs.overlaps(rhs):
                raise AssertionError(f"blocks overlap: {lhs!r} and {rhs!r}")
        for block in self._blocks:
            for space in self.spaces:
                if space.overlaps(block):
                    raise AssertionError(f"space {space!r} overlaps block {block!r}")
        for group in self.block_pool:
            if not _fits(self.boxes, group):
                raise AssertionError(f"block exceeds available boxes: {group!r}")
        for kind, count in self.boxes.items():
            for wanted in range(1, count + 1):
                if not any(_box_counts(g).get(kind, 0) == wanted for g in self.block_pool):
                    raise AssertionError(
                        f"no block holds {wanted} of {kind!r}; boxes: {self.boxes!r}"
                    )

    def check_inflated(self) -> None:
        """Raise :class:`AssertionError` if the top spaces are not aligned."""
        height = self.h
        tops = {s.y + s.h for s in self.spaces if s.y + s.h >= height}
        if len(tops) > 1:
            raise AssertionError(f"spaces not aligned to one height: {self.spaces!r}")

    def _avg_high_without(self, group: RectGroup) -> float:
        used = _box_counts(group)
        weighted = 0
        remaining = 0
        for kind, count in self.boxes.items():
            left = count - used.get(kind, 0)
            remaining += left
            weighted += kind.h * left
        return weighted / remaining if remaining else math.nan

    def _select_blocks(self, space: Placement[Rect], branch: int) -> List[RectGroup]:
        fitting = [g for g in self.block_pool if space.w >= g.w and space.h >= g.h]
        fitting.sort(key=lambda g: g.score(space, self._avg_high_without(g)))
        return fitting[:branch]

    def _prepare(self, branch: int) -> Tuple[Placement[Rect], List[RectGroup]]:
        for space in sorted(self.spaces):
            pool = self._select_blocks(space, branch)
            if pool:
                return space, pool
        raise BranchExhausted("no block fits any free space")

    def _advance(self, space: Placement[Rect], block: RectGroup) -> "BspaNode":
        used = _box_counts(block)
        boxes = {kind: count - used.get(kind, 0) for kind, count in self.boxes.items()}
        if any(count < 0 for count in boxes.values()):
            raise ValueError("block uses more boxes than are available")

        pool = [g for g in self.block_pool if _fits(boxes, g)]
        placed = Placement(space.x, space.y, block)
        blocks = self._blocks + [placed]

        spaces = [
            part
            for s in self.spaces
            if s.overlaps(placed)
            for part in s.subtract(placed)
        ]
        spaces.extend(s for s in self.spaces if not s.overlaps(placed))

        return BspaNode(spaces, blocks, boxes, pool)