"""Generic beam search over user-defined search nodes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from itertools import islice
from typing import Generic, Iterable, Iterator, List, Optional, TypeVar


class BeamError(Exception):
    """Base class for beam search failures."""


class BranchExhausted(BeamError):
    """A single node cannot produce any successor."""


class Exhausted(BeamError):
    """No node of the beam could produce a successor."""


class Node(ABC):
    """A state of the search space explored by :class:`Beam`.

    Subclasses must be constructible without arguments: the beam uses such
    default nodes to fill slots the root could not populate.
    """

    @abstractmethod
    def has_fulfilled(self) -> bool:
        """Return whether this node satisfies the search goal."""

    @abstractmethod
    def expand(self, branch: int) -> Iterable["Node"]:
        """Return the successors of this node.

        ``branch`` is the branching factor the beam was built with. The beam
        consumes the result lazily and only as many items as it has room for.
        Raise :class:`BranchExhausted` when no successor exists.
        """

    @abstractmethod
    def evaluate(self) -> int:
        """Score the node; lower scores are preferred."""

    def inflate(self) -> None:
        """Relax this node so that it can be expanded again."""
        raise TypeError(f"{type(self).__name__} does not support inflation")

    def estimate(self, branch: int) -> Optional[int]:
        """Suggest how many slots the beam should hold, or ``None``.

        The default makes no suggestion, leaving the beam width in charge;
        it still rejects a negative branching factor.
        """
        if branch < 0:
            raise ValueError("branching factor must not be negative")
        return None


N = TypeVar("N", bound=Node)


class Beam(Generic[N]):
    """A fixed population of nodes advanced one greedy step per cycle."""

    def __init__(self, root: N, width: int, branch: int) -> None:
        if width < 1:
            raise ValueError("beam width must be positive")
        if branch < 0:
            raise ValueError("branching factor must not be negative")

        length = root.estimate(branch)
        if length is None:
            length = width
        if length < 1:
            raise ValueError("estimated beam length must be positive")

        total = (length + 1) * width
        chunk = total // length
        slots = total // chunk

        self._branch = branch
        self._capacity = chunk - 1

        population: List[N] = list(islice(root.expand(branch), slots))
        if not population:
            raise ValueError("root node produced no successors")
        factory = type(root)
        population.extend(factory() for _ in range(slots - len(population)))
        self._population = population

    def has_fulfilled(self) -> bool:
        """Return whether any node of the beam fulfils the goal."""
        return any(True for _ in self.nodes())

    def nodes(self) -> Iterator[N]:
        """Yield the nodes of the beam that fulfil the goal."""
        return (node for node in self._population if node.has_fulfilled())

    def cycle(self) -> None:
        """Replace every node by its best successor.

        Raises :class:`Exhausted` when every node reported
        :class:`BranchExhausted`.
        """
        all_exhausted = True
        for index, node in enumerate(self._population):
            try:
                successors = list(islice(node.expand(self._branch), self._capacity))
            except BranchExhausted:
                continue
            except BeamError:
                all_exhausted = False
                continue
            all_exhausted = False
            if successors:
                self._population[index] = min(successors, key=lambda s: s.evaluate())
        if all_exhausted:
            raise Exhausted("every node of the beam is exhausted")

    def extend(self) -> None:
        """Inflate every node of the beam."""
        for node in self._population:
            node.inflate()