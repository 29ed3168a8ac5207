"""Priority queue of open nodes ordered by f, g, or f then g."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from enum import Enum

from .types import Index


class CostMode(str, Enum):
    """Which cost the open list orders by."""

    F = "f"
    G = "g"
    FG = "fg"


@dataclass(frozen=True)
class OpenNode:
    """A grid cell waiting in the open list together with its costs."""

    f: float = 0.0
    g: float = 0.0
    idx: Index = Index(-1, -1)


class OpenListNotReadyError(RuntimeError):
    """Raised when the open list is used before a cost mode is set."""


def _parse_mode(cost_mode: str | CostMode) -> CostMode:
    try:
        return CostMode(cost_mode)
    except ValueError:
        return CostMode.FG


class OpenList:
    """Min-heap of open nodes; unknown cost modes fall back to f then g."""

    def __init__(self, cost_mode: str | CostMode | None = None) -> None:
        self._heap: list[tuple[tuple[float, ...], int, OpenNode]] = []
        self._counter = itertools.count()
        self.mode: CostMode | None = None
        if cost_mode is not None:
            self.set_mode(cost_mode)

    @property
    def ready(self) -> bool:
        return self.mode is not None

    def set_mode(self, cost_mode: str | CostMode) -> None:
        self.mode = _parse_mode(cost_mode)
        self._heap = [(self._key(node), order, node) for _, order, node in self._heap]
        heapq.heapify(self._heap)

    def _key(self, node: OpenNode) -> tuple[float, ...]:
        if self.mode is CostMode.F:
            return (node.f,)
        if self.mode is CostMode.G:
            return (node.g,)
        return (node.f, node.g)

    def _require_ready(self) -> None:
        if not self.ready:
            raise OpenListNotReadyError("open list has no cost mode")

    def push(self, node: OpenNode) -> None:
        self._require_ready()
        heapq.heappush(self._heap, (self._key(node), next(self._counter), node))

    def pop(self) -> OpenNode:
        self._require_ready()
        if not self._heap:
            raise IndexError("open list is empty")
        return heapq.heappop(self._heap)[2]

    def __len__(self) -> int:
        return len(self._heap)

    def clear(self) -> None:
        self._heap.clear()

    def dump(self) -> str:
        """Describe the queued nodes in pop order without removing them."""
        if not self._heap:
            return ""
        parts = (
            f"({node.f:g},{node.g:g} [{node.idx.i},{node.idx.j}]) "
            for _, _, node in sorted(self._heap)
        )
        return "".join(parts) + "\n"