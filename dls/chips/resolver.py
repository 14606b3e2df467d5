"""
Chip Resolver - expand a chip into the number of NAND gates it contains.

Resolution is a memoized depth-first walk over the sub-chip references.
Each distinct chip is read from storage and summed at most once per graph,
so shared sub-chips (A -> B -> D, A -> C -> D) cost one read, not one per
path.

The walk keeps its own frame stack instead of recursing, so deeply nested
designs are limited by ``max_depth`` rather than the interpreter's
recursion limit. A chip is marked IN_PROGRESS while its sub-chips are being
resolved; meeting it again before it is committed means the design
contains a cycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .errors import CyclicDefinition, DepthLimitExceeded
from .graph import ChipGraph, ChipState
from .store import ChipStore

log = logging.getLogger("nandscan.chips")

DEFAULT_MAX_DEPTH = 2048


@dataclass
class _Frame:
    name: str
    sub_chips: List[str]
    index: int = 0
    total: int = 0


@dataclass
class ChipResolver:
    graph: ChipGraph
    store: ChipStore
    max_depth: int = DEFAULT_MAX_DEPTH
    _stack: List[_Frame] = field(default_factory=list, repr=False)

    def resolve(self, chip_name: str) -> None:
        """Resolve ``chip_name`` and every chip below it.

        Returns immediately if the chip is already resolved. Raises a
        ResolutionError on the first sub-chip that fails; sibling sub-chips
        after it are not attempted. Chips whose totals were not committed
        are left unresolved.
        """
        if self.graph.is_resolved(chip_name):
            return

        self.graph.placeholder(chip_name)
        stack = self._stack
        stack.clear()
        try:
            self._enter(chip_name)
            while stack:
                frame = stack[-1]
                if frame.index < len(frame.sub_chips):
                    sub_name = frame.sub_chips[frame.index]
                    sub = self.graph.placeholder(sub_name)
                    if sub.resolved:
                        frame.total += sub.gate_count
                        frame.index += 1
                    elif sub.state is ChipState.IN_PROGRESS:
                        raise CyclicDefinition(sub_name, self._cycle_to(sub_name))
                    else:
                        self._enter(sub_name)
                    continue

                stack.pop()
                chip = self.graph[frame.name]
                chip.gate_count = frame.total
                chip.state = ChipState.RESOLVED
                log.debug("Resolved %s: %d NAND", frame.name, frame.total)
        finally:
            # Frames left on the stack were never committed.
            for frame in stack:
                self.graph[frame.name].state = ChipState.UNVISITED
            stack.clear()

    def _enter(self, chip_name: str) -> None:
        if len(self._stack) >= self.max_depth:
            raise DepthLimitExceeded(chip_name, self.max_depth)
        sub_chips = self.store.sub_chips(chip_name)
        self.graph[chip_name].state = ChipState.IN_PROGRESS
        self._stack.append(_Frame(name=chip_name, sub_chips=sub_chips))

    def _cycle_to(self, chip_name: str) -> List[str]:
        path = [frame.name for frame in self._stack]
        return path[path.index(chip_name):] + [chip_name]


def resolve(
    chip_name: str,
    graph: ChipGraph,
    project_base_path: Union[str, Path],
    *,
    store: Optional[ChipStore] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> None:
    """Resolve one chip of the project at ``project_base_path`` into ``graph``."""
    store = store or ChipStore(project_base_path)
    ChipResolver(graph=graph, store=store, max_depth=max_depth).resolve(chip_name)
