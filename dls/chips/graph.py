"""
Chip graph - the per-project memo table of resolved chips.

A graph lives for exactly one project scan. Entries appear the first time
a chip is referenced (as an unvisited, zero-cost placeholder) and are
upgraded in place once the resolver has summed their sub-chips.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class ChipState(Enum):
    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


@dataclass
class Chip:
    """A named chip and its NAND gate count (final only once resolved)."""

    name: str
    gate_count: int = 0
    state: ChipState = ChipState.UNVISITED

    @property
    def resolved(self) -> bool:
        return self.state is ChipState.RESOLVED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "gate_count": self.gate_count,
            "resolved": self.resolved,
        }


class ChipGraph:
    """Mapping of chip name -> Chip, scoped to one resolution pass."""

    def __init__(self):
        self._chips: Dict[str, Chip] = {}

    @classmethod
    def seeded(cls) -> "ChipGraph":
        """A fresh graph holding only the built-in chips."""
        from .catalog import seed

        return seed(cls())

    def __getitem__(self, name: str) -> Chip:
        return self._chips[name]

    def __setitem__(self, name: str, chip: Chip) -> None:
        self._chips[name] = chip

    def __contains__(self, name: object) -> bool:
        return name in self._chips

    def __iter__(self) -> Iterator[str]:
        return iter(self._chips)

    def __len__(self) -> int:
        return len(self._chips)

    def get(self, name: str) -> Optional[Chip]:
        return self._chips.get(name)

    def placeholder(self, name: str) -> Chip:
        """Return the entry for ``name``, creating an unvisited one if absent."""
        chip = self._chips.get(name)
        if chip is None:
            chip = Chip(name=name)
            self._chips[name] = chip
        return chip

    def is_resolved(self, name: str) -> bool:
        chip = self._chips.get(name)
        return chip is not None and chip.resolved

    def items(self) -> List[Tuple[str, Chip]]:
        return list(self._chips.items())

    def values(self) -> List[Chip]:
        return list(self._chips.values())

    def unresolved(self) -> List[str]:
        return [name for name, chip in self._chips.items() if not chip.resolved]

    def total_gate_count(self) -> int:
        return sum(chip.gate_count for chip in self._chips.values())
