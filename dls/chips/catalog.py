"""
Built-in chips shipped with Digital Logic Sim.

NAND is the unit of cost. Every other built-in is an atomic hardware
abstraction outside the gate-count model and costs nothing.
"""

from types import MappingProxyType
from typing import Mapping, Tuple

from .graph import Chip, ChipGraph, ChipState

NAND = "NAND"

BUILTIN_CHIPS: Tuple[str, ...] = (
    # Merge / Split
    "4-1BIT",
    "1-4BIT",
    "4-8BIT",
    "8-4BIT",
    "1-8BIT",
    "8-1BIT",
    # Display
    "LED",
    "7-SEGMENT",
    "RGB DISPLAY",
    "DOT DISPLAY",
    # Memory
    "ROM 256x16",
    # Basic
    "CLOCK",
    "PULSE",
    "KEY",
    "3-STATE BUFFER",
    # Bus
    "BUS-1",
    "BUS-4",
    "BUS-8",
)

PRIMITIVE_GATE_COUNTS: Mapping[str, int] = MappingProxyType(
    {NAND: 1, **{name: 0 for name in BUILTIN_CHIPS}}
)


def is_builtin(name: str) -> bool:
    """True for the zero-cost built-ins. NAND is primitive but not listed here."""
    return name in BUILTIN_CHIPS


def is_primitive(name: str) -> bool:
    return name in PRIMITIVE_GATE_COUNTS


def seed(graph: ChipGraph) -> ChipGraph:
    """Insert every primitive into ``graph`` as already resolved."""
    for name, gate_count in PRIMITIVE_GATE_COUNTS.items():
        graph[name] = Chip(name=name, gate_count=gate_count, state=ChipState.RESOLVED)
    return graph
