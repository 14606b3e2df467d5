"""
Chip resolution for Digital Logic Sim projects.

- Catalog: the fixed built-in chips, pre-resolved
- Graph: per-project memo table of chip name -> resolved state
- Store: reads chip definitions from a project's Chips/ folder
- Resolver: expands a chip into its NAND gate count
"""

from .catalog import BUILTIN_CHIPS, NAND, PRIMITIVE_GATE_COUNTS, is_builtin, is_primitive, seed
from .errors import (
    CyclicDefinition,
    DefinitionNotFound,
    DepthLimitExceeded,
    MalformedDefinition,
    ResolutionError,
)
from .graph import Chip, ChipGraph, ChipState
from .resolver import ChipResolver, resolve
from .store import ChipStore

__all__ = [
    'BUILTIN_CHIPS', 'NAND', 'PRIMITIVE_GATE_COUNTS', 'is_builtin', 'is_primitive', 'seed',
    'ResolutionError', 'DefinitionNotFound', 'MalformedDefinition',
    'CyclicDefinition', 'DepthLimitExceeded',
    'Chip', 'ChipGraph', 'ChipState',
    'ChipResolver', 'resolve',
    'ChipStore',
]
