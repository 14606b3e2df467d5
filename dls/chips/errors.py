"""Errors raised while resolving a chip's gate count."""

from __future__ import annotations

from typing import List, Optional


class ResolutionError(Exception):
    """A chip could not be resolved.

    ``chip`` is the chip whose definition was at fault, which is not
    necessarily the chip ``resolve`` was called with.
    """

    def __init__(self, chip: str, message: str):
        super().__init__(message)
        self.chip = chip
        self.message = message

    def __str__(self) -> str:
        return self.message


class DefinitionNotFound(ResolutionError):
    """No definition file exists for a non-primitive chip."""

    def __init__(self, chip: str, path: Optional[str] = None):
        super().__init__(chip, f"Chip file not found: {chip}")
        self.path = path


class MalformedDefinition(ResolutionError):
    """The definition is unreadable, or its SubChips list is missing or bad."""


class CyclicDefinition(ResolutionError):
    """A chip contains itself, directly or through other chips."""

    def __init__(self, chip: str, cycle: List[str]):
        super().__init__(chip, f"Cyclic chip definition: {' -> '.join(cycle)}")
        self.cycle = list(cycle)


class DepthLimitExceeded(ResolutionError):
    """Sub-chip nesting went deeper than the configured ceiling."""

    def __init__(self, chip: str, max_depth: int):
        super().__init__(chip, f"Chip nesting deeper than {max_depth} levels at {chip}")
        self.max_depth = max_depth
