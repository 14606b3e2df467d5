"""
ChipStore: read-only access to a project's chip definitions.

Layout:
- <project>/Chips/<chip name>.json: one definition per custom chip
"""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Union

from .errors import DefinitionNotFound, MalformedDefinition
from .schema import sub_chip_names

log = logging.getLogger("nandscan.chips")

CHIPS_DIRNAME = "Chips"


class ChipStore:
    """
    Loads chip definitions for a single project.

    Counts every definition it reads, so callers can check that a chip was
    loaded at most once per scan.
    """

    def __init__(self, base_path: Union[str, Path]):
        self.base_path = Path(base_path)
        self.chips_dir = self.base_path / CHIPS_DIRNAME
        self.read_counts: Counter = Counter()

    @property
    def reads(self) -> int:
        """Total definition reads so far."""
        return sum(self.read_counts.values())

    def definition_path(self, chip: str) -> Path:
        return self.chips_dir / f"{chip}.json"

    def exists(self, chip: str) -> bool:
        return self.definition_path(chip).is_file()

    def load(self, chip: str) -> Dict[str, Any]:
        """Read and decode a chip's definition."""
        path = self.definition_path(chip)
        if not path.is_file():
            raise DefinitionNotFound(chip, str(path))

        self.read_counts[chip] += 1
        log.debug("Reading chip definition %s", path)
        try:
            content = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedDefinition(chip, f"Failed to read chip file for {chip}") from e
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedDefinition(chip, f"Failed to parse JSON for {chip}") from e

    def sub_chips(self, chip: str) -> List[str]:
        """Names of the chips ``chip`` directly contains, in order."""
        return sub_chip_names(chip, self.load(chip))
