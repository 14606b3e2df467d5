"""
Chip definition fields.

Digital Logic Sim writes one JSON document per custom chip. Only the
``SubChips`` list matters for gate counting; every other field is ignored.
"""

from typing import Any, Dict, List

from .errors import MalformedDefinition

SUBCHIPS_FIELD = "SubChips"
NAME_FIELD = "Name"

# ProjectDescription.json
EARLIEST_COMPATIBLE_FIELD = "DLSVersion_EarliestCompatible"
CUSTOM_CHIPS_FIELD = "AllCustomChipNames"


def sub_chip_names(chip: str, data: Dict[str, Any]) -> List[str]:
    """Sub-chip names of ``chip`` in declaration order, repeats kept.

    Raises MalformedDefinition on the first problem found.
    """
    if not isinstance(data, dict) or not isinstance(data.get(SUBCHIPS_FIELD), list):
        raise MalformedDefinition(chip, f"{SUBCHIPS_FIELD} missing or not array for {chip}")

    names: List[str] = []
    for entry in data[SUBCHIPS_FIELD]:
        name = entry.get(NAME_FIELD) if isinstance(entry, dict) else None
        if not isinstance(name, str):
            raise MalformedDefinition(chip, f"SubChip entry missing {NAME_FIELD} in {chip}")
        names.append(name)
    return names
