"""
Render project scan results.

- text: aligned table, largest chips first, with the deviation from the
  average and the share of the reported total
- json / yaml: ProjectScanResult.to_dict() for every project
"""

import json
from typing import List, Sequence

import yaml

from .scanner import ProjectScanResult

RULE_WIDTH = 40


def _percent_above(count: int, average: float) -> float:
    if average <= 0:
        return 0.0
    return (count - average) / average * 100.0


def _percent_of(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return count / total * 100.0


def format_text(result: ProjectScanResult) -> str:
    chips = result.custom_chips()
    average = result.average_gate_count
    total = result.custom_gate_count
    name_width = max((len(c.name) for c in chips), default=0)
    count_width = max((len(str(c.gate_count)) for c in chips), default=1)

    lines: List[str] = [
        f"Project: {result.project.name}",
        f"Path: {result.project.path}",
        f"Total NAND: {total}",
        f"Average NAND per chip: {average:.1f}",
        "-" * RULE_WIDTH,
        "Chips:",
    ]
    for chip in chips:
        count = str(chip.gate_count)
        lines.append(
            f"{chip.name}:{' ' * (name_width - len(chip.name))} {count},"
            f"{' ' * (count_width - len(count))} "
            f"{_percent_above(chip.gate_count, average):+.1f}%, "
            f"{_percent_of(chip.gate_count, total):.1f}%"
        )

    if result.chip_errors:
        lines.append("Unresolved:")
        for name, err in result.chip_errors.items():
            lines.append(f"  {name}: {err}")
    return "\n".join(lines) + "\n"


def format_json(results: Sequence[ProjectScanResult]) -> str:
    return json.dumps([r.to_dict() for r in results], indent=2)


def format_yaml(results: Sequence[ProjectScanResult]) -> str:
    return yaml.safe_dump([r.to_dict() for r in results], sort_keys=False, allow_unicode=True)


def render(results: Sequence[ProjectScanResult], fmt: str = "text") -> str:
    """Render all results in one of text, json or yaml."""
    if fmt == "json":
        return format_json(results)
    if fmt == "yaml":
        return format_yaml(results)
    if fmt != "text":
        raise ValueError(f"Unknown report format: {fmt}")
    return "\n".join(format_text(r) for r in results)
