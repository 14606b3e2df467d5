"""
Schema for nandscan tuneables.

Two sections:
- scan: where projects live, which versions are accepted, and how chips
  are resolved
- logging: diagnostics level and optional log directory

Every key has a type, a default, optional bounds or allowed values, and a
description. ``validate_tuneables`` fills missing keys with defaults, clamps
out-of-range ints, and reports anything it did not recognise.
"""

from __future__ import annotations

from collections import namedtuple
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

TuneableSpec = namedtuple("TuneableSpec", [
    "type",          # "int" or "str"
    "default",
    "min_val",       # None if unbounded or non-numeric
    "max_val",
    "description",
    "enum_values",   # allowed values for a str key, or None
], defaults=[None, None, "", None])


@dataclass
class ValidationResult:
    data: Dict[str, Any]
    warnings: List[str] = field(default_factory=list)
    clamped: List[str] = field(default_factory=list)
    defaults_applied: List[str] = field(default_factory=list)
    unknown_keys: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


REPORT_FORMATS = ["text", "json", "yaml"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

SCHEMA: Dict[str, Dict[str, TuneableSpec]] = {
    "scan": {
        "max_supported_version": TuneableSpec("str", "2.1.5", None, None, "Newest DLSVersion_EarliestCompatible accepted"),
        "game_dir": TuneableSpec("str", "", None, None, "Digital Logic Sim save directory (empty = platform default)"),
        "max_depth": TuneableSpec("int", 2048, 1, 1000000, "Max sub-chip nesting depth before giving up"),
        "workers": TuneableSpec("int", 1, 1, 64, "Projects scanned in parallel"),
        "report_format": TuneableSpec("str", "text", None, None, "Report output format", REPORT_FORMATS),
    },
    "logging": {
        "level": TuneableSpec("str", "INFO", None, None, "Log level for diagnostics", LOG_LEVELS),
        "log_dir": TuneableSpec("str", "", None, None, "Also append diagnostics to <log_dir>/nandscan.log"),
    },
}


def check_value(section: str, key: str, value: Any) -> Tuple[Any, Optional[str]]:
    """Coerce ``value`` for ``section.key``. Returns (value, warning_or_None).

    Ints outside their bounds come back clamped; anything unusable comes
    back as the key's default.
    """
    spec = SCHEMA[section][key]
    name = f"{section}.{key}"
    if spec.type == "int":
        try:
            number = int(value)
        except (ValueError, TypeError):
            return spec.default, f"{name}: cannot convert {value!r} to int, using default {spec.default}"
        if spec.min_val is not None and number < spec.min_val:
            return spec.min_val, f"{name}: {number} below min {spec.min_val}, clamped"
        if spec.max_val is not None and number > spec.max_val:
            return spec.max_val, f"{name}: {number} above max {spec.max_val}, clamped"
        return number, None

    text = str(value).strip()
    if spec.enum_values and text not in spec.enum_values:
        return spec.default, f"{name}: {text!r} not in {spec.enum_values}, using default {spec.default!r}"
    return text, None


def validate_tuneables(data: Dict[str, Any]) -> ValidationResult:
    """Check every known section of ``data`` against SCHEMA.

    Keys starting with ``_`` (``_doc`` and the like) are dropped silently.
    Unknown keys and sections are kept but reported.
    """
    result = ValidationResult(data={})

    for section, specs in SCHEMA.items():
        raw = data.get(section)
        if raw is None:
            result.data[section] = section_defaults(section)
            result.defaults_applied.append(f"section:{section}")
            continue
        if not isinstance(raw, dict):
            result.warnings.append(f"{section}: expected dict, got {type(raw).__name__}")
            result.data[section] = section_defaults(section)
            continue

        cleaned: Dict[str, Any] = {}
        for key, spec in specs.items():
            if key not in raw:
                cleaned[key] = spec.default
                result.defaults_applied.append(f"{section}.{key}")
                continue
            cleaned[key], warning = check_value(section, key, raw[key])
            if warning:
                result.warnings.append(warning)
                if warning.endswith("clamped"):
                    result.clamped.append(f"{section}.{key}")

        for key, value in raw.items():
            if key in specs or key.startswith("_"):
                continue
            cleaned[key] = value
            result.unknown_keys.append(f"{section}.{key}")
            result.warnings.append(f"{section}.{key}: unknown key (possible typo?)")
        result.data[section] = cleaned

    for section, value in data.items():
        if section in SCHEMA or section.startswith("_"):
            continue
        result.data[section] = value
        result.unknown_keys.append(f"section:{section}")
        result.warnings.append(f"section:{section}: unknown section (possible typo?)")

    return result


def section_defaults(section: str) -> Dict[str, Any]:
    return {key: spec.default for key, spec in SCHEMA.get(section, {}).items()}
