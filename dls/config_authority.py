"""
Central configuration resolver with deterministic precedence.

Precedence per key:
1) schema default
2) versioned baseline (config/tuneables.json)
3) runtime override (~/.nandscan/tuneables.json)
4) explicit env override mapping (opt-in per key); the process
   environment wins over ~/.nandscan/.env
"""

from __future__ import annotations

import json
import logging
import os
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from dotenv import dotenv_values

log = logging.getLogger("nandscan.config")

DEFAULT_BASELINE_PATH = Path(__file__).resolve().parent.parent / "config" / "tuneables.json"
USER_DIRNAME = ".nandscan"

ParserFn = Callable[[str], Any]


@dataclass(frozen=True)
class EnvOverride:
    env_name: str
    parser: ParserFn


@dataclass
class ResolvedSection:
    data: Dict[str, Any]
    sources: Dict[str, str]
    warnings: List[str] = field(default_factory=list)


def default_runtime_path() -> Path:
    return Path.home() / USER_DIRNAME / "tuneables.json"


def default_env_path() -> Path:
    return Path.home() / USER_DIRNAME / ".env"


def _read_json(path: Path, warnings: List[str]) -> Dict[str, Any]:
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8-sig"))
            if isinstance(data, dict):
                return data
            warnings.append(f"config_not_object:{path}")
    except (ValueError, OSError) as exc:
        warnings.append(f"config_unreadable:{path}:{exc.__class__.__name__}")
    return {}


def _section(data: Dict[str, Any], section_name: str) -> Dict[str, Any]:
    row = data.get(section_name, {})
    return dict(row) if isinstance(row, dict) else {}


def read_env(env_path: Optional[Path] = None) -> Dict[str, str]:
    """Environment values, with the process environment over the .env file."""
    path = env_path or default_env_path()
    values: Dict[str, str] = {}
    if path.is_file():
        values.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    values.update(os.environ)
    return values


def env_str(name: str, *, lower: bool = False, upper: bool = False) -> EnvOverride:
    def _parse(raw: str) -> str:
        out = str(raw or "").strip()
        if lower:
            return out.lower()
        return out.upper() if upper else out

    return EnvOverride(name, _parse)


def env_int(name: str, *, lo: Optional[int] = None, hi: Optional[int] = None) -> EnvOverride:
    def _parse(raw: str) -> int:
        value = int(raw)
        if lo is not None:
            value = max(int(lo), value)
        if hi is not None:
            value = min(int(hi), value)
        return value

    return EnvOverride(name, _parse)


def resolve_section(
    section_name: str,
    *,
    baseline_path: Optional[Path] = None,
    runtime_path: Optional[Path] = None,
    env_path: Optional[Path] = None,
    env_overrides: Optional[Dict[str, EnvOverride]] = None,
    include_schema_defaults: bool = True,
) -> ResolvedSection:
    """Resolve a tuneables section with source attribution."""
    from .tuneables_schema import SCHEMA, section_defaults, validate_tuneables

    baseline = baseline_path or DEFAULT_BASELINE_PATH
    runtime = runtime_path or default_runtime_path()

    merged: Dict[str, Any] = {}
    sources: Dict[str, str] = {}
    warnings: List[str] = []

    if include_schema_defaults:
        for key, value in section_defaults(section_name).items():
            merged[key] = deepcopy(value)
            sources[key] = "schema"

    for source, path in (("baseline", baseline), ("runtime", runtime)):
        for key, value in _section(_read_json(path, warnings), section_name).items():
            if key.startswith("_"):
                continue
            merged[key] = deepcopy(value)
            sources[key] = source

    if env_overrides:
        env = read_env(env_path)
        for key, override in env_overrides.items():
            raw = env.get(override.env_name)
            if raw is None or str(raw).strip() == "":
                continue
            try:
                merged[key] = deepcopy(override.parser(raw))
                sources[key] = f"env:{override.env_name}"
            except Exception:
                warnings.append(f"invalid_env_override:{override.env_name}")

    if section_name in SCHEMA:
        checked = validate_tuneables({section_name: merged})
        merged = checked.data[section_name]
        warnings.extend(checked.warnings)

    for warning in warnings:
        log.warning("config: %s", warning)
    return ResolvedSection(data=merged, sources=sources, warnings=warnings)
