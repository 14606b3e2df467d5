"""Scan settings resolved through config-authority.

Every knob the scanner and CLI read lives in the ``scan`` and ``logging``
tuneables sections. CLI flags are applied on top by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .config_authority import env_int, env_str, resolve_section

SCAN_ENV = {
    "max_supported_version": env_str("NANDSCAN_MAX_VERSION"),
    "game_dir": env_str("NANDSCAN_GAME_DIR"),
    "max_depth": env_int("NANDSCAN_MAX_DEPTH", lo=1),
    "workers": env_int("NANDSCAN_WORKERS", lo=1),
    "report_format": env_str("NANDSCAN_FORMAT", lower=True),
}

LOGGING_ENV = {
    "level": env_str("NANDSCAN_LOG_LEVEL", upper=True),
    "log_dir": env_str("NANDSCAN_LOG_DIR"),
}


@dataclass(frozen=True)
class ScanSettings:
    max_supported_version: str = "2.1.5"
    game_dir: Optional[Path] = None
    max_depth: int = 2048
    workers: int = 1
    report_format: str = "text"
    log_level: str = "INFO"
    log_dir: Optional[Path] = None

    def with_overrides(self, **overrides: Any) -> "ScanSettings":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _optional_path(raw: Any) -> Optional[Path]:
    text = str(raw or "").strip()
    return Path(text).expanduser() if text else None


def load_scan_settings(**paths: Optional[Path]) -> ScanSettings:
    """Resolve settings; ``paths`` are forwarded to resolve_section (baseline_path etc.)."""
    scan: Dict[str, Any] = resolve_section("scan", env_overrides=SCAN_ENV, **paths).data
    logging_cfg: Dict[str, Any] = resolve_section("logging", env_overrides=LOGGING_ENV, **paths).data
    return ScanSettings(
        max_supported_version=str(scan["max_supported_version"]),
        game_dir=_optional_path(scan.get("game_dir")),
        max_depth=int(scan["max_depth"]),
        workers=int(scan["workers"]),
        report_format=str(scan["report_format"]),
        log_level=str(logging_cfg["level"]),
        log_dir=_optional_path(logging_cfg.get("log_dir")),
    )
