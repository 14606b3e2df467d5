"""Helpers for resolving Digital Logic Sim save and project paths."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

log = logging.getLogger("nandscan.paths")

DLS_VENDOR_PATH = ("SebastianLague", "Digital-Logic-Sim")
PROJECTS_DIRNAME = "Projects"
PROJECT_DESCRIPTION_FILE = "ProjectDescription.json"


class ProjectsDirError(RuntimeError):
    """The Projects directory could not be listed."""


@dataclass(frozen=True)
class Project:
    name: str
    path: Path

    @property
    def description_path(self) -> Path:
        return self.path / PROJECT_DESCRIPTION_FILE


def default_game_dir(
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Where Digital Logic Sim keeps its save data on this platform."""
    platform = platform or sys.platform
    env = os.environ if env is None else env
    explicit = home
    home = Path(explicit or env.get("HOME") or Path.home())

    if platform.startswith("win"):
        profile = Path(explicit or env.get("USERPROFILE") or home)
        return profile.joinpath("AppData", "LocalLow", *DLS_VENDOR_PATH)
    if platform == "darwin":
        # Only exists once the app has been run at least once.
        return home.joinpath("Library", "Application Support", "unity3d", *DLS_VENDOR_PATH)
    return home.joinpath(".config", "unity3d", *DLS_VENDOR_PATH)


def projects_dir(game_dir: Path) -> Path:
    return Path(game_dir) / PROJECTS_DIRNAME


def discover_projects(game_dir: Path) -> List[Project]:
    """List project folders under ``<game_dir>/Projects``, sorted by name."""
    root = projects_dir(game_dir)
    try:
        entries = list(root.iterdir())
    except OSError as e:
        raise ProjectsDirError(f"Failed to read project directory {root}: {e}") from e

    projects = [Project(name=p.name, path=p) for p in entries if p.is_dir()]
    projects.sort(key=lambda p: p.name.lower())
    log.debug("Found %d projects in %s", len(projects), root)
    return projects
