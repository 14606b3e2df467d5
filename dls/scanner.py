"""
Project Scanner - resolve every custom chip a project declares.

A project is skipped (logged, never raised) when its description is
missing or unreadable, its DLSVersion_EarliestCompatible is missing,
invalid or newer than we support, or it declares no custom chips.
A chip that fails to resolve is logged and left out of the totals; the
rest of the project is still scanned.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import semver

from .chips.catalog import is_primitive
from .chips.errors import ResolutionError
from .chips.graph import Chip, ChipGraph
from .chips.resolver import DEFAULT_MAX_DEPTH, ChipResolver
from .chips.schema import CUSTOM_CHIPS_FIELD, EARLIEST_COMPATIBLE_FIELD
from .chips.store import ChipStore
from .paths import PROJECT_DESCRIPTION_FILE, Project

log = logging.getLogger("nandscan.scanner")

MAX_SUPPORTED_VERSION = "2.1.5"


@dataclass
class ProjectScanResult:
    project: Project
    graph: ChipGraph
    total_gate_count: int
    chip_errors: Dict[str, ResolutionError] = field(default_factory=dict)
    definition_reads: int = 0

    def custom_chips(self) -> List[Chip]:
        """Resolved user-defined chips, largest first (ties by name)."""
        chips = [c for name, c in self.graph.items() if not is_primitive(name) and c.resolved]
        chips.sort(key=lambda c: (-c.gate_count, c.name))
        return chips

    @property
    def custom_gate_count(self) -> int:
        return sum(c.gate_count for c in self.custom_chips())

    @property
    def average_gate_count(self) -> float:
        """Mean gate count of the reported rows."""
        chips = self.custom_chips()
        if not chips:
            return 0.0
        return sum(c.gate_count for c in chips) / len(chips)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": self.project.name,
            "path": str(self.project.path),
            "total_nand": self.custom_gate_count,
            "graph_nand": self.total_gate_count,
            "average_nand": round(self.average_gate_count, 3),
            "chips": [
                {"name": c.name, "nand": c.gate_count}
                for c in self.custom_chips()
            ],
            "errors": {name: str(err) for name, err in self.chip_errors.items()},
        }


def _parse_version(raw: Any) -> Optional[semver.Version]:
    if not isinstance(raw, str):
        return None
    try:
        return semver.Version.parse(raw)
    except ValueError:
        return None


def _build_key(build: Optional[str]) -> Tuple:
    # Identifiers compare numerically when all digits, numbers before words;
    # empty build metadata sorts first.
    if not build:
        return ()
    return tuple(
        (0, int(part), len(part)) if part.isdigit() else (1, part)
        for part in build.split(".")
    )


def version_exceeds(version: semver.Version, ceiling: semver.Version) -> bool:
    """True when ``version`` sorts after ``ceiling``, build metadata included."""
    order = version.compare(ceiling)
    if order:
        return order > 0
    return _build_key(version.build) > _build_key(ceiling.build)


class ProjectScanner:
    """Scans projects one at a time; each scan gets its own ChipGraph."""

    def __init__(
        self,
        max_supported_version: str = MAX_SUPPORTED_VERSION,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.max_supported_version = semver.Version.parse(max_supported_version)
        self.max_depth = max_depth

    def _load_description(self, project: Project) -> Optional[Dict[str, Any]]:
        meta_path = project.description_path
        if not meta_path.exists():
            log.warning("Skipping %s: missing %s", project.name, PROJECT_DESCRIPTION_FILE)
            return None
        try:
            contents = meta_path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Failed to read metadata for %s: %s", project.name, e)
            return None
        try:
            metadata = json.loads(contents)
        except json.JSONDecodeError as e:
            log.warning("Failed to parse JSON for %s: %s", project.name, e)
            return None
        if not isinstance(metadata, dict):
            log.warning("Skipping %s: %s is not a JSON object", project.name, PROJECT_DESCRIPTION_FILE)
            return None
        return metadata

    def declared_chips(self, project: Project) -> Optional[List[str]]:
        """Custom chip names of an analyzable project, or None to skip it."""
        metadata = self._load_description(project)
        if metadata is None:
            return None

        version = _parse_version(metadata.get(EARLIEST_COMPATIBLE_FIELD))
        if version is None:
            log.warning(
                "Skipping %s: missing or invalid %s", project.name, EARLIEST_COMPATIBLE_FIELD
            )
            return None
        if version_exceeds(version, self.max_supported_version):
            log.warning(
                "Skipping %s: incompatible version %s > %s",
                project.name, version, self.max_supported_version,
            )
            return None

        raw_names = metadata.get(CUSTOM_CHIPS_FIELD)
        names = [n for n in raw_names if isinstance(n, str)] if isinstance(raw_names, list) else []
        if not names:
            log.warning("Skipping %s: no custom chips found", project.name)
            return None
        return names

    def scan_project(self, project: Project) -> Optional[ProjectScanResult]:
        log.info("Scanning project: %s", project.name)
        names = self.declared_chips(project)
        if names is None:
            return None

        graph = ChipGraph.seeded()
        for name in names:
            graph.placeholder(name)

        store = ChipStore(project.path)
        resolver = ChipResolver(graph=graph, store=store, max_depth=self.max_depth)
        chip_errors: Dict[str, ResolutionError] = {}
        for name in names:
            try:
                resolver.resolve(name)
            except ResolutionError as e:
                chip_errors[name] = e
                log.warning("Error scanning chip %s in %s: %s", name, project.name, e)

        return ProjectScanResult(
            project=project,
            graph=graph,
            total_gate_count=graph.total_gate_count(),
            chip_errors=chip_errors,
            definition_reads=store.reads,
        )

    def scan_projects(self, projects: Iterable[Project], workers: int = 1) -> List[ProjectScanResult]:
        """Scan several projects; skipped ones are dropped, order is kept."""
        projects = list(projects)
        if workers > 1 and len(projects) > 1:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="nandscan_scan") as pool:
                results = list(pool.map(self.scan_project, projects))
        else:
            results = [self.scan_project(p) for p in projects]
        return [r for r in results if r is not None]


def scan_project(
    project: Project,
    max_supported_version: str = MAX_SUPPORTED_VERSION,
) -> Optional[ProjectScanResult]:
    return ProjectScanner(max_supported_version=max_supported_version).scan_project(project)
