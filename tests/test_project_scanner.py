import json
import logging
from pathlib import Path

import pytest

from dls.chips import BUILTIN_CHIPS, CyclicDefinition, DefinitionNotFound
from dls.paths import Project
from dls.scanner import ProjectScanner, scan_project


def _write_chip(project: Path, name: str, subchips) -> None:
    path = project / "Chips" / f"{name}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"Name": name, "SubChips": [{"Name": s} for s in subchips]}), encoding="utf-8")


def _write_project(root: Path, name: str, chips, version="2.1.5", **overrides) -> Project:
    path = root / "Projects" / name
    path.mkdir(parents=True, exist_ok=True)
    meta = {
        "ProjectName": name,
        "DLSVersion_EarliestCompatible": version,
        "AllCustomChipNames": list(chips),
    }
    meta.update(overrides)
    (path / "ProjectDescription.json").write_text(json.dumps(meta), encoding="utf-8")
    return Project(name=name, path=path)


def _basic_gates(project: Project) -> None:
    _write_chip(project.path, "NOT", ["NAND"])
    _write_chip(project.path, "AND", ["NAND", "NOT"])
    _write_chip(project.path, "OR", ["NOT", "NOT", "NAND"])


def test_scan_resolves_declared_chips(tmp_path):
    project = _write_project(tmp_path, "Gates", ["NOT", "AND", "OR"])
    _basic_gates(project)

    result = ProjectScanner().scan_project(project)

    assert result is not None
    assert [(c.name, c.gate_count) for c in result.custom_chips()] == [("OR", 3), ("AND", 2), ("NOT", 1)]
    # Every graph entry counts, NAND's seeded unit included.
    assert result.total_gate_count == 1 + 2 + 3 + 1
    assert result.custom_gate_count == 6
    assert result.chip_errors == {}
    assert result.definition_reads == 3


def test_builtins_are_not_reported(tmp_path):
    project = _write_project(tmp_path, "Display", ["SCREEN"])
    _write_chip(project.path, "SCREEN", ["RGB DISPLAY", "DOT DISPLAY", "CLOCK", "NAND"])

    result = scan_project(project)

    names = [c.name for c in result.custom_chips()]
    assert names == ["SCREEN"]
    assert not set(names) & set(BUILTIN_CHIPS)
    assert result.definition_reads == 1


def test_version_at_ceiling_is_accepted(tmp_path):
    project = _write_project(tmp_path, "Edge", ["NOT"], version="2.1.5")
    _write_chip(project.path, "NOT", ["NAND"])

    assert ProjectScanner(max_supported_version="2.1.5").scan_project(project) is not None


def test_version_above_ceiling_is_skipped(tmp_path, caplog):
    project = _write_project(tmp_path, "Future", ["NOT"], version="2.1.6")
    _write_chip(project.path, "NOT", ["NAND"])

    with caplog.at_level(logging.WARNING, logger="nandscan"):
        assert ProjectScanner(max_supported_version="2.1.5").scan_project(project) is None

    assert "incompatible version 2.1.6 > 2.1.5" in caplog.text


def test_prerelease_sorts_below_release(tmp_path):
    project = _write_project(tmp_path, "Beta", ["NOT"], version="2.1.6-beta.1")
    _write_chip(project.path, "NOT", ["NAND"])

    assert ProjectScanner(max_supported_version="2.1.6").scan_project(project) is not None
    assert ProjectScanner(max_supported_version="2.1.5").scan_project(project) is None


@pytest.mark.parametrize("version, ceiling, skipped", [
    ("2.1.5+build.7", "2.1.5", True),
    ("2.1.5", "2.1.5+build.7", False),
    ("2.1.5+build.7", "2.1.5+build.10", False),
    ("2.1.5+build.10", "2.1.5+build.7", True),
    ("2.1.5+a", "2.1.5+9", True),
    ("2.1.4+zzz", "2.1.5", False),
])
def test_build_metadata_breaks_version_ties(tmp_path, version, ceiling, skipped):
    project = _write_project(tmp_path, "Built", ["NOT"], version=version)
    _write_chip(project.path, "NOT", ["NAND"])

    result = ProjectScanner(max_supported_version=ceiling).scan_project(project)

    assert (result is None) is skipped

@pytest.mark.parametrize("version", [None, "", "2.1", "latest", 215])
def test_missing_or_invalid_version_is_skipped(tmp_path, caplog, version):
    project = _write_project(tmp_path, "Odd", ["NOT"], version=version)
    _write_chip(project.path, "NOT", ["NAND"])

    with caplog.at_level(logging.WARNING, logger="nandscan"):
        assert scan_project(project) is None

    assert "missing or invalid DLSVersion_EarliestCompatible" in caplog.text


def test_missing_description_is_skipped(tmp_path, caplog):
    path = tmp_path / "Projects" / "Bare"
    path.mkdir(parents=True)

    with caplog.at_level(logging.WARNING, logger="nandscan"):
        assert scan_project(Project(name="Bare", path=path)) is None

    assert "missing ProjectDescription.json" in caplog.text


def test_corrupt_description_is_skipped(tmp_path, caplog):
    path = tmp_path / "Projects" / "Corrupt"
    path.mkdir(parents=True)
    (path / "ProjectDescription.json").write_text("{", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="nandscan"):
        assert scan_project(Project(name="Corrupt", path=path)) is None

    assert "Failed to parse JSON for Corrupt" in caplog.text


def test_undecodable_description_is_skipped_and_scan_continues(tmp_path, caplog):
    path = tmp_path / "Projects" / "Garbled"
    path.mkdir(parents=True)
    (path / "ProjectDescription.json").write_bytes(b'{"x": "\xff\xfe"}')
    good = _write_project(tmp_path, "Good", ["NOT"])
    _write_chip(good.path, "NOT", ["NAND"])

    with caplog.at_level(logging.WARNING, logger="nandscan"):
        results = ProjectScanner().scan_projects([Project(name="Garbled", path=path), good])

    assert [r.project.name for r in results] == ["Good"]
    assert "Failed to read metadata for Garbled" in caplog.text


def test_project_without_custom_chips_is_skipped(tmp_path, caplog):
    project = _write_project(tmp_path, "Empty", [])
    other = _write_project(tmp_path, "NoList", [], AllCustomChipNames=None)

    with caplog.at_level(logging.WARNING, logger="nandscan"):
        assert scan_project(project) is None
        assert scan_project(other) is None

    assert caplog.text.count("no custom chips found") == 2


def test_broken_chip_does_not_abort_project(tmp_path, caplog):
    project = _write_project(tmp_path, "Mixed", ["NOT", "BROKEN", "LOOP", "AND"])
    _basic_gates(project)
    _write_chip(project.path, "BROKEN", ["NOT", "GHOST"])
    _write_chip(project.path, "LOOP", ["LOOP"])

    with caplog.at_level(logging.WARNING, logger="nandscan"):
        result = scan_project(project)

    assert result is not None
    assert isinstance(result.chip_errors["BROKEN"], DefinitionNotFound)
    assert isinstance(result.chip_errors["LOOP"], CyclicDefinition)
    assert [c.name for c in result.custom_chips()] == ["AND", "NOT"]
    assert result.total_gate_count == 1 + 1 + 2
    assert "Error scanning chip BROKEN in Mixed: Chip file not found: GHOST" in caplog.text


def test_scan_projects_keeps_order_and_drops_skipped(tmp_path):
    projects = []
    for i, name in enumerate(["Alpha", "Beta", "Gamma", "Delta"]):
        version = "9.0.0" if name == "Gamma" else "2.0.0"
        project = _write_project(tmp_path, name, ["NOT"] * (i + 1), version=version)
        _write_chip(project.path, "NOT", ["NAND"])
        projects.append(project)
    scanner = ProjectScanner()

    sequential = scanner.scan_projects(projects)
    parallel = scanner.scan_projects(projects, workers=4)

    assert [r.project.name for r in sequential] == ["Alpha", "Beta", "Delta"]
    assert [r.project.name for r in parallel] == ["Alpha", "Beta", "Delta"]
    assert all(r.graph is not s.graph for r, s in zip(parallel, sequential))


def test_to_dict(tmp_path):
    project = _write_project(tmp_path, "Gates", ["NOT", "AND"])
    _basic_gates(project)

    data = scan_project(project).to_dict()

    assert data["project"] == "Gates"
    assert data["total_nand"] == 3
    assert data["graph_nand"] == 4
    assert data["chips"] == [{"name": "AND", "nand": 2}, {"name": "NOT", "nand": 1}]
    assert data["average_nand"] == 1.5
    assert data["errors"] == {}
