#!/usr/bin/env python3
"""
nandscan CLI - count the NAND gates behind every custom chip

Usage:
    python -m nandscan.cli                      # pick a project interactively
    python -m nandscan.cli /path/to/save/dir    # use another save directory
    python -m nandscan.cli --all --format json  # scan everything, JSON report
    python -m nandscan.cli -p "My CPU" -p 2     # scan projects by name or number
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from dls.diagnostics import configure_logging
from dls.paths import Project, ProjectsDirError, default_game_dir, discover_projects
from dls.report import render
from dls.scanner import ProjectScanner
from dls.settings import load_scan_settings
from dls.tuneables_schema import REPORT_FORMATS, SCHEMA

log = logging.getLogger("nandscan.cli")


def _configure_output():
    """Ensure UTF-8 output on Windows terminals to avoid UnicodeEncodeError."""
    for stream in (sys.stdout, sys.stderr):
        try:
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding="utf-8", errors="replace")
        except Exception:
            pass


def list_projects(projects: Sequence[Project], out: TextIO) -> None:
    out.write("Choose a DLS Project to NAND scan:\n")
    longest_name = 3
    for i, project in enumerate(projects, start=1):
        longest_name = max(longest_name, len(project.name))
        out.write(f"  {i}.) {project.name}\n")
    out.write("-" * (longest_name + 7) + "\n")
    out.write(f"  {len(projects) + 1}.) All\n")


def prompt_for_projects(
    projects: Sequence[Project],
    stdin: TextIO,
    out: TextIO,
) -> Optional[List[Project]]:
    """Ask which project to scan. Returns None on an invalid choice."""
    list_projects(projects, out)
    out.write("Enter your choice: ")
    out.flush()
    try:
        choice = int(stdin.readline().strip())
    except ValueError:
        return None

    if choice == len(projects) + 1:
        out.write("Scanning all projects...\n")
        return list(projects)
    if 0 < choice <= len(projects):
        return [projects[choice - 1]]
    return None


def select_projects(projects: Sequence[Project], wanted: Sequence[str]) -> List[Project]:
    """Pick projects by exact name or 1-based index, in the order given."""
    by_name = {p.name: p for p in projects}
    selected: List[Project] = []
    for token in wanted:
        if token in by_name:
            project = by_name[token]
        elif token.isdigit() and 0 < int(token) <= len(projects):
            project = projects[int(token) - 1]
        else:
            raise KeyError(token)
        if project not in selected:
            selected.append(project)
    return selected


def _scan_int(key: str):
    """argparse type for an int tuneable; rejects values outside its bounds."""
    spec = SCHEMA["scan"][key]

    def parse(text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
        if not spec.min_val <= value <= spec.max_val:
            raise argparse.ArgumentTypeError(
                f"must be between {spec.min_val} and {spec.max_val}, got {value}"
            )
        return value

    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nandscan",
        description="nandscan - count NAND gates in Digital Logic Sim projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nandscan
  nandscan ~/dls-backup --all
  nandscan --project "My CPU" --format yaml
""",
    )
    parser.add_argument("game_dir", nargs="?", type=Path, default=None,
                        help="directory containing the Projects folder (default: platform save dir)")
    parser.add_argument("--project", "-p", action="append", default=None,
                        help="project name or number to scan (repeatable)")
    parser.add_argument("--all", action="store_true", help="scan every project")
    parser.add_argument("--format", choices=REPORT_FORMATS, default=None, help="report format")
    parser.add_argument("--max-version", default=None,
                        help="newest DLSVersion_EarliestCompatible to accept")
    parser.add_argument("--max-depth", type=_scan_int("max_depth"), default=None, help="max sub-chip nesting depth")
    parser.add_argument("--workers", type=_scan_int("workers"), default=None, help="projects to scan in parallel")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug diagnostics")
    parser.add_argument("--quiet", "-q", action="store_true", help="only report errors")
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    _configure_output()
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    args = build_parser().parse_args(argv)

    settings = load_scan_settings().with_overrides(
        report_format=args.format,
        max_supported_version=args.max_version,
        max_depth=args.max_depth,
        workers=args.workers,
    )
    level = settings.log_level
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "ERROR"
    configure_logging(level, log_dir=settings.log_dir)

    game_dir = args.game_dir or settings.game_dir or default_game_dir()
    try:
        projects = discover_projects(game_dir)
    except ProjectsDirError as e:
        log.error("%s", e)
        return 2
    if not projects:
        log.error("No projects found in %s", game_dir)
        return 1

    try:
        scanner = ProjectScanner(
            max_supported_version=settings.max_supported_version,
            max_depth=settings.max_depth,
        )
    except ValueError:
        log.error("Invalid max version: %s", settings.max_supported_version)
        return 2

    if args.all:
        selected = list(projects)
    elif args.project:
        try:
            selected = select_projects(projects, args.project)
        except KeyError as e:
            log.error("Unknown project: %s", e.args[0])
            return 1
    else:
        selected = prompt_for_projects(projects, stdin, stdout)
        if selected is None:
            sys.stderr.write("Invalid choice.\n")
            return 1

    results = scanner.scan_projects(selected, workers=settings.workers)
    if results:
        stdout.write(render(results, settings.report_format))
        if settings.report_format != "yaml":
            stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
