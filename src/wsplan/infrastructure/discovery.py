"""Project discovery — locate and parse package manifests under a workspace root.

Patterns are pathlib glob patterns relative to the root
(``packages/*/package.json``, ``**/package.json``). Any path with a
directory component matching one of the *ignore* globs is skipped, so
``node_modules`` trees never contribute projects.
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from pathlib import Path

from wsplan.domain.projects import ProjectDescriptor
from wsplan.infrastructure.jsonc import parse_json

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"
DEFAULT_PATTERNS: tuple[str, ...] = (f"**/{MANIFEST_FILENAME}",)
DEFAULT_IGNORE: tuple[str, ...] = ("node_modules", "dist")


def find_manifests(
    root: Path,
    *,
    patterns: Iterable[str] = DEFAULT_PATTERNS,
    ignore: Iterable[str] = DEFAULT_IGNORE,
) -> list[Path]:
    """Return manifest files matching *patterns*, sorted and de-duplicated."""
    ignore = tuple(ignore)
    found: set[Path] = set()
    for pattern in patterns:
        for path in root.glob(pattern):
            if not path.is_file():
                continue
            if _is_ignored(path.relative_to(root), ignore):
                continue
            found.add(path)
    return sorted(found)


def discover_projects(
    root: Path,
    *,
    patterns: Iterable[str] = DEFAULT_PATTERNS,
    ignore: Iterable[str] = DEFAULT_IGNORE,
    warnings: list[str] | None = None,
) -> list[ProjectDescriptor]:
    """Discover projects under *root*.

    Manifests that cannot be read, do not parse, or have no ``name`` are
    skipped rather than failing discovery. The note goes to *warnings* when
    given, otherwise to the log.
    """
    projects: list[ProjectDescriptor] = []
    for path in find_manifests(root, patterns=patterns, ignore=ignore):
        try:
            manifest = parse_json(path.read_text(encoding="utf-8"))
            if not isinstance(manifest, dict):
                msg = f"{path}: manifest is not a JSON object"
                raise ValueError(msg)
            projects.append(ProjectDescriptor.from_manifest(manifest, manifest_path=path))
        except (OSError, ValueError) as exc:
            note = f"Skipped manifest {path}: {exc}"
            if warnings is not None:
                warnings.append(note)
            else:
                logger.warning(note)

    logger.debug("Discovered %d project(s) under %s", len(projects), root)
    return projects


def workspace_package_names(
    root: Path,
    *,
    ignore: Iterable[str] = DEFAULT_IGNORE,
) -> set[str]:
    """Names of every parseable manifest under *root*, regardless of patterns."""
    names: set[str] = set()
    for path in find_manifests(root, ignore=ignore):
        try:
            manifest = parse_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            continue
        if isinstance(manifest, dict) and isinstance(manifest.get("name"), str):
            names.add(manifest["name"])
    return names


def _is_ignored(relative: Path, ignore: tuple[str, ...]) -> bool:
    return any(
        fnmatch.fnmatch(part, pattern) for part in relative.parent.parts for pattern in ignore
    )
