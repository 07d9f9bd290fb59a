"""Project descriptors — the read-only input of the dependency graph.

A descriptor is built either by hand (tests, callers embedding the
planner) or from a parsed ``package.json`` by :meth:`ProjectDescriptor.from_manifest`.
Only dependency *names* matter to the graph; constraint strings are carried
along untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_SCOPE_PREFIX = re.compile(r"^@")


@dataclass(frozen=True, eq=False)
class ProjectDescriptor:
    """One buildable project of the workspace."""

    name: str
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    version: str | None = None
    private: bool = False
    manifest_path: Path | None = None
    directory: Path | None = None
    manifest: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_manifest(
        cls,
        manifest: dict[str, Any],
        *,
        manifest_path: Path | None = None,
    ) -> ProjectDescriptor:
        """Build a descriptor from a parsed ``package.json`` mapping.

        Raises:
            ValueError: If the manifest has no string ``name``.
        """
        name = manifest.get("name")
        if not isinstance(name, str) or not name:
            where = manifest_path or "<manifest>"
            msg = f"{where}: package manifest has no name"
            raise ValueError(msg)

        version = manifest.get("version")
        return cls(
            name=name,
            dependencies=_str_mapping(manifest.get("dependencies")),
            dev_dependencies=_str_mapping(manifest.get("devDependencies")),
            version=version if isinstance(version, str) else None,
            private=bool(manifest.get("private", False)),
            manifest_path=manifest_path,
            directory=manifest_path.parent if manifest_path is not None else None,
            manifest=dict(manifest),
        )

    def dependency_names(self, *, include_dev: bool = True) -> list[str]:
        """Declared dependency names, runtime first, without duplicates."""
        names = dict.fromkeys(self.dependencies)
        if include_dev:
            names.update(dict.fromkeys(self.dev_dependencies))
        return list(names)


def safe_name(name: str) -> str:
    """Filesystem-safe form of a package name.

    Examples:
        >>> safe_name("@myorg/my-package")
        'myorg-my-package'
        >>> safe_name("plain")
        'plain'
    """
    return _SCOPE_PREFIX.sub("", name).replace("/", "-")


def _str_mapping(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}
