"""
manifest.py

Responsibility: the working package and its npm manifest (`package.json`).

- Resolve a user-supplied package directory, sandboxed to the current working
  directory subtree.
- Read the `version` field as a `SemVer`.
- Write a new `version` back, leaving every other field (and key order) as-is.

This module intentionally does NOT know about bump rules, badges, or git.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from badgeman.errors import ManifestError, ParseError, PathOutOfScope, ValidationError
from badgeman.semver import SemVer, parse_version

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"
MANIFEST_INDENT = 2


def resolve_package_path(package_path: str | Path, cwd: str | Path | None = None) -> Path:
    """
    Resolve `package_path` against `cwd` (default: the process cwd).

    The result must be `cwd` itself or one of its descendants.
    """
    base = Path(cwd if cwd is not None else Path.cwd()).resolve()
    real = (base / Path(package_path)).resolve()
    if real != base and base not in real.parents:
        raise PathOutOfScope(f"Invalid path. Path: {package_path} cannot be resolved to {base}")
    return real


@dataclass
class PackageContext:
    """The package directory a workflow operates on; assigned once per invocation."""

    root: Path | None = None
    manifest_path: Path | None = None
    initialized: bool = False

    def assign(self, package_path: str | Path, cwd: str | Path | None = None) -> PackageContext:
        root = resolve_package_path(package_path, cwd=cwd)
        self.root = root
        self.manifest_path = root / MANIFEST_FILENAME
        self.initialized = True
        logger.debug("Working package: %s", root)
        return self

    def require_root(self) -> Path:
        if not self.initialized or self.root is None:
            raise ValidationError("No working package has been assigned")
        return self.root

    def require_manifest(self) -> Path:
        return self.require_root() / MANIFEST_FILENAME


def _load_manifest(manifest_path: Path) -> dict[str, Any]:
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Cannot read package manifest %s: %s", manifest_path, e)
        raise ManifestError(f"Cannot read package manifest: {manifest_path}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Malformed package manifest %s: %s", manifest_path, e)
        raise ParseError(f"Package manifest is not valid JSON: {manifest_path}") from e
    if not isinstance(data, dict):
        raise ParseError(f"Package manifest must be a JSON object: {manifest_path}")
    return data


def read_version(manifest_path: str | Path) -> SemVer:
    path = Path(manifest_path)
    data = _load_manifest(path)
    raw = data.get("version")
    if not isinstance(raw, str) or not raw.strip():
        raise ParseError(f"Package manifest has no `version` string: {path}")
    return parse_version(raw)


def write_version(manifest_path: str | Path, version: SemVer) -> None:
    """
    Overwrite the `version` field only.

    Output is pretty-printed JSON (fixed indent) with a trailing newline, which
    matches what npm itself writes.
    """
    path = Path(manifest_path)
    data = _load_manifest(path)
    data["version"] = str(version)
    path.write_text(json.dumps(data, indent=MANIFEST_INDENT, ensure_ascii=False) + "\n", encoding="utf-8")
    logger.info("Wrote version %s to %s", version, path)
