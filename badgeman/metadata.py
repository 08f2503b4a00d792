"""
metadata.py

Responsibility: persist endpoint schemas of custom badges as JSON files under
`<package root>/metadata/badges/<badge name>`.

Write failures (OSError) are not caught here: they propagate to the caller.
A badge name that resolves outside `metadata/badges` raises PathOutOfScope
before anything is written for it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from badgeman.badges import METADATA_DIR, BadgeCollection, CustomBadge
from badgeman.errors import PathOutOfScope
from badgeman.manifest import resolve_package_path

logger = logging.getLogger(__name__)

SCHEMA_INDENT = 4


def metadata_dir(package_root: str | Path) -> Path:
    return Path(package_root) / METADATA_DIR


def _schema_path(out_dir: Path, name: str) -> Path:
    """The schema file for badge `name`; it must sit directly inside `out_dir`."""
    path = resolve_package_path(name, cwd=out_dir)
    if path.parent != out_dir.resolve():
        raise PathOutOfScope(f"Badge name {name!r} does not resolve to a file in {out_dir}")
    return out_dir / path.name


def save_metadata(collection: BadgeCollection, package_root: str | Path) -> list[Path]:
    """
    Write one schema file per custom badge; other badge types have no schema and are skipped.

    Returns the written paths in collection order.
    """
    out_dir = metadata_dir(package_root)
    out_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for name, badge in collection:
        if not isinstance(badge, CustomBadge):
            logger.debug("Skipping badge without endpoint schema: %s", name)
            continue
        path = _schema_path(out_dir, name)
        path.write_text(json.dumps(badge.schema, indent=SCHEMA_INDENT), encoding="utf-8")
        logger.info("Badge metadata saved: %s -> %s", name, path)
        written.append(path)
    return written
