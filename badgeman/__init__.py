"""
badgeman package

This package implements badgeman as a CLI-first utility.

Key responsibilities are split across modules:
- `semver.py`: semantic version model, parsing and the bump state machine
- `manifest.py`: package.json version read/write and working package path resolution
- `badges.py`: badge variants and their markdown rendering
- `metadata.py`: endpoint-schema JSON persistence for custom badges
- `readme.py`: splicing rendered badges into README.md
- `config.py`: YAML badge config parsing
- `cli.py`: CLI entrypoint and orchestration (`version` / `badges` workflows)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
