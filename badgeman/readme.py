"""
readme.py

Responsibility: splice a rendered badge line into README.md, right under the
top-level heading.

Layout after a first insertion:

    # Title
    <blank>
    [//]: # (inserted by Badgeman)
    <badges>
    <blank>
    ...original content...

Later runs find the marker and replace (or append to) the badge line. A README
that does not start with `# heading` followed by a blank line is left as-is.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

README_FILENAME = "README.md"
INJECTION_MARKER = "[//]: # (inserted by Badgeman)"


def splice_badges(lines: list[str], rendered: str, *, replace: bool = True) -> list[str]:
    """Return a new line list with `rendered` spliced in; `lines` is not modified."""
    out = list(lines)
    if len(out) < 2 or not out[0].startswith("# ") or out[1] != "":
        logger.warning("README does not start with a '# heading' line followed by a blank line; not modified")
        return out

    if len(out) > 2 and out[2] == INJECTION_MARKER:
        if len(out) == 3:
            out.append(rendered)
        elif replace:
            out[3] = rendered
        else:
            out[3] = f"{out[3]} {rendered}"
        return out

    out[1:1] = ["", INJECTION_MARKER, rendered]
    return out


def insert_into_readme(package_root: str | Path, rendered: str, *, replace: bool = True) -> Path:
    path = Path(package_root) / README_FILENAME
    if not path.is_file():
        raise FileNotFoundError(f"README.md not found in directory: {package_root}")

    lines = path.read_text(encoding="utf-8").split("\n")
    path.write_text("\n".join(splice_badges(lines, rendered, replace=replace)), encoding="utf-8", newline="\n")
    logger.info("Badges %s in %s", "written" if replace else "appended", path)
    return path
