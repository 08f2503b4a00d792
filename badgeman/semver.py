"""
semver.py

Responsibility: the Semantic Versioning 2.0.0 model and the bump state machine.

Versions are immutable: `bump` never mutates its input and always returns a
`SemVer` (possibly the same one, see the prerelease no-op below).

Supported string form: `major.minor.patch[-identifier.number]`. A prerelease
suffix without an identifier (`1.2.3-4`) is kept as an empty identifier.
Build metadata (`+...`) is not supported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Literal

from badgeman.errors import ParseError, ValidationError

Level = Literal["major", "minor", "patch"]

LEVELS: tuple[Level, ...] = ("major", "minor", "patch")

_NUM = r"(?:0|[1-9]\d*)"
_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

_VERSION_RE = re.compile(
    rf"^(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})"
    rf"(?:-(?:(?P<identifier>{_IDENT})\.)?(?P<number>{_NUM}))?$"
)
_IDENT_RE = re.compile(rf"^{_IDENT}$")


@dataclass(frozen=True)
class Prerelease:
    identifier: str
    number: int = 0

    def __str__(self) -> str:
        if not self.identifier:
            return str(self.number)
        return f"{self.identifier}.{self.number}"


@dataclass(frozen=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: Prerelease | None = None

    def __post_init__(self) -> None:
        for name in LEVELS:
            if getattr(self, name) < 0:
                raise ValidationError(f"Version {name} must be non-negative, got {getattr(self, name)}")

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease is None:
            return core
        return f"{core}-{self.prerelease}"


@dataclass(frozen=True)
class BumpDirective:
    """
    What to bump.

    `prerelease` is None for a release bump, True to continue the current
    prerelease line, or an identifier string to start / switch to one.
    """

    level: Level = "patch"
    prerelease: bool | str | None = None


def parse_version(text: str) -> SemVer:
    m = _VERSION_RE.match(str(text).strip())
    if not m:
        raise ParseError(f"Not a supported semantic version: {text!r}")
    prerelease = None
    if m.group("number") is not None:
        prerelease = Prerelease(identifier=m.group("identifier") or "", number=int(m.group("number")))
    return SemVer(
        major=int(m.group("major")),
        minor=int(m.group("minor")),
        patch=int(m.group("patch")),
        prerelease=prerelease,
    )


def _bump_level(version: SemVer, level: Level) -> SemVer:
    if level == "major":
        return SemVer(version.major + 1, 0, 0)
    if level == "minor":
        return SemVer(version.major, version.minor + 1, 0)
    if level == "patch":
        return SemVer(version.major, version.minor, version.patch + 1)
    raise ValidationError(f"Unknown version level: {level!r} (expected one of {', '.join(LEVELS)})")


def _validate_identifier(identifier: str) -> str:
    identifier = identifier.strip()
    if not _IDENT_RE.match(identifier):
        raise ValidationError(f"Invalid prerelease identifier: {identifier!r}")
    return identifier


def bump(version: SemVer, directive: BumpDirective | None = None) -> SemVer:
    """
    Compute the next version.

    - No prerelease directive: bump `level`, zero lower levels, drop any prerelease.
    - Prerelease directive on a release version: an identifier is required; bump
      `level` and attach `identifier.0`.
    - Prerelease directive on a prerelease version: `True` or the same identifier
      increments the prerelease number; a new identifier restarts at 0. Level
      fields are left untouched.
    """
    directive = directive or BumpDirective()
    wanted = directive.prerelease

    if wanted is None or wanted is False:
        return _bump_level(version, directive.level)

    identifier = None if wanted is True else _validate_identifier(str(wanted))

    if version.prerelease is None:
        if identifier is None:
            raise ValidationError(
                f"A prerelease identifier is required to turn release version {version} into a prerelease"
            )
        return replace(_bump_level(version, directive.level), prerelease=Prerelease(identifier, 0))

    current = version.prerelease
    if identifier is None:
        # `1.2.3-4` + True: nothing to continue from, left as-is.
        if not current.identifier:
            return version
        return replace(version, prerelease=Prerelease(current.identifier, current.number + 1))
    if identifier == current.identifier:
        return replace(version, prerelease=Prerelease(identifier, current.number + 1))
    return replace(version, prerelease=Prerelease(identifier, 0))
