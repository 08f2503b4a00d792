"""
badges.py

Responsibility: badge variants and their rendering to markdown image links.

Rules:
- Every badge is an immutable value; the variant decides its shields.io URL.
- Rendering is a single `render_badge` dispatch over the variant, backed by
  Jinja2 string templates rendered with `StrictUndefined`.
- A `BadgeCollection` keeps insertion order explicitly as (name, badge) pairs.

No network calls are made: URLs are only built as strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union
from urllib.parse import quote

from jinja2 import Environment, StrictUndefined

from badgeman.errors import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

SHIELDS_BASE = "https://img.shields.io"
METADATA_DIR = "metadata/badges"
SCHEMA_VERSION = 1

STYLE_FLAT = "flat"
BADGE_STYLES = ("flat", "flat-square", "plastic", "for-the-badge", "social")

COLOR_LIGHT_GREY = "lightgrey"
COLOR_GREY = "grey"

DEFAULT_CACHE_SECONDS = 300

# Characters `encodeURIComponent` leaves alone besides alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"

_env = Environment(autoescape=False, undefined=StrictUndefined)

_GITHUB_TEMPLATE = _env.from_string(
    "[![{{ label }}](" + SHIELDS_BASE + "/github/{{ path }}/{{ username }}/{{ repo }}"
    "{% if branch %}/{{ branch }}{% endif %}.svg?style={{ style }})]({{ link }})"
)
_ENDPOINT_TEMPLATE = _env.from_string(
    "[![{{ label }}](" + SHIELDS_BASE + "/endpoint.svg?url={{ endpoint }}&style={{ style }})]({{ link }})"
)


def validate_style(name: str) -> str:
    if name not in BADGE_STYLES:
        raise ValidationError(f"Style name not supported: {name!r} (expected one of {', '.join(BADGE_STYLES)})")
    return name


def _clean_text(value: Any) -> str:
    if value is None or value is True or value is False:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class CodeSizeBadge:
    username: str
    repo: str
    branch: str = "master"
    default_message: str = ""
    style: str = STYLE_FLAT
    label: str = "Code Size"


@dataclass(frozen=True)
class RepoSizeBadge:
    username: str
    repo: str
    branch: str = "master"
    default_message: str = ""
    style: str = STYLE_FLAT
    label: str = "Repo Size"


@dataclass(frozen=True)
class PackageVersionBadge:
    username: str
    repo: str
    branch: str = "master"
    default_message: str = ""
    style: str = STYLE_FLAT
    label: str = "Package Version"


@dataclass(frozen=True)
class LatestTagBadge:
    username: str
    repo: str
    prerelease: bool = False
    default_message: str = ""
    style: str = STYLE_FLAT
    label: str = "Latest Tag"


@dataclass(frozen=True)
class CustomBadge:
    """A shields.io endpoint badge backed by a JSON schema file under `metadata/badges/`."""

    endpoint_url: str | None
    label: str
    default_message: str = ""
    style: str = STYLE_FLAT
    schema: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def create(
        cls,
        endpoint_url: str | None,
        label: str,
        message: str,
        schema: dict[str, Any] | None = None,
        style: str = STYLE_FLAT,
    ) -> CustomBadge:
        label = _clean_text(label)
        message = _clean_text(message)
        return cls(
            endpoint_url=endpoint_url,
            label=label,
            default_message=message,
            style=style,
            schema=schema if schema else create_schema(label, message, style=style),
        )


Badge = Union[CodeSizeBadge, RepoSizeBadge, PackageVersionBadge, LatestTagBadge, CustomBadge]
BADGE_TYPES = (CodeSizeBadge, RepoSizeBadge, PackageVersionBadge, LatestTagBadge, CustomBadge)


def create_github_endpoint(username: str, repo: str, branch: str = "master") -> str:
    return f"https://raw.githubusercontent.com/{username}/{repo}/{branch}"


def _to_int(value: Any) -> int | None:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        try:
            return int(float(str(value).strip()))
        except (TypeError, ValueError, OverflowError):
            return None


def create_schema(
    label: str,
    message: str,
    *,
    color: str | None = COLOR_LIGHT_GREY,
    label_color: str | None = COLOR_GREY,
    style: str | None = STYLE_FLAT,
    is_error: bool = False,
    cache_seconds: Any = DEFAULT_CACHE_SECONDS,
    named_logo: str | None = None,
    logo_svg: str | None = None,
    logo_color: str | None = None,
    logo_width: Any = None,
    logo_position: Any = None,
) -> dict[str, Any]:
    """
    Build a shields.io endpoint schema (https://shields.io/endpoint).

    Numeric fields are coerced: `cacheSeconds` falls back to 300 unless it is a
    positive integer; `logoWidth` / `logoPosition` fall back to 0 when not numeric.
    """
    schema: dict[str, Any] = {
        "schemaVersion": SCHEMA_VERSION,
        "label": label,
        "message": message,
        "style": style or STYLE_FLAT,
        "color": color or COLOR_LIGHT_GREY,
        "labelColor": label_color or COLOR_GREY,
    }
    if is_error:
        schema["isError"] = True

    seconds = _to_int(cache_seconds)
    schema["cacheSeconds"] = seconds if seconds is not None and seconds > 0 else DEFAULT_CACHE_SECONDS

    if named_logo:
        schema["namedLogo"] = named_logo
    if logo_svg:
        schema["logoSvg"] = logo_svg
    if logo_color:
        schema["logoColor"] = logo_color
    if logo_width is not None:
        schema["logoWidth"] = _to_int(logo_width) or 0
    if logo_position is not None:
        schema["logoPosition"] = _to_int(logo_position) or 0
    return schema


def endpoint_for(badge: CustomBadge, name: str) -> str:
    """The fully qualified URL of a custom badge's schema file."""
    return f"{badge.endpoint_url}/{METADATA_DIR}/{name}"


def render_badge(badge: Badge, name: str = "") -> str:
    match badge:
        case CodeSizeBadge():
            path, branch = "languages/code-size", ""
        case RepoSizeBadge():
            path, branch = "repo-size", ""
        case PackageVersionBadge(branch=branch):
            path = "package-json/v"
        case LatestTagBadge(prerelease=prerelease):
            path, branch = ("tag-pre" if prerelease else "tag"), ""
        case CustomBadge():
            if not badge.endpoint_url:
                raise ConfigurationError(f"No endpoint URL provided for custom badge {name or badge.label!r}.")
            return _ENDPOINT_TEMPLATE.render(
                label=badge.label,
                endpoint=quote(endpoint_for(badge, name), safe=_URI_COMPONENT_SAFE),
                style=badge.style,
                link=badge.default_message,
            )
        case _:
            raise ValidationError(f"Not a valid badge type: {badge!r}")

    return _GITHUB_TEMPLATE.render(
        label=badge.label,
        path=path,
        username=badge.username,
        repo=badge.repo,
        branch=branch,
        style=badge.style,
        link=badge.default_message,
    )


class BadgeCollection:
    """Badges keyed by name, in insertion order. Re-adding a name replaces it in place."""

    def __init__(self) -> None:
        self._items: list[tuple[str, Badge]] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def get(self, name: str) -> Badge | None:
        for n, badge in self._items:
            if n == name:
                return badge
        return None

    def add(self, badge: Badge, name: str | None = None) -> int:
        if not isinstance(badge, BADGE_TYPES):
            raise ValidationError(f"Not a valid badge type: {badge!r}")
        key = name if isinstance(name, str) else f"badge-{len(self._items)}"
        for i, (n, _old) in enumerate(self._items):
            if n == key:
                self._items[i] = (key, badge)
                break
        else:
            self._items.append((key, badge))
        return len(self._items)

    def render(self, name: str | None = None) -> str:
        if name is not None:
            badge = self.get(name)
            if badge is not None:
                logger.debug("Rendering badge (key: %s)", name)
                return render_badge(badge, name)
        parts = []
        for key, badge in self._items:
            logger.debug("Rendering badge (key: %s)", key)
            parts.append(render_badge(badge, key))
        return " ".join(parts)
