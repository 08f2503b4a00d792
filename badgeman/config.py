"""
config.py

Responsibility: Load and parse a YAML badge config into a typed model, and turn
it into a `BadgeCollection`.

Example:

    username: alice
    repo: project
    branch: develop
    style: flat
    badges:
      - type: code-size
      - type: latest-tag
        prerelease: true
      - type: custom
        name: coverage
        label: coverage
        message: 87%
        color: green

The CLI treats the parsed result as the single source of truth; flags only
override individual top-level values.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from badgeman.badges import (
    STYLE_FLAT,
    BadgeCollection,
    CodeSizeBadge,
    CustomBadge,
    LatestTagBadge,
    PackageVersionBadge,
    RepoSizeBadge,
    create_github_endpoint,
    create_schema,
    validate_style,
)
from badgeman.errors import ConfigurationError

BADGE_KINDS = ("code-size", "repo-size", "package-version", "latest-tag", "custom")

# Endpoint schema options (besides `isError`) accepted on a custom badge entry, mapped to `create_schema` kwargs.
_SCHEMA_KEYS = {
    "color": "color",
    "labelColor": "label_color",
    "cacheSeconds": "cache_seconds",
    "namedLogo": "named_logo",
    "logoSvg": "logo_svg",
    "logoColor": "logo_color",
    "logoWidth": "logo_width",
    "logoPosition": "logo_position",
}


@dataclass(frozen=True)
class BadgeEntry:
    """One item of the `badges` list."""

    kind: str
    name: str | None = None
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BadgeConfig:
    username: str
    repo: str
    branch: str = "master"
    style: str = STYLE_FLAT
    endpoint: str | None = None
    badges: tuple[BadgeEntry, ...] = ()

    def with_overrides(self, *, style: str | None = None) -> BadgeConfig:
        if style is None:
            return self
        return replace(self, style=validate_style(style))


def _parse_entry(raw: Any, index: int) -> BadgeEntry:
    if isinstance(raw, str):
        raw = {"type": raw}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"`badges[{index}]` must be a mapping or a badge type name.")
    options = dict(raw)
    kind = str(options.pop("type", "") or "").strip()
    if kind not in BADGE_KINDS:
        raise ConfigurationError(f"`badges[{index}].type` must be one of {', '.join(BADGE_KINDS)}; got {kind!r}.")
    name = options.pop("name", None)
    if name is not None:
        name = str(name).strip() or None
    return BadgeEntry(kind=kind, name=name, options=options)


def load_badge_config(config_path: str | Path) -> BadgeConfig:
    """
    Parse a YAML badge config.

    Keys:
    - username: str (required)
    - repo: str (required)
    - branch: str (default: master)
    - style: str (default: flat)
    - endpoint: str (custom badge endpoint; default: raw.githubusercontent.com of the repo)
    - badges: list of `{type, name?, ...}` mappings
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Badge config file does not exist: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Badge config is not valid YAML: {path}") from e
    if not isinstance(data, dict):
        raise ConfigurationError("Badge config must be a mapping/object at the top level.")

    username = str(data.get("username") or "").strip()
    repo = str(data.get("repo") or "").strip()
    if not username or not repo:
        raise ConfigurationError("Badge config must define `username` and `repo`.")

    branch = str(data.get("branch") or "master").strip()
    style = validate_style(str(data.get("style") or STYLE_FLAT).strip())

    endpoint = data.get("endpoint")
    if endpoint is not None:
        endpoint = str(endpoint).strip().rstrip("/") or None

    badges_raw = data.get("badges") or []
    if not isinstance(badges_raw, list):
        raise ConfigurationError("`badges` must be a list when provided.")

    return BadgeConfig(
        username=username,
        repo=repo,
        branch=branch,
        style=style,
        endpoint=endpoint,
        badges=tuple(_parse_entry(raw, i) for i, raw in enumerate(badges_raw)),
    )


def _flag(opts: dict[str, Any], key: str) -> bool:
    value = opts.get(key, False)
    if not isinstance(value, bool):
        raise ConfigurationError(f"`{key}` must be true or false; got {value!r}.")
    return value


def _build_custom(config: BadgeConfig, entry: BadgeEntry) -> CustomBadge:
    opts = entry.options
    label = str(opts.get("label") or entry.name or "").strip()
    message = str(opts.get("message") or "").strip()
    if not label:
        raise ConfigurationError("A custom badge needs a `label` (or a `name`).")
    style = validate_style(str(opts.get("style") or config.style))
    schema_kwargs = {kw: opts[key] for key, kw in _SCHEMA_KEYS.items() if key in opts}
    if "isError" in opts:
        schema_kwargs["is_error"] = _flag(opts, "isError")
    endpoint = opts.get("endpoint") or config.endpoint or create_github_endpoint(config.username, config.repo, config.branch)
    return CustomBadge.create(
        str(endpoint).rstrip("/"),
        label,
        message,
        schema=create_schema(label, message, style=style, **schema_kwargs),
        style=style,
    )


def build_collection(config: BadgeConfig) -> BadgeCollection:
    collection = BadgeCollection()
    for entry in config.badges:
        opts = entry.options
        style = validate_style(str(opts.get("style") or config.style))
        link = str(opts.get("link") or "").strip()
        if entry.kind == "custom":
            badge = _build_custom(config, entry)
        elif entry.kind == "latest-tag":
            badge = LatestTagBadge(
                config.username, config.repo, prerelease=_flag(opts, "prerelease"), default_message=link, style=style
            )
        else:
            cls = {"code-size": CodeSizeBadge, "repo-size": RepoSizeBadge, "package-version": PackageVersionBadge}[entry.kind]
            badge = cls(config.username, config.repo, branch=str(opts.get("branch") or config.branch), default_message=link, style=style)
        collection.add(badge, entry.name)
    return collection
