"""
errors.py

Responsibility: the exception taxonomy shared by every badgeman module.
"""

from __future__ import annotations


class BadgemanError(Exception):
    pass


class ValidationError(BadgemanError, ValueError):
    """Bad user input: package path, prerelease identifier, style name."""


class PathOutOfScope(ValidationError):
    pass


class ParseError(BadgemanError, ValueError):
    """A manifest or version string could not be parsed."""


class ManifestError(BadgemanError, OSError):
    """A manifest file could not be read."""


class ConfigurationError(BadgemanError):
    pass


class ExternalCommandError(BadgemanError, RuntimeError):
    pass
