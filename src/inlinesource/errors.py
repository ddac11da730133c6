"""Exception types raised while inlining build artifacts."""

from __future__ import annotations

from pathlib import Path


class InlineSourceError(Exception):
    """Base class for all inline-source errors."""


class InlineRuleError(InlineSourceError):
    """The configured matching rule is not a valid regular expression."""

    def __init__(self, pattern: str, cause: Exception | None = None) -> None:
        self.pattern = pattern
        self.cause = cause
        message = f"Invalid inline-source pattern {pattern!r}"
        if cause:
            message += f": {cause}"
        super().__init__(message)


class AssetNotFoundError(InlineSourceError):
    """A reference matched the rule but no build artifact could be found for it."""

    def __init__(self, reference: str, asset_name: str) -> None:
        self.reference = reference
        self.asset_name = asset_name
        message = f"No build artifact for {reference!r}"
        if asset_name != reference:
            message += f" (looked up as {asset_name!r})"
        super().__init__(message)


class DocumentError(InlineSourceError):
    """An HTML document could not be read or written."""

    def __init__(self, path: Path, cause: Exception | None = None) -> None:
        self.path = path
        self.cause = cause
        message = f"Failed to process document {path}"
        if cause:
            message += f": {cause}"
        super().__init__(message)


__all__ = [
    "AssetNotFoundError",
    "DocumentError",
    "InlineRuleError",
    "InlineSourceError",
]
