"""Inlining options and build context.

Options are passed explicitly into every resolver call; nothing here is
module-level state. Defaults reproduce the classic behavior: no inlining
unless a pattern is configured, missing assets are left as external
references, and inlined tags stay in their original placement group.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path, PurePath
from typing import Any

from inlinesource.errors import InlineRuleError

AUTO_PUBLIC_PATH = "auto"


class Strictness(Enum):
    """What to do when a matched reference has no build artifact."""

    IGNORE = "ignore"  # Leave the tag as an external reference (default)
    WARN = "warn"  # Same, but log a warning
    ERROR = "error"  # Raise AssetNotFoundError


class InjectTarget(Enum):
    """Placement group for inlined tags."""

    KEEP = "keep"  # Stay where the template generator put them (default)
    HEAD = "head"
    BODY = "body"


@dataclass
class InlineOptions:
    """User configuration for one inlining pass."""

    # Regular expression tested against src/href values; None disables inlining
    inline_source: str | None = None

    strictness: Strictness = Strictness.IGNORE

    inject_target: InjectTarget = InjectTarget.KEEP

    @classmethod
    def from_cli(
        cls,
        *,
        inline_source: str | None = None,
        strict: str = "ignore",
        inject_target: str = "keep",
    ) -> InlineOptions:
        """Build InlineOptions from CLI argument values.

        Raises:
            ValueError: If any argument has an invalid value
        """
        try:
            strictness = Strictness(strict)
        except ValueError as exc:
            valid_values = [mode.value for mode in Strictness]
            raise ValueError(
                f"Invalid strictness '{strict}'. Valid values: {valid_values}"
            ) from exc

        try:
            target = InjectTarget(inject_target)
        except ValueError as exc:
            valid_values = [t.value for t in InjectTarget]
            raise ValueError(
                f"Invalid inject target '{inject_target}'. Valid values: {valid_values}"
            ) from exc

        return cls(inline_source=inline_source or None, strictness=strictness, inject_target=target)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> InlineOptions:
        """Build InlineOptions from a TOML table such as ``[tool.inline-source]``.

        Keys may use dashes or underscores. Unknown keys are rejected.
        """
        normalized = {str(k).replace("-", "_"): v for k, v in data.items()}
        known = {"inline_source", "strict", "inject_target"}
        unknown = sorted(set(normalized) - known)
        if unknown:
            raise ValueError(f"Unknown inline-source option(s): {unknown}")
        inline_source = normalized.get("inline_source")
        if inline_source is not None and not isinstance(inline_source, str):
            raise ValueError("inline-source must be a string pattern")
        return cls.from_cli(
            inline_source=inline_source,
            strict=str(normalized.get("strict", Strictness.IGNORE.value)),
            inject_target=str(normalized.get("inject_target", InjectTarget.KEEP.value)),
        )

    def merged(self, **overrides: Any) -> InlineOptions:
        """Return a copy with every non-None override applied."""
        names = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if v is not None and k in names}
        return replace(self, **changes)

    def compile_rule(self) -> re.Pattern[str] | None:
        """Compile the matching rule, or return None when inlining is disabled.

        Raises:
            InlineRuleError: If the pattern is not a valid regular expression
        """
        if not self.inline_source:
            return None
        try:
            return re.compile(self.inline_source)
        except re.error as exc:
            raise InlineRuleError(self.inline_source, exc) from exc

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization/logging."""
        return {
            "inline_source": self.inline_source,
            "strictness": self.strictness.value,
            "inject_target": self.inject_target.value,
        }


@dataclass(frozen=True)
class BuildContext:
    """Read-only facts about the build producing the document.

    - output_path: absolute output directory of the build
    - public_path: URL prefix of served assets; None, "" and "auto" mean no prefix
    - filename: output filename of the HTML document, relative to output_path
    """

    output_path: str | Path
    public_path: str | None = None
    filename: str = "index.html"

    @property
    def output_dir(self) -> str:
        """Output directory with forward-slash separators."""
        path = self.output_path
        if isinstance(path, PurePath):
            return path.as_posix()
        return str(path).replace("\\", "/")

    def map_url_prefix(self) -> str:
        """Public path with the "no prefix" sentinels collapsed to ""."""
        public_path = self.public_path or ""
        if public_path == AUTO_PUBLIC_PATH:
            return ""
        return public_path

    def normalized_public_path(self) -> str:
        """Public path ready to be stripped from a reference ("" or ending in "/")."""
        public_path = self.map_url_prefix()
        if public_path and not public_path.endswith("/"):
            public_path += "/"
        return public_path


__all__ = [
    "AUTO_PUBLIC_PATH",
    "BuildContext",
    "InjectTarget",
    "InlineOptions",
    "Strictness",
]
