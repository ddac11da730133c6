"""Artifact tables built from memory or from a build output directory."""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from inlinesource.types import ArtifactLike

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE = ("*.html", "*.htm")


@dataclass(slots=True)
class TextArtifact:
    content: str | bytes

    def source(self) -> str | bytes:
        return self.content


@dataclass(slots=True)
class FileArtifact:
    """Artifact read from disk on first access and memoized afterwards."""

    path: Path
    _content: bytes | None = field(default=None, init=False, repr=False)

    def source(self) -> bytes:
        if self._content is None:
            self._content = self.path.read_bytes()
        return self._content


def artifact_table_from_strings(contents: dict[str, str | bytes]) -> dict[str, ArtifactLike]:
    """Wrap literal contents keyed by artifact name."""

    return {name: TextArtifact(content) for name, content in contents.items()}


def load_artifact_table(
    output_dir: Path, exclude: Iterable[str] = DEFAULT_EXCLUDE
) -> dict[str, ArtifactLike]:
    """Index every file under ``output_dir`` by its POSIX path relative to it.

    Files whose relative path matches one of the ``exclude`` glob patterns
    (default: HTML documents) are skipped. Content is not read here.
    """

    if not output_dir.is_dir():
        raise FileNotFoundError(f"Output directory not found: {output_dir}")

    patterns = tuple(exclude)
    table: dict[str, ArtifactLike] = {}
    for path in sorted(output_dir.rglob("*")):
        if not path.is_file():
            continue
        name = path.relative_to(output_dir).as_posix()
        if any(fnmatch.fnmatch(name, pat) for pat in patterns):
            continue
        table[name] = FileArtifact(path)
    logger.info("Indexed %d artifact(s) under %s", len(table), output_dir)
    return table


__all__ = [
    "DEFAULT_EXCLUDE",
    "FileArtifact",
    "TextArtifact",
    "artifact_table_from_strings",
    "load_artifact_table",
]
