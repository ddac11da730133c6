"""Source-map URL relocation for inlined build artifacts.

A built script or stylesheet usually ends with a comment pointing at its
source map, relative to the file's own location::

    //# sourceMappingURL=app.js.map
    /*# sourceMappingURL=style.css.map */

Once the content is embedded in an HTML document that relative URL would be
resolved against the document instead, so it is rewritten into a URL
resolvable from the site root (public path + output-relative map path).

Paths are handled as POSIX paths and ``..`` segments are collapsed lexically
with :func:`posixpath.normpath`; the filesystem is never consulted.
"""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Protocol

from inlinesource.model.options import BuildContext

logger = logging.getLogger(__name__)

_INNER = r"[#@] sourceMappingURL=([^\s'\"]*)"

# Trailing map comment: "/*# ... */" (optionally after a newline) or "//# ...",
# followed only by whitespace until the end of the content.
_MAP_COMMENT_RE = re.compile(
    r"(?:/\*(?:\s*\r?\n(?://)?)?(?:" + _INNER + r")\s*\*/|//(?:" + _INNER + r"))\s*\Z"
)


class SourceMapLocator(Protocol):
    """Strategy for finding and replacing the map URL inside built content."""

    def find(self, text: str) -> str | None:  # pragma: no cover - interface
        ...

    def replace(self, text: str, old_url: str, new_url: str) -> str:  # pragma: no cover - interface
        ...


class CommentSourceMapLocator:
    """Locate the map URL in a trailing ``sourceMappingURL`` comment."""

    def find(self, text: str) -> str | None:
        """Return the map URL, "" for an empty one, or None if there is no comment."""
        m = _MAP_COMMENT_RE.search(text)
        if not m:
            return None
        return m.group(1) or m.group(2) or ""

    def replace(self, text: str, old_url: str, new_url: str) -> str:
        """Replace ``old_url`` only where it ends the content.

        Whatever follows the URL (closing ``*/`` and whitespace) is preserved,
        and earlier occurrences of the same string are left alone.
        """
        pattern = re.compile(re.escape(old_url) + r"(\s*(?:\*/)?\s*)\Z")
        return pattern.sub(lambda m: new_url + m.group(1), text, count=1)


_DEFAULT_LOCATOR = CommentSourceMapLocator()


def needs_relocation(map_url: str | None) -> bool:
    """False for missing, empty, embedded (data:) and root-relative map URLs."""

    if not map_url:
        return False
    return not (map_url.startswith("data:") or map_url.startswith("/"))


def corrected_map_url(map_url: str, asset_name: str, context: BuildContext) -> str:
    """Rewrite a map URL relative to ``asset_name`` into a site-root URL."""

    out_dir = context.output_dir or "."
    asset_path = posixpath.join(out_dir, asset_name)
    map_path = posixpath.normpath(posixpath.join(posixpath.dirname(asset_path), map_url))
    map_path_relative = posixpath.relpath(map_path, out_dir)
    return posixpath.join(context.map_url_prefix(), map_path_relative)


def relocate_source_map(
    content: str | bytes,
    asset_name: str,
    context: BuildContext,
    locator: SourceMapLocator | None = None,
) -> str:
    """Return ``content`` with its trailing source-map URL made site-root relative.

    Content without a map comment, or whose map URL is embedded or already
    absolute, is returned unchanged (apart from bytes being decoded as UTF-8;
    undecodable bytes become U+FFFD).
    """

    if isinstance(content, bytes):
        source = content.decode("utf-8", errors="replace")
    else:
        source = str(content)

    loc = locator or _DEFAULT_LOCATOR
    map_url = loc.find(source)
    if map_url is None or not needs_relocation(map_url):
        return source

    new_url = corrected_map_url(map_url, asset_name, context)
    logger.debug("Relocating source map of %s: %s -> %s", asset_name, map_url, new_url)
    return loc.replace(source, map_url, new_url)


__all__ = [
    "CommentSourceMapLocator",
    "SourceMapLocator",
    "corrected_map_url",
    "needs_relocation",
    "relocate_source_map",
]
