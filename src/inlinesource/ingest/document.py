"""Locate script and stylesheet references in a generated HTML document.

This is deliberately not an HTML parser: it recognizes ``<script src=...>``
elements (with their closing tag) and ``<link ...>`` elements, which is the
shape template generators emit for asset references. Matches inside HTML
comments and inside inline ``<script>``/``<style>`` bodies are ignored.
Everything else in the document is kept byte for byte.
"""

from __future__ import annotations

import bisect
import html
import re
from dataclasses import dataclass, field

from inlinesource.model.tags import HtmlTag, TagGroups

SCRIPT_RE = re.compile(
    r"<script\b(?P<attrs>[^>]*\bsrc\s*=[^>]*)>\s*</script\s*>",
    re.IGNORECASE,
)
LINK_RE = re.compile(r"<link\b(?P<attrs>[^>]*?)\s*/?>", re.IGNORECASE)
HEAD_END_RE = re.compile(r"</head\s*>", re.IGNORECASE)
BODY_END_RE = re.compile(r"</body\s*>", re.IGNORECASE)

# Regions whose text is not markup: comments and raw-text element bodies
OPAQUE_RE = re.compile(
    r"<!--.*?-->|<(?P<raw>script|style)\b[^>]*>(?P<body>.*?)</(?P=raw)\s*>",
    re.IGNORECASE | re.DOTALL,
)

ATTR_RE = re.compile(
    r"(?P<name>[a-zA-Z_:][-a-zA-Z0-9_:.]*)"
    r"(?:\s*=\s*(?:(?P<q>['\"])(?P<val>.*?)(?P=q)|(?P<bare>[^\s'\">]+)))?",
    re.DOTALL,
)


@dataclass(slots=True)
class LocatedTag:
    tag: HtmlTag
    start: int
    end: int
    group: str  # "head" | "body"


@dataclass(slots=True)
class ParsedDocument:
    html: str
    tags: list[LocatedTag] = field(default_factory=list)
    head_end: int | None = None
    body_end: int | None = None

    def groups(self) -> TagGroups:
        """Tag records split into their placement groups, in document order."""
        return TagGroups(
            head=[t.tag for t in self.tags if t.group == "head"],
            body=[t.tag for t in self.tags if t.group == "body"],
        )


def parse_attrs(text: str) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for m in ATTR_RE.finditer(text):
        value = m.group("val")
        if value is None:
            value = m.group("bare") or ""
        attrs[m.group("name").lower()] = html.unescape(value)
    return attrs


def opaque_spans(text: str) -> list[tuple[int, int]]:
    """Spans of comments and of inline script/style bodies, in document order."""

    spans: list[tuple[int, int]] = []
    for m in OPAQUE_RE.finditer(text):
        span = m.span() if m.group("raw") is None else m.span("body")
        if span[0] < span[1]:
            spans.append(span)
    return spans


def _in_spans(pos: int, spans: list[tuple[int, int]]) -> bool:
    idx = bisect.bisect_right(spans, pos, key=lambda span: span[0]) - 1
    return idx >= 0 and spans[idx][0] <= pos < spans[idx][1]


def _first_outside(regex: re.Pattern[str], text: str, spans: list[tuple[int, int]]) -> int | None:
    for m in regex.finditer(text):
        if not _in_spans(m.start(), spans):
            return m.start()
    return None


def parse_document(text: str) -> ParsedDocument:
    """Find asset-referencing tags and the end of the head and body sections."""

    masked = opaque_spans(text)
    head_end = _first_outside(HEAD_END_RE, text, masked)
    body_end = _first_outside(BODY_END_RE, text, masked)

    found: list[tuple[int, int, HtmlTag]] = []
    for m in SCRIPT_RE.finditer(text):
        if _in_spans(m.start(), masked):
            continue
        tag = HtmlTag("script", parse_attrs(m.group("attrs")), close_tag=True)
        found.append((m.start(), m.end(), tag))
    for m in LINK_RE.finditer(text):
        if _in_spans(m.start(), masked):
            continue
        tag = HtmlTag("link", parse_attrs(m.group("attrs")))
        found.append((m.start(), m.end(), tag))
    found.sort(key=lambda item: item[0])

    located = [
        LocatedTag(
            tag=tag,
            start=start,
            end=end,
            group="head" if head_end is not None and start < head_end else "body",
        )
        for start, end, tag in found
    ]
    return ParsedDocument(html=text, tags=located, head_end=head_end, body_end=body_end)


__all__ = [
    "LocatedTag",
    "ParsedDocument",
    "opaque_spans",
    "parse_attrs",
    "parse_document",
]
