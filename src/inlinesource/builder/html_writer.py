"""Render tag records and splice them back into the HTML document."""

from __future__ import annotations

import contextlib
import html
import os
from collections.abc import Sequence
from pathlib import Path
from tempfile import NamedTemporaryFile

from inlinesource.ingest.document import ParsedDocument
from inlinesource.model.tags import HtmlTag
from inlinesource.transform.inline import TagPlacement


def render_tag(tag: HtmlTag) -> str:
    """Serialize a tag record.

    Attribute values are escaped; ``inner_html`` is emitted verbatim.
    """

    attrs = "".join(
        f' {name}="{html.escape(value, quote=True)}"' for name, value in tag.attributes.items()
    )
    if not tag.close_tag and tag.inner_html is None:
        return f"<{tag.tag_name}{attrs}>"
    return f"<{tag.tag_name}{attrs}>{tag.inner_html or ''}</{tag.tag_name}>"


def apply_placements(parsed: ParsedDocument, placements: Sequence[TagPlacement]) -> str:
    """Return the document text with every inlined tag substituted.

    Untouched tags keep their original markup. Tags moved to the other group
    are removed from their position and inserted before ``</head>`` or
    ``</body>``; if that marker is missing they stay in place.
    """

    by_group = {
        "head": [t for t in parsed.tags if t.group == "head"],
        "body": [t for t in parsed.tags if t.group == "body"],
    }
    anchors = {"head": parsed.head_end, "body": parsed.body_end}

    # (start, end, order, text); at equal offsets insertions (order 1) are applied first
    edits: list[tuple[int, int, int, str]] = []
    inserts: dict[str, list[str]] = {"head": [], "body": []}

    for p in placements:
        if not p.inlined:
            continue
        located = by_group[p.group][p.index]
        rendered = render_tag(p.result)
        anchor = anchors[p.target]
        if p.moved and anchor is not None:
            edits.append((located.start, located.end, 0, ""))
            inserts[p.target].append(rendered)
        else:
            edits.append((located.start, located.end, 0, rendered))

    for group, texts in inserts.items():
        anchor = anchors[group]
        if texts and anchor is not None:
            edits.append((anchor, anchor, 1, "".join(texts)))

    out = parsed.html
    for start, end, _, text in sorted(edits, key=lambda e: (e[0], e[2]), reverse=True):
        out = out[:start] + text + out[end:]
    return out


def atomic_write_text(path: Path, data: str, *, encoding: str = "utf-8") -> None:
    """Atomically write text to a file by writing to a temp file then replacing.

    Ensures parent directories exist and minimizes risk of partial writes; the
    temp file is removed when writing or replacing fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = NamedTemporaryFile("w", encoding=encoding, dir=str(path.parent), delete=False)
    tmp_path = Path(tmp.name)
    try:
        with tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise


__all__ = [
    "apply_placements",
    "atomic_write_text",
    "render_tag",
]
