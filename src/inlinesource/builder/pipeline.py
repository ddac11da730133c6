"""Inline the matching assets of one HTML document."""

from __future__ import annotations

import logging

from inlinesource.builder.html_writer import apply_placements
from inlinesource.ingest.document import parse_document
from inlinesource.model.options import BuildContext, InlineOptions
from inlinesource.transform.inline import plan_tag_groups
from inlinesource.types import ArtifactTable, InlineEventCallback

logger = logging.getLogger(__name__)


def inline_html(
    html_text: str,
    artifacts: ArtifactTable,
    context: BuildContext,
    options: InlineOptions,
    on_event: InlineEventCallback | None = None,
) -> str:
    """Return ``html_text`` with matched script/stylesheet references inlined."""

    parsed = parse_document(html_text)
    logger.debug(
        "%s: %d head tag(s), %d body tag(s)",
        context.filename,
        sum(1 for t in parsed.tags if t.group == "head"),
        sum(1 for t in parsed.tags if t.group == "body"),
    )
    placements = plan_tag_groups(parsed.groups(), artifacts, context, options, on_event)
    return apply_placements(parsed, placements)


__all__ = ["inline_html"]
