"""Resolve matched script/stylesheet tags to build artifacts and inline them.

A tag is inlined when its reference (``src`` for scripts, ``href`` for
stylesheet links) matches the configured pattern and the reference can be
mapped back to an artifact of the build. Everything else passes through
untouched: the pass never fails because of a tag it cannot inline, unless
strict mode asks for it.

Reference -> artifact name:

1. drop the query string (cache busting)
2. prefix the document's own directory when the HTML is emitted into a
   sub-directory (absolute references are left alone)
3. strip the public path

Paths are compared lexically under a virtual root, so results never depend
on the process working directory.
"""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass

from inlinesource.errors import AssetNotFoundError
from inlinesource.model.options import BuildContext, InjectTarget, InlineOptions, Strictness
from inlinesource.model.tags import HtmlTag, TagGroups, TagKind, classify_tag, reference_attribute
from inlinesource.transform.inline_logger import (
    log_error_policy,
    log_inline_configuration,
    log_tag_decision,
)
from inlinesource.transform.sourcemap import relocate_source_map
from inlinesource.types import ArtifactLike, ArtifactTable, InlineEventCallback

logger = logging.getLogger(__name__)

PLUGIN_NAME = "html-inline-source"

_SCRIPT_CLOSE_RE = re.compile(r"(<)(/script>)")

_INLINE_TYPES = {
    TagKind.SCRIPT: ("script", "text/javascript"),
    TagKind.STYLESHEET: ("style", "text/css"),
}


def strip_query(reference: str) -> str:
    return reference.split("?", 1)[0]


def relative_to_public_path(path: str, public_path: str) -> str:
    """Return ``path`` relative to ``public_path``, both rooted at "/"."""

    return posixpath.relpath(posixpath.join("/", path), posixpath.join("/", public_path))


def asset_name_for(reference: str, context: BuildContext) -> str:
    """Map a tag reference to the artifact name it points at."""

    url = strip_query(reference)
    doc_dir = posixpath.dirname(context.filename.replace("\\", "/"))
    if doc_dir and not url.startswith("/"):
        url = f"{doc_dir}/{url}"
    return relative_to_public_path(url, context.normalized_public_path())


def escape_script_content(text: str) -> str:
    """Keep a literal ``</script>`` from closing the inline element."""

    return _SCRIPT_CLOSE_RE.sub(lambda m: "\\x3C" + m.group(2), text)


class ArtifactIndex:
    """Artifact lookup by exact name, then by public-path-normalized name.

    Artifact tables do not agree on how names are stored (with or without the
    public path, absolute or relative). The normalized view is computed once
    and reused for every tag of the pass.
    """

    def __init__(self, artifacts: ArtifactTable, public_path: str) -> None:
        self.artifacts = artifacts
        self.public_path = public_path
        self._normalized: dict[str, str] | None = None

    def _normalized_keys(self) -> dict[str, str]:
        if self._normalized is None:
            index: dict[str, str] = {}
            for key in self.artifacts:
                index.setdefault(relative_to_public_path(key, self.public_path), key)
            self._normalized = index
        return self._normalized

    def lookup(self, asset_name: str) -> ArtifactLike | None:
        asset = self.artifacts.get(asset_name)
        if asset is not None:
            return asset
        key = self._normalized_keys().get(asset_name)
        if key is None:
            return None
        logger.debug("Resolved %s via normalized artifact name %s", asset_name, key)
        return self.artifacts[key]


def _as_index(
    artifacts: ArtifactTable | ArtifactIndex, context: BuildContext
) -> ArtifactIndex:
    if isinstance(artifacts, ArtifactIndex):
        return artifacts
    return ArtifactIndex(artifacts, context.normalized_public_path())


def matched_reference(tag: HtmlTag, rule: re.Pattern[str]) -> tuple[TagKind, str] | None:
    """Return the tag kind and reference if ``tag`` is eligible for inlining."""

    kind = classify_tag(tag)
    attr = reference_attribute(kind)
    if attr is None:
        return None
    reference = tag.attributes.get(attr)
    if reference is None or not rule.search(reference):
        return None
    return kind, reference


def build_inline_tag(kind: TagKind, content: str) -> HtmlTag:
    tag_name, mime = _INLINE_TYPES[kind]
    if kind is TagKind.SCRIPT:
        content = escape_script_content(content)
    return HtmlTag(
        tag_name=tag_name,
        attributes={"type": mime},
        inner_html=content,
        close_tag=True,
        meta={"plugin": PLUGIN_NAME},
    )


def resolve_tag(
    tag: HtmlTag,
    rule: re.Pattern[str],
    artifacts: ArtifactTable | ArtifactIndex,
    context: BuildContext,
    options: InlineOptions | None = None,
    on_event: InlineEventCallback | None = None,
) -> HtmlTag:
    """Return an inlined replacement for ``tag``, or ``tag`` itself.

    Raises:
        AssetNotFoundError: If the reference matched but no artifact exists and
            ``options.strictness`` is ``Strictness.ERROR``
    """

    matched = matched_reference(tag, rule)
    if matched is None:
        return tag
    kind, reference = matched

    index = _as_index(artifacts, context)
    asset_name = asset_name_for(reference, context)
    asset = index.lookup(asset_name)
    if asset is None:
        _handle_missing(reference, asset_name, options, on_event)
        return tag

    content = relocate_source_map(asset.source(), asset_name, context)
    log_tag_decision(reference, "inlined", {"asset": asset_name, "kind": kind.value})
    if on_event:
        on_event(
            "tag:inlined",
            {"reference": reference, "asset": asset_name, "kind": kind.value, "size": len(content)},
        )
    return build_inline_tag(kind, content)


def _handle_missing(
    reference: str,
    asset_name: str,
    options: InlineOptions | None,
    on_event: InlineEventCallback | None,
) -> None:
    strictness = options.strictness if options else Strictness.IGNORE
    if on_event:
        on_event("tag:missing", {"reference": reference, "asset": asset_name})
    if strictness is Strictness.ERROR:
        log_error_policy("asset_not_found", "raise", reference, level=logging.ERROR)
        raise AssetNotFoundError(reference, asset_name)
    if strictness is Strictness.WARN:
        log_error_policy("asset_not_found", "keep external reference", reference)
    else:
        log_tag_decision(reference, "not found", {"asset": asset_name})


@dataclass(slots=True)
class TagPlacement:
    """Outcome for one input tag: where it came from and where its result goes."""

    group: str  # "head" | "body", group of the input tag
    index: int  # position of the input tag within its group
    original: HtmlTag
    result: HtmlTag
    target: str  # group the result is emitted into

    @property
    def inlined(self) -> bool:
        return self.result is not self.original

    @property
    def moved(self) -> bool:
        return self.target != self.group


def plan_tag_groups(
    groups: TagGroups,
    artifacts: ArtifactTable,
    context: BuildContext,
    options: InlineOptions,
    on_event: InlineEventCallback | None = None,
) -> list[TagPlacement]:
    """Resolve every head tag, then every body tag, in order.

    Raises:
        InlineRuleError: If the configured pattern is invalid
        AssetNotFoundError: In strict mode, for the first missing artifact
    """

    rule = options.compile_rule()
    if rule is None:
        logger.debug("No inline-source pattern configured; leaving %s untouched", context.filename)
        return [
            TagPlacement(group, i, tag, tag, group)
            for group, tags in (("head", groups.head), ("body", groups.body))
            for i, tag in enumerate(tags)
        ]

    log_inline_configuration(options, context)
    index = ArtifactIndex(artifacts, context.normalized_public_path())

    placements: list[TagPlacement] = []
    for group, tags in (("head", groups.head), ("body", groups.body)):
        for i, tag in enumerate(tags):
            result = resolve_tag(tag, rule, index, context, options, on_event)
            target = group
            if result is not tag and options.inject_target is not InjectTarget.KEEP:
                target = options.inject_target.value
            placements.append(TagPlacement(group, i, tag, result, target))
    return placements


def process_tag_groups(
    groups: TagGroups,
    artifacts: ArtifactTable,
    context: BuildContext,
    options: InlineOptions,
    on_event: InlineEventCallback | None = None,
) -> TagGroups:
    """Run the resolver over the head and body tags of one document.

    Group order is preserved. With an inject target other than ``keep``,
    inlined tags from the other group are appended to the target group in
    their original relative order.
    """

    placements = plan_tag_groups(groups, artifacts, context, options, on_event)
    out = TagGroups()
    moved = TagGroups()
    for p in placements:
        dest = moved if p.moved else out
        (dest.head if p.target == "head" else dest.body).append(p.result)
    return TagGroups(head=out.head + moved.head, body=out.body + moved.body)


__all__ = [
    "PLUGIN_NAME",
    "ArtifactIndex",
    "TagPlacement",
    "asset_name_for",
    "build_inline_tag",
    "escape_script_content",
    "matched_reference",
    "plan_tag_groups",
    "process_tag_groups",
    "relative_to_public_path",
    "resolve_tag",
    "strip_query",
]
