"""Tag records exchanged with the HTML template generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TagKind(Enum):
    """Kinds of tag the resolver knows how to inline."""

    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    OTHER = "other"


@dataclass(slots=True)
class HtmlTag:
    tag_name: str
    attributes: dict[str, str] = field(default_factory=dict)
    inner_html: str | None = None
    close_tag: bool = False
    meta: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class TagGroups:
    head: list[HtmlTag] = field(default_factory=list)
    body: list[HtmlTag] = field(default_factory=list)


def classify_tag(tag: HtmlTag) -> TagKind:
    """Return the kind of ``tag``.

    A ``link`` is treated as a stylesheet unless it declares a ``rel`` that
    does not include ``stylesheet`` (e.g. ``rel="icon"``).
    """

    name = tag.tag_name.lower()
    if name == "script":
        return TagKind.SCRIPT
    if name == "link":
        rel = tag.attributes.get("rel")
        if rel is None or "stylesheet" in rel.lower().split():
            return TagKind.STYLESHEET
    return TagKind.OTHER


def reference_attribute(kind: TagKind) -> str | None:
    """Name of the attribute holding the asset reference for ``kind``."""

    if kind is TagKind.SCRIPT:
        return "src"
    if kind is TagKind.STYLESHEET:
        return "href"
    return None


__all__ = [
    "HtmlTag",
    "TagGroups",
    "TagKind",
    "classify_tag",
    "reference_attribute",
]
