from __future__ import annotations

import os
from pathlib import Path

import pytest

from inlinesource.builder.html_writer import atomic_write_text, render_tag
from inlinesource.builder.pipeline import inline_html
from inlinesource.ingest.artifacts import artifact_table_from_strings
from inlinesource.model.options import BuildContext, InjectTarget, InlineOptions
from inlinesource.model.tags import HtmlTag

PAGE = (
    "<html><head>"
    '<link rel="stylesheet" href="style.css">'
    '<link rel="icon" href="favicon.ico">'
    "</head><body>"
    '<script src="main.js"></script>'
    '<script src="https://cdn.example.com/lib.js"></script>'
    "</body></html>"
)

ARTIFACTS = artifact_table_from_strings(
    {"main.js": 'console.log("</script>")', "style.css": "body{}"}
)
CTX = BuildContext(output_path="/out")


def test_render_tag_variants() -> None:
    assert render_tag(HtmlTag("link", {"rel": "icon", "href": "a&b"})) == '<link rel="icon" href="a&amp;b">'
    assert (
        render_tag(HtmlTag("style", {"type": "text/css"}, inner_html="a>b{}", close_tag=True))
        == '<style type="text/css">a>b{}</style>'
    )
    assert render_tag(HtmlTag("script", {"src": "x.js"}, close_tag=True)) == '<script src="x.js"></script>'


def test_inline_html_replaces_matched_tags_in_place() -> None:
    out = inline_html(PAGE, ARTIFACTS, CTX, InlineOptions(inline_source=".(js|css)$"))
    assert (
        out == "<html><head>"
        '<style type="text/css">body{}</style>'
        '<link rel="icon" href="favicon.ico">'
        "</head><body>"
        '<script type="text/javascript">console.log("\\x3C/script>")</script>'
        '<script src="https://cdn.example.com/lib.js"></script>'
        "</body></html>"
    )


def test_inline_html_without_pattern_is_identity() -> None:
    assert inline_html(PAGE, ARTIFACTS, CTX, InlineOptions()) == PAGE


def test_inline_html_moves_scripts_to_head() -> None:
    opts = InlineOptions(inline_source=r"\.js$", inject_target=InjectTarget.HEAD)
    out = inline_html(PAGE, ARTIFACTS, CTX, opts)
    head, body = out.split("</head>")
    assert head.endswith('<script type="text/javascript">console.log("\\x3C/script>")</script>')
    assert 'src="main.js"' not in body
    assert '<link rel="stylesheet" href="style.css">' in head


def test_inline_html_moves_styles_to_body() -> None:
    opts = InlineOptions(inline_source=r"\.css$", inject_target=InjectTarget.BODY)
    out = inline_html(PAGE, ARTIFACTS, CTX, opts)
    head, body = out.split("</head>")
    assert "style" not in head
    assert body.endswith('<style type="text/css">body{}</style></body></html>')


def test_atomic_write_text(tmp_path: Path) -> None:
    dest = tmp_path / "nested" / "index.html"
    atomic_write_text(dest, "<p>ok</p>")
    assert dest.read_text(encoding="utf-8") == "<p>ok</p>"
    assert [p.name for p in dest.parent.iterdir()] == ["index.html"]


def test_commented_and_scripted_references_survive_inlining() -> None:
    page = (
        '<html><head><!-- <script src="main.js"></script> --></head><body>'
        "<script>document.write('<link rel=\"stylesheet\" href=\"style.css\">')</script>"
        "</body></html>"
    )
    assert inline_html(page, ARTIFACTS, CTX, InlineOptions(inline_source=".(js|css)$")) == page


def test_atomic_write_text_removes_temp_file_on_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fail_replace(src: object, dst: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail_replace)
    with pytest.raises(OSError, match="disk full"):
        atomic_write_text(tmp_path / "index.html", "<p>ok</p>")
    assert list(tmp_path.iterdir()) == []
