from __future__ import annotations

from pathlib import Path

import pytest

from inlinesource.ingest.artifacts import FileArtifact, TextArtifact, load_artifact_table


def test_load_artifact_table_keys_by_posix_relative_path(tmp_path: Path) -> None:
    (tmp_path / "bin").mkdir()
    (tmp_path / "bin" / "app.js").write_text("a", encoding="utf-8")
    (tmp_path / "style.css").write_text("b", encoding="utf-8")
    (tmp_path / "index.html").write_text("<p>", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "page.html").write_text("<p>", encoding="utf-8")

    table = load_artifact_table(tmp_path)
    assert sorted(table) == ["bin/app.js", "style.css"]
    assert table["bin/app.js"].source() == b"a"


def test_load_artifact_table_custom_exclude(tmp_path: Path) -> None:
    (tmp_path / "a.js").write_text("a", encoding="utf-8")
    (tmp_path / "a.js.map").write_text("{}", encoding="utf-8")
    assert list(load_artifact_table(tmp_path, exclude=["*.map"])) == ["a.js"]


def test_load_artifact_table_missing_dir(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_artifact_table(tmp_path / "missing")


def test_file_artifact_is_lazy_and_memoized(tmp_path: Path) -> None:
    path = tmp_path / "a.js"
    artifact = FileArtifact(path)  # file does not exist yet: nothing is read
    path.write_text("first", encoding="utf-8")
    assert artifact.source() == b"first"
    path.write_text("second", encoding="utf-8")
    assert artifact.source() == b"first"


def test_text_artifact() -> None:
    assert TextArtifact("x").source() == "x"
