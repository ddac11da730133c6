from __future__ import annotations

from pathlib import Path

import pytest
import tomli

from inlinesource.config import load_options, options_table
from inlinesource.model.options import InjectTarget, Strictness


def test_load_options_from_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "site"\n\n'
        '[tool.inline-source]\ninline-source = ".(js|css)$"\nstrict = "warn"\n',
        encoding="utf-8",
    )
    opts = load_options(search_dir=tmp_path)
    assert opts.inline_source == ".(js|css)$"
    assert opts.strictness is Strictness.WARN


def test_pyproject_without_table_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "site"\n', encoding="utf-8")
    opts = load_options(search_dir=tmp_path)
    assert opts.inline_source is None


def test_no_pyproject_gives_defaults(tmp_path: Path) -> None:
    assert load_options(search_dir=tmp_path).inline_source is None


def test_standalone_config_file(tmp_path: Path) -> None:
    cfg = tmp_path / "inline.toml"
    cfg.write_text('inline_source = "\\\\.js$"\ninject_target = "head"\n', encoding="utf-8")
    opts = load_options(cfg)
    assert opts.inline_source == r"\.js$"
    assert opts.inject_target is InjectTarget.HEAD
    assert options_table(cfg) == {"inline_source": r"\.js$", "inject_target": "head"}


def test_missing_explicit_config(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_options(tmp_path / "nope.toml")


def test_invalid_toml(tmp_path: Path) -> None:
    cfg = tmp_path / "bad.toml"
    cfg.write_text("inline_source = \n", encoding="utf-8")
    with pytest.raises(tomli.TOMLDecodeError):
        load_options(cfg)


def test_invalid_option_value(tmp_path: Path) -> None:
    cfg = tmp_path / "bad.toml"
    cfg.write_text('strict = "sometimes"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid strictness"):
        load_options(cfg)
