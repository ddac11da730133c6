"""Load inline-source options from TOML.

Options live in a ``[tool.inline-source]`` table of ``pyproject.toml`` or at
the top level of a dedicated TOML file passed with ``--config``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import tomli

from inlinesource.model.options import InlineOptions

logger = logging.getLogger(__name__)

TOOL_TABLE = "inline-source"


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        return tomli.load(f)


def options_table(path: Path) -> dict[str, Any]:
    """Return the option table of a config file (empty when absent)."""

    data = _read_toml(path)
    tool = data.get("tool")
    if isinstance(tool, dict) and TOOL_TABLE in tool:
        table = tool[TOOL_TABLE]
    elif path.name == "pyproject.toml":
        table = {}
    else:
        table = data
    if not isinstance(table, dict):
        raise ValueError(f"[tool.{TOOL_TABLE}] in {path} must be a table")
    return table


def load_options(config: Path | None = None, *, search_dir: Path | None = None) -> InlineOptions:
    """Load options from ``config`` or from ``pyproject.toml`` in ``search_dir``.

    Raises:
        FileNotFoundError: If an explicit ``config`` does not exist
        ValueError: If the file contains invalid options
        tomli.TOMLDecodeError: If the file is not valid TOML
    """

    if config is not None:
        if not config.is_file():
            raise FileNotFoundError(f"Config file not found: {config}")
        path = config
    else:
        candidate = (search_dir or Path.cwd()) / "pyproject.toml"
        if not candidate.is_file():
            return InlineOptions()
        path = candidate

    table = options_table(path)
    logger.debug("Loaded %d option(s) from %s", len(table), path)
    return InlineOptions.from_mapping(table)


__all__ = ["TOOL_TABLE", "load_options", "options_table"]
