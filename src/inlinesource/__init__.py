"""Inline built scripts and stylesheets into generated HTML documents."""

__version__ = "0.3.0"
