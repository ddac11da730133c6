"""CLI interface for html-inline-source."""

import logging
from pathlib import Path
from typing import Annotated, NoReturn

import tomli
import typer
from rich.console import Console
from rich.logging import RichHandler

from inlinesource import __version__
from inlinesource.builder.html_writer import atomic_write_text
from inlinesource.builder.pipeline import inline_html
from inlinesource.config import load_options
from inlinesource.errors import AssetNotFoundError, DocumentError, InlineRuleError
from inlinesource.ingest.artifacts import load_artifact_table
from inlinesource.model.options import BuildContext, InlineOptions
from inlinesource.ui.summary import InlineReport

app = typer.Typer(
    name="inline-source",
    help="Inline built scripts and stylesheets into generated HTML documents.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def _resolve_options(
    config: Path | None,
    inline_source: str | None,
    strict: str | None,
    inject_target: str | None,
) -> InlineOptions:
    """File options (``--config`` or ./pyproject.toml) overridden by CLI flags."""
    try:
        file_options = load_options(config)
    except (OSError, ValueError, tomli.TOMLDecodeError) as exc:
        _fail(f"could not load configuration: {exc}")

    try:
        overrides = InlineOptions.from_cli(
            inline_source=inline_source,
            strict=strict or file_options.strictness.value,
            inject_target=inject_target or file_options.inject_target.value,
        )
    except ValueError as exc:
        _fail(str(exc))

    return file_options.merged(
        inline_source=overrides.inline_source,
        strictness=overrides.strictness,
        inject_target=overrides.inject_target,
    )


@app.command()
def inline(
    output_dir: Annotated[
        Path,
        typer.Argument(
            help="Build output directory containing the HTML document and its assets",
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
        ),
    ],
    html: Annotated[
        str,
        typer.Option(
            "--html",
            help="HTML document to process, relative to OUTPUT_DIR (may be in a sub-directory)",
        ),
    ] = "index.html",
    inline_source: Annotated[
        str | None,
        typer.Option(
            "--inline-source",
            help="Regular expression matched against src/href values, e.g. '.(js|css)$'",
        ),
    ] = None,
    public_path: Annotated[
        str | None,
        typer.Option(
            "--public-path",
            help="Public URL prefix of the build's assets ('auto' means none)",
        ),
    ] = None,
    strict: Annotated[
        str | None,
        typer.Option(
            "--strict",
            help="Missing artifact handling: 'ignore' (default), 'warn' or 'error'",
        ),
    ] = None,
    inject_target: Annotated[
        str | None,
        typer.Option(
            "--inject-target",
            help="Where inlined tags go: 'keep' (default), 'head' or 'body'",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="TOML file with options (default: [tool.inline-source] in ./pyproject.toml)",
        ),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Write the result here instead of overwriting the document"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Report what would be inlined without writing"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """
    Replace matching <script src> and <link href> references with inline content.

    Source-map comments inside inlined content are rewritten so they still
    resolve from the site root.

    Examples:

        # Inline every script and stylesheet of dist/index.html
        inline-source inline dist --inline-source '.(js|css)$'

        # Document in a sub-directory, assets served under /assets
        inline-source inline dist --html pages/index.html \\
            --inline-source '\\.css$' --public-path /assets
    """
    _configure_logging(verbose)
    options = _resolve_options(config, inline_source, strict, inject_target)

    try:
        options.compile_rule()
    except InlineRuleError as exc:
        _fail(str(exc))

    html_path = output_dir / html
    if not options.inline_source:
        typer.echo("No inline-source pattern configured; nothing to inline.")
        return

    try:
        html_text = html_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _fail(str(DocumentError(html_path, exc)))

    artifacts = load_artifact_table(output_dir)
    context = BuildContext(output_path=output_dir.resolve(), public_path=public_path, filename=html)
    report = InlineReport()

    try:
        result = inline_html(html_text, artifacts, context, options, on_event=report)
    except AssetNotFoundError as exc:
        _fail(str(exc))

    report.print(Console())

    if dry_run:
        typer.echo("\nDry run: no files written.")
        return

    dest = out or html_path
    try:
        atomic_write_text(dest, result)
    except OSError as exc:
        _fail(str(DocumentError(dest, exc)))
    typer.echo(f"\n✅ Wrote {dest} ({len(report.inlined)} inlined, {len(report.missing)} not found)")


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"inline-source version {__version__}")


def version_callback(value: bool) -> None:
    """Version callback for --version flag."""
    if value:
        typer.echo(f"inline-source version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """
    html-inline-source - inline built assets into generated HTML documents.

    Post-processes a static build: script and stylesheet references whose
    src/href matches a pattern are replaced by the artifact's content, with
    trailing source-map URLs rewritten to stay valid.

    For detailed usage, run: inline-source inline --help
    """
    pass


if __name__ == "__main__":  # pragma: no cover - executed only via `python -m`
    app()
