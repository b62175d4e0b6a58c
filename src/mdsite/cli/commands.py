"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdsite.config import Settings, load_config
from mdsite.core.frontmatter import split_frontmatter
from mdsite.core.pipeline import run_build, write_sample_content
from mdsite.core.render import render_markdown
from mdsite.core.toc import extract_headings, generate_toc


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def build_cmd(
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Directory of markdown sources")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    base_path: Annotated[Optional[str], typer.Option("--base-path", help="URL prefix, e.g. /blog")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log per-document progress")] = False,
    ):
    """Build the site: article pages, listings, galleries, feed.xml and data/content.json."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = _settings(overrides={"content_dir": content, "output_dir": out, "base_path": base_path})
    content_dir = Path(settings.content_dir)
    if not content_dir.is_dir():
        _fail(f"Content directory '{content_dir}' not found. Run 'mdsite init' to create sample content.")

    try:
        result = run_build(settings)
    except OSError as e:
        _fail("Build failed", e)

    for path in result.written:
        typer.echo(f"  {path}")
    for path, msg in result.failures:
        typer.echo(f"  failed: {path}: {msg}", err=True)
    typer.echo(
        f"Build complete - "
        f"{len(result.items)} item(s), "
        f"{len(result.written)} file(s) written, "
        f"{len(result.failures)} failure(s)"
    )
    if result.failures and not result.items:
        raise typer.Exit(1)


def render_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to render")],
    toc: Annotated[bool, typer.Option("--toc", help="Prepend the table of contents")] = False,
    base_path: Annotated[Optional[str], typer.Option("--base-path", help="URL prefix for wikilinks")] = None,
    ):
    """Print the HTML fragment for a single markdown file (frontmatter removed)."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)
    _, body = split_frontmatter(raw)
    html = render_markdown(body, base_path or "")
    if toc:
        nav = generate_toc(extract_headings(html))
        if nav:
            typer.echo(nav)
    typer.echo(html)


def init_cmd(
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Directory to create")] = None,
    ):
    """Create the content directory with a sample welcome post."""
    settings = _settings(overrides={"content_dir": content})
    try:
        path = write_sample_content(Path(settings.content_dir))
    except FileExistsError as e:
        _fail(str(e))
    typer.echo(f"Created sample content file: {path}")
