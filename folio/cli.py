"""Command-line interface for Folio.

This module defines the CLI commands using Click framework.

Commands:
- build: Render every page of the site into the output directory.
- render: Render a single Markdown file to standard output.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from . import __version__
from .content import Page, SourceNotFoundError
from .filters import MarkdownFilter
from .frontmatter import FrontMatterSyntaxError
from .helpers import FrontMatterHelper
from .layout import Layout
from .parser import Parser


@click.group()
@click.version_option(version=__version__, prog_name="folio")
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline details")
def cli(verbose: bool):
    """Folio static page generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
    help="Directory to build into (overrides folio.yaml output_dir)",
)
@click.option("--no-clean", is_flag=True, help="Keep existing output files")
def build(output: Path | None, no_clean: bool):
    """Build the site into the output directory."""
    project_root = Path.cwd()
    from .build import BuildError, ConfigError, build_site

    try:
        result = build_site(project_root, output_dir=output, clean_output=not no_clean)
    except (ConfigError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from None
    except BuildError as exc:
        try:
            shown = exc.source_path.relative_to(project_root)
        except ValueError:
            shown = exc.source_path
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {shown}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    click.echo(f"Built {len(result.pages)} pages into {result.output_dir}")


@cli.command()
@click.argument("source", type=click.Path(path_type=Path))
@click.option("--name", help="Page name used for {NAME}")
@click.option("--no-markdown", is_flag=True, help="Skip the Markdown filter")
def render(source: Path, name: str | None, no_markdown: bool):
    """Render a single page to standard output."""
    layout = Layout()
    if not no_markdown:
        layout.add_filter(MarkdownFilter())
    layout.add_helper(FrontMatterHelper())

    try:
        page = Page.from_file(source, name=name)
        result = Parser(layout).parse_page(page)
    except (SourceNotFoundError, FrontMatterSyntaxError) as exc:
        raise click.ClickException(str(exc)) from None
    click.echo(result.html, nl=False)


def main():
    """Entry point for the CLI application."""
    cli()
