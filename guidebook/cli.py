"""Command-line interface for guidebook.

Provides a Click-based CLI for rendering topic guides, printing their
outline, and reading them in the terminal.
"""

import json
import sys
from importlib.metadata import version as get_version
from pathlib import Path

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import GuideConfig
from .domain import GuideError
from .infrastructure import configure_services
from .logging_setup import setup_logging
from .services import GuideService, TocService

try:
    __version__ = get_version("guidebook")
except Exception:
    __version__ = "0.0.0"  # Fallback version


# Context keys
GUIDE_SERVICE_KEY = "guide_service"

SOURCE_ARGUMENT = click.argument(
    "source", type=click.Path(exists=True, path_type=Path)
)


def get_guide_service(ctx: click.Context) -> GuideService:
    """Get the guide service from click context.

    Args:
        ctx: The click context.

    Returns:
        The configured GuideService instance.
    """
    return ctx.obj[GUIDE_SERVICE_KEY]


def load_guide(ctx: click.Context, source: Path, title: str | None = None) -> GuideService:
    """Load ``source`` into the guide service, exiting on failure."""
    guide_service = get_guide_service(ctx)
    try:
        guide_service.load(source, title=title)
        guide_service.outline()
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except GuideError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Error: Invalid content source - {e}", err=True)
        sys.exit(1)
    return guide_service


@click.group()
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase log output (-v info, -vv debug).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write debug logs to this file.",
)
@click.option(
    "--topic-level",
    type=click.IntRange(GuideConfig.MIN_TOPIC_LEVEL, GuideConfig.MAX_TOPIC_LEVEL),
    default=None,
    help="Heading level that starts a topic in markdown sources (default: 2).",
)
@click.version_option(version=__version__, prog_name="guidebook")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    log_file: Path | None,
    topic_level: int | None,
) -> None:
    """guidebook - Render topic guides into navigable documents.

    A SOURCE is a JSON file of title/body records, a markdown file
    split into topics at one heading level, or a directory holding
    one markdown file per topic.
    """
    setup_logging(verbose, log_file)
    ctx.ensure_object(dict)
    ctx.obj[GUIDE_SERVICE_KEY] = configure_services(topic_level=topic_level)


@cli.command()
@SOURCE_ARGUMENT
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output file, or directory with --pages (default: stdout).",
)
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(GuideConfig.OUTPUT_FORMATS),
    default=None,
    help="Output format (default: html, or $GUIDEBOOK_FORMAT).",
)
@click.option(
    "--pages",
    is_flag=True,
    help="Write one HTML page per topic plus an index into --output.",
)
@click.option("--title", "-t", default=None, help="Override the guide title.")
@click.pass_context
def render(
    ctx: click.Context,
    source: Path,
    output: Path | None,
    fmt: str | None,
    pages: bool,
    title: str | None,
) -> None:
    """Render a guide to a single document or a paginated site.

    SOURCE is the guide content to render.
    """
    guide_service = load_guide(ctx, source, title)

    if pages:
        if output is None:
            click.echo("Error: --pages requires --output DIRECTORY", err=True)
            sys.exit(1)
        try:
            written = guide_service.render_pages(output)
        except PermissionError as e:
            click.echo(f"Error: Permission denied - {e}", err=True)
            sys.exit(1)
        click.echo(f"Wrote {len(written)} page(s) to {output}")
        return

    document = guide_service.render(fmt)
    if output is None:
        click.echo(document, nl=False)
        return

    try:
        guide_service.write(document, output)
    except PermissionError as e:
        click.echo(f"Error: Permission denied - {e}", err=True)
        sys.exit(1)
    click.echo(f"Rendered {len(guide_service.store)} topic(s) to {output}")


@cli.command()
@SOURCE_ARGUMENT
@click.option("--json", "as_json", is_flag=True, help="Print the outline as JSON.")
@click.option("--markdown", "as_markdown", is_flag=True, help="Print a markdown link list.")
@click.pass_context
def toc(ctx: click.Context, source: Path, as_json: bool, as_markdown: bool) -> None:
    """Show the outline of a guide.

    SOURCE is the guide content to outline.
    """
    guide_service = load_guide(ctx, source)
    outline = guide_service.outline()

    if as_json:
        payload = [{"title": e.title, "anchor": e.anchor} for e in outline]
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if as_markdown:
        click.echo(TocService().to_markdown(outline))
        return

    console = Console(width=GuideConfig.CONSOLE_WIDTH)
    table = Table(
        title=guide_service.title,
        show_header=True,
        header_style=GuideConfig.COLORS["header"],
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Topic", style=GuideConfig.COLORS["topic_title"])
    table.add_column("Anchor", style=GuideConfig.COLORS["navigation"])

    for number, entry in enumerate(outline, start=1):
        table.add_row(str(number), entry.title, entry.href)

    console.print(table)


@cli.command()
@SOURCE_ARGUMENT
@click.option("--topic", "topic_title", default=None, help="Show only this topic.")
@click.pass_context
def read(ctx: click.Context, source: Path, topic_title: str | None) -> None:
    """Read a guide in the terminal.

    SOURCE is the guide content to display.
    """
    guide_service = load_guide(ctx, source)
    store = guide_service.store

    topics = store.list_topics()
    if topic_title is not None and topic_title not in store:
        click.echo(f"Topic not found: {topic_title}", err=True)
        sys.exit(1)

    console = Console(width=GuideConfig.CONSOLE_WIDTH)
    code_theme = GuideConfig.get_code_theme()

    for position, topic in enumerate(topics, start=1):
        if topic_title is not None and topic.title != topic_title.strip():
            continue
        console.print(
            Panel(
                Text(topic.title, style=GuideConfig.COLORS["topic_title"]),
                title=guide_service.title,
                subtitle=f"Topic {position} of {len(topics)}",
                border_style=GuideConfig.COLORS["info"],
            )
        )
        console.print(Markdown(topic.to_markdown(), hyperlinks=True, code_theme=code_theme))
        console.print()


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
