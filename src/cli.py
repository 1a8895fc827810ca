"""CLI interface for postkit."""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from postkit.builder import build_site
from postkit.config import PostkitConfig, load_config, merge_cli_overrides
from postkit.errors import PostkitError
from postkit.posts.checks import check_directory
from postkit.posts.models import CheckReport, Severity
from postkit.posts.reader import PostReader
from postkit.posts.services import DEFAULT_LAYOUT, create_post, set_published
from postkit.publishers import OutputFormat, create_publisher

app = typer.Typer(
    name="postkit",
    help="Validate, publish, and build Markdown blog posts.",
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from postkit import __version__

        console.print(f"postkit {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _config(ctx: typer.Context) -> PostkitConfig:
    if isinstance(ctx.obj, PostkitConfig):
        return ctx.obj
    return load_config()


def _fail(exc: Exception) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show debug logging."),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .postkit.toml file."),
    ] = None,
    posts_dir: Annotated[
        Optional[Path],
        typer.Option("--dir", "-d", help="Posts directory (overrides config)."),
    ] = None,
) -> None:
    """postkit - check, publish, and build blog posts."""
    _setup_logging(verbose)
    config = load_config(config_path)
    ctx.obj = merge_cli_overrides(config, posts_directory=posts_dir)


def _print_report(report: CheckReport) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Line", justify="right")
    table.add_column("Severity")
    table.add_column("Code")
    table.add_column("Message")

    for file_report in report.files:
        for issue in file_report.issues:
            style = "red" if issue.severity == Severity.ERROR else "yellow"
            table.add_row(
                file_report.path.name,
                str(issue.line) if issue.line is not None else "",
                f"[{style}]{issue.severity.value}[/{style}]",
                issue.code.value,
                escape(issue.message),
            )

    if report.error_count or report.warning_count:
        console.print(table)
    console.print(
        f"Checked {len(report.files)} file(s): "
        f"{report.error_count} error(s), {report.warning_count} warning(s)"
    )


@app.command(name="check")
def check_cmd(
    ctx: typer.Context,
    strict: Annotated[
        Optional[bool],
        typer.Option("--strict/--no-strict", help="Treat warnings as failures."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the report as JSON."),
    ] = False,
) -> None:
    """Check every post's front matter and Markdown."""
    config = merge_cli_overrides(_config(ctx), strict=strict)

    try:
        report = check_directory(config.posts_dir, config.check, config.posts.pattern)
    except PostkitError as exc:
        _fail(exc)

    if as_json:
        data = report.model_dump(mode="json", exclude={"files": {"__all__": {"post"}}})
        data["error_count"] = report.error_count
        data["warning_count"] = report.warning_count
        typer.echo(json.dumps(data, indent=2))
    else:
        _print_report(report)

    if report.failed(config.check.strict):
        raise typer.Exit(1)


@app.command(name="list")
def list_cmd(
    ctx: typer.Context,
    drafts: Annotated[
        bool,
        typer.Option("--drafts", help="Only show unpublished posts."),
    ] = False,
    published: Annotated[
        bool,
        typer.Option("--published", help="Only show published posts."),
    ] = False,
) -> None:
    """List posts, newest first."""
    config = _config(ctx)
    posts = PostReader(config.posts.pattern).read_all(config.posts_dir)
    if drafts:
        posts = [p for p in posts if not p.published]
    if published:
        posts = [p for p in posts if p.published]

    if not posts:
        console.print("[yellow]No posts found.[/yellow]")
        console.print(f"Searched in: {config.posts_dir}")
        raise typer.Exit(0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Date")
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Layout")
    table.add_column("Status")
    table.add_column("Words", justify="right")
    for post in posts:
        status = "[green]published[/green]" if post.published else "[dim]draft[/dim]"
        table.add_row(
            post.date.isoformat() if post.date else "",
            escape(post.slug),
            escape(post.title),
            escape(post.layout),
            status,
            str(post.word_count),
        )
    console.print(table)


@app.command(name="show")
def show_cmd(
    ctx: typer.Context,
    slug: Annotated[str, typer.Argument(help="Post slug, file name, or path.")],
) -> None:
    """Show a post's front matter and body statistics."""
    config = _config(ctx)
    try:
        post = PostReader(config.posts.pattern).find(config.posts_dir, slug)
    except PostkitError as exc:
        _fail(exc)

    console.print(f"[bold]{escape(post.title or post.slug)}[/bold]")
    console.print(f"  File: {post.path}")
    for key, value in post.front_matter.items():
        console.print(f"  {escape(key)}: {escape(repr(value))}")
    console.print(f"  Words: {post.word_count}")


def _set_flag(ctx: typer.Context, slug: str, value: bool) -> None:
    config = _config(ctx)
    try:
        post = PostReader(config.posts.pattern).find(config.posts_dir, slug)
        changed = set_published(post, value)
    except PostkitError as exc:
        _fail(exc)

    label = "published" if value else "unpublished"
    if changed:
        console.print(f"[green]{post.path.name} {label}[/green]")
    else:
        console.print(f"{post.path.name} was already {label}")


@app.command(name="publish")
def publish_cmd(
    ctx: typer.Context,
    slug: Annotated[str, typer.Argument(help="Post slug, file name, or path.")],
) -> None:
    """Set ``published: true`` on a post."""
    _set_flag(ctx, slug, True)


@app.command(name="unpublish")
def unpublish_cmd(
    ctx: typer.Context,
    slug: Annotated[str, typer.Argument(help="Post slug, file name, or path.")],
) -> None:
    """Set ``published: false`` on a post."""
    _set_flag(ctx, slug, False)


@app.command(name="new")
def new_cmd(
    ctx: typer.Context,
    title: Annotated[str, typer.Argument(help="Title of the new post.")],
    layout: Annotated[
        str,
        typer.Option("--layout", "-l", help="Layout name for the front matter."),
    ] = DEFAULT_LAYOUT,
    on: Annotated[
        Optional[str],
        typer.Option("--date", help="Post date (YYYY-MM-DD). Defaults to today."),
    ] = None,
) -> None:
    """Create a new unpublished post."""
    config = _config(ctx)

    post_date: date | None = None
    if on:
        try:
            post_date = datetime.strptime(on, "%Y-%m-%d").date()
        except ValueError:
            err_console.print(f"[red]Error:[/red] Invalid date format: {on}")
            err_console.print("Use YYYY-MM-DD format (e.g., 2024-01-15)")
            raise typer.Exit(1)

    try:
        path = create_post(config.posts_dir, title, layout=layout, post_date=post_date)
    except PostkitError as exc:
        _fail(exc)

    console.print(f"[green]Created {path}[/green]")


@app.command(name="index")
def index_cmd(
    ctx: typer.Context,
    drafts: Annotated[
        bool,
        typer.Option("--drafts/--no-drafts", help="Include unpublished posts."),
    ] = False,
) -> None:
    """Print a Markdown index of published posts."""
    config = _config(ctx)
    posts = PostReader(config.posts.pattern).read_all(config.posts_dir)
    if not drafts:
        posts = [p for p in posts if p.published]
    typer.echo(create_publisher(OutputFormat.MARKDOWN).format_index(posts))


@app.command(name="build")
def build_cmd(
    ctx: typer.Context,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Site output directory."),
    ] = None,
    output_format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: html or markdown."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Rebuild unchanged posts too."),
    ] = False,
    drafts: Annotated[
        Optional[bool],
        typer.Option("--drafts/--no-drafts", help="Include unpublished posts."),
    ] = None,
) -> None:
    """Render published posts into a static site."""
    config = merge_cli_overrides(
        _config(ctx),
        output_directory=output,
        build_format=output_format,
        include_drafts=drafts,
    )
    if config.build.format not in {f.value for f in OutputFormat}:
        err_console.print(f"[red]Error:[/red] Unsupported format: {config.build.format}")
        err_console.print(f"Choose one of: {', '.join(f.value for f in OutputFormat)}")
        raise typer.Exit(1)

    result = build_site(config, force=force)

    console.print("[bold green]Build complete![/bold green]")
    console.print(f"  Built: {len(result.built)}")
    console.print(f"  Unchanged: {len(result.skipped)}")
    console.print(f"  Removed: {len(result.removed)}")
    console.print(f"  Output: {result.output_dir}")

    if result.failed:
        console.print()
        console.print(f"[red]{len(result.failed)} post(s) could not be built:[/red]")
        for name, reason in sorted(result.failed.items()):
            console.print(f"  - {escape(name)}: {escape(reason)}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
