"""Command line interface for guidekit."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from guidekit.config import AppConfig, load_site_config
from guidekit.index.collection import ContentCollection, LoadStats
from guidekit.index.toc import TocBuilder, render_markdown
from guidekit.index.validation import ERROR, validate
from guidekit.web.app import CONTENT_DIR_ENV, app as web_app


console = Console()
app = typer.Typer(help="guidekit - question index and link checks for Markdown guides")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _load_collection(content_dir: Path, config: AppConfig) -> tuple[ContentCollection, LoadStats]:
    if not content_dir.is_dir():
        raise typer.BadParameter(f"Content directory not found: {content_dir}")
    collection, stats = ContentCollection.load(content_dir, config)
    if stats.failed:
        console.print(f"[yellow]{stats.failed} document(s) could not be loaded.[/yellow]")
    return collection, stats


def _link_base(output: Path, content_dir: Path) -> str:
    try:
        base = output.parent.resolve().relative_to(content_dir.resolve()).as_posix()
    except ValueError:
        return ""
    return "" if base == "." else base


@app.command()
def toc(
    content_dir: Path = typer.Argument(
        Path("."), help="Directory holding the guide's Markdown pages.", resolve_path=True
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the index to this file instead of stdout", resolve_path=True
    ),
    check: bool = typer.Option(False, "--check", help="Fail when the index file is out of date"),
    title: Optional[str] = typer.Option(None, help="Index title"),
    link_suffix: str = typer.Option(AppConfig().link_suffix, help="Suffix for page links (.md or .html)"),
    layout: Optional[str] = typer.Option(None, help="Emit Jekyll front matter with this layout"),
    strict: bool = typer.Option(False, "--strict", help="Require front matter on every page"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Build the question index from the guide's pages."""
    _setup_logging(verbose)
    config = load_site_config(
        content_dir, AppConfig(link_suffix=link_suffix, require_front_matter=strict)
    )
    if title:
        config.index_title = title
    if output is not None:
        config.index_file = output

    collection, _ = _load_collection(content_dir, config)
    table_of_contents = TocBuilder.from_collection(collection, title=config.index_title)

    target = config.resolve_index_path(content_dir)
    rendered = render_markdown(
        table_of_contents,
        link_suffix=config.link_suffix,
        layout=layout,
        base_dir=_link_base(target, content_dir),
    )

    if check:
        current = target.read_text(encoding="utf-8") if target.exists() else None
        if current != rendered:
            console.print(f"[red]{escape(str(target))} is out of date.[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green]{escape(str(target))} is up to date.[/green]")
        return

    if output is None:
        typer.echo(rendered, nl=False)
        return

    _ensure_parent(target)
    target.write_text(rendered, encoding="utf-8")
    console.print(
        f"Wrote {len(table_of_contents.topics)} topics, "
        f"{table_of_contents.question_count} questions to [bold]{escape(str(target))}[/bold]"
    )


@app.command()
def check(
    content_dir: Path = typer.Argument(
        Path("."), help="Directory holding the guide's Markdown pages.", resolve_path=True
    ),
    index: Optional[Path] = typer.Option(
        None, "--index", help="Existing index to verify (defaults to QUESTIONS_INDEX.md)", resolve_path=True
    ),
    strict: bool = typer.Option(False, "--strict", help="Require front matter on every page"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Check navigation links and question counts."""
    _setup_logging(verbose)
    config = load_site_config(content_dir, AppConfig(require_front_matter=strict))
    if index is not None:
        config.index_file = index

    collection, stats = _load_collection(content_dir, config)
    index_path = config.resolve_index_path(content_dir)
    index_text = None
    if index_path.exists():
        index_text = index_path.read_text(encoding="utf-8")
    else:
        console.print(f"[yellow]No index at {escape(str(index_path))}, skipping count checks.[/yellow]")

    report = validate(collection, index_text, index_path.name)
    if report.issues:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Severity")
        table.add_column("Code")
        table.add_column("Document")
        table.add_column("Message")
        for issue in report.issues:
            style = "red" if issue.severity == ERROR else "yellow"
            table.add_row(
                f"[{style}]{issue.severity}[/{style}]",
                issue.code,
                escape(issue.path),
                escape(issue.message),
            )
        console.print(table)

    console.print(
        f"Checked {len(collection)} documents: "
        f"{len(report.errors)} errors, {len(report.warnings)} warnings"
    )
    if not report.ok or stats.failed:
        raise typer.Exit(code=1)


@app.command("list")
def list_documents(
    content_dir: Path = typer.Argument(
        Path("."), help="Directory holding the guide's Markdown pages.", resolve_path=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show the guide's pages in reading order."""
    _setup_logging(verbose)
    config = load_site_config(content_dir)
    collection, _ = _load_collection(content_dir, config)
    if not len(collection):
        console.print("[yellow]No documents found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Order")
    table.add_column("Document")
    table.add_column("Title")
    table.add_column("Questions")
    table.add_column("Previous")
    table.add_column("Next")

    for document in collection:
        order = "" if document.order is None else f"{document.order:g}"
        table.add_row(
            order,
            escape(document.slug),
            escape(document.title),
            str(len(document.questions)),
            escape(document.nav.previous or ""),
            escape(document.nav.next or ""),
        )

    console.print(table)


@app.command()
def web(
    content_dir: Path = typer.Argument(
        Path("."), help="Directory holding the guide's Markdown pages.", resolve_path=True
    ),
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the preview API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    if not content_dir.is_dir():
        raise typer.BadParameter(f"Content directory not found: {content_dir}")

    os.environ[CONTENT_DIR_ENV] = str(content_dir)
    console.print(f"Starting preview on http://{host}:{port} (content: {escape(str(content_dir))})")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
