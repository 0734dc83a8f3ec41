"""storygraph CLI - typer application entry point."""

from __future__ import annotations

import asyncio
import atexit
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from storygraph.artifacts.kinds import AssetKind, asset_kind_for_filename
from storygraph.artifacts.storage import DirectoryTextStorage
from storygraph.config import ConfigError, ProjectConfig, load_project_config
from storygraph.graph.factories import new_document
from storygraph.graph.queries import incoming_edges, outgoing_edges
from storygraph.graph.store import DocumentCache
from storygraph.graph.summary import summarize
from storygraph.graph.validation import validate
from storygraph.models.story_graph import EndNode, SceneNode
from storygraph.observability import close_file_logging, configure_logging, get_logger

if TYPE_CHECKING:
    from storygraph.models.story_graph import StoryGraph

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="sgraph",
    help="storygraph: inspect and edit branching story graph documents.",
    no_args_is_help=True,
)
console = Console()
log = get_logger(__name__)

DEFAULT_LOGS_DIR = Path("logs")


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_enabled: Annotated[
        bool,
        typer.Option(
            "--log",
            help="Append JSONL events to ./logs/storygraph.jsonl.",
        ),
    ] = False,
) -> None:
    """storygraph: inspect and edit branching story graph documents."""
    if log_enabled:
        configure_logging(verbosity=verbose, log_to_file=True, log_dir=DEFAULT_LOGS_DIR)
        atexit.register(close_file_logging)
    else:
        configure_logging(verbosity=verbose)


def _story_cache(path: Path) -> tuple[DocumentCache[StoryGraph], str]:
    """Cache over the file's directory, and the file's id within it."""
    storage = DirectoryTextStorage(path.parent)
    return DocumentCache.for_story_graphs(storage), path.name


def _project_config() -> ProjectConfig:
    """Load storygraph.yaml from the working directory or exit with an error."""
    try:
        return load_project_config(Path.cwd())
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


def _resolve_story_path(path: Path, config: ProjectConfig) -> Path:
    """Resolve a relative story path against the stories directory.

    Absolute paths and paths that exist from the working directory are used
    as given. Anything else goes under the project's stories directory when
    that directory exists.
    """
    if path.is_absolute() or path.exists():
        return path
    stories = config.stories_path(Path.cwd())
    return stories / path if stories.is_dir() else path


def _load_story(path: Path) -> StoryGraph:
    """Load a story file or exit with an error."""
    path = _resolve_story_path(path, _project_config())
    if not path.is_file():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)

    cache, doc_id = _story_cache(path)
    document = asyncio.run(cache.load(doc_id))
    if document is None:
        console.print(
            f"[red]Error:[/red] Could not load story from {path}. Run with -v for details."
        )
        raise typer.Exit(1)
    return document


# =============================================================================
# CLI Commands
# =============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from storygraph import __version__

    console.print(f"storygraph v{__version__}")


@app.command()
def new(
    path: Annotated[
        Path, typer.Argument(help="Story file to create (e.g. intro.storygraph.yaml).")
    ],
    title: Annotated[
        str | None,
        typer.Option("--title", "-t", help="Story title (default from storygraph.yaml)."),
    ] = None,
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="Story description."),
    ] = "",
) -> None:
    """Create a new story with a single start node.

    A relative path lands in the project's stories directory if it exists.
    """
    config = _project_config()
    path = _resolve_story_path(path, config)
    if path.exists():
        console.print(f"[red]Error:[/red] {path} already exists")
        raise typer.Exit(1)

    document = new_document(title=title or config.default_title, description=description)
    cache, doc_id = _story_cache(path)
    cache.put(doc_id, document)

    if not asyncio.run(cache.save(doc_id)):
        console.print(f"[red]Error:[/red] Could not write {path}")
        raise typer.Exit(1)

    log.info("story_created", path=str(path), title=document.metadata.title)
    console.print(f"[green]Created[/green] {path} ({document.metadata.title!r})")


@app.command(name="validate")
def validate_cmd(
    path: Annotated[Path, typer.Argument(help="Story file to validate.")],
) -> None:
    """Check a story's structure. Exits with status 1 if it is invalid."""
    document = _load_story(path)
    result = validate(document)

    if result.valid:
        console.print(f"[green]✓[/green] {path} is valid")
        return

    console.print(f"[red]✗[/red] {path} has {len(result.errors)} problem(s):")
    for error in result.errors:
        console.print(f"  • {error}", markup=False)
    raise typer.Exit(1)


@app.command()
def summary(
    path: Annotated[Path, typer.Argument(help="Story file to summarize.")],
) -> None:
    """Print the plain-text story summary."""
    document = _load_story(path)
    console.print(summarize(document), markup=False, highlight=False)


@app.command()
def nodes(
    path: Annotated[Path, typer.Argument(help="Story file to list.")],
) -> None:
    """List a story's nodes with their connections."""
    document = _load_story(path)

    table = Table(title=f"Nodes: {document.metadata.title}")
    table.add_column("ID", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("In", justify="right")
    table.add_column("Out", justify="right")
    table.add_column("Details")

    for node in document.nodes.values():
        if isinstance(node, SceneNode):
            details = f"{len(node.dialogues)} dialogue(s), {len(node.choices)} choice(s)"
        elif isinstance(node, EndNode) and node.ending_type:
            details = node.ending_type
        else:
            details = ""
        table.add_row(
            node.id,
            node.node_type,
            node.name,
            str(len(incoming_edges(document, node.id))),
            str(len(outgoing_edges(document, node.id))),
            details,
        )

    console.print(table)


async def _load_many(
    cache: DocumentCache[StoryGraph], doc_ids: list[str]
) -> list[StoryGraph | None]:
    return list(await asyncio.gather(*(cache.load(doc_id) for doc_id in doc_ids)))


@app.command(name="list")
def list_stories() -> None:
    """List the stories in the project's stories directory."""
    config = _project_config()
    stories = config.stories_path(Path.cwd())
    if not stories.is_dir():
        console.print(f"[red]Error:[/red] Stories directory not found: {stories}")
        raise typer.Exit(1)

    doc_ids = sorted(
        path.relative_to(stories).as_posix()
        for path in stories.rglob("*")
        if path.is_file() and asset_kind_for_filename(path.name) is AssetKind.STORY_GRAPH
    )
    if not doc_ids:
        console.print(f"[yellow]No stories in {stories}[/yellow]")
        return

    cache = DocumentCache.for_story_graphs(DirectoryTextStorage(stories))
    documents = asyncio.run(_load_many(cache, doc_ids))

    table = Table(title=f"Stories: {config.name}")
    table.add_column("File", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Nodes", justify="right")
    table.add_column("Valid")

    for doc_id, document in zip(doc_ids, documents, strict=True):
        if document is None:
            table.add_row(doc_id, "", "", "[red]unreadable[/red]")
            continue
        verdict = "[green]yes[/green]" if validate(document).valid else "[red]no[/red]"
        table.add_row(doc_id, document.metadata.title, str(len(document.nodes)), verdict)

    console.print(table)


if __name__ == "__main__":
    app()
