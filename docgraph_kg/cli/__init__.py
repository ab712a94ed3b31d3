"""
Command-Line Interface

CLI commands for DocGraph operations.

Commands:
    docgraph init      - Create constraints and the vector index
    docgraph ingest    - Ingest a directory into the graph
    docgraph query     - Ask a question
    docgraph entities  - List extracted entities
    docgraph graph     - Show a sample of entity relations
    docgraph health    - Check database connectivity

Usage:
    # Ingest a directory
    docgraph ingest ./documents

    # Query
    docgraph query "Who maintains the parser?" --top-k 8

    # Use a config file and debug logging
    docgraph entities --config ./docgraph.toml --verbose

Connection settings come from NEO4J_* and OPENAI_API_KEY (a .env file in
the working directory is loaded first) or from --config.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from docgraph_kg.errors import DocGraphError

if TYPE_CHECKING:
    from docgraph_kg.api.docgraph import DocGraph

__all__ = ["main", "app"]

app = typer.Typer(
    name="docgraph",
    help="Document knowledge graph on Neo4j",
    no_args_is_help=True,
)
console = Console()

ConfigOption = typer.Option(
    None,
    "--config", "-c",
    help="TOML configuration file",
    exists=True,
    dir_okay=False,
)
VerboseOption = typer.Option(
    False,
    "--verbose", "-v",
    help="Enable debug logging",
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if verbose:
        logging.getLogger("docgraph_kg").setLevel(logging.DEBUG)
    for noisy in ("httpx", "openai", "neo4j"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def _open_graph(config_path: Path | None) -> "DocGraph":
    from docgraph_kg.api.docgraph import DocGraph
    from docgraph_kg.config import KGConfig

    config = KGConfig.from_file(config_path) if config_path else KGConfig()
    return DocGraph(config)


@app.command()
def init(
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Create uniqueness constraints and the chunk vector index."""
    _setup_logging(verbose)

    async def _run() -> None:
        graph = _open_graph(config)
        try:
            await graph.init()
            console.print(f"[green]Schema ready[/] ({graph.config.vector_index_name})")
        finally:
            await graph.close()

    asyncio.run(_run())


@app.command()
def ingest(
    path: Path = typer.Argument(
        ...,
        help="Directory to ingest",
        exists=True,
        file_okay=False,
    ),
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Ingest every supported file under a directory."""
    _setup_logging(verbose)

    async def _run() -> None:
        graph = _open_graph(config)

        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console,
            ) as progress:
                task = progress.add_task("Starting indexing...", total=1.0)

                def on_status(snapshot):
                    progress.update(
                        task,
                        description=snapshot.message,
                        completed=snapshot.progress,
                    )

                unsubscribe = graph.status.subscribe(on_status)
                try:
                    summary = await graph.run_ingestion(path)
                finally:
                    unsubscribe()

            console.print()
            console.print(Panel(
                f"[green]Indexing complete[/]\n\n"
                f"  Files scanned: {summary.files_scanned}\n"
                f"  Ingested: {summary.files_ingested}\n"
                f"  Skipped: {summary.files_skipped}\n"
                f"  Chunks: {summary.chunks_created}\n"
                f"  Entities: {summary.entities_created}\n"
                f"  Relations: {summary.relations_created}",
                title="Ingestion Complete",
            ))
        except DocGraphError as e:
            console.print(f"[red]{graph.status.snapshot().message or e}[/]")
            raise typer.Exit(code=1)
        finally:
            await graph.close()

    asyncio.run(_run())


@app.command()
def query(
    question: str = typer.Argument(
        ...,
        help="Question to ask",
    ),
    top_k: Optional[int] = typer.Option(
        None,
        "--top-k", "-k",
        help="Chunks to retrieve (default from config)",
        min=1,
    ),
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Answer a question from the ingested documents."""
    _setup_logging(verbose)

    async def _run() -> None:
        graph = _open_graph(config)

        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                task = progress.add_task("Thinking...")
                result = await graph.query(question, top_k=top_k)
                progress.update(task, completed=True)

            # Display answer
            console.print()
            console.print(Panel(
                Markdown(result.answer),
                title="Answer",
                border_style="green",
            ))

            if result.key_entities:
                console.print()
                table = Table(title="Key Entities")
                table.add_column("Entity", style="cyan")
                for entity in result.key_entities:
                    table.add_row(entity)
                console.print(table)

            # Display timing
            if result.timing:
                console.print(f"\n[dim]Query time: {result.total_time_ms}ms[/]")

        except DocGraphError as e:
            console.print(f"[red]Query failed: {e}[/]")
            raise typer.Exit(code=1)
        finally:
            await graph.close()

    asyncio.run(_run())


@app.command()
def entities(
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """List all entities."""
    _setup_logging(verbose)

    async def _run() -> None:
        graph = _open_graph(config)

        try:
            items = await graph.entities()

            table = Table(title=f"Entities ({len(items)})")
            table.add_column("Entity", style="cyan")
            table.add_column("Label", style="green")
            for item in items:
                table.add_row(item.id, item.label or "")

            console.print(table)
        finally:
            await graph.close()

    asyncio.run(_run())


@app.command(name="graph")
def graph_command(
    limit: int = typer.Option(
        50,
        "--limit", "-l",
        help="Maximum relations to show",
        min=1,
    ),
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show a sample of relations between entities."""
    _setup_logging(verbose)

    async def _run() -> None:
        graph = _open_graph(config)

        try:
            snapshot = await graph.graph(limit=limit)

            table = Table(title=f"Relations ({len(snapshot.edges)} of {len(snapshot.nodes)} nodes)")
            table.add_column("Source", style="cyan")
            table.add_column("Relation", style="magenta")
            table.add_column("Target", style="cyan")
            for edge in snapshot.edges:
                table.add_row(edge.source, edge.predicate, edge.target)

            console.print(table)
        finally:
            await graph.close()

    asyncio.run(_run())


@app.command()
def health(
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Check connectivity to Neo4j."""
    _setup_logging(verbose)

    async def _run() -> dict[str, str]:
        graph = _open_graph(config)
        try:
            return await graph.health()
        finally:
            await graph.close()

    result = asyncio.run(_run())
    if result["status"] == "ok":
        console.print(f"[green]OK[/] - Neo4j Browser: {result['browser_url']}")
    else:
        console.print(f"[red]Unreachable[/]: {result.get('detail', '')}")
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point for the CLI."""
    load_dotenv()
    app()
