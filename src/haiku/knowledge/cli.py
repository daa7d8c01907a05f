import asyncio
import logging
import sys
from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

from haiku.knowledge.client import HaikuKnowledge
from haiku.knowledge.config import (
    AppConfig,
    Config,
    generate_default_config,
    load_yaml_config,
)
from haiku.knowledge.exceptions import KnowledgeTreeError
from haiku.knowledge.logging import configure_cli_logging
from haiku.knowledge.store.models import Document, Heading
from haiku.knowledge.tree.models import TreeEntry

console = Console()

_cli = typer.Typer(
    name="haiku-knowledge",
    no_args_is_help=True,
    help="Self-organizing knowledge tree driven by an LLM.",
)

DbOption = typer.Option(None, "--db", help="Path to the database directory")
ConfigOption = typer.Option(None, "--config", help="Path to the configuration file")


def _load_config(config_file: Path | None) -> AppConfig:
    if config_file is None:
        return Config  # type: ignore[return-value]
    if not config_file.exists():
        raise typer.BadParameter(f"Config file not found: {config_file}")
    return AppConfig.model_validate(load_yaml_config(config_file))


def _entry_label(entry: TreeEntry) -> str:
    node = entry.node
    prefix = f"[dim]{entry.short}[/dim] " if entry.short else ""
    if isinstance(node, Document):
        return f"{prefix}[green]document {node.id}[/green] ({len(node.content)} chars)"
    if isinstance(node, Heading):
        return f"{prefix}[cyan]heading {node.id}[/cyan] ({len(node.refs)} children)"
    return f"{prefix}[red]missing {node.id}[/red]"


@_cli.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    configure_cli_logging(logging.DEBUG if debug else logging.INFO)


@_cli.command("find", help="Find the document that answers a query")
def find(
    query: str = typer.Argument(..., help="Natural language query"),
    db: Path | None = DbOption,
    config_file: Path | None = ConfigOption,
):
    config = _load_config(config_file)

    async def run():
        async with HaikuKnowledge(db, config=config, read_only=True) as client:
            return await client.find(query)

    document = asyncio.run(run())
    if document is None:
        console.print("[yellow]No matching document[/yellow]")
        return
    console.print(Panel(document.content, title=f"Document {document.id}"))


@_cli.command("update", help="Add, remove or edit knowledge")
def update(
    query: str = typer.Argument(..., help="Natural language change request"),
    db: Path | None = DbOption,
    config_file: Path | None = ConfigOption,
):
    config = _load_config(config_file)

    async def run():
        async with HaikuKnowledge(db, config=config, create=True) as client:
            return await client.update(query)

    description = asyncio.run(run())
    console.print(f"[green]{description}[/green]")


@_cli.command("show", help="Print the knowledge tree")
def show(
    db: Path | None = DbOption,
    config_file: Path | None = ConfigOption,
):
    config = _load_config(config_file)

    async def run() -> list[TreeEntry]:
        async with HaikuKnowledge(db, config=config, read_only=True) as client:
            return [entry async for entry in client.walk()]

    entries = asyncio.run(run())
    if not entries:
        console.print("[yellow]The knowledge base is empty[/yellow]")
        return

    root = Tree(_entry_label(entries[0]))
    # Branch at each depth, to attach the next deeper entry to
    branches: list[Tree] = [root]
    for entry in entries[1:]:
        del branches[entry.depth :]
        branches.append(branches[-1].add(_entry_label(entry)))
    console.print(root)


@_cli.command("init-config", help="Write a default configuration file")
def init_config(
    output: Path = typer.Argument(
        Path("haiku.knowledge.yaml"), help="Where to write the configuration"
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
):
    if output.exists() and not force:
        console.print(f"[red]{output} already exists. Use --force to overwrite.[/red]")
        raise typer.Exit(1)

    with open(output, "w") as f:
        yaml.safe_dump(generate_default_config(), f, sort_keys=False)
    console.print(f"[green]Wrote configuration to {output}[/green]")


def cli():
    try:
        _cli()
    except (KnowledgeTreeError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
