"""Main CLI application for nda-search."""

import asyncio
from collections.abc import Coroutine, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
)

from nda_search import __version__
from nda_search.cli.context import (
    configure_logging,
    create_client,
    create_context,
    create_history_store,
    history_db_path,
)
from nda_search.cli.options import FormatOption, NoHistoryOption, VerboseOption

# Import commands to ensure they're registered
from nda_search.commands import (
    CommandRegistry,
    ElementCommand,
    FullTextCommand,
    StructureCommand,
    StructuresCommand,
)
from nda_search.commands.fulltext import FULL_TEXT_COLUMNS
from nda_search.config import get_config
from nda_search.config.defaults import get_config_path
from nda_search.exceptions import NDASearchError
from nda_search.output.base import OutputFormatter
from nda_search.search.models import (
    ExactHit,
    NoMatch,
    PartialInProgress,
    PartialResult,
    SearchState,
)

T = TypeVar("T")

app = typer.Typer(
    name="nda-search",
    help="Search the NDA data dictionary for data elements and structures",
    add_completion=True,
    no_args_is_help=True,
)

# Rich console for output
console = Console()
err_console = Console(stderr=True)


@contextmanager
def _exit_on_error() -> Iterator[None]:
    """Print nda-search errors and exit with the error's exit code."""
    try:
        yield
    except NDASearchError as e:
        detail = str(e)
        message = e.user_message
        if detail and detail != message:
            message = f"{message}: {detail}"
        err_console.print(f"[red]Error:[/red] {escape(message)}")
        raise typer.Exit(e.exit_code) from None


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine on a fresh event loop."""
    with _exit_on_error():
        return asyncio.run(coro)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"nda-search version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Search the NDA data dictionary."""


# Element search


def _progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("{task.fields[matches]} matches"),
        console=err_console,
        transient=True,
        disable=not err_console.is_terminal,
    )


def _print_state(formatter: OutputFormatter, state: SearchState) -> None:
    if isinstance(state, ExactHit) and state.element is not None:
        formatter.print_element(state.element, state.query)
    elif isinstance(state, PartialResult):
        formatter.print_matches(state.matches, state.query)
        err_console.print("[dim]Use --pick N to open one of the results.[/dim]")
    elif isinstance(state, NoMatch):
        content: str | list[str] = state.message
        if state.suggestions:
            content = [state.message, f"Did you mean: {', '.join(state.suggestions)}?"]
        formatter.print_content(content)


async def _element(
    query: str,
    pick: int | None,
    format_choice: Any,
    verbose: bool,
    no_history: bool,
) -> None:
    config = get_config()
    configure_logging(config, verbose)
    store = None if no_history else create_history_store(config)

    try:
        async with create_client(config) as client:
            ctx = create_context(
                client=client,
                format_choice=format_choice,
                verbose=verbose,
                no_history=no_history,
                history_store=store,
                config=config,
            )

            with _progress() as progress:
                task = progress.add_task(f"Searching {query!r}", total=None, matches=0)

                def on_state(state: SearchState) -> None:
                    if isinstance(state, PartialInProgress) and state.total_batches:
                        progress.update(
                            task,
                            description="Scanning structures",
                            total=state.total_batches,
                            completed=state.batch_index,
                            matches=state.matches_so_far,
                        )

                result = await ElementCommand().aexecute(
                    ctx, query=query, pick=pick, listener=on_state
                )

        if store is not None and result.metadata.get("recorded"):
            store.record(
                result.metadata["query"],
                result.metadata["outcome"],
                result.metadata["result_count"],
            )
    finally:
        if store is not None:
            store.close()

    if not result.success:
        ctx.formatter.print_error(result.error or "Search failed")
        raise typer.Exit(1)
    _print_state(ctx.formatter, result.data)


@app.command()
def element(
    query: str = typer.Argument(..., help="Element name or description words."),
    pick: int | None = typer.Option(
        None, "--pick", "-n", help="Open the Nth result of a fuzzy search."
    ),
    format: FormatOption = None,
    verbose: VerboseOption = False,
    no_history: NoHistoryOption = False,
) -> None:
    """Find a data element by exact name, falling back to fuzzy search."""
    _run(_element(query, pick, format, verbose, no_history))


# Structures


async def _structures(query: str, format_choice: Any, verbose: bool) -> None:
    config = get_config()
    configure_logging(config, verbose)

    async with create_client(config) as client:
        ctx = create_context(
            client=client, format_choice=format_choice, verbose=verbose, config=config
        )
        result = await StructuresCommand().aexecute(ctx, query=query)

    structures = result.data
    if not structures:
        ctx.formatter.print_content(f'No data structures found for "{query}"')
        return

    term = result.metadata["term"]
    title = (
        f'Category "{term}" ({len(structures)})'
        if result.metadata["category"]
        else f'{len(structures)} structures matching "{term}"'
    )
    ctx.formatter.print_structures(structures, title=title)


@app.command()
def structures(
    query: str = typer.Argument(
        ..., help="Keyword, or category:NAME to list a category."
    ),
    format: FormatOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Search data structures by keyword or category."""
    _run(_structures(query, format, verbose))


async def _structure(short_name: str, format_choice: Any, verbose: bool) -> None:
    config = get_config()
    configure_logging(config, verbose)

    async with create_client(config) as client:
        ctx = create_context(
            client=client, format_choice=format_choice, verbose=verbose, config=config
        )
        result = await StructureCommand().aexecute(ctx, short_name=short_name)

    rows = [
        {
            "position": el.position if el.position is not None else "",
            "name": el.name,
            "type": el.type,
            "size": el.size if el.size is not None else "",
            "description": el.description,
        }
        for el in result.data
    ]
    if not rows:
        ctx.formatter.print_content(f"{short_name} has no data elements")
        return
    ctx.formatter.print_table(rows, title=f"{short_name} ({len(rows)} elements)")


@app.command()
def structure(
    short_name: str = typer.Argument(..., help="Data structure short name."),
    format: FormatOption = None,
    verbose: VerboseOption = False,
) -> None:
    """List the elements of a data structure."""
    _run(_structure(short_name, format, verbose))


# Full-text search


async def _fulltext(
    query: str, size: int | None, format_choice: Any, verbose: bool
) -> None:
    config = get_config()
    configure_logging(config, verbose)

    async with create_client(config) as client:
        ctx = create_context(
            client=client, format_choice=format_choice, verbose=verbose, config=config
        )
        result = await FullTextCommand().aexecute(ctx, query=query, size=size)

    rows = result.data
    if not rows:
        ctx.formatter.print_content(f'No data elements found matching "{query}"')
        return
    ctx.formatter.print_table(
        rows, columns=FULL_TEXT_COLUMNS, title=f'{len(rows)} full-text hits for "{query}"'
    )


@app.command()
def fulltext(
    query: str = typer.Argument(..., help="Search text."),
    size: int | None = typer.Option(
        None, "--size", "-s", help="Maximum number of hits. Defaults to config setting."
    ),
    format: FormatOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Full-text search over data elements."""
    _run(_fulltext(query, size, format, verbose))


# History subcommand group
history_app = typer.Typer(help="Manage recent searches.")
app.add_typer(history_app, name="history")


def _history_config() -> Any:
    config = get_config()
    configure_logging(config)
    return config


@history_app.command("list")
def history_list() -> None:
    """Show recent searches, most recent first."""
    with _exit_on_error():
        config = _history_config()
        store = create_history_store(config)
        if store is None:
            console.print("[dim]Search history is disabled[/dim]")
            return
        with store:
            queries = store.recent(config.history.max_entries)

    if not queries:
        console.print("[dim]No recent searches[/dim]")
        return
    for position, recent in enumerate(queries, 1):
        console.print(f"{position:>3}  {escape(recent)}")


@history_app.command("remove")
def history_remove(
    query: str = typer.Argument(..., help="Query to forget."),
) -> None:
    """Remove one query from the history."""
    with _exit_on_error():
        store = create_history_store(_history_config())
        if store is None:
            console.print("[dim]Search history is disabled[/dim]")
            return
        with store:
            removed = store.remove(query)

    if removed:
        console.print(f"Removed {escape(query)} from history")
    else:
        console.print(f"[dim]{escape(query)} is not in history[/dim]")


@history_app.command("clear")
def history_clear(
    force: bool = typer.Option(False, "--force", "-y", help="Skip confirmation."),
) -> None:
    """Forget all recent searches."""
    if not force and not typer.confirm("Clear all recent searches?"):
        console.print("[dim]Cancelled[/dim]")
        return

    with _exit_on_error():
        store = create_history_store(_history_config())
        if store is None:
            console.print("[dim]Search history is disabled[/dim]")
            return
        with store:
            cleared = store.clear()

    console.print(f"Cleared {cleared} history entries")


@app.command("config")
def config_cmd(
    show_path: bool = typer.Option(
        False,
        "--path",
        "-p",
        help="Show config file path.",
    ),
) -> None:
    """Show current configuration."""
    if show_path:
        console.print(str(get_config_path()))
        return

    with _exit_on_error():
        config = get_config()

    default_format = getattr(
        config.output.default_format, "value", config.output.default_format
    )
    categories = ", ".join(config.search.supplementary_categories) or "none"

    console.print("[bold]nda-search configuration[/bold]\n")
    console.print(f"Config file: {get_config_path()}")
    console.print(f"Service: {config.service.base_url}")
    console.print(f"Full-text search: {config.service.search_url}")
    console.print(f"Batch size: {config.search.batch_size}")
    console.print(f"Batch pause: {config.search.batch_pause_seconds}s")
    console.print(f"Supplementary categories: {escape(categories)}")
    console.print(f"History: {'enabled' if config.history.enabled else 'disabled'}")
    console.print(f"History database: {history_db_path(config)}")
    console.print(f"Output format: {default_format}")

    console.print("\n[bold]Registered Commands:[/bold]")
    for info in CommandRegistry.get_command_info():
        aliases = f" ({info['aliases']})" if info["aliases"] else ""
        console.print(f"  {info['name']}{aliases}: {info['description']}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
