"""Context factory for creating CommandContext from CLI options.

This module wires configuration into the client, formatter, logging
and history store used by a single CLI invocation.
"""

from pathlib import Path

from nda_search.cli.options import get_output_format
from nda_search.commands.base import CommandContext
from nda_search.config import get_config
from nda_search.config.defaults import get_history_path
from nda_search.config.schema import NDASearchConfig, OutputFormat
from nda_search.history.recent import RecentSearchHistory
from nda_search.history.store import DuckDBHistoryStore
from nda_search.output import get_formatter
from nda_search.output.base import OutputFormatter
from nda_search.service.base import DataDictionaryClient
from nda_search.service.http import HttpDataDictionaryClient
from nda_search.utils.logging import setup_logging


def configure_logging(config: NDASearchConfig, verbose: bool = False) -> None:
    """Set up logging from configuration; ``verbose`` forces DEBUG."""
    setup_logging(
        level="DEBUG" if verbose else config.logging.level,
        log_file=config.logging.file,
        json_format=config.logging.json_format,
        use_color=config.output.color,
    )


def create_client(config: NDASearchConfig | None = None) -> DataDictionaryClient:
    """Create the HTTP data dictionary client from configuration."""
    if config is None:
        config = get_config()

    service = config.service
    return HttpDataDictionaryClient(
        base_url=service.base_url,
        search_url=service.search_url,
        timeout=service.timeout,
    )


def create_formatter(
    format_choice: OutputFormat | None = None,
    verbose: bool = False,
    config: NDASearchConfig | None = None,
) -> OutputFormatter:
    """Create an output formatter from configuration."""
    if config is None:
        config = get_config()

    output_format = get_output_format(format_choice, config.output.default_format)
    if output_format == OutputFormat.RICH:
        return get_formatter(output_format, verbose=verbose, color=config.output.color)
    return get_formatter(output_format, verbose=verbose)


def history_db_path(config: NDASearchConfig) -> Path:
    return config.history.path or get_history_path()


def create_history_store(
    config: NDASearchConfig | None = None,
) -> DuckDBHistoryStore | None:
    """Open the history database, or None when history is disabled."""
    if config is None:
        config = get_config()

    if not config.history.enabled:
        return None
    return DuckDBHistoryStore(history_db_path(config), config.history.max_entries)


def create_context(
    *,
    client: DataDictionaryClient,
    format_choice: OutputFormat | None = None,
    verbose: bool = False,
    no_history: bool = False,
    history_store: DuckDBHistoryStore | None = None,
    config: NDASearchConfig | None = None,
) -> CommandContext:
    """Create a CommandContext from CLI options.

    Args:
        client: Data dictionary client for this invocation.
        format_choice: Output format override.
        verbose: Whether to enable verbose output.
        no_history: Do not record searches of this invocation.
        history_store: Store to load the recent-search history from.
        config: Configuration to use. If None, uses global config.

    Returns:
        Fully configured CommandContext.
    """
    if config is None:
        config = get_config()

    max_entries = config.history.max_entries
    if history_store is not None:
        history = history_store.load(max_entries)
    else:
        history = RecentSearchHistory(max_entries=max_entries)

    return CommandContext(
        client=client,
        formatter=create_formatter(format_choice, verbose, config),
        config=config,
        history=history,
        record_history=not no_history and config.history.enabled,
        verbose=verbose,
    )
