"""Base command pattern implementation.

This module provides the foundation for all nda-search commands,
including the CommandContext for dependency injection and
BaseCommand abstract class for command implementations.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any

from nda_search.config.schema import NDASearchConfig
from nda_search.history.recent import RecentSearchHistory
from nda_search.output.base import OutputData, OutputFormatter
from nda_search.search.orchestrator import SearchOrchestrator
from nda_search.service.base import DataDictionaryClient


@dataclass
class CommandContext:
    """Context object passed to commands for dependency injection.

    Attributes:
        client: The data dictionary client.
        formatter: The output formatter for displaying results.
        config: The application configuration.
        history: Recent searches of this session.
        record_history: Whether searches are added to the history.
        verbose: Whether to show verbose output.
    """

    client: DataDictionaryClient
    formatter: OutputFormatter
    config: NDASearchConfig
    history: RecentSearchHistory = field(default_factory=RecentSearchHistory)
    record_history: bool = True
    verbose: bool = False

    def create_orchestrator(self) -> SearchOrchestrator:
        """Build a search orchestrator from the search configuration.

        With history recording disabled the orchestrator gets a
        throwaway history, so the session history is left untouched.
        """
        search = self.config.search
        history = self.history if self.record_history else RecentSearchHistory()
        return SearchOrchestrator(
            self.client,
            history=history,
            batch_size=search.batch_size,
            batch_pause=search.batch_pause_seconds,
            supplementary_categories=search.supplementary_categories,
            max_cached_elements=search.max_cached_elements,
            max_results=search.max_results,
        )

    def with_history_disabled(self) -> "CommandContext":
        return replace(self, record_history=False)

    def with_verbose(self, verbose: bool = True) -> "CommandContext":
        return replace(self, verbose=verbose)


@dataclass
class CommandResult:
    """Result of a command execution.

    Attributes:
        success: Whether the command succeeded.
        data: The result data (type depends on command).
        error: Error message if command failed.
        metadata: Additional metadata about the execution.
    """

    success: bool
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: Any, **metadata: Any) -> "CommandResult":
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str, **metadata: Any) -> "CommandResult":
        return cls(success=False, error=error, metadata=metadata)

    def to_output_data(self, title: str | None = None) -> OutputData:
        """Convert to OutputData for formatting."""
        if self.success:
            return OutputData.from_content(
                content=self.data,
                title=title,
                **self.metadata,
            )
        return OutputData.from_error(
            error=self.error or "Unknown error",
            title=title,
        )


class BaseCommand(ABC):
    """Abstract base class for all nda-search commands.

    Commands receive a CommandContext with all necessary dependencies
    and return a CommandResult. Service lookups are coroutines, so
    commands implement ``aexecute``; ``execute`` drives it on a fresh
    event loop.

    Example:
        class StructureCommand(BaseCommand):
            @property
            def name(self) -> str:
                return "structure"

            @property
            def description(self) -> str:
                return "List a data structure's elements"

            async def aexecute(self, ctx, **kwargs) -> CommandResult:
                elements = await ctx.client.get_structure(kwargs["short_name"])
                return CommandResult.ok(elements)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The command name (used in CLI)."""

    @property
    @abstractmethod
    def description(self) -> str:
        """A short description of what the command does."""

    @property
    def aliases(self) -> list[str]:
        """Alternative names for the command."""
        return []

    @abstractmethod
    async def aexecute(self, ctx: CommandContext, **kwargs: Any) -> CommandResult:
        """Execute the command.

        Args:
            ctx: The command context with dependencies.
            **kwargs: Command-specific arguments.

        Returns:
            CommandResult indicating success/failure and data.

        Raises:
            NDASearchError: On invalid arguments or service failures.
        """

    def execute(self, ctx: CommandContext, **kwargs: Any) -> CommandResult:
        """Synchronous wrapper around ``aexecute``."""
        return asyncio.run(self.aexecute(ctx, **kwargs))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
