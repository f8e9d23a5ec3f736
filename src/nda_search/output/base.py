"""Output formatter protocol and base classes."""

import sys
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, TextIO

from nda_search.config.schema import OutputFormat
from nda_search.search.models import Element, MatchRecord, StructureSummary

MATCH_COLUMNS = ["#", "name", "type", "match", "score", "structure", "description"]
STRUCTURE_COLUMNS = ["short_name", "title", "category"]


def element_to_dict(element: Element, *, include_empty: bool = False) -> dict[str, Any]:
    """Flatten an element for display.

    Args:
        element: The element to flatten.
        include_empty: Keep fields without a value (used for JSON output).
    """
    data: dict[str, Any] = {
        "name": element.name,
        "type": element.type,
        "description": element.description,
        "notes": element.notes,
        "value_range": element.value_range,
        "size": element.size,
        "structures": list(element.structures),
    }
    if include_empty:
        return data
    return {key: value for key, value in data.items() if value not in (None, "", [])}


def match_to_row(record: MatchRecord, rank: int) -> dict[str, Any]:
    """One table row per ranked match."""
    return {
        "#": rank,
        "name": record.name,
        "type": record.element.type,
        "match": record.match_type.value,
        "score": round(record.relevance_score, 1),
        "structure": record.source_structure,
        "description": record.element.description,
    }


def structure_to_row(structure: StructureSummary) -> dict[str, Any]:
    return {
        "short_name": structure.short_name,
        "title": structure.title,
        "category": structure.category,
    }


@dataclass
class OutputData:
    """Container for output data to be formatted.

    Attributes:
        content: The main content to display.
        title: Optional title for the output.
        metadata: Additional metadata (query, counts, timing).
        error: Error message if operation failed.
        success: Whether the operation was successful.
    """

    content: str | list[str] | dict[str, Any]
    title: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    success: bool = True

    @classmethod
    def from_error(cls, error: str, title: str | None = None) -> "OutputData":
        """Create an OutputData instance for an error."""
        return cls(content="", title=title, error=error, success=False)

    @classmethod
    def from_content(
        cls,
        content: str | list[str] | dict[str, Any],
        title: str | None = None,
        **metadata: Any,
    ) -> "OutputData":
        """Create an OutputData instance for successful output."""
        return cls(content=content, title=title, metadata=metadata, success=True)


class OutputFormatter(ABC):
    """Abstract base class for output formatters.

    Formatters render search results to the terminal in different
    formats (plain text, JSON, rich formatted). Element and match
    rendering is built on ``format`` and ``format_table``; formatters
    override it where they can do better.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
        verbose: bool = False,
    ) -> None:
        """Initialize the formatter.

        Args:
            stream: Output stream (defaults to stdout).
            error_stream: Error stream (defaults to stderr).
            verbose: Whether to show verbose output.
        """
        self._stream = stream or sys.stdout
        self._error_stream = error_stream or sys.stderr
        self._verbose = verbose

    @property
    def stream(self) -> TextIO:
        return self._stream

    @property
    def error_stream(self) -> TextIO:
        return self._error_stream

    @property
    def verbose(self) -> bool:
        return self._verbose

    @property
    @abstractmethod
    def format_type(self) -> OutputFormat:
        """Get the format type of this formatter."""

    @abstractmethod
    def format(self, data: OutputData) -> str:
        """Format output data as a string."""

    @abstractmethod
    def format_list(self, items: list[str], title: str | None = None) -> str:
        """Format a list of items."""

    @abstractmethod
    def format_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str] | None = None,
        title: str | None = None,
    ) -> str:
        """Format data as a table.

        Args:
            rows: List of row dictionaries.
            columns: Column names (inferred from rows if None).
            title: Optional title.
        """

    def format_element(self, element: Element, query: str | None = None) -> str:
        """Format one element's detail."""
        data = OutputData.from_content(element_to_dict(element), title=element.name)
        return self.format(data)

    def format_matches(self, matches: Sequence[MatchRecord], query: str) -> str:
        """Format a ranked match list."""
        rows = [match_to_row(record, rank) for rank, record in enumerate(matches, 1)]
        return self.format_table(
            rows,
            columns=MATCH_COLUMNS,
            title=f'{len(rows)} elements matching "{query}"',
        )

    def format_structures(
        self, structures: Sequence[StructureSummary], title: str | None = None
    ) -> str:
        """Format a list of data structures."""
        rows = [structure_to_row(s) for s in structures]
        return self.format_table(rows, columns=STRUCTURE_COLUMNS, title=title)

    def write(self, text: str, *, error: bool = False) -> None:
        """Write already formatted text."""
        if not text:
            return
        print(text, file=self._error_stream if error else self._stream)

    def print(self, data: OutputData) -> None:
        """Format and print output data."""
        self.write(self.format(data), error=not data.success)

    def print_error(self, message: str, title: str | None = None) -> None:
        self.print(OutputData.from_error(message, title))

    def print_content(
        self,
        content: str | list[str] | dict[str, Any],
        title: str | None = None,
        **metadata: Any,
    ) -> None:
        self.print(OutputData.from_content(content, title, **metadata))

    def print_element(self, element: Element, query: str | None = None) -> None:
        self.write(self.format_element(element, query))

    def print_matches(self, matches: Sequence[MatchRecord], query: str) -> None:
        self.write(self.format_matches(matches, query))

    def print_structures(
        self, structures: Sequence[StructureSummary], title: str | None = None
    ) -> None:
        self.write(self.format_structures(structures, title))

    def print_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str] | None = None,
        title: str | None = None,
    ) -> None:
        self.write(self.format_table(rows, columns, title))

    def print_list(self, items: list[str], title: str | None = None) -> None:
        self.write(self.format_list(items, title))
