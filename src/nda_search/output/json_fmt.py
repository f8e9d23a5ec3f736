"""JSON output formatters."""

import json
from collections.abc import Sequence
from typing import Any, TextIO

from nda_search.output.base import (
    OutputData,
    OutputFormat,
    OutputFormatter,
    element_to_dict,
    match_to_row,
)
from nda_search.search.models import Element, MatchRecord


class JSONFormatter(OutputFormatter):
    """JSON output formatter.

    Produces structured JSON output suitable for programmatic
    consumption and integration with other tools.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
        verbose: bool = False,
        indent: int | None = 2,
        ensure_ascii: bool = False,
    ) -> None:
        """Initialize JSON formatter.

        Args:
            stream: Output stream.
            error_stream: Error stream.
            verbose: Whether to show verbose output.
            indent: JSON indentation (None for compact).
            ensure_ascii: Whether to escape non-ASCII characters.
        """
        super().__init__(stream, error_stream, verbose)
        self._indent = indent
        self._ensure_ascii = ensure_ascii

    @property
    def format_type(self) -> OutputFormat:
        return OutputFormat.JSON

    def _to_json(self, data: Any) -> str:
        return json.dumps(
            data,
            indent=self._indent,
            ensure_ascii=self._ensure_ascii,
            default=str,  # datetimes from the history store
        )

    def format(self, data: OutputData) -> str:
        """Format output data as JSON."""
        output: dict[str, Any] = {"success": data.success}

        if data.title:
            output["title"] = data.title

        if data.success:
            output["content"] = data.content
        else:
            output["error"] = data.error

        if data.metadata:
            output["metadata"] = data.metadata

        return self._to_json(output)

    def format_list(self, items: list[str], title: str | None = None) -> str:
        output: dict[str, Any] = {"success": True, "items": items, "count": len(items)}
        if title:
            output["title"] = title
        return self._to_json(output)

    def format_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str] | None = None,
        title: str | None = None,
    ) -> str:
        output: dict[str, Any] = {"success": True, "rows": rows, "count": len(rows)}
        if title:
            output["title"] = title
        if columns:
            output["columns"] = columns
        return self._to_json(output)

    def format_element(self, element: Element, query: str | None = None) -> str:
        output: dict[str, Any] = {
            "success": True,
            "element": element_to_dict(element, include_empty=True),
        }
        if query is not None:
            output["query"] = query
        return self._to_json(output)

    def format_matches(self, matches: Sequence[MatchRecord], query: str) -> str:
        rows = [match_to_row(record, rank) for rank, record in enumerate(matches, 1)]
        if self._verbose:
            for row, record in zip(rows, matches):
                row["name_relevance"] = record.name_relevance
        return self._to_json(
            {"success": True, "query": query, "count": len(rows), "matches": rows}
        )


class JSONLinesFormatter(JSONFormatter):
    """JSON Lines (JSONL) output formatter.

    Produces newline-delimited JSON, one object per element, match or
    table row.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
        verbose: bool = False,
    ) -> None:
        # JSONL uses compact JSON (no indentation)
        super().__init__(stream, error_stream, verbose, indent=None)

    @property
    def format_type(self) -> OutputFormat:
        return OutputFormat.JSONL

    def format_list(self, items: list[str], title: str | None = None) -> str:
        lines = []
        for item in items:
            line_data = {"item": item}
            if title:
                line_data["title"] = title
            lines.append(self._to_json(line_data))
        return "\n".join(lines)

    def format_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str] | None = None,
        title: str | None = None,
    ) -> str:
        lines = []
        for row in rows:
            line_data = dict(row)
            if title:
                line_data["_title"] = title
            lines.append(self._to_json(line_data))
        return "\n".join(lines)

    def format_element(self, element: Element, query: str | None = None) -> str:
        return self._to_json(element_to_dict(element, include_empty=True))

    def format_matches(self, matches: Sequence[MatchRecord], query: str) -> str:
        return "\n".join(
            self._to_json(match_to_row(record, rank))
            for rank, record in enumerate(matches, 1)
        )
