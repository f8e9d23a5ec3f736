"""Plain text output formatter."""

from typing import Any, TextIO

from nda_search.output.base import OutputData, OutputFormat, OutputFormatter

# Long descriptions are cut in plain tables to keep one row per line
MAX_CELL_WIDTH = 60


def _cell(value: Any, limit: int | None = MAX_CELL_WIDTH) -> str:
    text = "" if value is None else " ".join(str(value).split())
    if limit is not None and len(text) > limit:
        return text[: limit - 3] + "..."
    return text


class PlainFormatter(OutputFormatter):
    """Plain text output formatter.

    Produces simple, unformatted text output suitable for
    piping to other commands or basic terminal display.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
        verbose: bool = False,
        show_metadata: bool = False,
    ) -> None:
        super().__init__(stream, error_stream, verbose)
        self._show_metadata = show_metadata

    @property
    def format_type(self) -> OutputFormat:
        return OutputFormat.PLAIN

    def _title(self, title: str | None) -> list[str]:
        if not title:
            return []
        return [title, "-" * len(title), ""]

    def format(self, data: OutputData) -> str:
        """Format output data as plain text."""
        lines = self._title(data.title)

        if not data.success and data.error:
            lines.append(f"Error: {data.error}")
            return "\n".join(lines)

        if isinstance(data.content, str):
            lines.append(data.content)
        elif isinstance(data.content, list):
            lines.extend(str(item) for item in data.content)
        elif isinstance(data.content, dict):
            for key, value in data.content.items():
                if isinstance(value, list):
                    value = ", ".join(str(v) for v in value)
                lines.append(f"{key}: {value}")

        if (self._verbose or self._show_metadata) and data.metadata:
            lines.append("")
            lines.append("---")
            for key, value in data.metadata.items():
                lines.append(f"{key}: {value}")

        return "\n".join(lines)

    def format_list(self, items: list[str], title: str | None = None) -> str:
        """Format a list of items as plain text."""
        lines = self._title(title)
        lines.extend(f"  {item}" for item in items)
        return "\n".join(lines)

    def format_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str] | None = None,
        title: str | None = None,
    ) -> str:
        """Format data as a plain text table."""
        if not rows:
            return ""

        if columns is None:
            columns = list(rows[0].keys())

        limit = None if self._verbose else MAX_CELL_WIDTH
        cells = [[_cell(row.get(col), limit) for col in columns] for row in rows]

        widths = [len(col) for col in columns]
        for row_cells in cells:
            for i, value in enumerate(row_cells):
                widths[i] = max(widths[i], len(value))

        lines: list[str] = []
        if title:
            lines.append(title)
            lines.append("")

        lines.append("  ".join(col.ljust(w) for col, w in zip(columns, widths)).rstrip())
        lines.append("  ".join("-" * w for w in widths))
        for row_cells in cells:
            lines.append(
                "  ".join(v.ljust(w) for v, w in zip(row_cells, widths)).rstrip()
            )

        return "\n".join(lines)
