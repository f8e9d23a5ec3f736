"""Rich terminal output formatter."""

from collections.abc import Sequence
from io import StringIO
from typing import Any, TextIO

from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from nda_search.output.base import (
    OutputData,
    OutputFormat,
    OutputFormatter,
    element_to_dict,
)
from nda_search.search.aggregator import search_terms
from nda_search.search.models import Element, MatchRecord, MatchType

HIGHLIGHT_STYLE = "bold yellow"

MATCH_TYPE_STYLES: dict[MatchType, str] = {
    MatchType.BOTH: "green",
    MatchType.NAME: "cyan",
    MatchType.DESCRIPTION: "magenta",
}


def highlight(text: str | None, query: str | None) -> Text:
    """Text with every occurrence of the search terms highlighted."""
    rendered = Text(text or "")
    if query:
        terms = sorted(search_terms(query), key=len, reverse=True)
        rendered.highlight_words(terms, style=HIGHLIGHT_STYLE, case_sensitive=False)
    return rendered


class RichFormatter(OutputFormatter):
    """Rich terminal output formatter.

    Renders elements as panels and match lists as tables, with the
    search terms highlighted in names and descriptions.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
        verbose: bool = False,
        color: bool = True,
        width: int | None = None,
    ) -> None:
        """Initialize rich formatter.

        Args:
            stream: Output stream.
            error_stream: Error stream.
            verbose: Whether to show verbose output.
            color: Emit colors when printing to a terminal.
            width: Console width (None for auto-detect).
        """
        super().__init__(stream, error_stream, verbose)
        self._color = color
        self._width = width
        self._console: Console | None = None
        self._error_console: Console | None = None

    @property
    def format_type(self) -> OutputFormat:
        return OutputFormat.RICH

    @property
    def console(self) -> Console:
        if self._console is None:
            self._console = Console(
                file=self._stream, width=self._width, no_color=not self._color
            )
        return self._console

    @property
    def error_console(self) -> Console:
        if self._error_console is None:
            self._error_console = Console(
                file=self._error_stream,
                width=self._width,
                stderr=True,
                no_color=not self._color,
            )
        return self._error_console

    def _render(self, renderable: RenderableType) -> str:
        """Render to a string without terminal control codes."""
        string_io = StringIO()
        temp_console = Console(file=string_io, width=self._width, force_terminal=False)
        temp_console.print(renderable)
        return string_io.getvalue().rstrip()

    # Renderable builders

    def _data_renderable(self, data: OutputData) -> RenderableType:
        if not data.success and data.error:
            error_text = Text(f"Error: {data.error}", style="bold red")
            if data.title:
                return Panel(error_text, title=data.title, border_style="red")
            return error_text

        content: RenderableType
        if isinstance(data.content, str):
            content = Text(data.content)
        elif isinstance(data.content, list):
            content = self._list_table(data.content)
        else:
            content = self._key_value_table(data.content)

        if self._verbose and data.metadata:
            meta = Table(show_header=False, box=None)
            meta.add_column("Key", style="dim")
            meta.add_column("Value", style="dim")
            for key, value in data.metadata.items():
                meta.add_row(str(key), str(value))
            container = Table.grid()
            container.add_row(content)
            container.add_row(meta)
            content = container

        if data.title:
            return Panel(content, title=data.title)
        return content

    def _list_table(self, items: list[Any]) -> Table:
        table = Table(show_header=False, box=None)
        table.add_column("Item")
        for item in items:
            table.add_row(f"• {item}")
        return table

    def _key_value_table(
        self, content: dict[str, Any], query: str | None = None
    ) -> Table:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Key", style="bold cyan")
        table.add_column("Value")
        for key, value in content.items():
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value)
            if key in ("name", "description"):
                table.add_row(key, highlight(str(value), query))
            else:
                table.add_row(key, str(value))
        return table

    def _table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str] | None = None,
        title: str | None = None,
    ) -> Table:
        if columns is None:
            columns = list(rows[0].keys()) if rows else []
        table = Table(title=title)
        for col in columns:
            table.add_column(col, style="cyan")
        for row in rows:
            table.add_row(*[str(row.get(col, "")) for col in columns])
        return table

    def _element_panel(self, element: Element, query: str | None) -> Panel:
        return Panel(
            self._key_value_table(element_to_dict(element), query),
            title=highlight(element.name, query),
        )

    def _match_table(self, matches: Sequence[MatchRecord], query: str) -> Table:
        table = Table(title=f'{len(matches)} elements matching "{query}"')
        table.add_column("#", justify="right", style="dim")
        table.add_column("Name", style="bold")
        table.add_column("Type")
        table.add_column("Match")
        table.add_column("Score", justify="right")
        table.add_column("Structure", style="dim")
        table.add_column("Description")
        for rank, record in enumerate(matches, 1):
            table.add_row(
                str(rank),
                highlight(record.name, query),
                record.element.type,
                Text(
                    record.match_type.value,
                    style=MATCH_TYPE_STYLES[record.match_type],
                ),
                f"{record.relevance_score:.1f}",
                record.source_structure,
                highlight(record.element.description, query),
            )
        return table

    # Formatting

    def format(self, data: OutputData) -> str:
        return self._render(self._data_renderable(data))

    def format_list(self, items: list[str], title: str | None = None) -> str:
        table = self._list_table(items)
        return self._render(Panel(table, title=title) if title else table)

    def format_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str] | None = None,
        title: str | None = None,
    ) -> str:
        if not rows:
            return ""
        return self._render(self._table(rows, columns, title))

    def format_element(self, element: Element, query: str | None = None) -> str:
        return self._render(self._element_panel(element, query))

    def format_matches(self, matches: Sequence[MatchRecord], query: str) -> str:
        return self._render(self._match_table(matches, query))

    # Printing goes straight to the console to keep styles

    def print(self, data: OutputData) -> None:
        console = self.console if data.success else self.error_console
        console.print(self._data_renderable(data))

    def print_element(self, element: Element, query: str | None = None) -> None:
        self.console.print(self._element_panel(element, query))

    def print_matches(self, matches: Sequence[MatchRecord], query: str) -> None:
        self.console.print(self._match_table(matches, query))

    def print_table(
        self,
        rows: list[dict[str, Any]],
        columns: list[str] | None = None,
        title: str | None = None,
    ) -> None:
        if rows:
            self.console.print(self._table(rows, columns, title))
