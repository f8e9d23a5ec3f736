"""Shared CLI options for nda-search commands."""

from typing import Annotated

import typer

from nda_search.config.schema import OutputFormat

FormatOption = Annotated[
    OutputFormat | None,
    typer.Option(
        "--format",
        "-f",
        help="Output format (rich, plain, json, jsonl). Defaults to config setting.",
        case_sensitive=False,
    ),
]

VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Show debug logging and untruncated output.",
    ),
]

NoHistoryOption = Annotated[
    bool,
    typer.Option(
        "--no-history",
        help="Do not record this search in the recent-search history.",
    ),
]


def get_output_format(
    format_choice: OutputFormat | None, default: OutputFormat | str = "rich"
) -> OutputFormat:
    """Resolve the CLI format choice against the configured default.

    The configured default may be an enum member or its string value
    depending on how the config was built.
    """
    if format_choice is not None:
        return OutputFormat(format_choice)
    return OutputFormat(getattr(default, "value", default))
