"""CLI layer for nda-search.

Built on Typer with Rich formatting support.

Usage:
    nda-search element subjectkey
    nda-search structures category:imaging
    nda-element "finger taps" --pick 1
"""

from nda_search.cli.app import app, main
from nda_search.cli.context import create_client, create_context
from nda_search.cli.options import FormatOption, NoHistoryOption, VerboseOption

__all__ = [
    # App
    "app",
    "main",
    # Context
    "create_client",
    "create_context",
    # Options
    "FormatOption",
    "NoHistoryOption",
    "VerboseOption",
]
