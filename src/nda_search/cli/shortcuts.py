"""Shortcut entry points for standalone commands.

Defined in pyproject.toml under [project.scripts]:
    nda-element = "nda_search.cli.shortcuts:element_main"
"""

import sys


def element_main() -> None:
    """Entry point for the nda-element command."""
    from nda_search.cli.app import app

    # Rewrite sys.argv to inject the 'element' command
    sys.argv = ["nda-search", "element"] + sys.argv[1:]
    app()
