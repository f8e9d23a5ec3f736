"""Command implementations for nda-search.

Usage:
    from nda_search.commands import CommandRegistry

    cmd = CommandRegistry.get_instance("element")
    result = await cmd.aexecute(ctx, query="subjectkey")
"""

from nda_search.commands.base import BaseCommand, CommandContext, CommandResult
from nda_search.commands.registry import CommandRegistry

# Import commands to trigger registration
from nda_search.commands.element import ElementCommand
from nda_search.commands.fulltext import FullTextCommand
from nda_search.commands.structures import StructureCommand, StructuresCommand

__all__ = [
    # Base classes
    "BaseCommand",
    "CommandContext",
    "CommandResult",
    # Registry
    "CommandRegistry",
    # Commands
    "ElementCommand",
    "FullTextCommand",
    "StructureCommand",
    "StructuresCommand",
]
