"""Data structure search and detail commands."""

from typing import Any

from nda_search.commands.base import BaseCommand, CommandContext, CommandResult
from nda_search.commands.registry import CommandRegistry
from nda_search.exceptions import InvalidArgumentError
from nda_search.search.structures import parse_structure_query, rank_structures


@CommandRegistry.register
class StructuresCommand(BaseCommand):
    """Search data structures by keyword, or list a category.

    ``category:NAME`` lists the structures of a category in service
    order; any other query is a keyword search ranked by short name
    and title.
    """

    @property
    def name(self) -> str:
        return "structures"

    @property
    def description(self) -> str:
        return "Search data structures by keyword or category"

    @property
    def aliases(self) -> list[str]:
        return ["ds"]

    async def aexecute(self, ctx: CommandContext, **kwargs: Any) -> CommandResult:
        parsed = parse_structure_query(kwargs.get("query") or "")
        if not parsed.term:
            raise InvalidArgumentError("No structure search term provided")

        if parsed.is_category:
            structures = await ctx.client.list_category(parsed.term)
        else:
            structures = rank_structures(
                await ctx.client.search_structures(parsed.term), parsed.term
            )

        return CommandResult.ok(
            structures,
            term=parsed.term,
            category=parsed.is_category,
            count=len(structures),
        )


@CommandRegistry.register
class StructureCommand(BaseCommand):
    """List the elements of one data structure by position."""

    @property
    def name(self) -> str:
        return "structure"

    @property
    def description(self) -> str:
        return "List a data structure's elements"

    async def aexecute(self, ctx: CommandContext, **kwargs: Any) -> CommandResult:
        short_name = (kwargs.get("short_name") or "").strip()
        if not short_name:
            raise InvalidArgumentError("No structure short name provided")

        elements = await ctx.client.get_structure(short_name)
        return CommandResult.ok(
            elements, short_name=short_name, count=len(elements)
        )
