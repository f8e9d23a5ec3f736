"""Full-text element search using the service's search index."""

import asyncio
from dataclasses import replace
from typing import Any

from nda_search.commands.base import BaseCommand, CommandContext, CommandResult
from nda_search.commands.registry import CommandRegistry
from nda_search.exceptions import InvalidArgumentError, ServiceError
from nda_search.search.models import MatchType
from nda_search.service.base import DataDictionaryClient, FullTextHit
from nda_search.utils.logging import get_logger

logger = get_logger(__name__)

FULL_TEXT_COLUMNS = ["name", "type", "match", "score", "description", "structures"]

NO_DESCRIPTION = "No description available"


def classify_hit(hit: FullTextHit, query: str) -> MatchType:
    """``name`` when the query occurs in the element name, else ``description``.

    The index does not say which field matched; a hit whose name does
    not contain the query matched on its description or notes.
    """
    if query.strip().lower() in hit.name.lower():
        return MatchType.NAME
    return MatchType.DESCRIPTION


def hit_to_row(hit: FullTextHit, query: str) -> dict[str, Any]:
    return {
        "name": hit.name,
        "type": hit.type,
        "match": classify_hit(hit, query).value,
        "score": round(hit.score, 3),
        "description": hit.description,
        "structures": ", ".join(s.short_name for s in hit.structures),
    }


async def with_details(
    client: DataDictionaryClient, hit: FullTextHit
) -> FullTextHit | None:
    """Fill a hit's description, notes and type from its element record.

    Returns None when the element cannot be fetched.
    """
    try:
        element = await client.get_element(hit.name)
    except ServiceError as e:
        logger.debug("Dropping full-text hit %r: %s", hit.name, e)
        return None
    return replace(
        hit,
        type=element.type or hit.type,
        description=element.description or NO_DESCRIPTION,
        notes=element.notes,
    )


@CommandRegistry.register
class FullTextCommand(BaseCommand):
    """Search elements through the service's full-text index."""

    @property
    def name(self) -> str:
        return "fulltext"

    @property
    def description(self) -> str:
        return "Full-text search over data elements"

    @property
    def aliases(self) -> list[str]:
        return ["ft"]

    async def aexecute(self, ctx: CommandContext, **kwargs: Any) -> CommandResult:
        """Execute the full-text search.

        Every hit is completed with its element record; hits whose record
        cannot be fetched are left out.

        Args:
            ctx: Command context.
            **kwargs: Command arguments:
                - query: Search text
                - size: Maximum hits requested (default: config setting)

        Returns:
            CommandResult whose data is a list of table rows, best first.
        """
        query = (kwargs.get("query") or "").strip()
        if not query:
            raise InvalidArgumentError("No search query provided")

        size = kwargs.get("size") or ctx.config.search.full_text_size
        if size < 1:
            raise InvalidArgumentError(f"--size must be 1 or more, got {size}")

        found = await ctx.client.search_elements_full(query, size=size)
        detailed = await asyncio.gather(
            *(with_details(ctx.client, hit) for hit in found)
        )
        hits = sorted(
            (hit for hit in detailed if hit is not None),
            key=lambda h: h.score,
            reverse=True,
        )
        rows = [hit_to_row(hit, query) for hit in hits]
        return CommandResult.ok(
            rows, query=query, count=len(rows), dropped=len(found) - len(rows)
        )
