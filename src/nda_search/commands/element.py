"""Find a data element by exact name or fuzzy search."""

from typing import Any

from nda_search.commands.base import BaseCommand, CommandContext, CommandResult
from nda_search.commands.registry import CommandRegistry
from nda_search.exceptions import InvalidArgumentError
from nda_search.search.models import (
    ExactHit,
    Failed,
    NoMatch,
    PartialResult,
    SearchState,
)
from nda_search.search.orchestrator import StateListener


def result_count(state: SearchState) -> int:
    """Number of elements a terminal state carries."""
    if isinstance(state, ExactHit):
        return 1
    if isinstance(state, PartialResult):
        return len(state.matches)
    return 0


@CommandRegistry.register
class ElementCommand(BaseCommand):
    """Search for a data element.

    Tries the exact element name first; on a miss, searches element
    names and descriptions across the candidate data structures and
    returns a ranked list.
    """

    @property
    def name(self) -> str:
        return "element"

    @property
    def description(self) -> str:
        return "Find a data element by name or description words"

    @property
    def aliases(self) -> list[str]:
        return ["el", "search"]

    async def aexecute(self, ctx: CommandContext, **kwargs: Any) -> CommandResult:
        """Execute the element search.

        Args:
            ctx: Command context.
            **kwargs: Command arguments:
                - query: Element name or description words
                - pick: 1-based rank of a fuzzy result to open
                - listener: Called with every published search state

        Returns:
            CommandResult whose data is the terminal SearchState.

        Raises:
            InvalidQueryError: If the query is empty.
            InvalidArgumentError: If ``pick`` is out of range.
        """
        query: str = kwargs.get("query") or ""
        pick: int | None = kwargs.get("pick")
        listener: StateListener | None = kwargs.get("listener")

        if pick is not None and pick < 1:
            raise InvalidArgumentError(f"--pick must be 1 or more, got {pick}")

        orchestrator = ctx.create_orchestrator()
        if listener is not None:
            orchestrator.add_listener(listener)

        state = await orchestrator.search(query)

        if pick is not None and isinstance(state, PartialResult):
            if pick > len(state.matches):
                raise InvalidArgumentError(
                    f"--pick {pick} is out of range: "
                    f"{len(state.matches)} results for {state.query!r}"
                )
            state = await orchestrator.select_result(state.matches[pick - 1])

        recorded = (
            ctx.record_history
            and not isinstance(state, Failed)
            and ctx.history.most_recent == state.query
        )
        metadata = {
            "query": state.query,
            "outcome": state.kind.value,
            "result_count": result_count(state),
            "recorded": recorded,
        }

        if isinstance(state, Failed):
            return CommandResult.fail(state.reason, **metadata)
        if isinstance(state, NoMatch):
            metadata["suggestions"] = list(state.suggestions)
        return CommandResult.ok(state, **metadata)
