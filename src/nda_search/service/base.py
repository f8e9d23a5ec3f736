"""Data dictionary client interface and shared result types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from nda_search.search.models import Element, StructureSummary


@dataclass(frozen=True)
class FullTextHit:
    """A hit of the service's full-text element search.

    The index returns names and scores only; ``description`` and ``notes``
    stay empty until the element record is fetched.
    """

    name: str
    type: str
    score: float
    structures: tuple[StructureSummary, ...] = ()
    description: str = ""
    notes: str | None = None


class DataDictionaryClient(ABC):
    """Abstract base class for data dictionary clients.

    All lookups are coroutines; the search engine awaits them from a
    single event loop. Implementations map service payloads to the core
    model before returning.
    """

    @abstractmethod
    async def get_element(self, name: str) -> Element:
        """Fetch a data element by exact name.

        Raises:
            ElementNotFoundError: If no element has that name.
            ServiceStatusError: On any other non-success status.
            ServiceError: On transport or payload failures.
        """
        ...

    @abstractmethod
    async def search_structures(self, term: str) -> list[StructureSummary]:
        """Keyword search over data structures.

        Raises:
            ServiceError: If the structure list cannot be fetched.
        """
        ...

    @abstractmethod
    async def list_category(self, category: str) -> list[StructureSummary]:
        """List the data structures of a category.

        Raises:
            ServiceError: If the structure list cannot be fetched.
        """
        ...

    @abstractmethod
    async def get_structure(self, short_name: str) -> list[Element]:
        """Fetch a structure's elements, ordered by position.

        Raises:
            ServiceError: If the structure cannot be fetched.
        """
        ...

    @abstractmethod
    async def search_elements_full(
        self, query: str, size: int = 10000
    ) -> list[FullTextHit]:
        """Run the service's full-text element search.

        Returns:
            Hits ordered by the service's relevance score, best first.

        Raises:
            ServiceError: If the search fails.
        """
        ...

    async def aclose(self) -> None:
        """Release transport resources."""

    async def __aenter__(self) -> "DataDictionaryClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
