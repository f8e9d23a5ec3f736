"""HTTP client for the NDA data dictionary service."""

from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from nda_search.config.defaults import DEFAULT_BASE_URL, DEFAULT_SEARCH_URL
from nda_search.exceptions import (
    ElementNotFoundError,
    ServiceConnectionError,
    ServiceResponseError,
    ServiceStatusError,
)
from nda_search.search.models import Element, StructureSummary
from nda_search.service.base import DataDictionaryClient, FullTextHit
from nda_search.service.models import (
    DataElementDTO,
    FullTextResponseDTO,
    StructureDetailDTO,
    StructureSummaryDTO,
)
from nda_search.utils.logging import get_logger, timed

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

_STRUCTURE_LIST = TypeAdapter(list[StructureSummaryDTO])


class HttpDataDictionaryClient(DataDictionaryClient):
    """Data dictionary client backed by ``httpx.AsyncClient``.

    One client instance holds one connection pool; close it with
    ``aclose()`` or use it as an async context manager.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        search_url: str = DEFAULT_SEARCH_URL,
        timeout: float = 30.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Root of the data dictionary API.
            search_url: Root of the full-text search API.
            timeout: Per-request timeout in seconds.
            transport: Optional transport override (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.search_url = search_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            with timed(logger, "Service request", method=method, url=url):
                return await self._client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ServiceConnectionError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _check_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        raise ServiceStatusError(
            f"{response.request.method} {response.request.url} "
            f"returned {response.status_code}",
            status_code=response.status_code,
        )

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ServiceResponseError(
                f"Invalid JSON from {response.request.url}: {e}"
            ) from e

    def _parse(self, response: httpx.Response, model: type[M]) -> M:
        try:
            return model.model_validate(self._json(response))
        except ValidationError as e:
            raise ServiceResponseError(
                f"Unexpected payload from {response.request.url}: {e}"
            ) from e

    def _parse_structures(self, response: httpx.Response) -> list[StructureSummary]:
        try:
            entries = _STRUCTURE_LIST.validate_python(self._json(response))
        except ValidationError as e:
            raise ServiceResponseError(
                f"Unexpected structure list from {response.request.url}: {e}"
            ) from e
        return [entry.to_summary() for entry in entries]

    async def get_element(self, name: str) -> Element:
        url = f"{self.base_url}/dataelement/{quote(name, safe='')}"
        response = await self._request("GET", url)
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.debug("No exact element named %r", name)
            raise ElementNotFoundError(name)
        self._check_status(response)
        return self._parse(response, DataElementDTO).to_element()

    async def search_structures(self, term: str) -> list[StructureSummary]:
        response = await self._request(
            "GET", f"{self.base_url}/v2/datastructure", params={"searchTerm": term}
        )
        self._check_status(response)
        return self._parse_structures(response)

    async def list_category(self, category: str) -> list[StructureSummary]:
        response = await self._request(
            "GET", f"{self.base_url}/datastructure", params={"category": category}
        )
        self._check_status(response)
        return self._parse_structures(response)

    async def get_structure(self, short_name: str) -> list[Element]:
        url = f"{self.base_url}/datastructure/{quote(short_name, safe='')}"
        response = await self._request("GET", url)
        self._check_status(response)
        return self._parse(response, StructureDetailDTO).to_elements(short_name)

    async def search_elements_full(
        self, query: str, size: int = 10000
    ) -> list[FullTextHit]:
        response = await self._request(
            "POST",
            f"{self.search_url}/dataelement/full",
            params={"size": size, "highlight": "true"},
            content=query.encode("utf-8"),
            headers={"Content-Type": "text/plain"},
        )
        self._check_status(response)
        payload = self._parse(response, FullTextResponseDTO)

        hits = [
            FullTextHit(
                name=hit.name,
                type=hit.type or "String",
                score=hit.score,
                structures=tuple(
                    StructureSummary(
                        short_name=ref.short_name,
                        title=ref.title or "",
                        category=ref.category or "",
                    )
                    for ref in hit.data_structures
                ),
            )
            for hit in payload.datadict.results
        ]
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits

    async def aclose(self) -> None:
        await self._client.aclose()

    def __repr__(self) -> str:
        return f"HttpDataDictionaryClient(base_url={self.base_url!r})"
