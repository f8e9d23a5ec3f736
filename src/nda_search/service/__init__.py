"""Clients for the NDA data dictionary service.

Usage:
    from nda_search.service import HttpDataDictionaryClient

    async with HttpDataDictionaryClient() as client:
        element = await client.get_element("subjectkey")
"""

from nda_search.service.base import DataDictionaryClient, FullTextHit
from nda_search.service.http import HttpDataDictionaryClient
from nda_search.service.mock import MockDataDictionaryClient

__all__ = [
    "DataDictionaryClient",
    "FullTextHit",
    "HttpDataDictionaryClient",
    "MockDataDictionaryClient",
]
