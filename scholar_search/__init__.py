"""Aggregated academic search over an OAI-PMH repository and a DOI registry."""

from __future__ import annotations

import atexit
from datetime import date
from typing import TYPE_CHECKING, Optional, Union

from .core.models import BibliographicRecord, SearchQuery, SearchResult, SourceError, SourcePage

if TYPE_CHECKING:
    from .api import SearchClient

_default_client: Optional["SearchClient"] = None
_close_callback_registered = False


def get_default_client() -> "SearchClient":
    """Return the default ``SearchClient`` instance, creating it lazily."""

    global _default_client, _close_callback_registered
    if _default_client is None:
        from .api import SearchClient

        _default_client = SearchClient()
    if not _close_callback_registered:
        atexit.register(_default_client.close)
        _close_callback_registered = True
    return _default_client


def search(
    keyword: str = "",
    *,
    date_from: Union[str, date, None] = None,
    date_to: Union[str, date, None] = None,
    use_harvester: bool = True,
    use_registry: bool = True,
    page: int = 1,
) -> SearchResult:
    """Search both sources and return the merged records and combined total.

    A source that fails contributes nothing; inspect ``source_errors`` on the
    result to see which one.
    """

    query = SearchQuery(
        keyword=keyword,
        date_from=date_from,
        date_to=date_to,
        use_harvester=use_harvester,
        use_registry=use_registry,
        page=page,
    )
    return get_default_client().search(query)


__all__ = [
    "BibliographicRecord",
    "SearchQuery",
    "SearchResult",
    "SourceError",
    "SourcePage",
    "get_default_client",
    "search",
]
