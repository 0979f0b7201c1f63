"""Crossref client for filtered works search."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from scholar_search.providers.clients.base import BaseHttpClient, ParseError

SELECT_FIELDS = "DOI,title,author,issued,container-title,URL"
JSON_HEADERS = {"Accept": "application/json"}


@dataclass
class CrossrefPage:
    items: List[Dict[str, Any]] = field(default_factory=list)
    total_results: Optional[int] = None


class CrossrefClient(BaseHttpClient):
    """Lightweight wrapper around the Crossref works API."""

    BASE_URL = "https://api.crossref.org"
    SOURCE = "Crossref"

    def search_works(
        self,
        query: str,
        *,
        rows: int = 50,
        filters: Optional[str] = None,
        mailto: Optional[str] = None,
    ) -> CrossrefPage:
        params: Dict[str, Any] = {"rows": rows, "select": SELECT_FIELDS}
        if query:
            params["query"] = query
        if filters:
            params["filter"] = filters
        if mailto:
            params["mailto"] = mailto

        response = self._request("GET", "/works", params=params, headers=JSON_HEADERS)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError(f"Crossref returned a non-JSON body: {exc}", source=self.source) from exc

        message = payload.get("message") if isinstance(payload, dict) else None
        if not isinstance(message, dict):
            raise ParseError("Crossref response is missing the 'message' object", source=self.source)

        items = message.get("items") or []
        if not isinstance(items, list):
            raise ParseError("Crossref 'items' is not a list", source=self.source)

        total = message.get("total-results")
        return CrossrefPage(
            items=[item for item in items if isinstance(item, dict)],
            total_results=total if isinstance(total, int) else None,
        )
