from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from scholar_search.core.identifiers import (
    DEFAULT_PREFIXES,
    UNTITLED,
    doi_to_url,
    format_date_parts,
    pick_record_id,
)
from scholar_search.core.models import BibliographicRecord, SearchQuery, SourcePage
from scholar_search.providers.clients.crossref import CrossrefClient

logger = logging.getLogger(__name__)


class RegistrySearchService:
    """Search a DOI registry restricted to a catalog's registrant prefixes.

    Crossref has no notion of "SciELO", but SciELO journals register their
    DOIs under a small set of prefixes, so filtering on those prefixes is a
    practical stand-in for a catalog search.
    """

    def __init__(
        self,
        client: Optional[CrossrefClient] = None,
        *,
        source_label: str = "SciELO (via Crossref)",
        prefixes: Sequence[str] = DEFAULT_PREFIXES,
        rows: int = 50,
        mailto: Optional[str] = None,
    ) -> None:
        self.client = client or CrossrefClient()
        self.source_label = source_label
        self.prefixes = tuple(prefixes)
        self.rows = rows
        self.mailto = mailto

    @property
    def name(self) -> str:
        return self.source_label

    def search(self, query: SearchQuery) -> SourcePage:
        return self.search_works(
            query.keyword,
            date_from=query.date_from,
            date_to=query.date_to,
            rows=query.rows,
        )

    def search_works(
        self,
        keyword: str,
        *,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        rows: Optional[int] = None,
    ) -> SourcePage:
        page = self.client.search_works(
            keyword,
            rows=rows or self.rows,
            filters=self.build_filter(date_from=date_from, date_to=date_to) or None,
            mailto=self.mailto,
        )
        records = [self._to_record(item) for item in page.items]
        total = page.total_results if page.total_results is not None else len(records)
        logger.info("%s returned=%s total=%s", self.source_label, len(records), total)
        return SourcePage(source=self.source_label, records=tuple(records), total=total)

    def build_filter(self, *, date_from: Optional[str], date_to: Optional[str]) -> str:
        """Combine the date window and prefix allow-list into one filter value.

        Distinct Crossref filter names are ANDed while repeated ``prefix``
        entries are ORed, which is exactly "in the window and in the catalog".
        """

        date_filter = ",".join(
            part
            for part in (
                f"from-pub-date:{date_from}" if date_from else "",
                f"until-pub-date:{date_to}" if date_to else "",
            )
            if part
        )
        prefix_filter = ",".join(f"prefix:{prefix}" for prefix in self.prefixes)
        if date_filter and prefix_filter:
            return f"{date_filter},{prefix_filter}"
        return date_filter or prefix_filter

    def _to_record(self, work: Dict[str, Any]) -> BibliographicRecord:
        title = self._extract_title(work.get("title"))
        doi = work.get("DOI") or ""
        url = work.get("URL") or doi_to_url(doi)
        return BibliographicRecord(
            id=pick_record_id(url, doi, title),
            title=title,
            source=self.source_label,
            authors=tuple(self._extract_authors(work.get("author") or [])),
            date=self._extract_date(work.get("issued")),
            doi=doi,
            url=url,
            journal=self._first(work.get("container-title")),
        )

    def _extract_title(self, titles: Any) -> str:
        if isinstance(titles, list):
            return self._first(titles) or UNTITLED
        if isinstance(titles, str) and titles:
            return titles
        return UNTITLED

    def _extract_authors(self, authors: List[Any]) -> List[str]:
        extracted: List[str] = []
        for author in authors:
            if not isinstance(author, dict):
                continue
            name = " ".join(part for part in (author.get("given"), author.get("family")) if part)
            if name:
                extracted.append(name)
        return extracted

    def _extract_date(self, issued: Any) -> str:
        if not isinstance(issued, dict):
            return ""
        parts = issued.get("date-parts")
        if isinstance(parts, list) and parts and isinstance(parts[0], list):
            return format_date_parts(parts[0])
        return ""

    def _first(self, values: Any) -> str:
        if isinstance(values, list) and values and values[0]:
            return str(values[0])
        return ""
