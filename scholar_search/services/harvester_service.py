from __future__ import annotations

import logging
import re
from typing import List, Optional

from lxml import etree

from scholar_search.core.models import BibliographicRecord, SearchQuery, SourcePage
from scholar_search.parsing.oai_dc import OaiBatch, parse_list_records
from scholar_search.providers.clients.base import ParseError, RetrievalError
from scholar_search.providers.clients.oai_pmh import OaiPmhClient

logger = logging.getLogger(__name__)

NO_RECORDS_MATCH = "noRecordsMatch"


class RepositoryHarvesterService:
    """Keyword search over an OAI-PMH repository.

    OAI-PMH only lists records by date window, so the keyword is applied
    client-side as a literal, case-insensitive match on the title or any
    subject, and pagination is done in memory over the filtered list.
    """

    def __init__(
        self,
        client: Optional[OaiPmhClient] = None,
        *,
        source_label: str = "Redalyc",
        page_size: int = 50,
        metadata_prefix: str = "oai_dc",
        set_spec: Optional[str] = None,
        max_batches: int = 1,
    ) -> None:
        self.client = client or OaiPmhClient()
        self.source_label = source_label
        self.page_size = page_size
        self.metadata_prefix = metadata_prefix
        self.set_spec = set_spec
        self.max_batches = max(1, max_batches)

    @property
    def name(self) -> str:
        return self.source_label

    def search(self, query: SearchQuery) -> SourcePage:
        return self.harvest(
            query.keyword,
            date_from=query.date_from,
            date_to=query.date_to,
            page=query.page,
            page_size=query.page_size,
        )

    def harvest(
        self,
        keyword: str,
        *,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> SourcePage:
        size = page_size or self.page_size
        if page < 1 or size < 1:
            raise ValueError("page and page_size must be >= 1")

        records = self._fetch_records(date_from=date_from, date_to=date_to)
        matched = self.filter_records(records, keyword)

        start = (page - 1) * size
        logger.info(
            "%s harvest fetched=%s matched=%s page=%s",
            self.source_label,
            len(records),
            len(matched),
            page,
        )
        return SourcePage(
            source=self.source_label,
            records=tuple(matched[start : start + size]),
            total=len(matched),
        )

    @staticmethod
    def filter_records(
        records: List[BibliographicRecord], keyword: str
    ) -> List[BibliographicRecord]:
        if not keyword:
            return list(records)

        pattern = re.compile(re.escape(keyword), re.IGNORECASE)
        return [
            record
            for record in records
            if pattern.search(record.title)
            or any(pattern.search(subject) for subject in record.subjects)
        ]

    def _fetch_records(
        self, *, date_from: Optional[str], date_to: Optional[str]
    ) -> List[BibliographicRecord]:
        records: List[BibliographicRecord] = []
        token: Optional[str] = None
        for _ in range(self.max_batches):
            batch = self._fetch_batch(date_from=date_from, date_to=date_to, resumption_token=token)
            records.extend(batch.records)
            token = batch.resumption_token
            if not token:
                break
        return records

    def _fetch_batch(
        self,
        *,
        date_from: Optional[str],
        date_to: Optional[str],
        resumption_token: Optional[str],
    ) -> OaiBatch:
        body = self.client.list_records(
            from_date=date_from,
            until_date=date_to,
            metadata_prefix=self.metadata_prefix,
            set_spec=self.set_spec,
            resumption_token=resumption_token,
        )
        try:
            batch = parse_list_records(body, source_label=self.source_label)
        except etree.XMLSyntaxError as exc:
            raise ParseError(
                f"Malformed OAI-PMH response from {self.source_label}: {exc}",
                source=self.source_label,
            ) from exc

        if batch.error_code == NO_RECORDS_MATCH:
            return OaiBatch()
        if batch.error_code:
            raise RetrievalError(
                f"Error querying {self.source_label} OAI-PMH: "
                f"{batch.error_code}: {batch.error_message}",
                source=self.source_label,
            )
        return batch
