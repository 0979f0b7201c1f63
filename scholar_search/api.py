"""High-level search API over the repository harvester and the registry.

This module exposes the :class:`SearchClient` facade used by the functional
helpers in :mod:`scholar_search.__init__`.

Example
-------
```python
from scholar_search.api import SearchClient
from scholar_search.core.models import SearchQuery

client = SearchClient()
result = client.search(SearchQuery(keyword="educación", date_from="2023-01-01"))
for record in result.records:
    print(record.source, record.title, record.url)
```
"""

from __future__ import annotations

from typing import Any, Optional

import requests

from .config import SearchSettings
from .core.models import SearchQuery, SearchResult
from .providers.clients.crossref import CrossrefClient
from .providers.clients.oai_pmh import OaiPmhClient
from .providers.proxy import build_proxy
from .services.harvester_service import RepositoryHarvesterService
from .services.registry_service import RegistrySearchService
from .services.search_service import AggregatedSearchService, SourceAdapter


class SearchClient:
    """Facade wiring settings, one HTTP session, both sources and the aggregator."""

    def __init__(
        self,
        settings: Optional[SearchSettings] = None,
        *,
        session: Optional[requests.Session] = None,
        harvester: Optional[SourceAdapter] = None,
        registry: Optional[SourceAdapter] = None,
        search_service: Optional[AggregatedSearchService] = None,
    ) -> None:
        self.settings = settings or SearchSettings()
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
        if self.settings.user_agent:
            session.headers["User-Agent"] = self.settings.user_agent
        self.session = session

        if harvester is None:
            oai_client = OaiPmhClient(
                session=self.session,
                base_url=self.settings.harvester_base_url,
                timeout=self.settings.timeout,
                proxy=build_proxy(self.settings.proxy_prefix, encode=self.settings.proxy_encode),
                max_attempts=self.settings.max_attempts,
                source=self.settings.harvester_label,
            )
            harvester = RepositoryHarvesterService(
                oai_client,
                source_label=self.settings.harvester_label,
                page_size=self.settings.page_size,
                metadata_prefix=self.settings.harvester_metadata_prefix,
                set_spec=self.settings.harvester_set,
                max_batches=self.settings.harvester_max_batches,
            )

        if registry is None:
            crossref_client = CrossrefClient(
                session=self.session,
                base_url=self.settings.registry_base_url,
                timeout=self.settings.timeout,
                max_attempts=self.settings.max_attempts,
                source=self.settings.registry_label,
            )
            registry = RegistrySearchService(
                crossref_client,
                source_label=self.settings.registry_label,
                prefixes=self.settings.registry_prefixes,
                rows=self.settings.registry_rows,
                mailto=self.settings.registry_mailto,
            )

        self.harvester = harvester
        self.registry = registry
        self._search_service = search_service or AggregatedSearchService(
            harvester=harvester,
            registry=registry,
            max_workers=self.settings.max_workers,
        )

    def search(self, query: Optional[SearchQuery] = None, **fields: Any) -> SearchResult:
        """Run ``query`` (or a query built from ``fields``) across enabled sources."""

        if query is None:
            query = SearchQuery(**fields)
        elif fields:
            raise TypeError("Pass either a SearchQuery or keyword fields, not both")
        return self._search_service.search(query)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
