from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Protocol, Union

from scholar_search.core.models import SearchQuery, SearchResult, SourceError, SourcePage
from scholar_search.providers.clients.base import ClientError

logger = logging.getLogger(__name__)


class SourceAdapter(Protocol):
    @property
    def name(self) -> str: ...

    def search(self, query: SearchQuery) -> SourcePage: ...


Outcome = Union[SourcePage, SourceError]


class AggregatedSearchService:
    """Fan a query out to the enabled sources and merge what comes back.

    Every adapter runs concurrently and its outcome is captured on its own: a
    failing source contributes nothing to the records or the total and never
    prevents the other source from finishing. Records keep invocation order
    (harvester first, then registry) and each source's internal order.

    Failures are reported in ``SearchResult.source_errors`` rather than
    raised, so callers that only read ``records``/``total`` see partial
    results silently and an empty result when everything failed.
    """

    def __init__(
        self,
        *,
        harvester: Optional[SourceAdapter] = None,
        registry: Optional[SourceAdapter] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.harvester = harvester
        self.registry = registry
        self.max_workers = max_workers

    def search(self, query: SearchQuery) -> SearchResult:
        adapters = self._enabled_adapters(query)
        if not adapters:
            logger.debug("No source enabled for query %r", query.keyword)
            return SearchResult()

        outcomes = self._run_all(adapters, query)

        records = []
        total = 0
        errors: List[SourceError] = []
        for outcome in outcomes:
            if isinstance(outcome, SourceError):
                errors.append(outcome)
                continue
            records.extend(outcome.records)
            total += outcome.total

        return SearchResult(
            records=tuple(records),
            total=total,
            source_errors=tuple(errors),
            attempted=len(adapters),
        )

    def _enabled_adapters(self, query: SearchQuery) -> List[SourceAdapter]:
        adapters: List[SourceAdapter] = []
        if query.use_harvester and self.harvester is not None:
            adapters.append(self.harvester)
        if query.use_registry and self.registry is not None:
            adapters.append(self.registry)
        return adapters

    def _run_all(self, adapters: List[SourceAdapter], query: SearchQuery) -> List[Outcome]:
        workers = max(1, min(self.max_workers or len(adapters), len(adapters)))
        ordered: Dict[int, Outcome] = {}

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_map = {
                executor.submit(adapter.search, query): (idx, adapter)
                for idx, adapter in enumerate(adapters)
            }
            for future in as_completed(future_map):
                idx, adapter = future_map[future]
                ordered[idx] = self._capture(future, adapter)

        return [ordered[idx] for idx in range(len(adapters))]

    def _capture(self, future: Future[SourcePage], adapter: SourceAdapter) -> Outcome:
        name = adapter.name
        try:
            return future.result()
        except ClientError as exc:
            logger.warning("%s search failed: %s", name, exc)
            return SourceError(source=name, message=str(exc))
        except Exception as exc:
            logger.exception("%s search raised an unexpected error", name)
            return SourceError(source=name, message=str(exc) or type(exc).__name__)
