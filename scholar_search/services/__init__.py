"""Service layer: source adapters and the aggregator."""

from .harvester_service import RepositoryHarvesterService
from .registry_service import RegistrySearchService
from .search_service import AggregatedSearchService, SourceAdapter

__all__ = [
    "AggregatedSearchService",
    "RegistrySearchService",
    "RepositoryHarvesterService",
    "SourceAdapter",
]
