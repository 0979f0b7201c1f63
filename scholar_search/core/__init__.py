"""Core models and identifier helpers shared by every source adapter."""

from .identifiers import (
    DEFAULT_PREFIXES,
    DOI_RESOLVER,
    UNTITLED,
    doi_to_url,
    format_date_parts,
    is_doi_like,
    is_url_like,
    pick_record_id,
)
from .models import BibliographicRecord, SearchQuery, SearchResult, SourceError, SourcePage

__all__ = [
    "BibliographicRecord",
    "DEFAULT_PREFIXES",
    "DOI_RESOLVER",
    "SearchQuery",
    "SearchResult",
    "SourceError",
    "SourcePage",
    "UNTITLED",
    "doi_to_url",
    "format_date_parts",
    "is_doi_like",
    "is_url_like",
    "pick_record_id",
]
