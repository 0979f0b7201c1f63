from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class BibliographicRecord:
    """Normalized representation of a work returned by any source adapter.

    ``source`` is a fixed provenance label per adapter (e.g. ``"Redalyc"``).
    ``id`` is a best-effort key (URL, then DOI, then title) and can collide when
    two untitled or DOI-less works share a title.
    """

    id: str
    title: str
    source: str
    authors: Tuple[str, ...] = ()
    subjects: Tuple[str, ...] = ()
    date: str = ""
    doi: str = ""
    url: str = ""
    journal: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "authors": list(self.authors),
            "subjects": list(self.subjects),
            "date": self.date,
            "doi": self.doi,
            "url": self.url,
            "journal": self.journal,
            "source": self.source,
        }


DateInput = Union[str, date, None]

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _coerce_date(value: DateInput, name: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    cleaned = value.strip()
    if not cleaned:
        return None
    message = f"{name} must use ISO format (YYYY-MM-DD), got {value!r}"
    if not _ISO_DATE.fullmatch(cleaned):
        raise ValueError(message)
    try:
        return date.fromisoformat(cleaned).isoformat()
    except ValueError as exc:
        raise ValueError(message) from exc


@dataclass(frozen=True)
class SearchQuery:
    """A user-initiated search across the enabled sources."""

    keyword: str = ""
    date_from: DateInput = None
    date_to: DateInput = None
    use_harvester: bool = True
    use_registry: bool = True
    page: int = 1
    page_size: Optional[int] = None
    rows: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "keyword", (self.keyword or "").strip())
        object.__setattr__(self, "date_from", _coerce_date(self.date_from, "date_from"))
        object.__setattr__(self, "date_to", _coerce_date(self.date_to, "date_to"))

        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.page_size is not None and self.page_size < 1:
            raise ValueError("page_size must be >= 1")
        if self.rows is not None and self.rows < 1:
            raise ValueError("rows must be >= 1")

    @property
    def can_search(self) -> bool:
        """Whether a caller should allow this query to be dispatched.

        The registry has no useful answer for an empty keyword, while the
        harvester can still list everything in the date window.
        """

        if not (self.use_harvester or self.use_registry):
            return False
        return bool(self.keyword) or self.use_harvester


@dataclass(frozen=True)
class SourcePage:
    """Records and reported total from a single adapter call."""

    source: str
    records: Tuple[BibliographicRecord, ...] = ()
    total: int = 0


@dataclass(frozen=True)
class SourceError:
    source: str
    message: str


@dataclass(frozen=True)
class SearchResult:
    """Merged output of one aggregated search."""

    records: Tuple[BibliographicRecord, ...] = ()
    total: int = 0
    source_errors: Tuple[SourceError, ...] = field(default_factory=tuple)
    attempted: int = 0

    @property
    def failed(self) -> bool:
        """True when sources were queried and every one of them failed."""

        return self.attempted > 0 and len(self.source_errors) == self.attempted

    def to_dict(self) -> Dict[str, Any]:
        return {
            "records": [record.to_dict() for record in self.records],
            "total": self.total,
            "source_errors": [
                {"source": error.source, "message": error.message}
                for error in self.source_errors
            ],
        }


__all__ = [
    "BibliographicRecord",
    "SearchQuery",
    "SearchResult",
    "SourceError",
    "SourcePage",
]
