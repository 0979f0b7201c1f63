from __future__ import annotations

from typing import Any, Optional, Sequence

DOI_RESOLVER = "https://doi.org/"
UNTITLED = "(untitled)"

# DOI registrant prefixes used by SciELO journals.
DEFAULT_PREFIXES = ("10.1590", "10.4025", "10.11606", "10.18634", "10.17533")


def is_doi_like(value: Optional[str]) -> bool:
    """Return ``True`` for bare DOIs such as ``10.1590/abc``."""

    return bool(value) and value.startswith("10.")


def is_url_like(value: Optional[str]) -> bool:
    return bool(value) and value.startswith("http")


def doi_to_url(doi: Optional[str]) -> str:
    """Build the resolver link for a DOI, or ``""`` when there is none."""

    if not doi:
        return ""
    return f"{DOI_RESOLVER}{doi}"


def pick_record_id(url: str, doi: str, title: str) -> str:
    """Choose a record key by precedence: landing URL, DOI, then title."""

    return url or doi or title


def format_date_parts(parts: Optional[Sequence[Any]]) -> str:
    """Assemble a ``YYYY-MM-DD`` string from a partial ``(year, month, day)`` tuple.

    Missing month or day default to ``1``. Crossref reports unknown dates as
    ``[[null]]``, which yields an empty string like an absent date.
    """

    if not parts:
        return ""

    year = parts[0]
    if year is None or year == "":
        return ""

    month = parts[1] if len(parts) > 1 and parts[1] else 1
    day = parts[2] if len(parts) > 2 and parts[2] else 1
    return f"{year}-{int(month):02d}-{int(day):02d}"
