"""HTTP clients used by the source adapters."""

from .base import (
    BaseHttpClient,
    ClientError,
    ParseError,
    RateLimitedError,
    RetrievalError,
    TransportError,
)
from .crossref import CrossrefClient, CrossrefPage
from .oai_pmh import OaiPmhClient

__all__ = [
    "BaseHttpClient",
    "ClientError",
    "CrossrefClient",
    "CrossrefPage",
    "OaiPmhClient",
    "ParseError",
    "RateLimitedError",
    "RetrievalError",
    "TransportError",
]
