"""URL indirection used to front upstream requests.

Browser deployments need a CORS-enabled relay in front of repositories that do
not send CORS headers; server-side callers usually need none. A proxy is any
callable mapping a fully-qualified URL to the URL that should be fetched.
"""

from __future__ import annotations

from typing import Callable, Optional
from urllib.parse import quote

Proxy = Callable[[str], str]


def identity_proxy(url: str) -> str:
    return url


class PrefixProxy:
    """Relay that expects the target URL appended to a fixed prefix."""

    def __init__(self, prefix: str, *, encode: bool = True) -> None:
        self.prefix = prefix
        self.encode = encode

    def __call__(self, url: str) -> str:
        target = quote(url, safe="") if self.encode else url
        return f"{self.prefix}{target}"

    def __repr__(self) -> str:
        return f"PrefixProxy(prefix={self.prefix!r}, encode={self.encode!r})"


def build_proxy(prefix: Optional[str], *, encode: bool = True) -> Proxy:
    if not prefix:
        return identity_proxy
    return PrefixProxy(prefix, encode=encode)


__all__ = ["PrefixProxy", "Proxy", "build_proxy", "identity_proxy"]
