"""Upstream providers: HTTP clients and request indirection."""

from .proxy import PrefixProxy, Proxy, build_proxy, identity_proxy

__all__ = ["PrefixProxy", "Proxy", "build_proxy", "identity_proxy"]
