"""
Applicability checks for requests and responses, and request filters.
"""
from typing import Any, Callable, Iterable

import httpx

from .parser import parse_cache_control


class AllowAllRequestFilter:
    """Accepts every request."""

    def matches(self, request: httpx.Request) -> bool:
        return True

    def __repr__(self) -> str:
        return "AllowAllRequestFilter()"


class HostRequestFilter:
    """Accepts requests to the given hosts (case-insensitive)."""

    def __init__(self, hosts: Iterable[str]) -> None:
        self._hosts = frozenset(h.lower() for h in hosts)

    def matches(self, request: httpx.Request) -> bool:
        return request.url.host.lower() in self._hosts


class PredicateRequestFilter:
    """Adapts a plain ``fn(request) -> bool`` predicate."""

    def __init__(self, predicate: Callable[[httpx.Request], bool]) -> None:
        self._predicate = predicate

    def matches(self, request: httpx.Request) -> bool:
        return bool(self._predicate(request))


def is_request_cacheable(request: httpx.Request, config: Any) -> bool:
    """
    Check if a request may be served from, and stored into, the cache.

    Only plain GETs qualify: a stored full body cannot answer a Range request.
    """
    return (
        request.method.upper() == "GET"
        and "range" not in request.headers
        and config.request_filter.matches(request)
    )


def is_response_cacheable(response: httpx.Response) -> bool:
    """
    Check if a response should be stored.

    Only 200 OK without a no-cache directive is stored. Other Cache-Control
    directives are not inspected.
    """
    if response.status_code != 200:
        return False
    cache_control = response.headers.get("cache-control")
    if cache_control is None:
        return True
    return not parse_cache_control(cache_control).no_cache
