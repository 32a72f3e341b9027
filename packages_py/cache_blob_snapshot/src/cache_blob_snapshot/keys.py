"""
Blob key derivation strategies.

A key groups snapshots by origin host first and disambiguates by path and
query, e.g. ``api.example.com/v1/items?page=2``. Selectors are pluggable so
callers can strip volatile query parameters or add a time bucket.
"""
import time
from typing import Any, Callable, Iterable, Optional
from urllib.parse import unquote_plus

import httpx

from .types import KeySelector


def _path_and_query(request: httpx.Request) -> str:
    return request.url.raw_path.decode("ascii")


class DefaultKeySelector:
    """Host followed by path and query."""

    def select_key(self, request: httpx.Request, config: Any) -> str:
        return request.url.host + _path_and_query(request)

    def __repr__(self) -> str:
        return "DefaultKeySelector()"


class QueryFilterKeySelector:
    """
    Host, path and query with volatile query parameters removed.

    The path and every kept parameter are used exactly as sent, still
    percent-encoded; only parameter names are decoded for matching.

    Example:
        selector = QueryFilterKeySelector(["tenant", "ts"])
        # GET https://api.example.com/items?page=2&ts=1700000000
        # -> "api.example.com/items?page=2"
    """

    def __init__(self, excluded_params: Iterable[str]) -> None:
        self._excluded = frozenset(excluded_params)

    def _is_excluded(self, pair: str) -> bool:
        name = pair.split("=", 1)[0]
        return unquote_plus(name) in self._excluded

    def select_key(self, request: httpx.Request, config: Any) -> str:
        path, sep, query = _path_and_query(request).partition("?")
        key = request.url.host + path
        if not sep:
            return key

        pairs = query.split("&")
        kept = [pair for pair in pairs if not self._is_excluded(pair)]
        if kept:
            key += "?" + "&".join(kept)
        return key


class TimeBucketKeySelector:
    """
    Prefixes another selector's key with a coarse time bucket.

    Every ``bucket_seconds`` a new prefix is used, so older snapshots are no
    longer read and the store's lifecycle policy can expire them.
    """

    def __init__(
        self,
        bucket_seconds: float,
        inner: Optional[KeySelector] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if bucket_seconds <= 0:
            raise ValueError(f"bucket_seconds must be positive, got {bucket_seconds}")
        self._bucket_seconds = bucket_seconds
        self._inner = inner or DefaultKeySelector()
        self._clock = clock

    def select_key(self, request: httpx.Request, config: Any) -> str:
        bucket = int(self._clock() // self._bucket_seconds)
        return f"{bucket}/{self._inner.select_key(request, config)}"


class FunctionKeySelector:
    """Adapts a plain ``fn(request, config) -> str`` function."""

    def __init__(self, fn: Callable[[httpx.Request, Any], str]) -> None:
        self._fn = fn

    def select_key(self, request: httpx.Request, config: Any) -> str:
        return self._fn(request, config)


def derive_key(request: httpx.Request, config: Any) -> str:
    """Derive the blob key for a request using the configured selector."""
    return config.key_selector.select_key(request, config)
