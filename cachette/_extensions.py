from __future__ import annotations

import typing as tp

import httpx

from ._logging import LogSink

__all__ = (
    "CacheExtensions",
    "IGNORE_EXPIRED",
    "IGNORE_CACHE",
    "ONLY_CACHED",
    "LOGGER",
    "with_ignore_expired",
    "with_ignore_cache",
    "with_only_cached",
    "with_logger",
    "ignore_expired",
    "ignore_cache",
    "only_cached",
    "request_logger",
)

IGNORE_EXPIRED = "cachette_ignore_expired"
IGNORE_CACHE = "cachette_ignore_cache"
ONLY_CACHED = "cachette_only_cached"
LOGGER = "cachette_logger"


class CacheExtensions(tp.TypedDict, total=False):
    # All the names here should be prefixed with "cachette_" to avoid collisions with httpx extensions
    cachette_ignore_expired: bool
    """When True, an expired entry is returned as is, without trying to refresh it."""

    cachette_ignore_cache: bool
    """
    When True, stored entries are never read. Responses are still stored.
    Takes precedence over `cachette_ignore_expired`.
    """

    cachette_only_cached: bool
    """When True, the network is never used. A missing entry raises `CacheMiss`."""

    cachette_logger: LogSink
    """Sink used for this request instead of the one the transport was built with."""


def _with_flag(extensions: tp.Optional[tp.Mapping[str, tp.Any]], name: str, value: bool) -> tp.Dict[str, tp.Any]:
    return {**(extensions or {}), name: value}


def with_ignore_expired(extensions: tp.Optional[tp.Mapping[str, tp.Any]] = None, value: bool = True) -> tp.Dict[str, tp.Any]:
    """
    Return a copy of `extensions` with the ignore-expired flag set.

    Example:
    ```python
        client.get("https://example.com", extensions=with_ignore_expired())
    ```
    """
    return _with_flag(extensions, IGNORE_EXPIRED, value)


def with_ignore_cache(extensions: tp.Optional[tp.Mapping[str, tp.Any]] = None, value: bool = True) -> tp.Dict[str, tp.Any]:
    """Return a copy of `extensions` with the ignore-cache flag set."""
    return _with_flag(extensions, IGNORE_CACHE, value)


def with_only_cached(extensions: tp.Optional[tp.Mapping[str, tp.Any]] = None, value: bool = True) -> tp.Dict[str, tp.Any]:
    """Return a copy of `extensions` with the only-cached flag set."""
    return _with_flag(extensions, ONLY_CACHED, value)


def ignore_expired(request: httpx.Request) -> bool:
    return bool(request.extensions.get(IGNORE_EXPIRED, False))


def ignore_cache(request: httpx.Request) -> bool:
    return bool(request.extensions.get(IGNORE_CACHE, False))


def only_cached(request: httpx.Request) -> bool:
    return bool(request.extensions.get(ONLY_CACHED, False))


def with_logger(extensions: tp.Optional[tp.Mapping[str, tp.Any]], logger: LogSink) -> tp.Dict[str, tp.Any]:
    """
    Return a copy of `extensions` that routes this request's cache events to `logger`.

    Example:
    ```python
        client.get("https://example.com", extensions=with_logger(None, LoggingSink().bind(user="alice")))
    ```
    """
    return {**(extensions or {}), LOGGER: logger}


def request_logger(request: httpx.Request) -> tp.Optional[LogSink]:
    return tp.cast(tp.Optional[LogSink], request.extensions.get(LOGGER))
