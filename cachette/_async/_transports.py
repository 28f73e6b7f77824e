from __future__ import annotations

import time
import types
import typing as tp

import httpx

from .._exceptions import CacheMiss, NotModifiedWithoutEntry, SerializationError, StorageError
from .._extensions import ignore_cache, ignore_expired, only_cached, request_logger
from .._keygen import KeyGenerator, default_key_generator
from .._logging import LogSink, NullSink
from .._models import CacheEntry
from .._serializers import BaseSerializer, JSONSerializer
from .._utils import BaseClock, Clock
from ._storages import AsyncBaseStorage, AsyncInMemoryStorage

if tp.TYPE_CHECKING:  # pragma: no cover
    from typing_extensions import Self

__all__ = ("AsyncCacheTransport",)

KNOWN_RESPONSE_EXTENSIONS = ("http_version", "reason_phrase")

# Headers of the stored entry that win over the ones sent with a 304.
REVALIDATED_HEADERS = ("Expires", "Last-Modified")

HIT = "hit"
MISS = "miss"
EXPIRED = "expired"
IGNORED = "ignored"
IGNORED_EXPIRY = "ignored_expiry"
IGNORED_CHECK = "ignored_check"


class AsyncCacheTransport(httpx.AsyncBaseTransport):
    """
    An HTTPX Transport that caches GET responses.

    :param transport: `Transport` that our class wraps in order to add an HTTP Cache layer on top of
    :type transport: httpx.AsyncBaseTransport
    :param storage: Storage that keeps the serialized entries, defaults to None
    :type storage: tp.Optional[AsyncBaseStorage], optional
    :param serializer: Serializer that turns entries into bytes and back, defaults to None
    :type serializer: tp.Optional[BaseSerializer], optional
    :param key_generator: Function that derives the cache key from a request, defaults to None
    :type key_generator: tp.Optional[KeyGenerator], optional
    :param logger: Sink for the structured events of every request, a request can override it
        through the `cachette_logger` extension, defaults to None
    :type logger: tp.Optional[LogSink], optional
    :param ttl: TTL hint in seconds passed to the storage on every write, defaults to None
    :type ttl: tp.Optional[float], optional
    :param clock: Clock used to decide whether a stored entry has expired, defaults to None
    :type clock: tp.Optional[BaseClock], optional
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        storage: tp.Optional[AsyncBaseStorage] = None,
        serializer: tp.Optional[BaseSerializer] = None,
        key_generator: tp.Optional[KeyGenerator] = None,
        logger: tp.Optional[LogSink] = None,
        ttl: tp.Optional[float] = None,
        clock: tp.Optional[BaseClock] = None,
    ) -> None:
        self._transport = transport
        self._storage = storage if storage is not None else AsyncInMemoryStorage()

        if not isinstance(self._storage, AsyncBaseStorage):  # pragma: no cover
            raise TypeError(f"Expected `AsyncBaseStorage` implementation but got `{storage.__class__.__name__}`")

        self._serializer = serializer if serializer is not None else JSONSerializer()
        self._key_generator = key_generator if key_generator is not None else default_key_generator
        self._logger: LogSink = logger if logger is not None else NullSink()
        self._ttl = ttl
        self._clock = clock if clock is not None else Clock()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """
        Handles HTTP requests while also implementing HTTP caching.

        :param request: An HTTP request
        :type request: httpx.Request
        :raises CacheMiss: When `only_cached` is set and nothing usable is stored
        :raises NotModifiedWithoutEntry: When the server answers 304 to an unconditional request
        :return: An HTTP response
        :rtype: httpx.Response
        """
        logger = (request_logger(request) or self._logger).bind(url=str(request.url))
        event: tp.Dict[str, tp.Any] = {}
        try:
            return await self._handle(request, event, logger)
        except CacheMiss:
            raise
        except Exception as exc:
            logger.error("cache.handle_request", error=repr(exc), **event)
            raise
        finally:
            logger.debug("cache.handle_request", **event)

    async def _handle(self, request: httpx.Request, event: tp.Dict[str, tp.Any], logger: LogSink) -> httpx.Response:
        if request.method != "GET":
            return await self._transport.handle_async_request(request)

        key = self._key_generator(request)
        event["cache_key"] = key

        entry: tp.Optional[CacheEntry] = None

        if ignore_cache(request):
            event["cache"] = IGNORED
        else:
            entry = await self._read(key, logger)
            if entry is None:
                event["cache"] = MISS
            elif not entry.is_expired(self._clock.now()):
                event["cache"] = HIT
                return self._response_from_entry(entry, request, HIT)
            elif ignore_expired(request):
                event["cache"] = IGNORED_EXPIRY
                return self._response_from_entry(entry, request, IGNORED_EXPIRY)
            else:
                event["cache"] = EXPIRED

        if only_cached(request):
            event["cache"] = IGNORED_CHECK
            if entry is None:
                raise CacheMiss(f"No cached response for {key!r}")
            return self._response_from_entry(entry, request, IGNORED_CHECK)

        if entry is not None and entry.etag:
            request.headers["If-None-Match"] = entry.etag

        start = time.monotonic()
        response = await self._transport.handle_async_request(request)
        event["elapsed"] = time.monotonic() - start
        event["status"] = response.status_code

        if response.status_code == 304:
            await self._read_body(response)
            if entry is None:
                raise NotModifiedWithoutEntry(f"Got 304 for {key!r} but nothing is cached")

            for name in REVALIDATED_HEADERS:
                value = entry.get_header(name)
                if value is not None:
                    response.headers[name] = value
            if "Content-Length" in response.headers:
                response.headers["Content-Length"] = str(len(entry.content))

            try:
                await self._write(key, entry)
            except StorageError as exc:
                # The stored body is still valid, only its storage TTL was not refreshed.
                logger.error("cache.write", cache_key=key, error=repr(exc))

            return httpx.Response(
                status_code=response.status_code,
                headers=response.headers,
                stream=httpx.ByteStream(entry.content),
                request=request,
                extensions={**response.extensions, "from_cache": True, "cache_status": event["cache"]},
            )

        content = await self._read_body(response)
        new_entry = CacheEntry.from_response(response, content)
        await self._write(key, new_entry)

        extensions = {
            name: value for name, value in response.extensions.items() if name in KNOWN_RESPONSE_EXTENSIONS
        }
        extensions.update(from_cache=False, cache_status=event["cache"])
        return new_entry.to_response(request, extensions=extensions)

    async def _read(self, key: str, logger: LogSink) -> tp.Optional[CacheEntry]:
        data = await self._storage.get(key)
        if not data:
            return None

        try:
            return self._serializer.loads(data)
        except SerializationError as exc:
            # A broken entry is refetched and overwritten, never served.
            logger.error("cache.read", cache_key=key, error=repr(exc))
            return None

    async def _write(self, key: str, entry: CacheEntry) -> None:
        await self._storage.set(key, self._serializer.dumps(entry), self._ttl)

    async def _read_body(self, response: httpx.Response) -> bytes:
        assert isinstance(response.stream, tp.AsyncIterable)
        try:
            return b"".join([chunk async for chunk in response.stream])
        finally:
            await response.aclose()

    def _response_from_entry(self, entry: CacheEntry, request: httpx.Request, status: str) -> httpx.Response:
        return entry.to_response(request, extensions={"from_cache": True, "cache_status": status})

    async def aclose(self) -> None:
        await self._transport.aclose()
        await self._storage.aclose()

    async def __aenter__(self) -> "Self":
        return self

    async def __aexit__(
        self,
        exc_type: tp.Optional[tp.Type[BaseException]] = None,
        exc_value: tp.Optional[BaseException] = None,
        traceback: tp.Optional[types.TracebackType] = None,
    ) -> None:
        await self.aclose()
