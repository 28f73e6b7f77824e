import typing as tp

import httpx

from cachette._async._storages import AsyncBaseStorage, AsyncInMemoryStorage
from cachette._async._transports import AsyncCacheTransport
from cachette._keygen import KeyGenerator
from cachette._logging import LogSink
from cachette._serializers import BaseSerializer
from cachette._utils import BaseClock

__all__ = ("AsyncCacheClient",)


class AsyncCacheClient(httpx.AsyncClient):
    """
    An `httpx.AsyncClient` whose transports are wrapped with `AsyncCacheTransport`.

    The cache options are keyword-only, everything else goes to `httpx.AsyncClient`.
    """

    def __init__(
        self,
        *args: tp.Any,
        storage: tp.Optional[AsyncBaseStorage] = None,
        serializer: tp.Optional[BaseSerializer] = None,
        key_generator: tp.Optional[KeyGenerator] = None,
        logger: tp.Optional[LogSink] = None,
        ttl: tp.Optional[float] = None,
        clock: tp.Optional[BaseClock] = None,
        **kwargs: tp.Any,
    ):
        self._storage = storage if storage is not None else AsyncInMemoryStorage()
        self._serializer = serializer
        self._key_generator = key_generator
        self._logger = logger
        self._ttl = ttl
        self._clock = clock
        super().__init__(*args, **kwargs)

    def _init_transport(self, *args, **kwargs) -> AsyncCacheTransport:  # type: ignore
        _transport = super()._init_transport(*args, **kwargs)
        return self._wrap(_transport)

    def _init_proxy_transport(self, *args, **kwargs) -> AsyncCacheTransport:  # type: ignore
        _transport = super()._init_proxy_transport(*args, **kwargs)  # pragma: no cover
        return self._wrap(_transport)  # pragma: no cover

    def _wrap(self, transport: httpx.AsyncBaseTransport) -> AsyncCacheTransport:
        return AsyncCacheTransport(
            transport=transport,
            storage=self._storage,
            serializer=self._serializer,
            key_generator=self._key_generator,
            logger=self._logger,
            ttl=self._ttl,
            clock=self._clock,
        )
