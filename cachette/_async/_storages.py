from __future__ import annotations

import logging
import types
import typing as tp

import anyio

try:
    import redis.asyncio as redis
except ImportError:  # pragma: no cover
    redis = None  # type: ignore

from .._exceptions import StorageError
from .._utils import BaseClock, Clock, float_seconds_to_int_milliseconds

if tp.TYPE_CHECKING:  # pragma: no cover
    from typing_extensions import Self

logger = logging.getLogger("cachette.storages")

__all__ = (
    "AsyncBaseStorage",
    "AsyncInMemoryStorage",
    "AsyncRedisStorage",
)


@tp.runtime_checkable
class AsyncBaseStorage(tp.Protocol):
    """
    The minimal key-value contract the cache transport persists entries through.

    `get` returns None for unknown keys and raises `StorageError` only when the
    storage itself fails. `set` stores opaque bytes; a falsy `ttl` means the
    storage should not expire the value on its own.
    """

    async def get(self, key: str) -> tp.Optional[bytes]: ...

    async def set(self, key: str, value: bytes, ttl: tp.Optional[float] = None) -> None: ...

    async def aclose(self) -> None: ...


class AsyncInMemoryStorage:
    """
    A simple in-memory storage.

    Values with a positive `ttl` are dropped lazily, the next time they are read.

    :param clock: Clock used to check the `ttl` of stored values, defaults to None
    :type clock: tp.Optional[BaseClock], optional
    """

    def __init__(self, clock: tp.Optional[BaseClock] = None) -> None:
        self._clock = clock if clock is not None else Clock()
        self._data: tp.Dict[str, tp.Tuple[bytes, tp.Optional[float]]] = {}
        self._lock = anyio.Lock()
        self._closed = False

    async def get(self, key: str) -> tp.Optional[bytes]:
        """
        Retrieves the value stored under the key.

        :param key: Cache key
        :type key: str
        :return: The stored bytes, or None when nothing is stored
        :rtype: tp.Optional[bytes]
        """
        async with self._lock:
            self._ensure_open()
            try:
                value, deadline = self._data[key]
            except KeyError:
                return None
            if deadline is not None and self._clock.now() >= deadline:
                logger.debug(f"Dropping expired value for key {key!r}")
                del self._data[key]
                return None
            return value

    async def set(self, key: str, value: bytes, ttl: tp.Optional[float] = None) -> None:
        """
        Stores the value under the key.

        :param key: Cache key
        :type key: str
        :param value: Serialized cache entry
        :type value: bytes
        :param ttl: Number of seconds the value should be kept, defaults to None
        :type ttl: tp.Optional[float], optional
        """
        deadline = self._clock.now() + ttl if ttl and ttl > 0 else None
        async with self._lock:
            self._ensure_open()
            self._data[key] = (bytes(value), deadline)

    async def aclose(self) -> None:
        async with self._lock:
            self._closed = True
            self._data.clear()

    def _ensure_open(self) -> None:
        if self._closed:
            raise StorageError("storage is closed")

    async def __aenter__(self) -> "Self":
        return self

    async def __aexit__(
        self,
        exc_type: tp.Optional[tp.Type[BaseException]] = None,
        exc_value: tp.Optional[BaseException] = None,
        traceback: tp.Optional[types.TracebackType] = None,
    ) -> None:
        await self.aclose()


class AsyncRedisStorage:
    """
    A simple redis storage.

    :param client: A client for redis, defaults to None
    :type client: tp.Optional["redis.Redis"], optional
    """

    def __init__(
        self,
        client: tp.Optional[redis.Redis] = None,  # type: ignore
    ) -> None:
        if redis is None:  # pragma: no cover
            raise RuntimeError(
                f"The `{type(self).__name__}` was used, but the required packages were not found. "
                "Check that you have `cachette` installed with the `redis` extension as shown.\n"
                "```pip install cachette[redis]```"
            )

        if client is None:  # pragma: no cover
            self._client = redis.Redis()  # type: ignore
        else:
            self._client = client

    async def get(self, key: str) -> tp.Optional[bytes]:
        """
        Retrieves the value stored under the key.

        :param key: Cache key
        :type key: str
        :raises StorageError: When redis could not be reached
        :return: The stored bytes, or None when nothing is stored
        :rtype: tp.Optional[bytes]
        """
        try:
            value = await self._client.get(key)
        except redis.RedisError as exc:
            raise StorageError(f"redis GET {key!r} failed: {exc}") from exc

        if not value:
            return None
        if isinstance(value, str):
            return value.encode("utf-8")
        return tp.cast(bytes, value)

    async def set(self, key: str, value: bytes, ttl: tp.Optional[float] = None) -> None:
        """
        Stores the value under the key.

        :param key: Cache key
        :type key: str
        :param value: Serialized cache entry
        :type value: bytes
        :param ttl: Number of seconds redis should keep the value, defaults to None
        :type ttl: tp.Optional[float], optional
        :raises StorageError: When redis could not be reached
        """
        px = max(float_seconds_to_int_milliseconds(ttl), 1) if ttl and ttl > 0 else None

        try:
            await self._client.set(key, value, px=px)
        except redis.RedisError as exc:
            raise StorageError(f"redis SET {key!r} failed: {exc}") from exc

    async def aclose(self) -> None:  # pragma: no cover
        await self._client.aclose()

    async def __aenter__(self) -> "Self":
        return self

    async def __aexit__(
        self,
        exc_type: tp.Optional[tp.Type[BaseException]] = None,
        exc_value: tp.Optional[BaseException] = None,
        traceback: tp.Optional[types.TracebackType] = None,
    ) -> None:
        await self.aclose()
