from ._client import AsyncCacheClient
from ._mock import MockAsyncTransport
from ._storages import AsyncBaseStorage, AsyncInMemoryStorage, AsyncRedisStorage
from ._transports import AsyncCacheTransport

__all__ = (
    "AsyncCacheClient",
    "MockAsyncTransport",
    "AsyncBaseStorage",
    "AsyncInMemoryStorage",
    "AsyncRedisStorage",
    "AsyncCacheTransport",
)
