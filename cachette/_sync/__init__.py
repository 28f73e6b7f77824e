from ._client import CacheClient
from ._mock import MockTransport
from ._storages import BaseStorage, InMemoryStorage, RedisStorage
from ._transports import CacheTransport

__all__ = (
    "CacheClient",
    "MockTransport",
    "BaseStorage",
    "InMemoryStorage",
    "RedisStorage",
    "CacheTransport",
)
