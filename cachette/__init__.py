from cachette._async import (
    AsyncBaseStorage as AsyncBaseStorage,
    AsyncCacheClient as AsyncCacheClient,
    AsyncCacheTransport as AsyncCacheTransport,
    AsyncInMemoryStorage as AsyncInMemoryStorage,
    AsyncRedisStorage as AsyncRedisStorage,
    MockAsyncTransport as MockAsyncTransport,
)
from cachette._exceptions import (
    CacheError as CacheError,
    CacheMiss as CacheMiss,
    NotModifiedWithoutEntry as NotModifiedWithoutEntry,
    SerializationError as SerializationError,
    StorageError as StorageError,
)
from cachette._extensions import (
    CacheExtensions as CacheExtensions,
    ignore_cache as ignore_cache,
    ignore_expired as ignore_expired,
    only_cached as only_cached,
    request_logger as request_logger,
    with_ignore_cache as with_ignore_cache,
    with_ignore_expired as with_ignore_expired,
    with_logger as with_logger,
    with_only_cached as with_only_cached,
)
from cachette._keygen import KeyGenerator as KeyGenerator, default_key_generator as default_key_generator
from cachette._logging import LoggingSink as LoggingSink, LogSink as LogSink, NullSink as NullSink
from cachette._models import CacheEntry as CacheEntry
from cachette._serializers import (
    BaseSerializer as BaseSerializer,
    JSONSerializer as JSONSerializer,
    MsgPackSerializer as MsgPackSerializer,
)
from cachette._sync import (
    BaseStorage as BaseStorage,
    CacheClient as CacheClient,
    CacheTransport as CacheTransport,
    InMemoryStorage as InMemoryStorage,
    MockTransport as MockTransport,
    RedisStorage as RedisStorage,
)

__all__ = (
    # Transports and clients
    "AsyncCacheTransport",
    "CacheTransport",
    "AsyncCacheClient",
    "CacheClient",
    "MockAsyncTransport",
    "MockTransport",
    # Storages
    "AsyncBaseStorage",
    "BaseStorage",
    "AsyncInMemoryStorage",
    "InMemoryStorage",
    "AsyncRedisStorage",
    "RedisStorage",
    # Models and serializers
    "CacheEntry",
    "BaseSerializer",
    "JSONSerializer",
    "MsgPackSerializer",
    # Per-request overrides
    "CacheExtensions",
    "with_ignore_expired",
    "with_ignore_cache",
    "with_only_cached",
    "ignore_expired",
    "ignore_cache",
    "only_cached",
    "with_logger",
    "request_logger",
    # Keys
    "KeyGenerator",
    "default_key_generator",
    # Logging
    "LogSink",
    "NullSink",
    "LoggingSink",
    # Errors
    "CacheError",
    "CacheMiss",
    "StorageError",
    "SerializationError",
    "NotModifiedWithoutEntry",
)

__version__ = "0.1.0"
