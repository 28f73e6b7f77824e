__all__ = (
    "CacheError",
    "CacheMiss",
    "StorageError",
    "SerializationError",
    "NotModifiedWithoutEntry",
)


class CacheError(Exception): ...


class CacheMiss(CacheError):
    """Raised for `only_cached` requests that have no usable stored entry."""


class StorageError(CacheError): ...


class SerializationError(CacheError): ...


class NotModifiedWithoutEntry(CacheError):
    """The server answered 304 but there is no stored entry to reconcile it with."""
