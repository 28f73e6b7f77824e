import base64
import datetime
import json
import typing as tp

import msgpack

from cachette._exceptions import SerializationError
from cachette._models import CacheEntry

__all__ = ("BaseSerializer", "JSONSerializer", "MsgPackSerializer")


class BaseSerializer:
    def dumps(self, entry: CacheEntry) -> bytes:
        raise NotImplementedError()

    def loads(self, data: bytes) -> CacheEntry:
        raise NotImplementedError()


class JSONSerializer(BaseSerializer):
    """A simple json-based serializer."""

    def dumps(self, entry: CacheEntry) -> bytes:
        """
        Dumps the cache entry.

        :param entry: A stored HTTP response
        :type entry: CacheEntry
        :return: Serialized entry
        :rtype: bytes
        """
        entry_dict = {
            "created_at": entry.created_at.isoformat(),
            "status_code": entry.status_code,
            "content": base64.b64encode(entry.content).decode("ascii"),
            "headers": entry.headers,
        }
        return json.dumps(entry_dict).encode("utf-8")

    def loads(self, data: bytes) -> CacheEntry:
        """
        Loads the cache entry from serialized data.

        :param data: Serialized data
        :type data: bytes
        :raises SerializationError: When the data is not a valid entry
        :return: The stored HTTP response
        :rtype: CacheEntry
        """
        try:
            entry_dict = json.loads(data)
            return CacheEntry(
                created_at=datetime.datetime.fromisoformat(entry_dict["created_at"]),
                status_code=int(entry_dict["status_code"]),
                content=base64.b64decode(entry_dict["content"].encode("ascii"), validate=True),
                headers={str(key): str(value) for key, value in entry_dict["headers"].items()},
            )
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            raise SerializationError(f"Could not decode cache entry: {exc}") from exc


class MsgPackSerializer(BaseSerializer):
    """
    A compact msgpack-based serializer.

    The body is stored as raw bytes and the creation time as a float timestamp.
    """

    def dumps(self, entry: CacheEntry) -> bytes:
        return tp.cast(
            bytes,
            msgpack.packb(
                {
                    "created_at": entry.created_at.timestamp(),
                    "status_code": entry.status_code,
                    "content": entry.content,
                    "headers": entry.headers,
                },
                use_bin_type=True,
            ),
        )

    def loads(self, data: bytes) -> CacheEntry:
        try:
            entry_dict = msgpack.unpackb(data, raw=False)
            return CacheEntry(
                created_at=datetime.datetime.fromtimestamp(entry_dict["created_at"], tz=datetime.timezone.utc),
                status_code=int(entry_dict["status_code"]),
                content=bytes(entry_dict["content"]),
                headers={str(key): str(value) for key, value in entry_dict["headers"].items()},
            )
        except (ValueError, TypeError, KeyError, AttributeError, msgpack.UnpackException) as exc:
            raise SerializationError(f"Could not decode cache entry: {exc}") from exc
