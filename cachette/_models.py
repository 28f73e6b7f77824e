from __future__ import annotations

import datetime
import time
import typing as tp
from dataclasses import dataclass, field

import httpx

from cachette._utils import first_header_values, parse_date

__all__ = ("CacheEntry",)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    """
    A stored snapshot of one HTTP response.

    Headers hold a single value per name, the first one the origin sent.
    """

    status_code: int
    content: bytes
    headers: tp.Dict[str, str] = field(default_factory=dict)
    created_at: datetime.datetime = field(default_factory=_utcnow)

    @classmethod
    def from_response(
        cls,
        response: httpx.Response,
        content: bytes,
        created_at: tp.Optional[datetime.datetime] = None,
    ) -> "CacheEntry":
        return cls(
            status_code=response.status_code,
            content=content,
            headers=first_header_values(response.headers.raw),
            created_at=created_at if created_at is not None else _utcnow(),
        )

    def get_header(self, name: str) -> tp.Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    @property
    def etag(self) -> tp.Optional[str]:
        return self.get_header("ETag") or None

    def expires_at(self) -> tp.Optional[int]:
        expires = self.get_header("Expires")
        if expires is None:
            return None
        return parse_date(expires)

    def is_expired(self, now: tp.Optional[float] = None) -> bool:
        # Missing or unparsable `Expires` means the entry is never fresh.
        expires = self.expires_at()
        if expires is None:
            return True
        if now is None:
            now = time.time()
        return expires < now

    def to_response(
        self,
        request: tp.Optional[httpx.Request] = None,
        extensions: tp.Optional[tp.Dict[str, tp.Any]] = None,
    ) -> httpx.Response:
        return httpx.Response(
            status_code=self.status_code,
            headers=list(self.headers.items()),
            stream=httpx.ByteStream(self.content),
            request=request,
            extensions=extensions or {},
        )
