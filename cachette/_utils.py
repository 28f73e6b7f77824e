from __future__ import annotations

import calendar
import time
import typing as tp
from email.utils import formatdate, parsedate_to_datetime

HEADERS_ENCODING = "iso-8859-1"


class BaseClock:
    def now(self) -> float:
        raise NotImplementedError()


class Clock(BaseClock):
    def now(self) -> float:
        return time.time()


def parse_date(date: str) -> tp.Optional[int]:
    """
    Parse an HTTP date into a unix timestamp.

    Returns None when the value is not a valid HTTP date, including dates
    without a zone or with an unknown one.
    """
    try:
        parsed = parsedate_to_datetime(date)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
    if parsed.tzinfo is None:
        return None
    return calendar.timegm(parsed.utctimetuple())


def generate_http_date(timeval: tp.Optional[float] = None) -> str:
    """
    Generate a Date header value for HTTP responses.
    Returns date in RFC 1123 format (required by HTTP/1.1).

    Example output: 'Sun, 26 Oct 2025 12:34:56 GMT'
    """
    return formatdate(timeval=timeval, localtime=False, usegmt=True)


def float_seconds_to_int_milliseconds(seconds: float) -> int:
    return int(seconds * 1000)


def first_header_values(raw_headers: tp.Iterable[tp.Tuple[bytes, bytes]]) -> tp.Dict[str, str]:
    """
    Collapse raw header pairs into one value per header name.

    The first occurrence wins, names are compared case-insensitively and keep
    the spelling they had on the wire.
    """
    collapsed: tp.Dict[str, str] = {}
    seen: tp.Set[str] = set()
    for raw_key, raw_value in raw_headers:
        key = raw_key.decode(HEADERS_ENCODING)
        if key.lower() in seen:
            continue
        seen.add(key.lower())
        collapsed[key] = raw_value.decode(HEADERS_ENCODING)
    return collapsed
