import typing as tp

import httpx

__all__ = ("KeyGenerator", "default_key_generator")

KeyGenerator = tp.Callable[[httpx.Request], str]


def default_key_generator(request: httpx.Request) -> str:
    """
    Use the full request URL as the cache key.

    No normalization is applied, so `/a?x=1&y=2` and `/a?y=2&x=1` are different keys.
    """
    return str(request.url)
