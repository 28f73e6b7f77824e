#!/usr/bin/env uv run
# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "cachette[redis]",
# ]
#
# [tool.uv.sources]
# cachette = { path = "../", editable = true }
# ///

import asyncio

from cachette import AsyncCacheClient, AsyncRedisStorage, CacheMiss, MsgPackSerializer, with_only_cached


async def fetch_and_print(client, url: str, **kwargs):
    print(f"\n➡ Sending request to {url}...")
    try:
        response = await client.get(url, **kwargs)
    except CacheMiss:
        print("❌ Not cached")
        return

    print(f"📦 Cache Status: {response.extensions['cache_status']}")
    print(f"🔄 From Cache: {response.extensions['from_cache']}")


async def main():
    url = "https://httpbin.org/cache/60"
    async with AsyncCacheClient(storage=AsyncRedisStorage(), serializer=MsgPackSerializer()) as client:
        await fetch_and_print(client, url, extensions=with_only_cached())
        await fetch_and_print(client, url)
        await fetch_and_print(client, url)


if __name__ == "__main__":
    asyncio.run(main())
