#!/usr/bin/env uv run
# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "cachette",
# ]
#
# [tool.uv.sources]
# cachette = { path = "../", editable = true }
# ///

import logging

from cachette import CacheClient, LoggingSink, with_ignore_cache

logging.basicConfig(level=logging.DEBUG, format="%(name)s %(message)s")

# Responses without an Expires header are refetched on every call.
cl = CacheClient(logger=LoggingSink(), ttl=3600)

cl.get("https://httpbin.org/cache/60")
response = cl.get("https://httpbin.org/cache/60")
print(response.extensions["cache_status"])

response = cl.get("https://httpbin.org/cache/60", extensions=with_ignore_cache())
print(response.extensions["cache_status"])
