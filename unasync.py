#!venv/bin/python
import os
import re
import sys

SUBS = [
    ("async def", "def"),
    ("async with", "with"),
    ("await ", ""),
    ("async for", "for"),
    ("AsyncIterable", "Iterable"),
    ("AsyncBaseStorage", "BaseStorage"),
    ("AsyncInMemoryStorage", "InMemoryStorage"),
    ("AsyncRedisStorage", "RedisStorage"),
    ("import redis.asyncio as redis", "import redis"),
    ("AsyncCacheTransport", "CacheTransport"),
    ("AsyncBaseTransport", "BaseTransport"),
    ("AsyncCacheClient", "CacheClient"),
    ("AsyncClient", "Client"),
    ("MockAsyncTransport", "MockTransport"),
    ("handle_async_request", "handle_request"),
    ("aread", "read"),
    ("aclose", "close"),
    ("import anyio", "import threading"),
    (r"anyio\.Lock", "threading.Lock"),
    ("from cachette._async", "from cachette._sync"),
    ("__aenter__", "__enter__"),
    ("__aexit__", "__exit__"),
    (r"fakeredis\.aioredis\.FakeRedis", "fakeredis.FakeRedis"),
]
COMPILED_SUBS = [(re.compile(r"(^|\b)" + regex + r"($|\b)"), repl) for regex, repl in SUBS]

# Lines that have no sync counterpart at all.
DROPS = [
    r"^ *@pytest\.mark\.anyio$",
    r"^import fakeredis\.aioredis$",
]
COMPILED_DROPS = [re.compile(regex) for regex in DROPS]

USED_SUBS = set()
USED_DROPS = set()


def unasync_line(line):
    for index, regex in enumerate(COMPILED_DROPS):
        if regex.match(line.rstrip("\n")):
            USED_DROPS.add(index)
            return None
    for index, (regex, repl) in enumerate(COMPILED_SUBS):
        old_line = line
        line = re.sub(regex, repl, line)
        if index not in USED_SUBS:
            if line != old_line:
                USED_SUBS.add(index)
    return line


def unasync_lines(in_path):
    with open(in_path) as in_file:
        lines = (unasync_line(line) for line in in_file.readlines())
        return [line for line in lines if line is not None]


def unasync_file(in_path, out_path):
    with open(out_path, "w", newline="") as out_file:
        out_file.writelines(unasync_lines(in_path))


def unasync_file_check(in_path, out_path):
    with open(out_path) as out_file:
        for expected, out_line in zip(unasync_lines(in_path), out_file.readlines()):
            if out_line != expected:
                print(f"unasync mismatch between {in_path!r} and {out_path!r}")
                print(f"Expected sync code: {expected!r}")
                print(f"Actual sync code:   {out_line!r}")
                sys.exit(1)


def unasync_dir(in_dir, out_dir, check_only=False):
    for dirpath, dirnames, filenames in os.walk(in_dir):
        for filename in filenames:
            if not filename.endswith(".py"):
                continue
            rel_dir = os.path.relpath(dirpath, in_dir)
            in_path = os.path.normpath(os.path.join(in_dir, rel_dir, filename))
            out_path = os.path.normpath(os.path.join(out_dir, rel_dir, filename))
            print(in_path, "->", out_path)
            if check_only:
                unasync_file_check(in_path, out_path)
            else:
                unasync_file(in_path, out_path)


def main():
    check_only = "--check" in sys.argv
    unasync_dir("cachette/_async", "cachette/_sync", check_only=check_only)
    unasync_dir("tests/_async", "tests/_sync", check_only=check_only)

    if len(USED_SUBS) != len(SUBS) or len(USED_DROPS) != len(DROPS):
        unused = [SUBS[i] for i in range(len(SUBS)) if i not in USED_SUBS]
        unused += [DROPS[i] for i in range(len(DROPS)) if i not in USED_DROPS]

        from pprint import pprint

        print("This SUBS was not used")
        pprint(unused)
        exit(1)


if __name__ == "__main__":
    main()
