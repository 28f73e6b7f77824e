import fakeredis
import fakeredis.aioredis
import pytest

import cachette
from cachette._utils import BaseClock


class MockedClock(BaseClock):
    def __init__(self, initial: float):
        self.current = initial

    def now(self) -> float:
        return self.current


@pytest.mark.anyio
async def test_inmemorystorage():
    storage = cachette.AsyncInMemoryStorage()

    assert await storage.get("https://example.com") is None

    await storage.set("https://example.com", b"test")
    assert await storage.get("https://example.com") == b"test"

    await storage.set("https://example.com", b"updated")
    assert await storage.get("https://example.com") == b"updated"


@pytest.mark.anyio
async def test_inmemorystorage_ttl():
    clock = MockedClock(1000.0)
    storage = cachette.AsyncInMemoryStorage(clock=clock)

    await storage.set("key", b"test", ttl=10)
    assert await storage.get("key") == b"test"

    clock.current = 1011.0
    assert await storage.get("key") is None


@pytest.mark.anyio
async def test_inmemorystorage_zero_ttl_never_expires():
    clock = MockedClock(1000.0)
    storage = cachette.AsyncInMemoryStorage(clock=clock)

    await storage.set("key", b"test", ttl=0)
    clock.current = 10**9
    assert await storage.get("key") == b"test"


@pytest.mark.anyio
async def test_inmemorystorage_closed():
    storage = cachette.AsyncInMemoryStorage()
    await storage.aclose()

    with pytest.raises(cachette.StorageError):
        await storage.get("key")
    with pytest.raises(cachette.StorageError):
        await storage.set("key", b"test")


@pytest.mark.anyio
async def test_redisstorage():
    storage = cachette.AsyncRedisStorage(client=fakeredis.aioredis.FakeRedis())

    assert await storage.get("https://example.com") is None

    await storage.set("https://example.com", b"test")
    assert await storage.get("https://example.com") == b"test"


@pytest.mark.anyio
async def test_redisstorage_ttl():
    client = fakeredis.aioredis.FakeRedis()
    storage = cachette.AsyncRedisStorage(client=client)

    await storage.set("with-ttl", b"test", ttl=1.5)
    await storage.set("without-ttl", b"test")

    assert 0 < await client.pttl("with-ttl") <= 1500
    assert await client.pttl("without-ttl") == -1


@pytest.mark.anyio
async def test_redisstorage_empty_value_is_absent():
    client = fakeredis.aioredis.FakeRedis()
    await client.set("key", b"")
    storage = cachette.AsyncRedisStorage(client=client)

    assert await storage.get("key") is None


@pytest.mark.anyio
async def test_redisstorage_connection_failure():
    server = fakeredis.FakeServer()
    server.connected = False
    storage = cachette.AsyncRedisStorage(client=fakeredis.aioredis.FakeRedis(server=server))

    with pytest.raises(cachette.StorageError):
        await storage.get("key")
    with pytest.raises(cachette.StorageError):
        await storage.set("key", b"test")


@pytest.mark.anyio
async def test_storages_implement_protocol():
    assert isinstance(cachette.AsyncInMemoryStorage(), cachette.AsyncBaseStorage)
    assert isinstance(cachette.AsyncRedisStorage(client=fakeredis.aioredis.FakeRedis()), cachette.AsyncBaseStorage)
