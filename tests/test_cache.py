import asyncio

from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.cache import RedisCache


class FakeRedis:
    """Async client double recording what RedisCache awaits"""

    def __init__(self, fail: bool = False):
        self.data = {}
        self.expiry = {}
        self.fail = fail
        self.closed = False

    async def get(self, key):
        if self.fail:
            raise RedisConnectionError("down")
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        if self.fail:
            raise RedisConnectionError("down")
        self.data[key] = value
        self.expiry[key] = ex

    async def aclose(self):
        self.closed = True


def test_unreachable_redis_disables_caching():
    cache = RedisCache(url="redis://127.0.0.1:1/0")

    async def scenario():
        await cache.connect()
        return await cache.set_cache("k", {"a": 1}), await cache.get_cache("k")

    stored, value = asyncio.run(scenario())
    assert cache.redis_client is None
    assert stored is False
    assert value is None


def test_values_round_trip_as_json_with_ttl():
    client = FakeRedis()
    cache = RedisCache(client=client)

    async def scenario():
        stored = await cache.set_cache("tmdb:/movie/550:", {"id": 550, "genres": ["drama"]}, expire=60)
        return stored, await cache.get_cache("tmdb:/movie/550:")

    stored, value = asyncio.run(scenario())
    assert stored is True
    assert value == {"id": 550, "genres": ["drama"]}
    assert client.expiry["tmdb:/movie/550:"] == 60


def test_missing_and_undecodable_entries_are_misses():
    client = FakeRedis()
    client.data["broken"] = "{not json"
    cache = RedisCache(client=client)

    assert asyncio.run(cache.get_cache("absent")) is None
    assert asyncio.run(cache.get_cache("broken")) is None


def test_redis_errors_degrade_to_misses():
    cache = RedisCache(client=FakeRedis(fail=True))

    assert asyncio.run(cache.set_cache("k", [1, 2])) is False
    assert asyncio.run(cache.get_cache("k")) is None


def test_unserializable_value_is_not_stored():
    client = FakeRedis()
    cache = RedisCache(client=client)

    assert asyncio.run(cache.set_cache("k", object())) is False
    assert client.data == {}


def test_close_releases_the_client():
    client = FakeRedis()
    cache = RedisCache(client=client)

    asyncio.run(cache.close())
    assert client.closed is True
    assert cache.redis_client is None
