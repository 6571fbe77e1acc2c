import redis.asyncio as redis

from seus.exceptions import DuplicateCode
from seus.models import ShortLink


class FakeRegistry:
    """In-memory registry that records every store call."""

    def __init__(self):
        self.links: dict[str, ShortLink] = {}
        self.calls: list[tuple[str, str]] = []

    async def find_by_code(self, code):
        self.calls.append(("find_by_code", code))
        return self.links.get(code)

    async def find_by_url(self, url):
        self.calls.append(("find_by_url", url))
        return next((link for link in self.links.values() if link.url == url), None)

    async def insert(self, link):
        self.calls.append(("insert", link.code))
        if link.code in self.links:
            raise DuplicateCode(link.code)
        self.links[link.code] = link
        return link


class FakeRedis:
    def __init__(self, fail: bool = False):
        self.data: dict[str, str] = {}
        self.expiry: dict[str, int] = {}
        self.fail = fail

    async def get(self, key):
        if self.fail:
            raise redis.ConnectionError("down")
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        if self.fail:
            raise redis.ConnectionError("down")
        self.data[key] = value
        self.expiry[key] = ex

    async def aclose(self):
        pass
