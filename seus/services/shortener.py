import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..exceptions import DuplicateCode, DuplicateURL, GenerationExhausted, InvalidURL
from ..models import ShortLink
from ..observability import (
    CACHE_HITS,
    CACHE_MISSES,
    CODE_COLLISIONS_TOTAL,
    CODES_CREATED_TOTAL,
    CODES_EXISTING_TOTAL,
)
from ..redis import RedisCache
from ..registry import CodeRegistry
from ..utils import generate_random_code, is_valid_code, is_valid_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateResult:
    code: str
    url: str
    created: bool


class ShortenerService:
    """Allocates codes for urls and resolves codes back to urls."""

    def __init__(
        self,
        registry: CodeRegistry,
        code_length: int = 6,
        max_attempts: int = 10,
        cache: Optional[RedisCache] = None,
        code_factory: Callable[[int], str] = generate_random_code,
    ):
        self.registry = registry
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.cache = cache
        self.code_factory = code_factory

    async def generate_code(self) -> str:
        """Draw random codes until one is absent from the registry.

        The returned code is not reserved; the caller inserts it and must
        handle ``DuplicateCode`` if another request claimed it meanwhile.
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.code_factory(self.code_length)
            if await self.registry.find_by_code(candidate) is None:
                return candidate
            CODE_COLLISIONS_TOTAL.inc()
            logger.debug(f"Code collision on attempt {attempt}: {candidate}")
        raise GenerationExhausted(self.max_attempts)

    async def create(self, url: str) -> CreateResult:
        if not is_valid_url(url):
            raise InvalidURL(url)

        existing = await self.registry.find_by_url(url)
        if existing is not None:
            CODES_EXISTING_TOTAL.inc()
            return CreateResult(code=existing.code, url=existing.url, created=False)

        for _ in range(self.max_attempts):
            code = await self.generate_code()
            try:
                link = await self.registry.insert(ShortLink(code=code, url=url))
            except DuplicateCode:
                CODE_COLLISIONS_TOTAL.inc()
                logger.info(f"Lost insert race for code {code}, regenerating")
                continue
            except DuplicateURL as e:
                # A concurrent create for the same url committed first
                CODES_EXISTING_TOTAL.inc()
                return CreateResult(code=e.existing.code, url=e.existing.url, created=False)

            CODES_CREATED_TOTAL.inc()
            logger.info(f"Created code {link.code} -> {link.url}")
            return CreateResult(code=link.code, url=link.url, created=True)

        raise GenerationExhausted(self.max_attempts)

    async def resolve(self, code: str) -> Optional[str]:
        """Return the url for ``code``, or None when there is no such code.

        Malformed codes are answered without a store round-trip.
        """
        if not is_valid_code(code, self.code_length):
            return None

        if self.cache and self.cache.enabled:
            cached = await self.cache.get(code)
            if cached:
                CACHE_HITS.inc()
                return cached
            CACHE_MISSES.inc()

        link = await self.registry.find_by_code(code)
        if link is None:
            return None

        if self.cache:
            await self.cache.set(code, link.url)
        return link.url
