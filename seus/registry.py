import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .database import Database
from .exceptions import DuplicateCode, DuplicateURL, StoreTimeout, StoreUnavailable
from .models import ShortLink

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CodeRegistry:
    """Store access for ShortLinks.

    Every call checks a session out of the engine pool, runs under
    ``timeout`` seconds and releases the session on every exit path.
    ``None`` from the finders means "not found"; store failures raise
    ``StoreUnavailable`` (or ``StoreTimeout``) instead.
    """

    def __init__(self, database: Database, timeout: float = 10.0):
        self.database = database
        self.timeout = timeout

    async def find_by_code(self, code: str) -> Optional[ShortLink]:
        async def op(db: AsyncSession) -> Optional[ShortLink]:
            result = await db.execute(select(ShortLink).where(ShortLink.code == code))
            return result.scalar_one_or_none()

        return await self._run(op)

    async def find_by_url(self, url: str) -> Optional[ShortLink]:
        async def op(db: AsyncSession) -> Optional[ShortLink]:
            result = await db.execute(select(ShortLink).where(ShortLink.url == url))
            return result.scalar_one_or_none()

        return await self._run(op)

    async def insert(self, link: ShortLink) -> ShortLink:
        """Persist ``link``.

        Raises ``DuplicateURL`` (carrying the stored record) when the url
        already has a code, ``DuplicateCode`` when the code is taken.
        """
        async def op(db: AsyncSession) -> ShortLink:
            db.add(link)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                logger.debug(f"Insert conflict for code {link.code}")
                # Either constraint may have fired; the url lookup tells which
                result = await db.execute(select(ShortLink).where(ShortLink.url == link.url))
                existing = result.scalar_one_or_none()
                if existing is not None:
                    raise DuplicateURL(link.url, existing)
                raise DuplicateCode(link.code)
            await db.refresh(link)
            return link

        return await self._run(op)

    async def _run(self, op: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async def scoped() -> T:
            async with self.database.session() as db:
                return await op(db)

        try:
            return await asyncio.wait_for(scoped(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise StoreTimeout(f"Store operation exceeded {self.timeout}s") from e
        except SQLAlchemyError as e:
            raise StoreUnavailable(str(e)) from e
        except OSError as e:
            # Driver-level connection failures (asyncpg) are not wrapped by SQLAlchemy
            raise StoreUnavailable(str(e)) from e
