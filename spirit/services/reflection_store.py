"""Reflection Store - persistence for conversation reflections"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spirit.db.models import Reflection

logger = logging.getLogger(__name__)


class ReflectionStoreError(Exception):
    """Raised when the datastore rejects a read or write."""


class ReflectionStore:
    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        default_limit: int = 50,
        max_limit: int = 200,
    ):
        self._session_maker = session_maker
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def log(
        self,
        summary: str,
        user: str = "anonymous",
        category: str = "general",
        sentiment: float = 0.0,
    ) -> Reflection:
        """Insert a reflection and return it with its id and timestamp."""
        reflection = Reflection(
            user=user,
            summary=summary,
            category=category,
            sentiment=sentiment,
        )
        try:
            async with self._session_maker() as session:
                session.add(reflection)
                await session.commit()
                await session.refresh(reflection)
        except Exception as e:
            logger.error(f"Reflection log error: {e}")
            raise ReflectionStoreError(str(e)) from e
        return reflection

    async def recent(self, limit: Optional[int] = None, offset: int = 0) -> List[Reflection]:
        """Newest-first page of reflections; `limit` is capped at `max_limit`."""
        limit = max(1, min(limit or self.default_limit, self.max_limit))
        offset = max(0, offset)
        query = (
            select(Reflection)
            .order_by(Reflection.timestamp.desc())
            .offset(offset)
            .limit(limit)
        )
        try:
            async with self._session_maker() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except Exception as e:
            logger.error(f"Reflection fetch error: {e}")
            raise ReflectionStoreError(str(e)) from e

    async def get(self, reflection_id: str) -> Optional[Reflection]:
        async with self._session_maker() as session:
            return await session.get(Reflection, reflection_id)
