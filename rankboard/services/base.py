"""
Base service class for the rankboard leaderboard API.

Services share one async session factory and open either a read scope,
which never commits, or a write scope, which commits once on success.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

class BaseService:
    """Base class for services backed by the score database."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    @asynccontextmanager
    async def read_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session for queries only; whatever it holds is discarded on exit."""
        async with self.session_factory() as session:
            try:
                yield session
            finally:
                await session.rollback()

    @asynccontextmanager
    async def write_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session whose changes are committed together when the block succeeds.

        Any exception rolls the whole block back and is re-raised unchanged.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                logger.debug(f"{type(self).__name__}: rolling back write session")
                await session.rollback()
                raise
