"""
Scoped sessions for store operations.

Reads run in a plain session, writes in a session wrapped by
`session.begin()`, so every exit path either commits or rolls back.
Unclassified SQLAlchemy errors leave the scope as StorageError.
"""
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database.engine import AsyncSessionLocal
from app.core.database.errors import StorageError
from app.utils import get_logger


log = get_logger(__name__)


class SessionScope:
    """
    Opens sessions from a session factory.
    
    Usage:
        sessions = SessionScope()
        
        async with sessions.read("list policies for org 1") as session:
            result = await session.execute(select(Policy))
        
        async with sessions.transaction("create policy 'viewer'") as session:
            session.add(policy)
    
    The context string ends up in StorageError messages and logs.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal):
        self._session_factory = session_factory

    @asynccontextmanager
    async def read(self, context: str) -> AsyncIterator[AsyncSession]:
        """Plain session for read-only work."""
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            log.exception("Storage failure during %s", context)
            raise StorageError(context) from exc

    @asynccontextmanager
    async def transaction(self, context: str) -> AsyncIterator[AsyncSession]:
        """Session inside one transaction, committed on success and rolled back on any error."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as exc:
            log.exception("Storage failure during %s, transaction rolled back", context)
            raise StorageError(context) from exc
