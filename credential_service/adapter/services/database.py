"""
Database connectivity

Owns the async engine and session factory, and tracks whether the store is
ready to accept operations. The credential store refuses work while the
database is not ready instead of queueing it.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from credential_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork

logger = logging.getLogger(__name__)


class Database:
    """
    Engine, session factory and readiness state.

    connect() retries with exponential backoff capped at max_delay seconds and
    raises the last error when every attempt fails.
    """

    def __init__(
        self,
        uri: str,
        connect_retries: int = 5,
        connect_base_delay: float = 1.0,
        connect_max_delay: float = 30.0,
        engine: Optional[AsyncEngine] = None,
    ):
        self.uri = uri
        self.connect_retries = connect_retries
        self.connect_base_delay = connect_base_delay
        self.connect_max_delay = connect_max_delay
        self.engine = engine or create_async_engine(uri, echo=False, future=True)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self.session_factory)

    async def connect(self) -> None:
        """Ping the database, create tables and mark the store ready"""
        attempt = 0
        while True:
            try:
                async with self.engine.begin() as conn:
                    await conn.execute(text("SELECT 1"))
                    await conn.run_sync(SQLModel.metadata.create_all)
                break
            except (SQLAlchemyError, OSError) as exc:
                attempt += 1
                if attempt >= self.connect_retries:
                    logger.error(
                        f"Database connection failed after {attempt} attempts: {exc}"
                    )
                    raise
                delay = min(self.connect_base_delay * 2**attempt, self.connect_max_delay)
                logger.warning(
                    f"Database connection attempt {attempt}/{self.connect_retries} failed, "
                    f"retrying in {delay}s"
                )
                await asyncio.sleep(delay)

        self._ready = True
        logger.info("Database connected")

    async def disconnect(self) -> None:
        self._ready = False
        await self.engine.dispose()
        logger.info("Database disconnected")
