import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from credential_service.adapter.repositories.account_repository import AccountRepository
from credential_service.adapter.services.db_errors import returns_result
from credential_service.app.services.unit_of_work import UnitOfWork
from credential_service.libs.result import Result, Return

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern, one session per scope"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self.session = None

    async def __aenter__(self):
        self.session = self.session_factory()
        self.accounts = AccountRepository(self.session)
        return self

    async def __aexit__(self, *args):
        try:
            await self.rollback()
        except SQLAlchemyError as exc:
            # Connection already gone; the session is discarded below
            logger.warning(f"Rollback on scope exit failed: {type(exc).__name__}")
        finally:
            await self.session.close()

    @returns_result
    async def commit(self) -> Result[None]:
        await self.session.commit()
        return Return.ok(None)

    async def rollback(self):
        await self.session.rollback()
