from abc import ABC, abstractmethod

from credential_service.app.repositories.account_repository import IAccountRepository
from credential_service.libs.result import Result


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    accounts: IAccountRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self) -> Result[None]:
        pass

    @abstractmethod
    async def rollback(self):
        pass
