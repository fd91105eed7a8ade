from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork
from src.adapter.repositories.in_memory import InMemoryStore


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()


class InMemoryUnitOfWork(UnitOfWork):
    """Rollback restores the store to its state at the last commit"""

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.commits = 0
        self._snapshot = store.snapshot()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        self.commits += 1
        self._snapshot = self.store.snapshot()

    async def rollback(self):
        self.store.restore(self._snapshot)
