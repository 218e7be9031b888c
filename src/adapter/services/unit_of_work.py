from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.user_repository import UserRepository
from src.app.services.clock import Clock, SystemClock
from src.app.services.hashing import DEFAULT_BCRYPT_ROUNDS
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(
        self,
        session: AsyncSession,
        clock: Clock = None,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ):
        self.session = session
        self.clock = clock or SystemClock()
        self.bcrypt_rounds = bcrypt_rounds

    async def __aenter__(self):
        self.users = UserRepository(self.session, self.clock, self.bcrypt_rounds)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
