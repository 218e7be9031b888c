from datetime import timedelta

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.smtp_notifier import SmtpNotifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import raise_for_error
from src.app.services.clock import Clock, SystemClock
from src.app.services.notifier import Notifier
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import CurrentUser, VerifySessionUseCase

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

_system_clock = SystemClock()


def get_clock() -> Clock:
    return _system_clock


async def get_unit_of_work(clock: Clock = Depends(get_clock)):
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(
            session, clock=clock, bcrypt_rounds=ApplicationConfig.BCRYPT_ROUNDS
        )


def get_token_service(clock: Clock = Depends(get_clock)) -> TokenService:
    return TokenService(
        secret=ApplicationConfig.JWT_SECRET,
        expires_in=timedelta(days=ApplicationConfig.JWT_EXPIRES_IN_DAYS),
        clock=clock,
        algorithm=ApplicationConfig.JWT_ALGORITHM,
    )


def get_notifier() -> Notifier:
    return SmtpNotifier(
        host=ApplicationConfig.SMTP_HOST,
        port=ApplicationConfig.SMTP_PORT,
        sender=ApplicationConfig.EMAIL_FROM,
        username=ApplicationConfig.SMTP_USERNAME,
        password=ApplicationConfig.SMTP_PASSWORD,
        use_tls=ApplicationConfig.SMTP_USE_TLS,
    )


async def get_current_user(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
) -> CurrentUser:
    """
    Dependency guarding protected routes.

    Verifies the bearer token from the Authorization header, checks that its
    user still exists and has not changed password since the token was issued.

    Returns:
        CurrentUser, also attached to request.state.user

    Raises:
        ClientError: 401 for missing, invalid, expired or stale credentials
    """
    use_case = VerifySessionUseCase(uow, token_service)
    result = await use_case.execute(request.headers.get("Authorization"))

    if result.is_err():
        raise_for_error(result.error)

    request.state.user = result.value
    return result.value
