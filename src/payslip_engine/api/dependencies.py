"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.config import get_settings
from payslip_engine.database import init_db
from payslip_engine.notifications import MailTransport, SmtpMailTransport


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@lru_cache(maxsize=1)
def get_mail_transport() -> MailTransport:
    """Mail transport used by the notification pipeline."""
    return SmtpMailTransport(get_settings())


def get_bootstrap_deductions() -> bool:
    return get_settings().bootstrap_deductions


async def get_actor(x_actor: Annotated[str | None, Header()] = None) -> str | None:
    """Optional caller identity recorded on audit events."""
    return x_actor


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
MailTransportDep = Annotated[MailTransport, Depends(get_mail_transport)]
BootstrapDeductions = Annotated[bool, Depends(get_bootstrap_deductions)]
Actor = Annotated[str | None, Depends(get_actor)]
