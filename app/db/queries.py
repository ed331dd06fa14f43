# /app/db/queries.py
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppException, ErrorType
from app.core.security import validate_token
from app.models.users import Company, User, UserRole


async def get_user_by_sid(db: AsyncSession, sid: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.sid == sid))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_company_by_sid(db: AsyncSession, sid: str) -> Optional[Company]:
    result = await db.execute(select(Company).where(Company.sid == sid))
    return result.scalar_one_or_none()


async def get_company_by_email(db: AsyncSession, email: str) -> Optional[Company]:
    result = await db.execute(select(Company).where(Company.email == email))
    return result.scalar_one_or_none()


async def get_company_manager(db: AsyncSession, company_sid: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(
            User.company_sid == company_sid,
            User.role == UserRole.COMPANY_MANAGER,
        )
    )
    return result.scalars().first()


async def get_company_personel(db: AsyncSession, company_sid: str) -> List[User]:
    result = await db.execute(
        select(User)
        .where(User.company_sid == company_sid, User.role == UserRole.EMPLOYEE)
        .order_by(User.first_name, User.last_name)
    )
    return list(result.scalars().all())


async def get_current_user(db: AsyncSession, token: str) -> User:
    """Session token -> user row, or INVALID_TOKEN / USER_NOT_FOUND"""
    user_sid = validate_token(token)
    user = await get_user_by_sid(db, user_sid)
    if user is None:
        raise AppException(ErrorType.USER_NOT_FOUND)
    return user
