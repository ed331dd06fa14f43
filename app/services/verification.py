from datetime import timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import create_purpose_token, decode_token, TokenPurpose
from app.models.base import Base
from app.models.users import EntityState, VerificationToken


class VerificationTokenStore:
    """
    Single-use email verification tokens. Writes are added to the caller's
    session; committing is left to the workflow that owns the transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def generate(self, company_sid: str, expires_delta: Optional[timedelta] = None) -> str:
        token = create_purpose_token(
            company_sid,
            TokenPurpose.VERIFICATION,
            expires_delta or timedelta(minutes=settings.VERIFICATION_TOKEN_EXPIRE_MINUTES),
        )
        payload = decode_token(token, TokenPurpose.VERIFICATION)

        self.db.add(VerificationToken(
            sid=Base.generate_sid(),
            token=token,
            company_sid=company_sid,
            expires_at=payload.expires_at,
            state=EntityState.ACTIVE,
        ))
        await self.db.flush()
        return token

    async def find_by_token(self, token: str) -> Optional[VerificationToken]:
        result = await self.db.execute(
            select(VerificationToken).where(VerificationToken.token == token)
        )
        return result.scalar_one_or_none()

    async def consume(self, record: VerificationToken) -> None:
        if record.state == EntityState.PASSIVE:
            return
        record.state = EntityState.PASSIVE
        await self.db.flush()
