import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.models.assets import Asset, AssetStatus
from app.models.base import Base
from app.models.users import Company, User, UserRole, EntityState, VerificationToken


def test_base_model_generate_sid():
    """Test the generation of short IDs"""
    sid = Base.generate_sid()
    assert isinstance(sid, str)
    assert len(sid) == 22
    assert sid != Base.generate_sid()


def test_table_names():
    assert Company.__tablename__ == "company"
    assert VerificationToken.__tablename__ == "verificationtoken"


@pytest.mark.asyncio
async def test_company_email_is_unique(db_session, test_company):
    db_session.add(Company(
        sid=Base.generate_sid(),
        name="Copy",
        email=test_company["company"].email,
        password_hash="x",
    ))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_defaults(db_session, test_company):
    user = User(
        sid=Base.generate_sid(),
        email="defaults@example.com",
        password_hash="x",
        company_sid=test_company["company"].sid,
    )
    db_session.add(user)
    await db_session.flush()

    asset = Asset(sid=Base.generate_sid(), user_sid=user.sid, name="Desk")
    token = VerificationToken(
        sid=Base.generate_sid(),
        token="opaque",
        company_sid=test_company["company"].sid,
        expires_at=datetime.now(timezone.utc) + timedelta(days=1),
    )
    db_session.add_all([asset, token])
    await db_session.commit()

    assert user.role == UserRole.EMPLOYEE
    assert user.state == EntityState.ACTIVE
    assert asset.status == AssetStatus.PENDING
    assert asset.assigned_at is not None
    assert token.state == EntityState.ACTIVE

    stored = (await db_session.execute(select(Asset).where(Asset.sid == asset.sid))).scalar_one()
    assert stored.reject_message is None
