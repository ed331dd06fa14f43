import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql
from unittest.mock import patch

from app.core.exceptions import AppException, ErrorType
from app.core.security import create_access_token
from app.models.assets import Asset, AssetStatus
from app.schemas.asset import NewAssetRequest
from app.services.assets import AssetService
from tests.conftest import create_company, create_employee


def token_for(user):
    return create_access_token(user.sid, user.role.value)


async def assign(db_session, manager_token, personel_sid, serial_number="SN-100"):
    dto = NewAssetRequest(
        personel_sid=personel_sid,
        name="Laptop",
        serial_number=serial_number,
        description="14 inch",
    )
    return await AssetService(db_session).assign_new_asset(manager_token, dto)


async def stored_status(db_session, asset_sid):
    result = await db_session.execute(select(Asset.status).where(Asset.sid == asset_sid))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_assign_creates_pending_assignment(db_session, manager_token, test_employee):
    asset = await assign(db_session, manager_token, test_employee["user"].sid)

    assert asset.status == AssetStatus.PENDING
    assert asset.user_sid == test_employee["user"].sid
    assert asset.personel_first_name == "Mehmet"
    assert asset.reject_message is None
    assert await stored_status(db_session, asset.sid) == AssetStatus.PENDING


@pytest.mark.asyncio
async def test_assign_requires_manager(db_session, employee_token, test_employee):
    with pytest.raises(AppException) as excinfo:
        await assign(db_session, employee_token, test_employee["user"].sid)
    assert excinfo.value.error_type == ErrorType.UNAUTHORIZED


@pytest.mark.asyncio
async def test_assign_to_unknown_personel(db_session, manager_token, test_company):
    with pytest.raises(AppException) as excinfo:
        await assign(db_session, manager_token, test_company["manager"].sid)
    assert excinfo.value.error_type == ErrorType.USER_NOT_FOUND


@pytest.mark.asyncio
async def test_assign_to_other_company_employee(db_session, manager_token, test_employee):
    other_company, _ = await create_company(db_session, email="other@example.com", name="Other")
    outsider = await create_employee(db_session, other_company, email="outsider@example.com")

    with pytest.raises(AppException) as excinfo:
        await assign(db_session, manager_token, outsider.sid)
    assert excinfo.value.error_type == ErrorType.UNAUTHORIZED


@pytest.mark.asyncio
async def test_approve_once(db_session, manager_token, employee_token, test_employee):
    asset = await assign(db_session, manager_token, test_employee["user"].sid)
    service = AssetService(db_session)

    approved = await service.approve_asset_assignment(employee_token, asset.sid)
    assert approved.status == AssetStatus.APPROVED

    with pytest.raises(AppException) as excinfo:
        await service.approve_asset_assignment(employee_token, asset.sid)
    assert excinfo.value.error_type == ErrorType.INVALID_STATE_TRANSITION
    assert await stored_status(db_session, asset.sid) == AssetStatus.APPROVED


@pytest.mark.asyncio
async def test_reject_after_approve_fails(db_session, manager_token, employee_token, test_employee):
    asset = await assign(db_session, manager_token, test_employee["user"].sid)
    service = AssetService(db_session)
    await service.approve_asset_assignment(employee_token, asset.sid)

    with pytest.raises(AppException) as excinfo:
        await service.reject_asset_assignment(employee_token, asset.sid, "changed my mind")
    assert excinfo.value.error_type == ErrorType.INVALID_STATE_TRANSITION

    result = await db_session.execute(select(Asset).where(Asset.sid == asset.sid))
    stored = result.scalar_one()
    assert stored.status == AssetStatus.APPROVED
    assert stored.reject_message is None


@pytest.mark.asyncio
async def test_reject_stores_message(db_session, manager_token, employee_token, test_employee):
    asset = await assign(db_session, manager_token, test_employee["user"].sid)

    rejected = await AssetService(db_session).reject_asset_assignment(
        employee_token, asset.sid, "Screen is cracked"
    )

    assert rejected.status == AssetStatus.REJECTED
    assert rejected.reject_message == "Screen is cracked"


@pytest.mark.asyncio
async def test_only_the_assignee_can_transition(db_session, manager_token, test_company, test_employee):
    asset = await assign(db_session, manager_token, test_employee["user"].sid)
    colleague = await create_employee(db_session, test_company["company"], email="colleague@example.com")
    service = AssetService(db_session)

    for transition in (service.approve_asset_assignment, service.reject_asset_assignment):
        with pytest.raises(AppException) as excinfo:
            await transition(token_for(colleague), asset.sid)
        assert excinfo.value.error_type == ErrorType.UNAUTHORIZED

    with pytest.raises(AppException) as excinfo:
        await service.approve_asset_assignment(manager_token, asset.sid)
    assert excinfo.value.error_type == ErrorType.UNAUTHORIZED

    assert await stored_status(db_session, asset.sid) == AssetStatus.PENDING


@pytest.mark.asyncio
async def test_transition_unknown_asset(db_session, employee_token):
    with pytest.raises(AppException) as excinfo:
        await AssetService(db_session).approve_asset_assignment(employee_token, "missing-asset-sid")
    assert excinfo.value.error_type == ErrorType.ASSET_NOT_FOUND


@pytest.mark.asyncio
async def test_serial_number_cannot_be_held_twice(db_session, manager_token, employee_token, test_company,
                                                   test_employee):
    colleague = await create_employee(db_session, test_company["company"], email="colleague@example.com")
    first = await assign(db_session, manager_token, test_employee["user"].sid)

    with pytest.raises(AppException) as excinfo:
        await assign(db_session, manager_token, colleague.sid)
    assert excinfo.value.error_type == ErrorType.ASSET_ALREADY_ASSIGNED

    # A rejected assignment releases the item
    await AssetService(db_session).reject_asset_assignment(employee_token, first.sid)
    second = await assign(db_session, manager_token, colleague.sid)
    assert second.status == AssetStatus.PENDING


@pytest.mark.asyncio
async def test_personel_assets_are_scoped_to_caller(db_session, manager_token, employee_token, test_company,
                                                     test_employee):
    colleague = await create_employee(db_session, test_company["company"], email="colleague@example.com")
    mine = await assign(db_session, manager_token, test_employee["user"].sid, serial_number="SN-1")
    await assign(db_session, manager_token, colleague.sid, serial_number="SN-2")

    assets = await AssetService(db_session).get_all_personel_assets(employee_token)
    assert [a.sid for a in assets] == [mine.sid]


@pytest.mark.asyncio
async def test_company_asset_list(db_session, manager_token, employee_token, test_employee):
    other_company, other_manager = await create_company(db_session, email="other@example.com", name="Other")
    outsider = await create_employee(db_session, other_company, email="outsider@example.com")
    await assign(db_session, token_for(other_manager), outsider.sid, serial_number="SN-9")
    ours = await assign(db_session, manager_token, test_employee["user"].sid)

    service = AssetService(db_session)
    assets = await service.get_asset_list_of_company(manager_token)
    assert [a.sid for a in assets] == [ours.sid]

    with pytest.raises(AppException) as excinfo:
        await service.get_asset_list_of_company(employee_token)
    assert excinfo.value.error_type == ErrorType.UNAUTHORIZED


@pytest.mark.asyncio
async def test_assign_locks_company_before_serial_check(db_session, manager_token, test_employee):
    with patch.object(db_session, "execute", wraps=db_session.execute) as execute:
        await assign(db_session, manager_token, test_employee["user"].sid)

    statements = [str(c.args[0].compile(dialect=postgresql.dialect())) for c in execute.call_args_list]
    lock = next(i for i, sql in enumerate(statements) if "FOR UPDATE" in sql)
    held = next(i for i, sql in enumerate(statements) if "asset.serial_number" in sql)
    assert "FROM company" in statements[lock]
    assert lock < held
