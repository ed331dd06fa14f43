from datetime import datetime, timezone
from typing import List, Optional

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppException, ErrorType
from app.db.queries import get_current_user
from app.models.assets import Asset, AssetStatus
from app.models.base import Base
from app.models.users import Company, User, UserRole
from app.schemas.asset import AssetResponse, NewAssetRequest

# Assignments that still hold the physical item
HOLDING_STATUSES = (AssetStatus.PENDING, AssetStatus.APPROVED)


def _to_response(asset: Asset, first_name: Optional[str], last_name: Optional[str]) -> AssetResponse:
    return AssetResponse(
        sid=asset.sid,
        user_sid=asset.user_sid,
        name=asset.name,
        serial_number=asset.serial_number,
        description=asset.description,
        status=asset.status,
        reject_message=asset.reject_message,
        assigned_at=asset.assigned_at,
        personel_first_name=first_name,
        personel_last_name=last_name,
    )


class AssetService:
    """
    Assignment lifecycle: PENDING -> APPROVED | REJECTED. Both targets are
    terminal and only the assigned employee can move an assignment.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def assign_new_asset(self, token: str, dto: NewAssetRequest) -> AssetResponse:
        manager = await get_current_user(self.db, token)
        if manager.role != UserRole.COMPANY_MANAGER:
            raise AppException(ErrorType.UNAUTHORIZED)

        result = await self.db.execute(
            select(User).where(User.sid == dto.personel_sid, User.role == UserRole.EMPLOYEE)
        )
        personel = result.scalar_one_or_none()
        if personel is None:
            raise AppException(ErrorType.USER_NOT_FOUND)
        if personel.company_sid != manager.company_sid:
            raise AppException(ErrorType.UNAUTHORIZED)

        if dto.serial_number:
            # Assigns within one company are serialized on the company row
            await self.db.execute(
                select(Company.id).where(Company.sid == manager.company_sid).with_for_update()
            )
            held = await self.db.execute(
                select(Asset.sid)
                .join(User, User.sid == Asset.user_sid)
                .where(
                    User.company_sid == manager.company_sid,
                    Asset.serial_number == dto.serial_number,
                    Asset.status.in_(HOLDING_STATUSES),
                )
            )
            if held.first() is not None:
                raise AppException(ErrorType.ASSET_ALREADY_ASSIGNED)

        asset = Asset(
            sid=Base.generate_sid(),
            user_sid=personel.sid,
            name=dto.name,
            serial_number=dto.serial_number,
            description=dto.description,
            assigned_at=datetime.now(timezone.utc),
            status=AssetStatus.PENDING,
        )
        self.db.add(asset)
        await self.db.commit()

        logger.info(f"Asset {asset.sid} assigned to {personel.sid} by {manager.sid}")
        return _to_response(asset, personel.first_name, personel.last_name)

    async def approve_asset_assignment(self, token: str, asset_sid: str) -> AssetResponse:
        return await self._transition(token, asset_sid, AssetStatus.APPROVED)

    async def reject_asset_assignment(self, token: str, asset_sid: str,
                                      reject_message: Optional[str] = None) -> AssetResponse:
        return await self._transition(token, asset_sid, AssetStatus.REJECTED, reject_message)

    async def _transition(self, token: str, asset_sid: str, target: AssetStatus,
                          reject_message: Optional[str] = None) -> AssetResponse:
        user = await get_current_user(self.db, token)

        result = await self.db.execute(select(Asset).where(Asset.sid == asset_sid))
        asset = result.scalar_one_or_none()
        if asset is None:
            raise AppException(ErrorType.ASSET_NOT_FOUND)
        if asset.user_sid != user.sid:
            raise AppException(ErrorType.UNAUTHORIZED)
        if asset.status != AssetStatus.PENDING:
            raise AppException(ErrorType.INVALID_STATE_TRANSITION)

        # Conditional write: a concurrent transition leaves rowcount at 0
        updated = await self.db.execute(
            update(Asset)
            .where(Asset.sid == asset_sid, Asset.status == AssetStatus.PENDING)
            .values(
                status=target,
                reject_message=reject_message if target == AssetStatus.REJECTED else None,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        if updated.rowcount != 1:
            await self.db.rollback()
            raise AppException(ErrorType.INVALID_STATE_TRANSITION)

        await self.db.commit()
        await self.db.refresh(asset)

        logger.info(f"Asset {asset.sid} {target.value.lower()} by {user.sid}")
        return _to_response(asset, user.first_name, user.last_name)

    async def get_assets_of_user(self, user_sid: str) -> List[AssetResponse]:
        result = await self.db.execute(
            select(Asset, User.first_name, User.last_name)
            .join(User, User.sid == Asset.user_sid)
            .where(Asset.user_sid == user_sid)
            .order_by(Asset.assigned_at.desc())
        )
        return [_to_response(asset, first, last) for asset, first, last in result.all()]

    async def get_all_personel_assets(self, token: str) -> List[AssetResponse]:
        user = await get_current_user(self.db, token)
        return await self.get_assets_of_user(user.sid)

    async def get_asset_list_of_company(self, token: str) -> List[AssetResponse]:
        manager = await get_current_user(self.db, token)
        if manager.role != UserRole.COMPANY_MANAGER:
            raise AppException(ErrorType.UNAUTHORIZED)

        result = await self.db.execute(
            select(Asset, User.first_name, User.last_name)
            .join(User, User.sid == Asset.user_sid)
            .where(User.company_sid == manager.company_sid)
            .order_by(Asset.assigned_at.desc())
        )
        return [_to_response(asset, first, last) for asset, first, last in result.all()]
