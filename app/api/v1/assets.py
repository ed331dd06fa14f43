from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.dependencies import require_roles
from app.db.session import get_db
from app.models.users import UserRole
from app.schemas.asset import AssetResponse, NewAssetRequest, RejectAssetRequest
from app.schemas.common import BaseResponse
from app.services.assets import AssetService

router = APIRouter()


@router.get("/personel", response_model=BaseResponse[List[AssetResponse]])
async def get_personel_assets(
        token: str = Depends(require_roles(UserRole.COMPANY_MANAGER, UserRole.EMPLOYEE)),
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Assets assigned to the personnel",
        data=await AssetService(db).get_all_personel_assets(token),
    )


@router.get("/company", response_model=BaseResponse[List[AssetResponse]])
async def get_asset_list_of_company(
        token: str = Depends(require_roles(UserRole.COMPANY_MANAGER)),
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Asset assignments of the company",
        data=await AssetService(db).get_asset_list_of_company(token),
    )


@router.post("/assign", response_model=BaseResponse[AssetResponse])
async def assign_new_asset(
        dto: NewAssetRequest,
        token: str = Depends(require_roles(UserRole.COMPANY_MANAGER)),
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Asset assigned, waiting for approval",
        data=await AssetService(db).assign_new_asset(token, dto),
    )


@router.put("/{asset_sid}/approve", response_model=BaseResponse[AssetResponse])
async def approve_asset(
        asset_sid: str,
        token: str = Depends(require_roles(UserRole.EMPLOYEE)),
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Asset assignment approved",
        data=await AssetService(db).approve_asset_assignment(token, asset_sid),
    )


@router.put("/{asset_sid}/reject", response_model=BaseResponse[AssetResponse])
async def reject_asset(
        asset_sid: str,
        dto: Optional[RejectAssetRequest] = None,
        token: str = Depends(require_roles(UserRole.EMPLOYEE)),
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Asset assignment rejected",
        data=await AssetService(db).reject_asset_assignment(
            token, asset_sid, dto.reject_message if dto else None
        ),
    )
