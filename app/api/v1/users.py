from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import require_roles
from app.db.session import get_db
from app.models.users import UserRole
from app.schemas.common import BaseResponse
from app.schemas.user import (
    UserProfileResponse, PersonelProfileResponse, CompanyManagerProfileResponse,
)
from app.services.identity import IdentityService

router = APIRouter()

any_user = require_roles(UserRole.COMPANY_MANAGER, UserRole.EMPLOYEE)
manager_only = require_roles(UserRole.COMPANY_MANAGER)


@router.get("/profile", response_model=BaseResponse[UserProfileResponse])
async def get_profile(
        token: str = Depends(any_user),
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="User profile",
        data=await IdentityService(db).get_profile(token),
    )


@router.get("/personel-profile", response_model=BaseResponse[PersonelProfileResponse])
async def get_personel_profile(
        token: str = Depends(any_user),
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Personnel profile",
        data=await IdentityService(db).get_personel_profile(token),
    )


@router.get("/company-manager-profile", response_model=BaseResponse[CompanyManagerProfileResponse])
async def get_company_manager_profile(
        token: str = Depends(manager_only),
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Company manager profile",
        data=await IdentityService(db).get_company_manager_profile(token),
    )


@router.post("/company-logo", response_model=BaseResponse[str])
async def add_logo_to_company(
        file: UploadFile = File(...),
        token: str = Depends(any_user),
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Company logo updated",
        data=await IdentityService(db).add_logo_to_company(token, file),
    )


@router.post("/avatar", response_model=BaseResponse[str])
async def add_avatar_to_user(
        file: UploadFile = File(...),
        token: str = Depends(any_user),
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Avatar updated",
        data=await IdentityService(db).add_avatar_to_user(token, file),
    )
