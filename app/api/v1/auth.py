from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import rate_limit_dependency
from app.db.session import get_db
from app.schemas.common import BaseResponse
from app.schemas.user import (
    RegisterRequest, LoginRequest, TokenResponse, ResendVerificationRequest,
    ForgotPasswordRequest, ResetPasswordRequest,
)
from app.services.identity import IdentityService

router = APIRouter()


@router.post("/register", response_model=BaseResponse[bool])
async def register(
        dto: RegisterRequest,
        db: AsyncSession = Depends(get_db),
):
    await IdentityService(db).register(dto)
    return BaseResponse(
        message="Registration successful, please verify your email",
        data=True,
    )


@router.get("/verify-account", response_model=BaseResponse[bool])
async def verify_account(
        token: str = Query(...),
        db: AsyncSession = Depends(get_db),
):
    await IdentityService(db).verify_account(token)
    return BaseResponse(message="Email verified", data=True)


@router.post("/resend-verification", response_model=BaseResponse[bool])
async def resend_verification(
        dto: ResendVerificationRequest,
        db: AsyncSession = Depends(get_db),
):
    await IdentityService(db).resend_verification(dto.email)
    return BaseResponse(message="Verification email sent", data=True)


@router.post(
    "/login",
    response_model=BaseResponse[TokenResponse],
    dependencies=[Depends(rate_limit_dependency(scope="login"))],
)
async def login(
        dto: LoginRequest,
        db: AsyncSession = Depends(get_db),
):
    access_token = await IdentityService(db).login(dto.email, dto.password)
    return BaseResponse(
        message="Login successful",
        data=TokenResponse(access_token=access_token),
    )


@router.post(
    "/forgot-password",
    response_model=BaseResponse[bool],
    dependencies=[Depends(rate_limit_dependency(scope="forgot-password"))],
)
async def forgot_password(
        dto: ForgotPasswordRequest,
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Password reset email sent",
        data=await IdentityService(db).forgot_password(dto.email),
    )


@router.post("/reset-password", response_model=BaseResponse[bool])
async def reset_password(
        dto: ResetPasswordRequest,
        db: AsyncSession = Depends(get_db),
):
    return BaseResponse(
        message="Password updated",
        data=await IdentityService(db).reset_password(dto.token, dto.password, dto.re_password),
    )
