from dataclasses import dataclass
from datetime import timedelta
from typing import Union

from fastapi import UploadFile
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import AppException, ErrorType
from app.core.security import (
    TokenPurpose,
    create_access_token,
    create_purpose_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from app.db.queries import (
    get_company_by_email,
    get_company_by_sid,
    get_company_manager,
    get_company_personel,
    get_current_user,
    get_user_by_email,
    get_user_by_sid,
)
from app.models.base import Base
from app.models.users import Address, Company, EntityState, User, UserDetails, UserRole
from app.schemas.user import (
    AddressCreate,
    CompanyManagerProfileResponse,
    PersonelProfileResponse,
    PersonelResponse,
    RegisterRequest,
    UserProfileResponse,
)
from app.services import email as email_service
from app.services import media as media_service
from app.services.assets import AssetService
from app.services.membership import build_membership
from app.services.verification import VerificationTokenStore


@dataclass(frozen=True)
class CompanyPrincipal:
    company: Company


@dataclass(frozen=True)
class PersonelPrincipal:
    user: User


Principal = Union[CompanyPrincipal, PersonelPrincipal]


def _address(dto: AddressCreate) -> Address:
    return Address(sid=Base.generate_sid(), **dto.model_dump())


class IdentityService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.verification_tokens = VerificationTokenStore(db)

    async def register(self, dto: RegisterRequest) -> Company:
        """
        Creates the company, its manager and their satellite rows in a single
        transaction, then mails a verification link. The mail goes out after
        commit, so a delivery failure never undoes the registration.
        """
        if await self._email_taken(dto.company_email):
            raise AppException(ErrorType.MAIL_ALREADY_EXISTS)

        password_hash = get_password_hash(dto.company_password)
        try:
            user_address = _address(dto.user_address)
            company_address = _address(dto.company_address)
            self.db.add_all([user_address, company_address])
            await self.db.flush()

            company = Company(
                sid=Base.generate_sid(),
                name=dto.company_name,
                email=dto.company_email,
                phone=dto.company_phone,
                password_hash=password_hash,
                is_mail_verified=False,
                address_sid=company_address.sid,
            )
            self.db.add(company)
            await self.db.flush()

            # The manager is only built once the company sid exists
            manager = User(
                sid=Base.generate_sid(),
                email=dto.company_email,
                password_hash=password_hash,
                first_name=dto.first_name,
                last_name=dto.last_name,
                role=UserRole.COMPANY_MANAGER,
                state=EntityState.ACTIVE,
                company_sid=company.sid,
            )
            self.db.add(manager)
            await self.db.flush()

            self.db.add(UserDetails(
                sid=Base.generate_sid(),
                user_sid=manager.sid,
                phone=dto.phone,
                address_sid=user_address.sid,
            ))
            self.db.add(build_membership(company.sid, dto.membership_type))

            token = await self.verification_tokens.generate(company.sid)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            # Only a duplicate email is reported as MAIL_ALREADY_EXISTS
            if await self._email_taken(dto.company_email):
                raise AppException(ErrorType.MAIL_ALREADY_EXISTS)
            raise
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Company {company.sid} registered by {manager.sid}")
        await email_service.send_verification_email(dto.company_email, token)
        return company

    async def verify_account(self, token: str) -> None:
        record = await self.verification_tokens.find_by_token(token)
        if record is None:
            raise AppException(ErrorType.INVALID_TOKEN)
        if record.state == EntityState.PASSIVE:
            raise AppException(ErrorType.TOKEN_ALREADY_USED)

        payload = decode_token(token, TokenPurpose.VERIFICATION)
        if payload.is_expired():
            # An expired token is spent, not retried
            await self.verification_tokens.consume(record)
            await self.db.commit()
            raise AppException(ErrorType.EXPIRED_TOKEN)

        company = await get_company_by_sid(self.db, record.company_sid)
        if company is None:
            raise AppException(ErrorType.COMPANY_NOT_FOUND)

        company.is_mail_verified = True
        await self.verification_tokens.consume(record)
        await self.db.commit()
        logger.info(f"Company {company.sid} verified its email")

    async def resend_verification(self, email: str) -> None:
        company = await get_company_by_email(self.db, email)
        if company is None:
            raise AppException(ErrorType.MAIL_NOT_FOUND)
        if company.is_mail_verified:
            raise AppException(ErrorType.MAIL_ALREADY_VERIFIED)
        await self._send_fresh_verification(company)

    async def authenticate(self, email: str, password: str) -> Principal:
        """
        A company match wins over a personnel match. Managers authenticate
        through their company row only.
        """
        company = await get_company_by_email(self.db, email)
        if company is not None and verify_password(password, company.password_hash):
            return CompanyPrincipal(company)

        result = await self.db.execute(
            select(User).where(
                User.email == email,
                User.role == UserRole.EMPLOYEE,
                User.state == EntityState.ACTIVE,
            )
        )
        user = result.scalar_one_or_none()
        if user is not None and verify_password(password, user.password_hash):
            return PersonelPrincipal(user)

        raise AppException(ErrorType.INVALID_CREDENTIALS)

    async def login(self, email: str, password: str) -> str:
        principal = await self.authenticate(email, password)

        if isinstance(principal, PersonelPrincipal):
            return create_access_token(principal.user.sid, principal.user.role.value)

        company = principal.company
        if not company.is_mail_verified:
            await self._send_fresh_verification(company)
            raise AppException(ErrorType.MAIL_NOT_VERIFIED)

        manager = await get_company_manager(self.db, company.sid)
        if manager is None:
            raise AppException(ErrorType.USER_NOT_FOUND)
        return create_access_token(manager.sid, manager.role.value)

    async def get_profile(self, token: str) -> UserProfileResponse:
        user = await get_current_user(self.db, token)
        return UserProfileResponse.model_validate(user)

    async def get_personel_profile(self, token: str) -> PersonelProfileResponse:
        user = await get_current_user(self.db, token)
        company = await get_company_by_sid(self.db, user.company_sid)
        personel = await self._personel_view(user, company.name if company else None)
        assets = await AssetService(self.db).get_assets_of_user(user.sid)
        return PersonelProfileResponse(**personel.model_dump(), assets=assets)

    async def get_company_manager_profile(self, token: str) -> CompanyManagerProfileResponse:
        user = await get_current_user(self.db, token)
        if user.role != UserRole.COMPANY_MANAGER:
            raise AppException(ErrorType.USER_NOT_FOUND)
        company = await get_company_by_sid(self.db, user.company_sid)
        if company is None:
            raise AppException(ErrorType.COMPANY_NOT_FOUND)

        personel_list = [
            await self._personel_view(employee, company.name)
            for employee in await get_company_personel(self.db, company.sid)
        ]

        return CompanyManagerProfileResponse(
            sid=user.sid,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            avatar_url=user.avatar_url,
            phone=await self._phone_of(user.sid),
            company_sid=company.sid,
            company_name=company.name,
            company_email=company.email,
            company_logo_url=company.logo_url,
            is_mail_verified=company.is_mail_verified,
            personel_list=personel_list,
        )

    async def forgot_password(self, email: str) -> bool:
        user = await get_user_by_email(self.db, email)
        if user is None:
            raise AppException(ErrorType.MAIL_NOT_FOUND)

        token = create_purpose_token(
            user.sid,
            TokenPurpose.PASSWORD_RESET,
            timedelta(minutes=settings.RESET_PASSWORD_TOKEN_EXPIRE_MINUTES),
        )
        await email_service.send_password_reset_email(email, token)
        return True

    async def reset_password(self, token: str, password: str, re_password: str) -> bool:
        payload = decode_token(token, TokenPurpose.PASSWORD_RESET)
        if payload.is_expired():
            raise AppException(ErrorType.EXPIRED_TOKEN)

        user = await get_user_by_sid(self.db, payload.subject)
        if user is None:
            raise AppException(ErrorType.USER_NOT_FOUND)
        if password != re_password:
            raise AppException(ErrorType.PASSWORDS_NOT_MATCH)

        if user.role == UserRole.COMPANY_MANAGER:
            company = await get_company_by_sid(self.db, user.company_sid)
            if company is None:
                raise AppException(ErrorType.COMPANY_NOT_FOUND)
            company.password_hash = get_password_hash(password)
        else:
            user.password_hash = get_password_hash(password)

        await self.db.commit()
        logger.info(f"Password reset for {user.sid}")
        return True

    async def add_logo_to_company(self, token: str, file: UploadFile) -> str:
        user = await self._manager_from_token(token)
        company = await get_company_by_sid(self.db, user.company_sid)
        if company is None:
            raise AppException(ErrorType.COMPANY_NOT_FOUND)

        company.logo_url = await media_service.upload_file(file, "logos")
        await self.db.commit()
        return company.logo_url

    async def add_avatar_to_user(self, token: str, file: UploadFile) -> str:
        user = await self._manager_from_token(token)
        user.avatar_url = await media_service.upload_file(file, "avatars")
        await self.db.commit()
        return user.avatar_url

    async def _manager_from_token(self, token: str) -> User:
        user = await get_current_user(self.db, token)
        if user.role != UserRole.COMPANY_MANAGER:
            raise AppException(ErrorType.UNAUTHORIZED)
        return user

    async def _email_taken(self, email: str) -> bool:
        if await get_user_by_email(self.db, email) is not None:
            return True
        return await get_company_by_email(self.db, email) is not None

    async def _send_fresh_verification(self, company: Company) -> None:
        token = await self.verification_tokens.generate(company.sid)
        await self.db.commit()
        await email_service.send_verification_email(company.email, token)

    async def _phone_of(self, user_sid: str):
        result = await self.db.execute(
            select(UserDetails.phone).where(UserDetails.user_sid == user_sid)
        )
        return result.scalar_one_or_none()

    async def _personel_view(self, user: User, company_name) -> PersonelResponse:
        return PersonelResponse(
            sid=user.sid,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            avatar_url=user.avatar_url,
            phone=await self._phone_of(user.sid),
            company_sid=user.company_sid,
            company_name=company_name,
        )
