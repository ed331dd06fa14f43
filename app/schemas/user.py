# app/schemas/user.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List

from app.models.membership import MembershipType
from app.schemas.asset import AssetResponse


class AddressCreate(BaseModel):
    country: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    street: Optional[str] = None
    postal_code: Optional[str] = None


class RegisterRequest(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    user_address: AddressCreate = Field(default_factory=AddressCreate)

    company_name: str = Field(..., min_length=1)
    company_email: EmailStr
    company_password: str = Field(..., min_length=8)
    company_phone: Optional[str] = None
    company_address: AddressCreate = Field(default_factory=AddressCreate)

    membership_type: MembershipType = MembershipType.MONTHLY


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str
    password: str = Field(..., min_length=8)
    re_password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserProfileResponse(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class PersonelResponse(BaseModel):
    sid: str
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    company_sid: str
    company_name: Optional[str] = None


class PersonelProfileResponse(PersonelResponse):
    assets: List[AssetResponse] = []


class CompanyManagerProfileResponse(BaseModel):
    sid: str
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    company_sid: str
    company_name: str
    company_email: EmailStr
    company_logo_url: Optional[str] = None
    is_mail_verified: bool
    personel_list: List[PersonelResponse] = []
