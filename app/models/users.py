# app/models/users.py
from sqlalchemy import Column, String, Boolean, Text, Enum, ForeignKey, DateTime
from app.models.base import Base
import enum


class UserRole(str, enum.Enum):
    COMPANY_MANAGER = "COMPANY_MANAGER"
    EMPLOYEE = "EMPLOYEE"


class EntityState(str, enum.Enum):
    ACTIVE = "ACTIVE"
    PASSIVE = "PASSIVE"


class Address(Base):
    country = Column(String)
    city = Column(String)
    district = Column(String)
    street = Column(String)
    postal_code = Column(String)


class Company(Base):
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    phone = Column(String)
    password_hash = Column(Text, nullable=False)
    is_mail_verified = Column(Boolean, default=False, nullable=False)
    logo_url = Column(String)
    address_sid = Column(String(22), ForeignKey("address.sid"))


class User(Base):
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(Text, nullable=False)
    first_name = Column(String)
    last_name = Column(String)
    avatar_url = Column(String)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.EMPLOYEE)
    state = Column(Enum(EntityState), nullable=False, default=EntityState.ACTIVE)
    company_sid = Column(String(22), ForeignKey("company.sid"), nullable=False, index=True)


class UserDetails(Base):
    user_sid = Column(String(22), ForeignKey("user.sid"), unique=True, nullable=False)
    phone = Column(String)
    address_sid = Column(String(22), ForeignKey("address.sid"))


class VerificationToken(Base):
    token = Column(Text, unique=True, nullable=False)
    company_sid = Column(String(22), ForeignKey("company.sid"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    state = Column(Enum(EntityState), nullable=False, default=EntityState.ACTIVE)
