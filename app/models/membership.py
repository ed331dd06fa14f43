from sqlalchemy import Column, String, Float, Date, Enum, ForeignKey
from app.models.base import Base
import enum


class MembershipType(str, enum.Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


class Membership(Base):
    company_sid = Column(String(22), ForeignKey("company.sid"), unique=True, nullable=False)
    membership_type = Column(Enum(MembershipType), nullable=False)
    price = Column(Float, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
