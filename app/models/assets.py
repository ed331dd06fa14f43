from sqlalchemy import Column, String, Text, DateTime, Enum, ForeignKey
from datetime import datetime, timezone
import enum
from app.models.base import Base


class AssetStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Asset(Base):
    user_sid = Column(String(22), ForeignKey("user.sid"), nullable=False, index=True)
    name = Column(String, nullable=False)
    serial_number = Column(String, index=True)
    description = Column(Text)
    assigned_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True))
    status = Column(Enum(AssetStatus), nullable=False, default=AssetStatus.PENDING)
    reject_message = Column(Text)
