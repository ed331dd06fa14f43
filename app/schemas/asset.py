from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.assets import AssetStatus


class NewAssetRequest(BaseModel):
    personel_sid: str
    name: str = Field(..., min_length=1)
    serial_number: Optional[str] = None
    description: Optional[str] = None


class RejectAssetRequest(BaseModel):
    reject_message: Optional[str] = None


class AssetResponse(BaseModel):
    sid: str
    user_sid: str
    name: str
    serial_number: Optional[str] = None
    description: Optional[str] = None
    status: AssetStatus
    reject_message: Optional[str] = None
    assigned_at: Optional[datetime] = None
    personel_first_name: Optional[str] = None
    personel_last_name: Optional[str] = None

    class Config:
        from_attributes = True
