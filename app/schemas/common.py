from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class BaseResponse(BaseModel, Generic[T]):
    code: int = 200
    success: bool = True
    message: str = ""
    data: Optional[T] = None
