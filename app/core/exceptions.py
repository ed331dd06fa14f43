from enum import Enum
from typing import Optional

from fastapi import status


class ErrorType(Enum):
    """Every failure the workflows can raise: (code, message, http status)."""

    MAIL_ALREADY_EXISTS = (1001, "Email already registered", status.HTTP_400_BAD_REQUEST)
    INVALID_TOKEN = (1002, "Invalid token", status.HTTP_401_UNAUTHORIZED)
    TOKEN_ALREADY_USED = (1003, "Token has already been used", status.HTTP_400_BAD_REQUEST)
    EXPIRED_TOKEN = (1004, "Token has expired", status.HTTP_400_BAD_REQUEST)
    COMPANY_NOT_FOUND = (1005, "Company not found", status.HTTP_404_NOT_FOUND)
    USER_NOT_FOUND = (1006, "User not found", status.HTTP_404_NOT_FOUND)
    INVALID_CREDENTIALS = (1007, "Incorrect email or password", status.HTTP_401_UNAUTHORIZED)
    MAIL_NOT_VERIFIED = (1008, "Email not verified, a new verification mail has been sent", status.HTTP_403_FORBIDDEN)
    MAIL_NOT_FOUND = (1009, "No account registered with this email", status.HTTP_404_NOT_FOUND)
    PASSWORDS_NOT_MATCH = (1010, "Passwords do not match", status.HTTP_400_BAD_REQUEST)
    UNAUTHORIZED = (1011, "Not enough permissions", status.HTTP_403_FORBIDDEN)
    INVALID_STATE_TRANSITION = (1012, "Asset assignment is not pending", status.HTTP_409_CONFLICT)
    ASSET_NOT_FOUND = (1013, "Asset not found", status.HTTP_404_NOT_FOUND)
    ASSET_ALREADY_ASSIGNED = (1014, "Asset is already assigned", status.HTTP_409_CONFLICT)
    MAIL_ALREADY_VERIFIED = (1015, "Email already verified", status.HTTP_400_BAD_REQUEST)
    MEDIA_UPLOAD_FAILED = (1016, "File upload failed", status.HTTP_502_BAD_GATEWAY)

    def __init__(self, code: int, message: str, http_status: int):
        self.code = code
        self.message = message
        self.http_status = http_status


class AppException(Exception):
    def __init__(self, error_type: ErrorType, message: Optional[str] = None):
        self.error_type = error_type
        self.message = message or error_type.message
        super().__init__(self.message)

    @property
    def code(self) -> int:
        return self.error_type.code

    @property
    def status_code(self) -> int:
        return self.error_type.http_status
