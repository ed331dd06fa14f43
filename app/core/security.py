import hashlib
import hmac
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from jose import jwt, JWTError

from app.core.config import settings
from app.core.exceptions import AppException, ErrorType


class TokenPurpose(str, Enum):
    SESSION = "session"
    VERIFICATION = "verification"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True)
class TokenPayload:
    subject: str
    purpose: TokenPurpose
    expires_at: datetime
    role: Optional[str] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at <= (now or datetime.now(timezone.utc))


def _encode(claims: dict) -> str:
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(subject: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return _encode({
        "sub": str(subject),
        "role": role,
        "purpose": TokenPurpose.SESSION.value,
        "exp": expire,
        "jti": str(uuid.uuid4()),
    })


def create_purpose_token(subject: str, purpose: TokenPurpose, expires_delta: timedelta) -> str:
    """
    Short-lived token bound to one workflow. The expiry travels as the ``exp``
    claim and is read back through decode_token.
    """
    expire = datetime.now(timezone.utc) + expires_delta
    return _encode({
        "sub": str(subject),
        "purpose": purpose.value,
        "exp": expire,
        "jti": str(uuid.uuid4()),
    })


def decode_token(token: str, purpose: Optional[TokenPurpose] = None) -> TokenPayload:
    """
    Checks signature and structure only; expiry is left to the caller.
    """
    try:
        claims = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": False},
        )
        payload = TokenPayload(
            subject=claims["sub"],
            purpose=TokenPurpose(claims["purpose"]),
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
            role=claims.get("role"),
        )
    except (JWTError, KeyError, ValueError, TypeError):
        raise AppException(ErrorType.INVALID_TOKEN)

    if purpose is not None and payload.purpose != purpose:
        raise AppException(ErrorType.INVALID_TOKEN)
    return payload


def validate_token(token: str) -> str:
    """Returns the subject sid of a live session token."""
    payload = decode_token(token, TokenPurpose.SESSION)
    if payload.is_expired():
        raise AppException(ErrorType.INVALID_TOKEN)
    return payload.subject


# Deterministic: login looks rows up by (email, password_hash).
def get_password_hash(password: str) -> str:
    return hmac.new(
        settings.PASSWORD_SALT.encode(),
        password.encode(),
        hashlib.sha256,
    ).hexdigest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return hmac.compare_digest(get_password_hash(plain_password), hashed_password)
