from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi.security import OAuth2PasswordBearer
from jose import jwt
from pydantic import BaseModel

from app.salonpos.core.config import settings

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/salonpos/auth/login")


class TokenData(BaseModel):
    sub: str
    tenant_id: str
    branch_id: str | None = None
    role: str


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def create_staff_access_token(
    *,
    user_id: str,
    tenant_id: str,
    role: str,
    branch_id: str | None = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    return create_access_token(
        {
            "sub": user_id,
            "tenant_id": tenant_id,
            "branch_id": branch_id,
            "role": role,
        },
        expires_delta=expires_delta,
    )
