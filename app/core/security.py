# app/core/security.py

from datetime import datetime, timedelta
from typing import Optional

from passlib.context import CryptContext
from jose import jwt, JWTError

from app.constants.error_codes import ErrorCode
from app.core.clock import utc_now
from app.core.config import (
    JWT_ACCESS_SECRET_KEY,
    JWT_ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES,
)
from app.core.exceptions import UnauthorizedError

# =====================================================
# PASSWORD HASHING
# =====================================================
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)

# =====================================================
# ACCESS TOKEN
# =====================================================
def create_access_token(
    account_id: int,
    username: str,
    now: Optional[datetime] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = now or utc_now()
    expire = now + (
        expires_delta
        if expires_delta
        else timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    payload = {
        "sub": str(account_id),
        "username": username,
        "type": "access",
        "iat": now,
        "exp": expire,
    }

    return jwt.encode(payload, JWT_ACCESS_SECRET_KEY, algorithm=JWT_ALGORITHM)

# =====================================================
# DECODE + VALIDATE TOKEN
# =====================================================
def decode_access_token(token: str, now: Optional[datetime] = None) -> dict:
    """
    Verify signature, then expiry against `now`.

    Expiry is checked here rather than by jose so the clock can be injected.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_ACCESS_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError:
        raise UnauthorizedError(ErrorCode.TOKEN_INVALID)

    if payload.get("type") != "access" or "sub" not in payload:
        raise UnauthorizedError(ErrorCode.TOKEN_INVALID)

    exp = payload.get("exp")
    if not isinstance(exp, (int, float)):
        raise UnauthorizedError(ErrorCode.TOKEN_INVALID)

    current = int((now or utc_now()).timestamp())
    if exp < current:
        raise UnauthorizedError(ErrorCode.TOKEN_EXPIRED)

    return payload
