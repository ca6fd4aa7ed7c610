from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request

from app.constants.error_codes import ErrorCode
from app.core.clock import get_clock
from app.core.exceptions import UnauthorizedError
from app.core.security import decode_access_token
from app.utils.logger import get_logger

logger = get_logger("auth.guard")


@dataclass(frozen=True)
class Principal:
    account_id: int
    username: str


async def get_current_principal(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    clock=Depends(get_clock),
) -> Principal:
    """Stateless bearer check; no store lookup."""
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError(ErrorCode.TOKEN_MISSING)

    token = authorization.split("Bearer ", 1)[1].strip()
    if not token:
        raise UnauthorizedError(ErrorCode.TOKEN_MISSING)

    payload = decode_access_token(token, now=clock())

    try:
        principal = Principal(
            account_id=int(payload["sub"]),
            username=payload.get("username", ""),
        )
    except (TypeError, ValueError):
        raise UnauthorizedError(ErrorCode.TOKEN_INVALID)

    request.state.principal = principal
    return principal
