from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import get_clock
from app.core.db import get_db
from app.schemas.auth.auth_schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
)
from app.services.auth.account_service import create_account
from app.services.auth.auth_service import login_user
from app.utils.logger import get_logger

logger = get_logger("auth.router")

router = APIRouter(tags=["Auth"])


@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    payload: SignupRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Signup attempt", extra={"username": payload.username})

    await create_account(db, payload.username, payload.password)

    return {"message": "User registered successfully"}


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
    clock=Depends(get_clock),
):
    logger.info("Login attempt", extra={"username": payload.username})

    return await login_user(db, payload.username, payload.password, clock())
