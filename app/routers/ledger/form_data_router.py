from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import get_clock
from app.core.db import get_db
from app.schemas.auth.auth_schemas import MessageResponse
from app.schemas.ledger.form_data_schemas import ActivityRecordOut, FormDataCreate
from app.services.ledger.form_data_service import list_form_data, save_form_data
from app.utils.get_user import get_current_principal

router = APIRouter(
    prefix="/formdata",
    tags=["Form Data"],
    dependencies=[Depends(get_current_principal)],
)


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_form_data(
    payload: FormDataCreate,
    db: AsyncSession = Depends(get_db),
    clock=Depends(get_clock),
):
    await save_form_data(db, payload, clock())
    return {"message": "Form data saved successfully"}


@router.get("/{owner_id}", response_model=List[ActivityRecordOut])
async def get_form_data(
    owner_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await list_form_data(db, owner_id)
