from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FormDataCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_name: str = Field(alias="accountName", min_length=1)
    # negatives are reserved for the absence sentinel
    sent_invitation: Optional[int] = Field(default=None, ge=0, alias="sentInvitation")
    connections: Optional[int] = Field(default=None, ge=0)
    bot_file_names: Optional[int] = Field(default=None, ge=0, alias="noOfBotFileNames")
    owner_id: int = Field(alias="id")


class ActivityRecordOut(BaseModel):
    """Wire shape of a record: four parallel, equal-length histories."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    account_name: str = Field(serialization_alias="accountName")
    sent_invitation: List[Optional[int]] = Field(serialization_alias="sentInvitation")
    connections: List[Optional[int]]
    bot_file_names: List[Optional[int]] = Field(serialization_alias="noOfBotFileNames")
    dates: List[datetime] = Field(serialization_alias="Dates")
    owner_id: int = Field(serialization_alias="owner")
