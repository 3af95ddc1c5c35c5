from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class InterestCreate(BaseModel):
    interest: str


class InterestInDB(BaseModel):
    id: int
    elderly_profile_id: int
    interest: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
