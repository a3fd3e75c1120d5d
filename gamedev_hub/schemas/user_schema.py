# schemas/user_schema.py
from pydantic import BaseModel
from typing import Optional


class UserSummary(BaseModel):
    """Public directory entry; never carries tokens."""
    id: int
    username: str
    avatar: str
    bio: str

    model_config = {"from_attributes": True}


class UserRecord(BaseModel):
    username: str
    avatar: str
    bio: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    model_config = {"from_attributes": True}
