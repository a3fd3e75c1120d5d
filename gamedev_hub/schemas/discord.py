from typing import Optional
from pydantic import BaseModel


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str = ""
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    scope: Optional[str] = None

    model_config = {"extra": "ignore"}


class DiscordProfile(BaseModel):
    id: str
    username: str
    avatar: Optional[str] = None
    discriminator: Optional[str] = "0"
    verified: bool = False
    email: Optional[str] = None

    model_config = {"extra": "ignore"}


class DiscordGuild(BaseModel):
    id: str
    name: Optional[str] = None

    model_config = {"extra": "ignore"}
