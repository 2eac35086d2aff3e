from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
from datetime import datetime


class ProfileUpdate(BaseModel):
    """Editable fields. Any id in the body is ignored; the id always comes from the session."""
    full_name: Optional[str] = None
    username: Optional[str] = None
    website: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("full_name", "username", "website", "bio", mode="before")
    @classmethod
    def empty_to_none(cls, value):
        # Only "" means unset; whitespace is validated as typed
        if value == "":
            return None
        return value


class ProfileResponse(BaseModel):
    id: str
    full_name: Optional[str] = None
    username: Optional[str] = None
    website: Optional[str] = None
    bio: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileErrorResponse(BaseModel):
    detail: str
    kind: str
