from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional, Dict, Any


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = {}


class SessionContext(BaseModel):
    """Identity of the signed-in user, passed explicitly into profile operations."""
    user_id: str
    access_token: str
    email: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_user_data(cls, user_data: Dict[str, Any], token: str) -> "SessionContext":
        return cls(user_id=user_data["id"], access_token=token, email=user_data.get("email"))
