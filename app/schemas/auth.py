"""Authentication-related request and response schemas."""

from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    """Payload for user login."""

    username: str
    password: str


class AuthUserResponse(BaseModel):
    """Public identity of a logged-in user."""

    id: int
    username: str
    full_name: str
    role: str
    email: str | None = None

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    user: AuthUserResponse
    token: str


class CheckAuthResponse(BaseModel):
    authenticated: bool
    user: AuthUserResponse | None = None
