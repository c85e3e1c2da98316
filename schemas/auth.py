from typing import Any

from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str


class VerifyTokenResponse(BaseModel):
    valid: bool
    user: dict[str, Any]
