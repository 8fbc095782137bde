"""
Request/response envelopes for the sign-in endpoints.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class GoogleSignInRequest(BaseModel):
    id_token: str


class UserOut(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    user: Optional[UserOut] = None


class AuthConfigResponse(BaseModel):
    # Public OAuth client id, never a secret
    googleClientId: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True
