"""Pydantic schemas for the auth API.

Responses describe the session state only; access and refresh tokens never
leave the process through this API.
"""

from typing import Optional

from pydantic import BaseModel


class AuthUrlResponse(BaseModel):
    auth_url: str


class AuthStatusResponse(BaseModel):
    authenticated: bool
    token_type: Optional[str] = None
    scope: Optional[str] = None
    expires_at: Optional[float] = None
    expired: Optional[bool] = None


class AuthResultResponse(BaseModel):
    authenticated: bool
    expires_in: int
