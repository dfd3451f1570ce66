"""
Pydantic schemas for authentication
"""
from typing import Any, Dict, Optional

from studyaid.schemas.common import CamelModel


class LoginRequest(CamelModel):
    email: str
    password: str


class SignupRequest(CamelModel):
    name: str
    email: str
    password: str


class AdminLoginRequest(CamelModel):
    token: str


class SessionStatus(CamelModel):
    """Authentication state exposed to the front end"""
    is_authenticated: bool
    is_loading: bool = False
    user: Optional[Dict[str, Any]] = None
    is_admin: bool = False
