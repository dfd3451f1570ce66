"""
Pydantic schemas for the API key vault
"""
from typing import Optional
from datetime import datetime

from studyaid.schemas.common import CamelModel


class APIKey(CamelModel):
    """Stored provider key; the secret itself is never returned"""
    id: str
    name: str
    provider: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class APIKeyCreate(CamelModel):
    name: str = ""
    key: str = ""
    provider: str = "openai"


class APIKeyUpdate(CamelModel):
    name: Optional[str] = None
    key: Optional[str] = None
