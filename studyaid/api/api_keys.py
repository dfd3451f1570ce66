"""
API key vault endpoints
"""
from fastapi import APIRouter, Depends
from typing import Any, Dict, List

from studyaid.api.deps import require_user
from studyaid.schemas.api_key import APIKey, APIKeyCreate, APIKeyUpdate
from studyaid.schemas.common import MessageResponse
from studyaid.services.api_key_service import PROVIDERS, api_key_service
from studyaid.services.session import SessionContext

router = APIRouter(prefix="/api/api-keys", tags=["api-keys"])


@router.get("/providers")
def list_providers() -> List[Dict[str, str]]:
    return [{"id": provider_id, "name": name} for provider_id, name in PROVIDERS.items()]


@router.get("/", response_model=List[APIKey])
def list_api_keys(session: SessionContext = Depends(require_user)):
    return api_key_service.list_api_keys(session)


@router.post("/", status_code=201)
def create_api_key(request: APIKeyCreate, session: SessionContext = Depends(require_user)) -> Any:
    return api_key_service.create_api_key(session, request)


@router.put("/{key_id}")
def update_api_key(
    key_id: str,
    request: APIKeyUpdate,
    session: SessionContext = Depends(require_user)
) -> Any:
    return api_key_service.update_api_key(session, key_id, request)


@router.delete("/{key_id}", response_model=MessageResponse)
def delete_api_key(key_id: str, session: SessionContext = Depends(require_user)):
    api_key_service.delete_api_key(session, key_id)
    return MessageResponse(message="API key deleted")
