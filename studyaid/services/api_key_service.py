"""
API key vault management
"""
import logging
from typing import Any, Dict, List, Optional

from studyaid.exceptions import RemoteAPIError, ValidationFailure
from studyaid.schemas.api_key import APIKey, APIKeyCreate, APIKeyUpdate
from studyaid.services.session import SessionContext

logger = logging.getLogger(__name__)

PROVIDERS = {
    "openai": "OpenAI",
    "groq": "Groq",
}


class APIKeyService:
    """Service for stored provider keys; every mutation invalidates apiKeys"""

    def list_api_keys(self, session: SessionContext) -> List[APIKey]:
        client = session.client
        data = session.cache.fetch(session.cache_scope, ("apiKeys",), client.list_api_keys)
        return [APIKey.model_validate(item) for item in data or []]

    def get_provider_key(self, session: SessionContext, provider: str) -> Optional[str]:
        """Return the stored secret for a provider, or None when unavailable"""
        try:
            data = session.client.get_provider_key(provider) or {}
        except RemoteAPIError as e:
            logger.error(f"Error fetching provider key: {e.message}")
            return None
        return data.get("key")

    def create_api_key(self, session: SessionContext, request: APIKeyCreate) -> Dict[str, Any]:
        if not request.name.strip() or not request.key.strip():
            raise ValidationFailure("Name and key are required")
        if request.provider not in PROVIDERS:
            raise ValidationFailure(f"Unknown provider: {request.provider}")

        created = session.client.create_api_key(request.model_dump(by_alias=True))
        session.cache.invalidate(session.cache_scope, ("apiKeys",))
        logger.info(f"API key stored for provider {request.provider}")
        return created

    def update_api_key(self, session: SessionContext, key_id: str, request: APIKeyUpdate) -> Dict[str, Any]:
        payload = {"id": key_id, **request.model_dump(by_alias=True, exclude_none=True)}
        updated = session.client.update_api_key(key_id, payload)
        session.cache.invalidate(session.cache_scope, ("apiKeys",))
        return updated

    def delete_api_key(self, session: SessionContext, key_id: str) -> Any:
        result = session.client.delete_api_key(key_id)
        session.cache.invalidate(session.cache_scope, ("apiKeys",))
        return result


# Global instance
api_key_service = APIKeyService()
