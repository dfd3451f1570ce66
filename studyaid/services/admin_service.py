"""
Admin surface: analytics, users and lectures under the admin token
"""
import logging
from typing import Any, List

from studyaid.schemas.admin import AdminLecture, AdminUser, Analytics
from studyaid.services.session import SessionContext

logger = logging.getLogger(__name__)


class AdminService:
    """Service for admin pages; all calls use the session's admin token"""

    def analytics(self, session: SessionContext) -> Analytics:
        client = session.admin_client
        data = session.cache.fetch(session.cache_scope, ("admin", "analytics"), client.admin_analytics)
        return Analytics.model_validate(data or {})

    def list_users(self, session: SessionContext) -> List[AdminUser]:
        client = session.admin_client
        data = session.cache.fetch(session.cache_scope, ("admin", "users"), client.admin_users)
        return [AdminUser.model_validate(item) for item in data or []]

    def delete_user(self, session: SessionContext, user_id: str) -> Any:
        result = session.admin_client.admin_delete_user(user_id)
        session.cache.invalidate(session.cache_scope, ("admin", "users"))
        logger.warning(f"Admin deleted user {user_id}")
        return result

    def list_lectures(self, session: SessionContext) -> List[AdminLecture]:
        client = session.admin_client
        data = session.cache.fetch(session.cache_scope, ("admin", "lectures"), client.admin_lectures)
        return [AdminLecture.model_validate(item) for item in data or []]

    def delete_lecture(self, session: SessionContext, lecture_id: str) -> Any:
        result = session.admin_client.admin_delete_lecture(lecture_id)
        session.cache.invalidate(session.cache_scope, ("admin", "lectures"))
        logger.warning(f"Admin deleted lecture {lecture_id}")
        return result


# Global instance
admin_service = AdminService()
