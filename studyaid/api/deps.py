"""
Request dependencies: session lookup and authentication guards
"""
import uuid

from fastapi import Depends, Request, Response

from studyaid.config import settings
from studyaid.exceptions import NotAuthenticated
from studyaid.services.session import SessionContext, session_registry


def get_session(request: Request, response: Response) -> SessionContext:
    """Resolve the caller's session from its cookie, issuing a new one if absent"""
    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not session_id:
        session_id = uuid.uuid4().hex
        response.set_cookie(
            settings.SESSION_COOKIE_NAME,
            session_id,
            max_age=settings.SESSION_TTL,
            httponly=True,
            samesite="lax"
        )
    return session_registry.get_or_create(session_id)


def require_user(session: SessionContext = Depends(get_session)) -> SessionContext:
    """Session with a verified user token"""
    if session.is_loading:
        session.check_auth()
    if not session.is_authenticated:
        raise NotAuthenticated()
    return session


def require_admin(session: SessionContext = Depends(get_session)) -> SessionContext:
    """Session holding an unexpired admin token"""
    if not session.is_admin:
        raise NotAuthenticated("Admin login required")
    return session
