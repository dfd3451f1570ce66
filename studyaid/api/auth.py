"""
Authentication endpoints for the user and admin token domains
"""
from fastapi import APIRouter, Depends
import logging

from studyaid.api.deps import get_session
from studyaid.schemas.auth import AdminLoginRequest, LoginRequest, SessionStatus, SignupRequest
from studyaid.services.session import SessionContext, session_registry

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _status(session: SessionContext) -> SessionStatus:
    return SessionStatus(
        is_authenticated=session.is_authenticated,
        is_loading=session.is_loading,
        user=session.user,
        is_admin=session.is_admin
    )


@router.post("/login", response_model=SessionStatus)
def login(request: LoginRequest, session: SessionContext = Depends(get_session)):
    """Log in against the remote API and persist the returned token"""
    session.login(request.email, request.password)
    return _status(session)


@router.post("/signup", response_model=SessionStatus)
def signup(request: SignupRequest, session: SessionContext = Depends(get_session)):
    """Create an account and log in with the returned token"""
    session.signup(request.name, request.email, request.password)
    return _status(session)


@router.get("/session", response_model=SessionStatus)
def session_status(session: SessionContext = Depends(get_session)):
    """
    Current authentication state

    Verifies a persisted token on first use of the session.
    """
    if session.is_loading:
        session.check_auth()
    return _status(session)


@router.post("/logout", response_model=SessionStatus)
def logout(session: SessionContext = Depends(get_session)):
    """Clear the session and release its live context"""
    session.logout()
    session_registry.discard(session.session_id)
    return _status(session)


@router.post("/admin/login", response_model=SessionStatus)
def admin_login(request: AdminLoginRequest, session: SessionContext = Depends(get_session)):
    """Store an admin bearer token for this session"""
    session.admin_login(request.token)
    logger.info("Admin token stored")
    return _status(session)


@router.post("/admin/logout", response_model=SessionStatus)
def admin_logout(session: SessionContext = Depends(get_session)):
    session.admin_logout()
    return _status(session)
