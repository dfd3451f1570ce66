"""
Admin endpoints, authorized by the session's admin token
"""
from fastapi import APIRouter, Depends
from typing import List
import logging

from studyaid.api.deps import require_admin
from studyaid.schemas.admin import AdminLecture, AdminUser, Analytics
from studyaid.schemas.common import MessageResponse
from studyaid.services.admin_service import admin_service
from studyaid.services.session import SessionContext

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)


@router.get("/analytics", response_model=Analytics)
def get_analytics(session: SessionContext = Depends(require_admin)):
    """
    Platform totals

    Returns:
    - Users, lectures, quizzes and flashcards
    - Quiz attempts and flashcard reviews
    - Users active in the last 30 days
    """
    return admin_service.analytics(session)


@router.get("/users", response_model=List[AdminUser])
def list_users(session: SessionContext = Depends(require_admin)):
    return admin_service.list_users(session)


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: str, session: SessionContext = Depends(require_admin)):
    admin_service.delete_user(session, user_id)
    return MessageResponse(message="User deleted")


@router.get("/lectures", response_model=List[AdminLecture])
def list_lectures(session: SessionContext = Depends(require_admin)):
    return admin_service.list_lectures(session)


@router.delete("/lectures/{lecture_id}", response_model=MessageResponse)
def delete_lecture(lecture_id: str, session: SessionContext = Depends(require_admin)):
    admin_service.delete_lecture(session, lecture_id)
    return MessageResponse(message="Lecture deleted")
