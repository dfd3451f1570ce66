"""
Pydantic schemas for admin endpoints
"""
from pydantic import Field
from typing import List, Optional
from datetime import datetime

from studyaid.schemas.common import CamelModel


class Analytics(CamelModel):
    """Platform-wide totals"""
    total_users: int = 0
    total_lectures: int = 0
    total_quizzes: int = 0
    total_flashcards: int = 0
    total_quiz_attempts: int = 0
    total_flashcard_reviews: int = 0
    active_users_last30_days: int = Field(0, alias="activeUsersLast30Days")


class UserCounts(CamelModel):
    lectures: int = 0
    quiz_attempts: int = 0
    flashcard_reviews: int = 0


class UserLecture(CamelModel):
    id: str
    title: str
    created_at: Optional[datetime] = None


class UserAPIKey(CamelModel):
    id: str
    name: str
    provider: str
    created_at: Optional[datetime] = None


class AdminUser(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    counts: Optional[UserCounts] = Field(None, alias="_count")
    lectures: List[UserLecture] = Field(default_factory=list)
    api_keys: List[UserAPIKey] = Field(default_factory=list)


class AdminLectureOwner(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class AdminLectureCounts(CamelModel):
    quizzes: int = 0
    flashcard_sets: int = 0


class AdminLecture(CamelModel):
    id: str
    title: str
    created_at: Optional[datetime] = None
    user: Optional[AdminLectureOwner] = None
    counts: Optional[AdminLectureCounts] = Field(None, alias="_count")
