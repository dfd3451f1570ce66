"""
Pydantic schemas for lecture-related requests and responses
"""
from pydantic import Field
from typing import List, Optional
from datetime import datetime

from studyaid.schemas.common import CamelModel
from studyaid.schemas.flashcard import FlashcardSet
from studyaid.schemas.quiz import Quiz


class LectureFile(CamelModel):
    """Uploaded file metadata; content lives server-side"""
    id: str
    filename: str
    original_name: str
    mime_type: str
    size: int


class LectureCounts(CamelModel):
    flashcard_sets: int = 0
    quizzes: int = 0
    files: int = 0


class Lecture(CamelModel):
    """Top-level container of files, flashcard sets and quizzes"""
    id: str
    title: str
    description: Optional[str] = None
    files: List[LectureFile] = Field(default_factory=list)
    flashcard_sets: List[FlashcardSet] = Field(default_factory=list)
    quizzes: List[Quiz] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    counts: Optional[LectureCounts] = Field(None, alias="_count")


class LectureCreate(CamelModel):
    """Request body for creating a lecture without files"""
    title: str = ""
    description: Optional[str] = None


class SelectedFile(CamelModel):
    """A file proposed for upload, before it is sent anywhere"""
    filename: str
    content_type: str
    size: int
