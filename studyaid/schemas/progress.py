"""
Pydantic schemas for the progress pages
"""
from pydantic import Field
from typing import List, Optional
from datetime import datetime

from studyaid.schemas.common import CamelModel
from studyaid.schemas.flashcard import LectureRef, Review


class AttemptQuiz(CamelModel):
    id: str
    title: str
    lecture_id: Optional[str] = None


class AttemptRecord(CamelModel):
    """Past quiz attempt as stored remotely"""
    id: str
    quiz: AttemptQuiz
    score: float
    created_at: Optional[datetime] = None


class QuizPerformance(CamelModel):
    """Attempts grouped by quiz"""
    quiz_id: str
    title: str
    attempts: List[AttemptRecord]
    average_score: float


class FlashcardProgress(CamelModel):
    """Review history for one flashcard set"""
    set_id: str
    title: str
    lecture: Optional[LectureRef] = None
    reviews: List[Review] = Field(default_factory=list)


class FlashcardSetProgress(CamelModel):
    set_id: str
    title: str
    lecture: Optional[LectureRef] = None
    review_count: int
    average_confidence: Optional[float] = None
    band: Optional[str] = None  # strong / fair / weak


class ProgressSummary(CamelModel):
    quizzes: List[QuizPerformance] = Field(default_factory=list)
    flashcards: List[FlashcardSetProgress] = Field(default_factory=list)
