"""
Pydantic schemas for quiz-related requests and responses
"""
from pydantic import Field, field_validator
from typing import List, Optional, Any
from datetime import datetime

from studyaid.schemas.common import CamelModel
from studyaid.schemas.flashcard import LectureRef


def _coerce_options(value: Any) -> Any:
    # Older quizzes store options as one comma-separated string
    if isinstance(value, str):
        return [{"value": part.strip()} for part in value.split(",")]
    if isinstance(value, list):
        return [{"value": item} if isinstance(item, str) else item for item in value]
    return value


class Option(CamelModel):
    """Free-text answer option"""
    value: str


class Question(CamelModel):
    """Quiz question with its options and correct answer"""
    id: Optional[str] = None
    question: str
    options: List[Option] = Field(default_factory=list)
    answer: str = ""

    @field_validator("options", mode="before")
    @classmethod
    def parse_options(cls, value):
        return _coerce_options(value)


class Quiz(CamelModel):
    """Quiz as returned by the remote API"""
    id: str
    title: str
    questions: List[Question] = Field(default_factory=list)
    lecture_id: Optional[str] = None
    lecture: Optional[LectureRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QuestionDraft(CamelModel):
    """Question as submitted from a create or edit form"""
    question: str = ""
    options: List[Option] = Field(default_factory=list)
    answer: str = ""

    @field_validator("options", mode="before")
    @classmethod
    def parse_options(cls, value):
        return _coerce_options(value)


class QuizDraft(CamelModel):
    """Request body for creating or updating a quiz"""
    title: str = ""
    lecture_id: Optional[str] = None
    questions: List[QuestionDraft] = Field(default_factory=list)


class AttemptAnswer(CamelModel):
    """Selected answer for one question"""
    question_index: int
    selected_answer: str


class QuizAttempt(CamelModel):
    """Submission sent to the attempts endpoint; immutable once created"""
    quiz_id: str
    answers: List[AttemptAnswer]
    score: float

    class Config:
        frozen = True


class QuestionPrompt(CamelModel):
    """Question shown while answering; the correct answer stays hidden"""
    question: str
    options: List[Option] = Field(default_factory=list)


class AnswerSelection(CamelModel):
    """Option picked for the current question"""
    answer: str


class QuestionResult(CamelModel):
    """Per-question outcome after grading"""
    question_index: int
    question: str
    selected_answer: Optional[str] = None
    correct_answer: str
    is_correct: bool


class QuizAttemptView(CamelModel):
    """Snapshot of a quiz attempt flow"""
    quiz_id: str
    title: str
    state: str
    current_index: int
    total_questions: int
    question: Optional[QuestionPrompt] = None
    selected_answer: Optional[str] = None
    answered: int = 0
    score: Optional[float] = None
    error: Optional[str] = None
    breakdown: List[QuestionResult] = Field(default_factory=list)
