"""
Pydantic schemas for AI content generation
"""
from pydantic import Field
from typing import List, Literal, Optional

from studyaid.schemas.common import CamelModel


ContentType = Literal["flashcard", "quiz"]


class GenerationRequest(CamelModel):
    """Generate flashcards or a quiz from selected lecture files"""
    type: ContentType = "quiz"
    title: str = ""
    file_ids: List[str] = Field(default_factory=list)
    api_key: Optional[str] = None  # falls back to the stored key for the provider
    provider: str = "openai"


class GeneratedItem(CamelModel):
    """One generated flashcard or quiz question

    Flashcards use question/explanation as front/back.
    """
    question: str = ""
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = None
    explanation: Optional[str] = None


class GenerationPreview(CamelModel):
    """Generated content awaiting approval"""
    lecture_id: str
    type: ContentType
    title: str
    items: List[GeneratedItem] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class PreviewEdit(CamelModel):
    items: List[GeneratedItem] = Field(default_factory=list)
