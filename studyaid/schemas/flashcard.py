"""
Pydantic schemas for flashcard sets, cards and reviews
"""
from pydantic import Field
from typing import List, Optional
from datetime import datetime

from studyaid.schemas.common import CamelModel


class LectureRef(CamelModel):
    """Owning lecture summary embedded in set and quiz payloads"""
    id: str
    title: str


class Review(CamelModel):
    """A single confidence outcome recorded for a flashcard"""
    confidence: int
    created_at: Optional[datetime] = None
    next_review: Optional[datetime] = None  # computed server-side


class Flashcard(CamelModel):
    """Front/back card, always owned by a set"""
    id: str
    front: str
    back: str
    reviews: List[Review] = Field(default_factory=list, alias="flashcardReview")


class FlashcardSet(CamelModel):
    """Ordered flashcards belonging to a lecture"""
    id: str
    title: str
    flashcards: List[Flashcard] = Field(default_factory=list)
    lecture_id: Optional[str] = None
    lecture: Optional[LectureRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CardContent(CamelModel):
    """Front/back text of a card in a create or update request"""
    front: str = ""
    back: str = ""


class FlashcardSetCreate(CamelModel):
    """Request body for creating a flashcard set"""
    title: str = ""
    lecture_id: str
    flashcards: List[CardContent] = Field(default_factory=list)


class FlashcardSetUpdate(CamelModel):
    """Request body for editing a flashcard set"""
    title: str = ""
    flashcards: List[CardContent] = Field(default_factory=list)


class ReviewRating(CamelModel):
    """Confidence rating for the current card"""
    confidence: int


class CardView(CamelModel):
    """Card as shown in the review flow; back is hidden until flipped"""
    id: str
    front: str
    back: Optional[str] = None
    reviews: List[Review] = Field(default_factory=list)


class ReviewView(CamelModel):
    """Snapshot of a flashcard review flow"""
    flashcard_set_id: str
    title: str
    index: int
    total: int
    state: str
    flipped: bool
    card: Optional[CardView] = None
    pending_reviews: int = 0
