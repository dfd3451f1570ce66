"""
Flashcard set endpoints and the review flow
"""
from fastapi import APIRouter, BackgroundTasks, Depends
from typing import Any
import logging

from studyaid.api.deps import require_user
from studyaid.schemas.common import MessageResponse
from studyaid.schemas.flashcard import (
    FlashcardSet,
    FlashcardSetCreate,
    FlashcardSetUpdate,
    ReviewRating,
    ReviewView,
)
from studyaid.services.flashcard_service import flashcard_service
from studyaid.services.session import SessionContext

router = APIRouter(prefix="/api/flashcards", tags=["flashcards"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201)
def create_flashcard_set(
    request: FlashcardSetCreate,
    session: SessionContext = Depends(require_user)
) -> Any:
    return flashcard_service.create_flashcard_set(session, request)


@router.get("/{set_id}", response_model=FlashcardSet)
def get_flashcard_set(set_id: str, session: SessionContext = Depends(require_user)):
    return flashcard_service.get_flashcard_set(session, set_id)


@router.put("/{set_id}")
def update_flashcard_set(
    set_id: str,
    request: FlashcardSetUpdate,
    session: SessionContext = Depends(require_user)
) -> Any:
    return flashcard_service.update_flashcard_set(session, set_id, request)


@router.delete("/{set_id}", response_model=MessageResponse)
def delete_flashcard_set(set_id: str, session: SessionContext = Depends(require_user)):
    flashcard_service.delete_flashcard_set(session, set_id)
    return MessageResponse(message="Flashcard set deleted")


@router.post("/{set_id}/review", response_model=ReviewView)
def start_review(set_id: str, session: SessionContext = Depends(require_user)):
    """Start reviewing a set from its first card, front side up"""
    return flashcard_service.start_review(session, set_id).snapshot()


@router.get("/{set_id}/review", response_model=ReviewView)
def get_review(set_id: str, session: SessionContext = Depends(require_user)):
    return flashcard_service.get_review(session, set_id).snapshot()


@router.post("/{set_id}/review/flip", response_model=ReviewView)
def flip_card(set_id: str, session: SessionContext = Depends(require_user)):
    review = flashcard_service.get_review(session, set_id)
    review.flip()
    return review.snapshot()


@router.post("/{set_id}/review/next", response_model=ReviewView)
def next_card(set_id: str, session: SessionContext = Depends(require_user)):
    review = flashcard_service.get_review(session, set_id)
    review.next_card()
    return review.snapshot()


@router.post("/{set_id}/review/previous", response_model=ReviewView)
def previous_card(set_id: str, session: SessionContext = Depends(require_user)):
    review = flashcard_service.get_review(session, set_id)
    review.previous_card()
    return review.snapshot()


@router.post("/{set_id}/review/rate", response_model=ReviewView)
def rate_card(
    set_id: str,
    rating: ReviewRating,
    background_tasks: BackgroundTasks,
    session: SessionContext = Depends(require_user)
):
    """
    Rate the current card and advance

    The rating is applied and the next card shown before the remote review
    write runs; a failed write is only logged.
    """
    review = flashcard_service.get_review(session, set_id)
    review.rate(rating.confidence)
    snapshot = review.snapshot()
    background_tasks.add_task(flashcard_service.flush_reviews, session, review)
    return snapshot
