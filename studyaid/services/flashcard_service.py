"""
Flashcard set reads, mutations and review flow management
"""
import logging
from typing import Any, Dict

from studyaid.exceptions import ValidationFailure
from studyaid.schemas.flashcard import FlashcardSet, FlashcardSetCreate, FlashcardSetUpdate
from studyaid.services.forms import CREATE, EDIT, FlashcardSetForm
from studyaid.services.review_flow import ReviewSession
from studyaid.services.session import SessionContext

logger = logging.getLogger(__name__)


class FlashcardService:
    """Service for flashcard sets and their review flow"""

    def get_flashcard_set(self, session: SessionContext, set_id: str) -> FlashcardSet:
        if not set_id:
            raise ValidationFailure("Flashcard set ID is required")
        client = session.client
        data = session.cache.fetch(
            session.cache_scope,
            ("flashcardSet", set_id),
            lambda: client.get_flashcard_set(set_id)
        )
        return FlashcardSet.model_validate(data)

    def create_flashcard_set(
        self,
        session: SessionContext,
        request: FlashcardSetCreate
    ) -> Dict[str, Any]:
        """
        Validate and create a flashcard set

        Invalidates: lecture/<lectureId>
        """
        form = FlashcardSetForm(title=request.title, mode=CREATE, lecture_id=request.lecture_id)
        for card in request.flashcards:
            form.add_card(card.front, card.back)
        payload = form.to_payload()

        created = session.client.create_flashcard_set(payload)
        session.cache.invalidate(session.cache_scope, ("lecture", request.lecture_id))
        logger.info(f"Flashcard set created for lecture {request.lecture_id}")
        return created

    def update_flashcard_set(
        self,
        session: SessionContext,
        set_id: str,
        request: FlashcardSetUpdate
    ) -> Dict[str, Any]:
        """
        Validate and update a flashcard set

        Invalidates: flashcardSet/<id>, lecture/<lectureId from response>
        """
        form = FlashcardSetForm(title=request.title, mode=EDIT)
        for card in request.flashcards:
            form.add_card(card.front, card.back)
        payload = form.to_payload()

        updated = session.client.update_flashcard_set(set_id, payload) or {}
        session.cache.invalidate(session.cache_scope, ("flashcardSet", updated.get("id", set_id)))
        if updated.get("lectureId"):
            session.cache.invalidate(session.cache_scope, ("lecture", updated["lectureId"]))
        session.review_sessions.pop(set_id, None)
        return updated

    def delete_flashcard_set(self, session: SessionContext, set_id: str) -> Any:
        result = session.client.delete_flashcard_set(set_id)
        session.cache.invalidate(session.cache_scope, ("flashcardSet", set_id))
        session.review_sessions.pop(set_id, None)
        return result

    def submit_review(self, session: SessionContext, flashcard_id: str, confidence: int) -> Any:
        """Write one review remotely; no cache invalidation"""
        result = session.client.submit_review(flashcard_id, confidence)
        logger.info("Review submitted successfully")
        return result

    def start_review(self, session: SessionContext, set_id: str) -> ReviewSession:
        """Begin (or restart) reviewing a set from its first card"""
        flashcard_set = self.get_flashcard_set(session, set_id)
        review = ReviewSession(flashcard_set)
        session.review_sessions[set_id] = review
        return review

    def get_review(self, session: SessionContext, set_id: str) -> ReviewSession:
        review = session.review_sessions.get(set_id)
        if review is None:
            review = self.start_review(session, set_id)
        return review

    def flush_reviews(self, session: SessionContext, review: ReviewSession) -> int:
        """Send queued ratings; used as a background task after the response"""
        return review.flush(
            lambda flashcard_id, confidence: self.submit_review(session, flashcard_id, confidence)
        )


# Global instance
flashcard_service = FlashcardService()
