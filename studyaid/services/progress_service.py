"""
Progress summaries for quiz attempts and flashcard reviews
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional

from studyaid.schemas.flashcard import Review
from studyaid.schemas.progress import (
    AttemptRecord,
    FlashcardProgress,
    FlashcardSetProgress,
    ProgressSummary,
    QuizPerformance,
)
from studyaid.services.session import SessionContext

logger = logging.getLogger(__name__)


class ProgressService:
    """Service for the progress page: attempt history and review confidence"""

    # Confidence bands (1-5 scale)
    STRONG_CONFIDENCE = 4
    FAIR_CONFIDENCE = 3

    def quiz_attempts(self, session: SessionContext) -> List[AttemptRecord]:
        client = session.client
        data = session.cache.fetch(session.cache_scope, ("quizAttempts",), client.list_quiz_attempts)
        return [AttemptRecord.model_validate(item) for item in data or []]

    def flashcard_progress(self, session: SessionContext) -> List[FlashcardProgress]:
        client = session.client
        data = session.cache.fetch(
            session.cache_scope, ("flashcardProgress",), client.flashcard_progress
        )
        return [FlashcardProgress.model_validate(item) for item in data or []]

    def group_attempts(self, attempts: List[AttemptRecord]) -> List[QuizPerformance]:
        """Group attempts by quiz, keeping first-seen order"""
        grouped: Dict[str, List[AttemptRecord]] = defaultdict(list)
        for attempt in attempts:
            grouped[attempt.quiz.id].append(attempt)

        return [
            QuizPerformance(
                quiz_id=quiz_id,
                title=quiz_attempts[0].quiz.title,
                attempts=quiz_attempts,
                average_score=self.average_score(quiz_attempts)
            )
            for quiz_id, quiz_attempts in grouped.items()
        ]

    def average_score(self, attempts: List[AttemptRecord]) -> float:
        if not attempts:
            return 0.0
        return round(sum(a.score for a in attempts) / len(attempts), 1)

    def average_confidence(self, reviews: List[Review]) -> Optional[float]:
        if not reviews:
            return None
        return round(sum(r.confidence for r in reviews) / len(reviews), 1)

    def confidence_band(self, confidence: Optional[float]) -> Optional[str]:
        if confidence is None:
            return None
        if confidence >= self.STRONG_CONFIDENCE:
            return "strong"
        if confidence >= self.FAIR_CONFIDENCE:
            return "fair"
        return "weak"

    def summarize_flashcards(self, progress: List[FlashcardProgress]) -> List[FlashcardSetProgress]:
        summaries = []
        for entry in progress:
            average = self.average_confidence(entry.reviews)
            summaries.append(FlashcardSetProgress(
                set_id=entry.set_id,
                title=entry.title,
                lecture=entry.lecture,
                review_count=len(entry.reviews),
                average_confidence=average,
                band=self.confidence_band(average)
            ))
        return summaries

    def summary(self, session: SessionContext) -> ProgressSummary:
        quizzes = self.group_attempts(self.quiz_attempts(session))
        flashcards = self.summarize_flashcards(self.flashcard_progress(session))
        logger.info(
            f"Progress summary: {len(quizzes)} quizzes attempted, "
            f"{len(flashcards)} flashcard sets reviewed"
        )
        return ProgressSummary(quizzes=quizzes, flashcards=flashcards)


# Global instance
progress_service = ProgressService()
