"""
Flashcard review flow

Steps through a flashcard set: flip to reveal the back, rate confidence,
advance. Ratings are applied locally first and queued for the remote review
endpoint; the queue is flushed after the response is sent.
"""
import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Deque, List, Optional

from studyaid.exceptions import StudyAidError, ValidationFailure
from studyaid.schemas.flashcard import CardView, Flashcard, FlashcardSet, Review, ReviewView

logger = logging.getLogger(__name__)

CONFIDENCE_LABELS = {
    1: "Again",
    2: "Hard",
    3: "Good",
    4: "Easy",
    5: "Perfect",
}


class ReviewState(str, Enum):
    FRONT_SHOWN = "front-shown"
    BACK_SHOWN = "back-shown"
    EXHAUSTED = "exhausted"


@dataclass
class PendingReview:
    """A rating applied locally but not yet written remotely"""
    flashcard_id: str
    confidence: int


SubmitReview = Callable[[str, int], object]
ReviewFailureHook = Callable[[PendingReview, StudyAidError], None]


class ReviewSession:
    """
    Review state for one flashcard set

    - flip() toggles the shown side, no remote call
    - rate() records locally, advances (clamped to the last card), queues the write
    - next_card()/previous_card() move manually and show the front again
    - flush() sends queued writes; failures are logged and handed to
      on_review_failed, local state is never rolled back
    """

    def __init__(
        self,
        flashcard_set: FlashcardSet,
        on_review_failed: Optional[ReviewFailureHook] = None
    ):
        self.flashcard_set = flashcard_set
        self.on_review_failed = on_review_failed
        self.index = 0
        self.flipped = False
        self.exhausted = False
        self.pending: Deque[PendingReview] = deque()

    @property
    def cards(self) -> List[Flashcard]:
        return self.flashcard_set.flashcards

    @property
    def last_index(self) -> int:
        return max(len(self.cards) - 1, 0)

    @property
    def current_card(self) -> Optional[Flashcard]:
        if not self.cards:
            return None
        return self.cards[self.index]

    @property
    def state(self) -> ReviewState:
        if self.exhausted:
            return ReviewState.EXHAUSTED
        return ReviewState.BACK_SHOWN if self.flipped else ReviewState.FRONT_SHOWN

    def _move_to(self, index: int) -> None:
        if index == self.index:
            return
        self.index = index
        self.flipped = False
        self.exhausted = False

    def flip(self) -> None:
        if self.current_card is None:
            raise ValidationFailure("This flashcard set has no cards.")
        self.flipped = not self.flipped

    def next_card(self) -> None:
        if self.index < self.last_index:
            self._move_to(self.index + 1)

    def previous_card(self) -> None:
        if self.index > 0:
            self._move_to(self.index - 1)

    def rate(self, confidence: int) -> PendingReview:
        """
        Rate the current card

        The review is recorded on the card before any network call, newest
        first, and the index advances immediately. At the last card the index stays put and
        the flow is marked exhausted, but the write is still queued.
        """
        card = self.current_card
        if card is None:
            raise ValidationFailure("This flashcard set has no cards.")
        if confidence not in CONFIDENCE_LABELS:
            raise ValidationFailure("Confidence must be between 1 and 5.")

        card.reviews.insert(0, Review(
            confidence=confidence,
            created_at=datetime.now(timezone.utc)
        ))

        if self.index < self.last_index:
            self._move_to(self.index + 1)
        else:
            self.exhausted = True

        pending = PendingReview(flashcard_id=card.id, confidence=confidence)
        self.pending.append(pending)
        logger.info(
            f"Rated card {card.id} as {CONFIDENCE_LABELS[confidence]} "
            f"(set {self.flashcard_set.id}, index now {self.index})"
        )
        return pending

    def flush(self, submit: SubmitReview) -> int:
        """
        Send every queued review through submit(flashcard_id, confidence)

        Returns:
            Number of writes that failed
        """
        failures = 0
        while self.pending:
            pending = self.pending.popleft()
            try:
                submit(pending.flashcard_id, pending.confidence)
            except StudyAidError as e:
                failures += 1
                logger.error(
                    f"Review write for card {pending.flashcard_id} failed: {e.message}"
                )
                if self.on_review_failed:
                    self.on_review_failed(pending, e)
        return failures

    def snapshot(self) -> ReviewView:
        card = self.current_card
        card_view = None
        if card is not None:
            card_view = CardView(
                id=card.id,
                front=card.front,
                back=card.back if self.flipped else None,
                reviews=card.reviews
            )
        return ReviewView(
            flashcard_set_id=self.flashcard_set.id,
            title=self.flashcard_set.title,
            index=self.index,
            total=len(self.cards),
            state=self.state.value,
            flipped=self.flipped,
            card=card_view,
            pending_reviews=len(self.pending)
        )
