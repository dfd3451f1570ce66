"""
Progress endpoints
"""
from fastapi import APIRouter, Depends
from typing import List
import logging

from studyaid.api.deps import require_user
from studyaid.schemas.progress import FlashcardSetProgress, ProgressSummary, QuizPerformance
from studyaid.services.progress_service import progress_service
from studyaid.services.session import SessionContext

router = APIRouter(prefix="/api/progress", tags=["progress"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=ProgressSummary)
def get_progress(session: SessionContext = Depends(require_user)):
    """
    Study progress overview

    Returns:
    - Quiz attempts grouped by quiz with average score
    - Flashcard sets with average review confidence and band
    """
    return progress_service.summary(session)


@router.get("/quizzes", response_model=List[QuizPerformance])
def get_quiz_progress(session: SessionContext = Depends(require_user)):
    return progress_service.group_attempts(progress_service.quiz_attempts(session))


@router.get("/flashcards", response_model=List[FlashcardSetProgress])
def get_flashcard_progress(session: SessionContext = Depends(require_user)):
    return progress_service.summarize_flashcards(progress_service.flashcard_progress(session))
