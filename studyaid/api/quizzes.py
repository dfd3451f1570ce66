"""
Quiz endpoints and the quiz attempt flow
"""
from fastapi import APIRouter, Depends
from typing import Any, Dict
import logging

from studyaid.api.deps import require_user
from studyaid.schemas.common import MessageResponse
from studyaid.schemas.quiz import AnswerSelection, Quiz, QuizAttemptView, QuizDraft
from studyaid.services.quiz_service import quiz_service
from studyaid.services.session import SessionContext

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201)
def create_quiz(draft: QuizDraft, session: SessionContext = Depends(require_user)) -> Any:
    """
    Create a quiz

    - Title, every question, every option and every answer are required
    - Each answer must match one of its question's options
    """
    return quiz_service.create_quiz(session, draft)


@router.get("/{quiz_id}", response_model=Quiz)
def get_quiz(quiz_id: str, session: SessionContext = Depends(require_user)):
    return quiz_service.get_quiz(session, quiz_id)


@router.get("/{quiz_id}/edit")
def get_edit_form(quiz_id: str, session: SessionContext = Depends(require_user)) -> Dict[str, Any]:
    """Quiz loaded as editable form fields"""
    form = quiz_service.edit_form(session, quiz_id)
    return {
        "title": form.title,
        "lectureId": form.lecture_id,
        "questions": [
            {"question": q.question, "options": q.options, "answer": q.answer}
            for q in form.questions
        ],
    }


@router.put("/{quiz_id}")
def update_quiz(quiz_id: str, draft: QuizDraft, session: SessionContext = Depends(require_user)) -> Any:
    return quiz_service.update_quiz(session, quiz_id, draft)


@router.delete("/{quiz_id}", response_model=MessageResponse)
def delete_quiz(quiz_id: str, session: SessionContext = Depends(require_user)):
    quiz_service.delete_quiz(session, quiz_id)
    return MessageResponse(message="Quiz deleted")


@router.post("/{quiz_id}/attempt", response_model=QuizAttemptView)
def start_attempt(quiz_id: str, session: SessionContext = Depends(require_user)):
    """Start a fresh attempt at the first question"""
    return quiz_service.start_attempt(session, quiz_id).snapshot()


@router.get("/{quiz_id}/attempt", response_model=QuizAttemptView)
def get_attempt(quiz_id: str, session: SessionContext = Depends(require_user)):
    return quiz_service.get_attempt(session, quiz_id).snapshot()


@router.post("/{quiz_id}/attempt/answer", response_model=QuizAttemptView)
def select_answer(
    quiz_id: str,
    selection: AnswerSelection,
    session: SessionContext = Depends(require_user)
):
    attempt = quiz_service.get_attempt(session, quiz_id)
    attempt.select_answer(selection.answer)
    return attempt.snapshot()


@router.post("/{quiz_id}/attempt/next", response_model=QuizAttemptView)
def next_question(quiz_id: str, session: SessionContext = Depends(require_user)):
    attempt = quiz_service.get_attempt(session, quiz_id)
    attempt.next_question()
    return attempt.snapshot()


@router.post("/{quiz_id}/attempt/previous", response_model=QuizAttemptView)
def previous_question(quiz_id: str, session: SessionContext = Depends(require_user)):
    attempt = quiz_service.get_attempt(session, quiz_id)
    attempt.previous_question()
    return attempt.snapshot()


@router.post("/{quiz_id}/attempt/submit", response_model=QuizAttemptView)
def submit_attempt(quiz_id: str, session: SessionContext = Depends(require_user)):
    """
    Score and submit the attempt

    Returns the graded view with a per-question breakdown. An incomplete
    attempt is rejected without contacting the remote API; a failed
    submission leaves the attempt open for another try.
    """
    attempt = quiz_service.submit_current_attempt(session, quiz_id)
    return attempt.snapshot()
