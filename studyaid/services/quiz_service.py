"""
Quiz reads, mutations and attempt flow management
"""
import logging
from typing import Any, Dict

from studyaid.exceptions import ValidationFailure
from studyaid.schemas.quiz import Quiz, QuizAttempt, QuizDraft
from studyaid.services.forms import CREATE, EDIT, QuizForm
from studyaid.services.quiz_flow import QuizAttemptSession
from studyaid.services.session import SessionContext

logger = logging.getLogger(__name__)


class QuizService:
    """Service for quizzes and quiz attempts"""

    def get_quiz(self, session: SessionContext, quiz_id: str) -> Quiz:
        if not quiz_id:
            raise ValidationFailure("Quiz ID is required")
        client = session.client
        data = session.cache.fetch(
            session.cache_scope,
            ("quiz", quiz_id),
            lambda: client.get_quiz(quiz_id)
        )
        return Quiz.model_validate(data)

    def create_quiz(self, session: SessionContext, draft: QuizDraft) -> Dict[str, Any]:
        """
        Validate and create a quiz

        Invalidates: lecture/<lectureId>
        """
        form = QuizForm.from_draft(draft, mode=CREATE)
        payload = form.to_payload()

        created = session.client.create_quiz(payload)
        session.cache.invalidate(session.cache_scope, ("lecture", payload["lectureId"]))
        logger.info(f"Quiz created for lecture {payload['lectureId']}")
        return created

    def edit_form(self, session: SessionContext, quiz_id: str) -> QuizForm:
        return QuizForm.for_edit(self.get_quiz(session, quiz_id))

    def update_quiz(self, session: SessionContext, quiz_id: str, draft: QuizDraft) -> Dict[str, Any]:
        """
        Validate and update a quiz

        Invalidates: quiz/<id>, lecture/<lectureId from response>
        """
        form = QuizForm.from_draft(draft, mode=EDIT)
        payload = form.to_payload()

        updated = session.client.update_quiz(quiz_id, payload) or {}
        session.cache.invalidate(session.cache_scope, ("quiz", updated.get("id", quiz_id)))
        if updated.get("lectureId"):
            session.cache.invalidate(session.cache_scope, ("lecture", updated["lectureId"]))
        session.quiz_sessions.pop(quiz_id, None)
        return updated

    def delete_quiz(self, session: SessionContext, quiz_id: str) -> Any:
        result = session.client.delete_quiz(quiz_id)
        session.cache.invalidate(session.cache_scope, ("quiz", quiz_id))
        session.quiz_sessions.pop(quiz_id, None)
        return result

    def submit_attempt(self, session: SessionContext, attempt: QuizAttempt) -> Any:
        """
        Send a scored attempt

        Invalidates: quiz/<id>, quizAttempts
        """
        result = session.client.submit_attempt(
            attempt.quiz_id,
            attempt.model_dump(by_alias=True)
        )
        session.cache.invalidate(session.cache_scope, ("quiz", attempt.quiz_id))
        session.cache.invalidate(session.cache_scope, ("quizAttempts",))
        return result

    def start_attempt(self, session: SessionContext, quiz_id: str) -> QuizAttemptSession:
        """Begin a fresh attempt; replaces any earlier attempt view for this quiz"""
        attempt = QuizAttemptSession(self.get_quiz(session, quiz_id))
        session.quiz_sessions[quiz_id] = attempt
        return attempt

    def get_attempt(self, session: SessionContext, quiz_id: str) -> QuizAttemptSession:
        attempt = session.quiz_sessions.get(quiz_id)
        if attempt is None:
            attempt = self.start_attempt(session, quiz_id)
        return attempt

    def submit_current_attempt(self, session: SessionContext, quiz_id: str) -> QuizAttemptSession:
        attempt = self.get_attempt(session, quiz_id)
        attempt.submit(lambda payload: self.submit_attempt(session, payload))
        return attempt


# Global instance
quiz_service = QuizService()
