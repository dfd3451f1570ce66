"""
Quiz attempt flow

One question at a time, one recorded answer per question, client-side
scoring, then a single submission to the attempts endpoint.
"""
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

from studyaid.exceptions import RemoteAPIError, ValidationFailure
from studyaid.schemas.quiz import (
    AttemptAnswer,
    QuestionPrompt,
    QuestionResult,
    Quiz,
    QuizAttempt,
    QuizAttemptView,
)

logger = logging.getLogger(__name__)

INCOMPLETE_MESSAGE = "Please answer all questions before submitting."
SUBMIT_FAILED_MESSAGE = "Failed to submit quiz. Please try again."


class AttemptState(str, Enum):
    ANSWERING = "answering"
    GRADED = "graded"


SendAttempt = Callable[[QuizAttempt], object]


class QuizAttemptSession:
    """
    Attempt state for one quiz

    Answers are keyed by question index; selecting again overwrites.
    Once graded the flow is terminal for this session.
    """

    def __init__(self, quiz: Quiz):
        self.quiz = quiz
        self.current_index = 0
        self.answers: Dict[int, str] = {}
        self.state = AttemptState.ANSWERING
        self.score: Optional[float] = None
        self.error: Optional[str] = None

    @property
    def total_questions(self) -> int:
        return len(self.quiz.questions)

    def select_answer(self, answer: str) -> None:
        if self.state == AttemptState.GRADED:
            raise ValidationFailure("Quiz has already been submitted.")
        if not self.quiz.questions:
            raise ValidationFailure("This quiz has no questions.")

        question = self.quiz.questions[self.current_index]
        choice = answer.strip()
        if choice not in [option.value.strip() for option in question.options]:
            raise ValidationFailure("Please choose one of the listed options.")

        self.answers[self.current_index] = choice

    def next_question(self) -> None:
        if self.current_index < self.total_questions - 1:
            self.current_index += 1

    def previous_question(self) -> None:
        if self.current_index > 0:
            self.current_index -= 1

    def calculate_score(self) -> float:
        """Percentage of recorded answers matching the stored correct answer"""
        if not self.quiz.questions:
            return 0.0
        correct = sum(
            1 for index, selected in self.answers.items()
            if self.quiz.questions[index].answer == selected
        )
        return correct / self.total_questions * 100

    def ordered_answers(self) -> List[AttemptAnswer]:
        return [
            AttemptAnswer(question_index=index, selected_answer=self.answers[index])
            for index in sorted(self.answers)
        ]

    def submit(self, send: SendAttempt) -> QuizAttempt:
        """
        Score and submit the attempt

        Raises:
            ValidationFailure: already graded, or not every question answered;
                nothing is sent in either case
            RemoteAPIError: the attempts endpoint failed; state stays answering
        """
        if self.state == AttemptState.GRADED:
            raise ValidationFailure("Quiz has already been submitted.")

        if not self.quiz.questions:
            self.error = "This quiz has no questions."
            raise ValidationFailure(self.error)

        if len(self.answers) != self.total_questions:
            self.error = INCOMPLETE_MESSAGE
            raise ValidationFailure(INCOMPLETE_MESSAGE)

        score = self.calculate_score()
        attempt = QuizAttempt(
            quiz_id=self.quiz.id,
            answers=self.ordered_answers(),
            score=score
        )

        try:
            send(attempt)
        except RemoteAPIError as e:
            self.error = SUBMIT_FAILED_MESSAGE
            logger.error(f"Submit quiz error for {self.quiz.id}: {e.message}")
            raise RemoteAPIError(SUBMIT_FAILED_MESSAGE, status_code=e.status_code) from e

        self.error = None
        self.score = score
        self.state = AttemptState.GRADED
        logger.info(f"Quiz {self.quiz.id} graded: {score:.1f}%")
        return attempt

    def breakdown(self) -> List[QuestionResult]:
        results = []
        for index, question in enumerate(self.quiz.questions):
            selected = self.answers.get(index)
            results.append(QuestionResult(
                question_index=index,
                question=question.question,
                selected_answer=selected,
                correct_answer=question.answer,
                is_correct=selected == question.answer
            ))
        return results

    def snapshot(self) -> QuizAttemptView:
        graded = self.state == AttemptState.GRADED
        prompt = None
        if self.quiz.questions and not graded:
            question = self.quiz.questions[self.current_index]
            prompt = QuestionPrompt(question=question.question, options=question.options)

        return QuizAttemptView(
            quiz_id=self.quiz.id,
            title=self.quiz.title,
            state=self.state.value,
            current_index=self.current_index,
            total_questions=self.total_questions,
            question=prompt,
            selected_answer=self.answers.get(self.current_index),
            answered=len(self.answers),
            score=self.score,
            error=self.error,
            breakdown=self.breakdown() if graded else []
        )
