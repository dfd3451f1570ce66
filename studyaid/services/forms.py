"""
Quiz and flashcard set forms

Both forms run in a create or edit mode that only changes the wording of
the validation message. A quiz question's answer must always name one of
its options; any option edit or removal that breaks that resets the answer.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from studyaid.exceptions import ValidationFailure
from studyaid.schemas.flashcard import FlashcardSet
from studyaid.schemas.quiz import Quiz, QuizDraft

CREATE = "create"
EDIT = "edit"

MIN_OPTIONS = 2
TOO_FEW_OPTIONS_MESSAGE = "Please provide at least two valid options."


@dataclass
class QuestionFields:
    question: str = ""
    options: List[str] = field(default_factory=lambda: ["", ""])
    answer: str = ""

    def is_valid(self) -> bool:
        return (
            len(self.question.strip()) > 0
            and len(self.options) >= MIN_OPTIONS
            and all(len(option.strip()) > 0 for option in self.options)
            and len(self.answer.strip()) > 0
        )


class QuizForm:
    """Editable quiz with the dangling-answer reset applied on every mutation"""

    def __init__(self, title: str = "", mode: str = CREATE, lecture_id: Optional[str] = None):
        self.title = title
        self.mode = mode
        self.lecture_id = lecture_id
        self.questions: List[QuestionFields] = []
        if mode == CREATE:
            self.add_question()

    @classmethod
    def for_edit(cls, quiz: Quiz) -> "QuizForm":
        """Load an existing quiz into an edit form"""
        form = cls(title=quiz.title, mode=EDIT, lecture_id=quiz.lecture_id)
        for question in quiz.questions:
            form.questions.append(QuestionFields(
                question=question.question,
                options=[option.value for option in question.options],
                answer=question.answer
            ))
        return form

    @classmethod
    def from_draft(
        cls,
        draft: QuizDraft,
        mode: str = CREATE,
        lecture_id: Optional[str] = None
    ) -> "QuizForm":
        """Replay a submitted draft through the form's own mutators"""
        form = cls(title=draft.title, mode=mode, lecture_id=lecture_id or draft.lecture_id)
        form.questions = []
        for q_index, question in enumerate(draft.questions):
            form.add_question()
            form.set_question_text(q_index, question.question)
            form.questions[q_index].options = []
            for o_index, option in enumerate(question.options):
                form.add_option(q_index)
                form.set_option(q_index, o_index, option.value)
            form.set_answer(q_index, question.answer)
        return form

    def _question(self, index: int) -> QuestionFields:
        if not 0 <= index < len(self.questions):
            raise ValidationFailure(f"Question {index + 1} does not exist.")
        return self.questions[index]

    def _reset_dangling_answer(self, question: QuestionFields) -> None:
        if question.answer not in question.options:
            question.answer = ""

    def add_question(self) -> None:
        self.questions.append(QuestionFields())

    def remove_question(self, index: int) -> None:
        self._question(index)
        del self.questions[index]

    def set_question_text(self, index: int, text: str) -> None:
        self._question(index).question = text

    def set_answer(self, index: int, answer: str) -> None:
        question = self._question(index)
        question.answer = answer
        self._reset_dangling_answer(question)

    def set_option(self, q_index: int, o_index: int, value: str) -> None:
        question = self._question(q_index)
        if not 0 <= o_index < len(question.options):
            raise ValidationFailure(f"Option {o_index + 1} does not exist.")
        question.options[o_index] = value
        self._reset_dangling_answer(question)

    def add_option(self, q_index: int) -> None:
        self._question(q_index).options.append("")

    def remove_option(self, q_index: int, o_index: int) -> None:
        question = self._question(q_index)
        if not 0 <= o_index < len(question.options):
            raise ValidationFailure(f"Option {o_index + 1} does not exist.")
        if len(question.options) <= MIN_OPTIONS:
            raise ValidationFailure(TOO_FEW_OPTIONS_MESSAGE)
        del question.options[o_index]
        self._reset_dangling_answer(question)

    def is_valid(self) -> bool:
        if not self.title.strip():
            return False
        return all(question.is_valid() for question in self.questions)

    def validate(self) -> None:
        if any(len(question.options) < MIN_OPTIONS for question in self.questions):
            raise ValidationFailure(TOO_FEW_OPTIONS_MESSAGE)
        if not self.is_valid():
            action = "creating" if self.mode == CREATE else "updating"
            raise ValidationFailure(
                f"Please fill in all required fields before {action} the quiz."
            )

    def to_payload(self) -> Dict[str, Any]:
        self.validate()
        payload = {
            "title": self.title.strip(),
            "questions": [
                {
                    "question": question.question.strip(),
                    "options": [{"value": option} for option in question.options],
                    "answer": question.answer.strip(),
                }
                for question in self.questions
            ],
        }
        if self.mode == CREATE:
            if not self.lecture_id:
                raise ValidationFailure("Lecture ID is required")
            payload["lectureId"] = self.lecture_id
        return payload


@dataclass
class CardFields:
    front: str = ""
    back: str = ""


class FlashcardSetForm:
    """Editable flashcard set"""

    def __init__(self, title: str = "", mode: str = CREATE, lecture_id: Optional[str] = None):
        self.title = title
        self.mode = mode
        self.lecture_id = lecture_id
        self.cards: List[CardFields] = []

    @classmethod
    def for_edit(cls, flashcard_set: FlashcardSet) -> "FlashcardSetForm":
        form = cls(title=flashcard_set.title, mode=EDIT, lecture_id=flashcard_set.lecture_id)
        form.cards = [CardFields(front=card.front, back=card.back) for card in flashcard_set.flashcards]
        return form

    def add_card(self, front: str = "", back: str = "") -> None:
        self.cards.append(CardFields(front=front, back=back))

    def remove_card(self, index: int) -> None:
        if not 0 <= index < len(self.cards):
            raise ValidationFailure(f"Flashcard {index + 1} does not exist.")
        del self.cards[index]

    def validate(self) -> None:
        if not self.title.strip():
            raise ValidationFailure("Title is required")
        if any(not card.front.strip() or not card.back.strip() for card in self.cards):
            raise ValidationFailure("All flashcards must have both front and back content")

    def to_payload(self) -> Dict[str, Any]:
        self.validate()
        payload = {
            "title": self.title,
            "flashcards": [{"front": card.front, "back": card.back} for card in self.cards],
        }
        if self.mode == CREATE:
            if not self.lecture_id:
                raise ValidationFailure("Lecture ID is required")
            payload["lectureId"] = self.lecture_id
        return payload
