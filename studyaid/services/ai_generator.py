"""
AI content generation flow

Two sequential remote calls per request, with no cancellation:
1. extract text chunks from the selected lecture files
2. generate flashcards or quiz questions from those chunks

The generated items are held as a preview in the session until the user
approves (saved as a flashcard set or quiz), edits, or rejects them.
"""
import logging
from typing import Any, Dict, List

from studyaid.exceptions import ValidationFailure
from studyaid.schemas.ai import GeneratedItem, GenerationPreview, GenerationRequest
from studyaid.schemas.flashcard import CardContent, FlashcardSetCreate
from studyaid.schemas.quiz import QuestionDraft, QuizDraft
from studyaid.services.api_key_service import PROVIDERS, api_key_service
from studyaid.services.flashcard_service import flashcard_service
from studyaid.services.quiz_service import quiz_service
from studyaid.services.session import SessionContext

logger = logging.getLogger(__name__)


class AIGeneratorService:
    """Service driving extract → generate → preview → approve"""

    def generate(
        self,
        session: SessionContext,
        lecture_id: str,
        request: GenerationRequest
    ) -> GenerationPreview:
        """
        Run extraction then generation and store the result as the session preview

        Args:
            session: Caller's session
            lecture_id: Lecture owning the files
            request: Content type, title, file ids, provider and optional key

        Returns:
            Preview with generated items and any content warnings
        """
        if not request.file_ids:
            raise ValidationFailure("Please select at least one file")
        if not request.title.strip():
            raise ValidationFailure("Title is required")
        if request.provider not in PROVIDERS:
            raise ValidationFailure(f"Unknown provider: {request.provider}")

        api_key = request.api_key or api_key_service.get_provider_key(session, request.provider)
        if not api_key:
            raise ValidationFailure(f"An API key for {PROVIDERS[request.provider]} is required")

        client = session.client

        # Step 1: Extract text
        extracted = client.extract_text(lecture_id, request.file_ids) or {}
        chunks = extracted.get("chunks")

        # Step 2: Generate content based on type
        payload = {
            "chunks": chunks,
            "apiKey": api_key,
            "provider": request.provider,
            "lectureId": lecture_id,
            "title": request.title,
        }
        if request.type == "flashcard":
            generated = client.generate_flashcards(payload)
        else:
            generated = client.generate_quiz(payload)

        items = [GeneratedItem.model_validate(item) for item in generated or []]
        preview = GenerationPreview(
            lecture_id=lecture_id,
            type=request.type,
            title=request.title,
            items=items,
            errors=self.validate_items(request.type, items)
        )
        session.generation = preview

        logger.info(
            f"Generated {len(items)} {request.type} items for lecture {lecture_id} "
            f"via {request.provider}"
        )
        return preview

    def validate_items(self, content_type: str, items: List[GeneratedItem]) -> List[str]:
        errors = []
        for index, item in enumerate(items, start=1):
            if content_type == "quiz":
                if not item.question:
                    errors.append(f"Question {index} is missing a question.")
                if not item.options or len(item.options) < 2:
                    errors.append(f"Question {index} must have at least 2 options.")
                if not item.correct_answer:
                    errors.append(f"Question {index} is missing a correct answer.")
            else:
                if not item.question:
                    errors.append(f"Flashcard {index} is missing a question.")
                if not item.explanation:
                    errors.append(f"Flashcard {index} is missing an answer.")
        return errors

    def _require_preview(self, session: SessionContext) -> GenerationPreview:
        if session.generation is None or not session.generation.items:
            raise ValidationFailure("There is no generated content to review.")
        return session.generation

    def edit(self, session: SessionContext, items: List[GeneratedItem]) -> GenerationPreview:
        preview = self._require_preview(session)
        preview.items = list(items)
        preview.errors = self.validate_items(preview.type, preview.items)
        return preview

    def reject(self, session: SessionContext) -> None:
        session.generation = None

    def approve(self, session: SessionContext) -> Dict[str, Any]:
        """Save the preview as a flashcard set or quiz and clear it"""
        preview = self._require_preview(session)
        if preview.errors:
            raise ValidationFailure(preview.errors[0])

        if preview.type == "flashcard":
            created = flashcard_service.create_flashcard_set(session, FlashcardSetCreate(
                title=preview.title,
                lecture_id=preview.lecture_id,
                flashcards=[
                    CardContent(front=item.question, back=item.explanation or "")
                    for item in preview.items
                ]
            ))
        else:
            created = quiz_service.create_quiz(session, QuizDraft(
                title=preview.title,
                lecture_id=preview.lecture_id,
                questions=[
                    QuestionDraft(
                        question=item.question.strip(),
                        options=[option.strip() for option in item.options or []],
                        answer=(item.correct_answer or "").strip()
                    )
                    for item in preview.items
                ]
            ))

        session.generation = None
        return created


# Global instance
ai_generator_service = AIGeneratorService()
