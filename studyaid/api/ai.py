"""
AI generation endpoints: generate, preview, edit, approve, reject
"""
from fastapi import APIRouter, Depends
from typing import Any
import logging

from studyaid.api.deps import require_user
from studyaid.exceptions import ValidationFailure
from studyaid.schemas.ai import GenerationPreview, GenerationRequest, PreviewEdit
from studyaid.schemas.common import MessageResponse
from studyaid.services.ai_generator import ai_generator_service
from studyaid.services.session import SessionContext

router = APIRouter(prefix="/api/ai", tags=["ai"])
logger = logging.getLogger(__name__)


@router.post("/lectures/{lecture_id}/generate", response_model=GenerationPreview)
def generate_content(
    lecture_id: str,
    request: GenerationRequest,
    session: SessionContext = Depends(require_user)
):
    """
    Generate flashcards or a quiz from selected lecture files

    - Extracts text from the files, then calls the chosen provider
    - Uses the stored key for the provider when none is supplied
    - Result is kept as a preview until approved or rejected
    """
    return ai_generator_service.generate(session, lecture_id, request)


@router.get("/preview", response_model=GenerationPreview)
def get_preview(session: SessionContext = Depends(require_user)):
    if session.generation is None:
        raise ValidationFailure("There is no generated content to review.")
    return session.generation


@router.put("/preview", response_model=GenerationPreview)
def edit_preview(edit: PreviewEdit, session: SessionContext = Depends(require_user)):
    return ai_generator_service.edit(session, edit.items)


@router.delete("/preview", response_model=MessageResponse)
def reject_preview(session: SessionContext = Depends(require_user)):
    ai_generator_service.reject(session)
    return MessageResponse(message="Generated content discarded")


@router.post("/preview/approve", status_code=201)
def approve_preview(session: SessionContext = Depends(require_user)) -> Any:
    """Save the preview as a flashcard set or quiz on its lecture"""
    return ai_generator_service.approve(session)
