"""
Lecture and lecture file endpoints
"""
from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from typing import Any, List, Optional
import logging

from studyaid.api.deps import require_user
from studyaid.schemas.common import MessageResponse
from studyaid.schemas.lecture import Lecture, LectureCreate
from studyaid.services.lecture_service import lecture_service
from studyaid.services.session import SessionContext
from studyaid.utils.uploads import FileSelection, describe_uploads

router = APIRouter(prefix="/api/lectures", tags=["lectures"])
logger = logging.getLogger(__name__)


def _select_files(uploads: Optional[List[UploadFile]]):
    """
    Validate uploads as one selection and read them into multipart parts

    Raises ValidationFailure before anything is read when the selection
    breaks a bound.
    """
    uploads = uploads or []
    FileSelection().require(describe_uploads(uploads))
    parts = []
    for upload in uploads:
        content = upload.file.read()
        parts.append((upload.filename, content, upload.content_type))
    return parts


@router.get("/", response_model=List[Lecture])
def list_lectures(session: SessionContext = Depends(require_user)):
    return lecture_service.list_lectures(session)


@router.post("/", status_code=201)
def create_lecture(request: LectureCreate, session: SessionContext = Depends(require_user)) -> Any:
    """Create an empty lecture"""
    return lecture_service.create_lecture(session, request.title, request.description)


@router.post("/upload", status_code=201)
def upload_lecture(
    title: str = Form(...),
    description: Optional[str] = Form(None),
    files: List[UploadFile] = File(None),
    session: SessionContext = Depends(require_user)
) -> Any:
    """
    Create a lecture together with its source documents

    - At most 5 files, each under 10MB
    - PDF, TXT, DOC and DOCX only
    - A rejected selection uploads nothing
    """
    parts = _select_files(files)
    logger.info(f"Uploading {len(parts)} files for new lecture")
    return lecture_service.create_lecture(session, title, description, parts)


@router.get("/files/{filename}")
def download_file(filename: str, session: SessionContext = Depends(require_user)):
    content, content_type = lecture_service.download_file(session, filename)
    return Response(content=content, media_type=content_type)


@router.get("/{lecture_id}", response_model=Lecture)
def get_lecture(lecture_id: str, session: SessionContext = Depends(require_user)):
    return lecture_service.get_lecture(session, lecture_id)


@router.delete("/{lecture_id}", response_model=MessageResponse)
def delete_lecture(lecture_id: str, session: SessionContext = Depends(require_user)):
    lecture_service.delete_lecture(session, lecture_id)
    return MessageResponse(message="Lecture deleted")


@router.post("/{lecture_id}/files", status_code=201)
def add_files(
    lecture_id: str,
    files: List[UploadFile] = File(None),
    session: SessionContext = Depends(require_user)
) -> Any:
    """Attach more documents to an existing lecture"""
    parts = _select_files(files)
    return lecture_service.add_files(session, lecture_id, parts)


@router.delete("/{lecture_id}/files/{file_id}", response_model=MessageResponse)
def delete_file(lecture_id: str, file_id: str, session: SessionContext = Depends(require_user)):
    lecture_service.delete_file(session, lecture_id, file_id)
    return MessageResponse(message="File deleted")
