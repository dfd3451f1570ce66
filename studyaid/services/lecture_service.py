"""
Lecture reads and mutations with query caching
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from studyaid.exceptions import ValidationFailure
from studyaid.schemas.lecture import Lecture
from studyaid.services.api_client import UploadPart
from studyaid.services.session import SessionContext

logger = logging.getLogger(__name__)


class LectureService:
    """Service for lectures and their uploaded files"""

    def list_lectures(self, session: SessionContext) -> List[Lecture]:
        client = session.client
        data = session.cache.fetch(session.cache_scope, ("lectures",), client.list_lectures)
        return [Lecture.model_validate(item) for item in data or []]

    def get_lecture(self, session: SessionContext, lecture_id: str) -> Lecture:
        if not lecture_id:
            raise ValidationFailure("Lecture ID is required")
        client = session.client
        data = session.cache.fetch(
            session.cache_scope,
            ("lecture", lecture_id),
            lambda: client.get_lecture(lecture_id)
        )
        return Lecture.model_validate(data)

    def create_lecture(
        self,
        session: SessionContext,
        title: str,
        description: Optional[str] = None,
        files: Sequence[UploadPart] = ()
    ) -> Dict[str, Any]:
        """
        Create a lecture, optionally uploading its first files in the same request

        Invalidates: lectures
        """
        if not title or not title.strip():
            raise ValidationFailure("Title is required")

        created = session.client.create_lecture(title, description, files)
        session.cache.invalidate(session.cache_scope, ("lectures",))
        logger.info(f"Lecture created: {created.get('id') if created else None}")
        return created

    def delete_lecture(self, session: SessionContext, lecture_id: str) -> Any:
        result = session.client.delete_lecture(lecture_id)
        session.cache.invalidate(session.cache_scope, ("lectures",))
        session.cache.invalidate(session.cache_scope, ("lecture", lecture_id))
        return result

    def add_files(
        self,
        session: SessionContext,
        lecture_id: str,
        files: Sequence[UploadPart]
    ) -> Any:
        if not files:
            raise ValidationFailure("Please select at least one file")
        result = session.client.add_files(lecture_id, files)
        session.cache.invalidate(session.cache_scope, ("lecture", lecture_id))
        logger.info(f"Added {len(files)} files to lecture {lecture_id}")
        return result

    def delete_file(self, session: SessionContext, lecture_id: str, file_id: str) -> Any:
        result = session.client.delete_file(lecture_id, file_id)
        session.cache.invalidate(session.cache_scope, ("lecture", lecture_id))
        return result

    def download_file(self, session: SessionContext, filename: str):
        return session.client.download_file(filename)


# Global instance
lecture_service = LectureService()
