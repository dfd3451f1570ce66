"""
Lecture file selection rules

A proposed selection is accepted whole or not at all.
"""
import logging
from typing import List, Optional, Sequence

from fastapi import UploadFile

from studyaid.config import settings
from studyaid.exceptions import ValidationFailure
from studyaid.schemas.lecture import SelectedFile

logger = logging.getLogger(__name__)

INVALID_TYPE_MESSAGE = "Only PDF, TXT, DOC, and DOCX files are allowed"
EMPTY_SELECTION_MESSAGE = "Please select at least one file"


class FileSelection:
    """Holds the currently accepted files and the last selection error"""

    def __init__(
        self,
        max_files: int = None,
        max_file_size: int = None,
        allowed_types: Sequence[str] = None
    ):
        self.max_files = max_files or settings.MAX_UPLOAD_FILES
        self.max_file_size = max_file_size or settings.MAX_UPLOAD_FILE_SIZE
        self.allowed_types = list(allowed_types or settings.ALLOWED_UPLOAD_TYPES)
        self.files: List[SelectedFile] = []
        self.error: Optional[str] = None

    def _check(self, proposed: Sequence[SelectedFile]) -> Optional[str]:
        if any(f.content_type not in self.allowed_types for f in proposed):
            return INVALID_TYPE_MESSAGE

        if len(proposed) > self.max_files:
            return f"Maximum {self.max_files} files allowed"

        if any(f.size > self.max_file_size for f in proposed):
            limit_mb = self.max_file_size // (1024 * 1024)
            return f"Files must be under {limit_mb}MB"

        return None

    def select(self, proposed: Sequence[SelectedFile]) -> bool:
        """
        Replace the selection if every file passes

        Checks run type, then count, then size. On the first failure the
        error is set and the previous selection is kept unchanged.

        Returns:
            True when the selection was accepted
        """
        error = self._check(proposed)
        if error:
            logger.info(f"File selection rejected: {error}")
            self.error = error
            return False

        self.files = list(proposed)
        self.error = None
        return True

    def require(self, proposed: Sequence[SelectedFile]) -> List[SelectedFile]:
        """Select and raise ValidationFailure unless a non-empty selection is accepted"""
        if not proposed:
            self.error = EMPTY_SELECTION_MESSAGE
            raise ValidationFailure(EMPTY_SELECTION_MESSAGE)
        if not self.select(proposed):
            raise ValidationFailure(self.error)
        return self.files

    def clear(self) -> None:
        self.files = []
        self.error = None


def describe_uploads(uploads: Sequence[UploadFile]) -> List[SelectedFile]:
    """Build SelectedFile entries from multipart uploads"""
    described = []
    for upload in uploads:
        size = upload.size
        if size is None:
            upload.file.seek(0, 2)
            size = upload.file.tell()
            upload.file.seek(0)
        described.append(SelectedFile(
            filename=upload.filename or "upload",
            content_type=upload.content_type or "application/octet-stream",
            size=size
        ))
    return described
