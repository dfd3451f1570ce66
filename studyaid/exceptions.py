"""
Error types shared by services and API routes

- ValidationFailure: caught client-side before any request is sent
- RemoteAPIError: raised from the HTTP layer talking to the study API
- NotAuthenticated: no token for the user or admin domain
"""
from typing import Optional


class StudyAidError(Exception):
    """Base error for the web client"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(StudyAidError):
    """Input rejected locally, no remote call was made"""


class RemoteAPIError(StudyAidError):
    """Remote study API call failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotAuthenticated(StudyAidError):
    """No usable bearer token for the requested domain"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)
