"""
HTTP client for the remote study API

Every call is a single round trip with no automatic retry. Failures surface
as RemoteAPIError carrying the server's `message` field when it sent one,
otherwise the operation's generic message.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from studyaid.config import settings
from studyaid.exceptions import RemoteAPIError

logger = logging.getLogger(__name__)

# (filename, content, content_type) as accepted by requests' multipart encoder
UploadPart = Tuple[str, Any, str]


class StudyApiClient:
    """Thin wrapper over requests.Session bound to one bearer token"""

    def __init__(
        self,
        base_url: str = None,
        token: Optional[str] = None,
        timeout: int = None,
        http: requests.Session = None
    ):
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self.token = token
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.http = http or requests.Session()

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def _request(
        self,
        method: str,
        path: str,
        error_message: str,
        **kwargs
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs
            )
            response.raise_for_status()
            return response
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            message = self._server_message(e.response) or error_message
            logger.error(f"{method} {path} failed with {status_code}: {message}")
            raise RemoteAPIError(message, status_code=status_code) from e
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {str(e)}")
            raise RemoteAPIError(error_message) from e

    def _json(self, method: str, path: str, error_message: str, **kwargs) -> Any:
        response = self._request(method, path, error_message, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned invalid JSON")
            raise RemoteAPIError(error_message, status_code=response.status_code) from e

    @staticmethod
    def _server_message(response: Optional[requests.Response]) -> Optional[str]:
        if response is None:
            return None
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return None

    # Auth

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._json("POST", "/auth/login", "Login failed",
                          json={"email": email, "password": password})

    def signup(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return self._json("POST", "/auth/signup", "Signup failed",
                          json={"name": name, "email": email, "password": password})

    def verify(self) -> Dict[str, Any]:
        return self._json("GET", "/auth/verify", "Session verification failed")

    # Lectures

    def list_lectures(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/lectures", "Failed to load lectures")

    def get_lecture(self, lecture_id: str) -> Dict[str, Any]:
        return self._json("GET", f"/lectures/{lecture_id}", "Failed to load lecture")

    def create_lecture(
        self,
        title: str,
        description: Optional[str] = None,
        files: Sequence[UploadPart] = ()
    ) -> Dict[str, Any]:
        """Create a lecture; with files the request is sent as multipart form data"""
        if not files:
            payload = {"title": title}
            if description:
                payload["description"] = description
            return self._json("POST", "/lectures", "Error creating lecture", json=payload)

        data = {"title": title}
        if description:
            data["description"] = description
        return self._json(
            "POST", "/lectures", "Error uploading files",
            data=data,
            files=[("files", part) for part in files]
        )

    def delete_lecture(self, lecture_id: str) -> Any:
        return self._json("DELETE", f"/lectures/{lecture_id}", "Failed to delete lecture")

    def add_files(self, lecture_id: str, files: Sequence[UploadPart]) -> Any:
        return self._json(
            "POST", f"/lectures/{lecture_id}/files", "Error uploading files",
            files=[("files", part) for part in files]
        )

    def delete_file(self, lecture_id: str, file_id: str) -> Any:
        return self._json("DELETE", f"/lectures/{lecture_id}/files/{file_id}",
                          "Failed to delete file")

    def download_file(self, filename: str) -> Tuple[bytes, str]:
        response = self._request("GET", f"/uploads/{filename}", "Failed to download file")
        return response.content, response.headers.get("Content-Type", "application/octet-stream")

    # Flashcards

    def get_flashcard_set(self, set_id: str) -> Dict[str, Any]:
        return self._json("GET", f"/flashcards/{set_id}", "Error loading flashcard set")

    def create_flashcard_set(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", "/flashcards", "Failed to create flashcard set", json=payload)

    def update_flashcard_set(self, set_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("PUT", f"/flashcards/{set_id}", "Failed to update flashcard set",
                          json=payload)

    def delete_flashcard_set(self, set_id: str) -> Any:
        return self._json("DELETE", f"/flashcards/{set_id}", "Failed to delete flashcard set")

    def submit_review(self, flashcard_id: str, confidence: int) -> Any:
        return self._json("POST", f"/users/flashcard/{flashcard_id}/review",
                          "Failed to submit review", json={"confidence": confidence})

    # Quizzes

    def get_quiz(self, quiz_id: str) -> Dict[str, Any]:
        return self._json("GET", f"/quizzes/{quiz_id}", "Error loading quiz")

    def create_quiz(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", "/quizzes", "Failed to create quiz. Please try again.",
                          json=payload)

    def update_quiz(self, quiz_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("PUT", f"/quizzes/{quiz_id}", "Failed to update quiz", json=payload)

    def delete_quiz(self, quiz_id: str) -> Any:
        return self._json("DELETE", f"/quizzes/{quiz_id}", "Failed to delete quiz")

    def submit_attempt(self, quiz_id: str, payload: Dict[str, Any]) -> Any:
        return self._json("POST", f"/quizzes/{quiz_id}/attempts",
                          "Failed to submit quiz. Please try again.", json=payload)

    # AI generation

    def extract_text(self, lecture_id: str, file_ids: Sequence[str]) -> Dict[str, Any]:
        return self._json("POST", "/ai/extract-text", "Failed to extract text",
                          json={"lectureId": lecture_id, "fileIds": list(file_ids)})

    def generate_flashcards(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._json("POST", "/ai/generate/flashcards", "Failed to generate flashcards",
                          json=payload)

    def generate_quiz(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._json("POST", "/ai/generate/quiz", "Failed to generate quiz", json=payload)

    # API key vault

    def list_api_keys(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/api-keys", "Failed to load API keys")

    def get_provider_key(self, provider: str) -> Dict[str, Any]:
        return self._json("GET", f"/api-keys/provider/{provider}", "Failed to load provider key")

    def create_api_key(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", "/api-keys", "Failed to save API key", json=payload)

    def update_api_key(self, key_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("PUT", f"/api-keys/{key_id}", "Failed to update API key", json=payload)

    def delete_api_key(self, key_id: str) -> Any:
        return self._json("DELETE", f"/api-keys/{key_id}", "Failed to delete API key")

    # Progress

    def list_quiz_attempts(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/users/quiz/attempts", "Failed to load quiz attempts")

    def flashcard_progress(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/users/flashcard/progress", "Failed to load flashcard progress")

    # Admin (called with the admin token)

    def admin_analytics(self) -> Dict[str, Any]:
        return self._json("GET", "/admin/analytics", "Failed to load analytics")

    def admin_users(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/admin/users", "Failed to load users")

    def admin_delete_user(self, user_id: str) -> Any:
        return self._json("DELETE", f"/admin/users/{user_id}", "Failed to delete user")

    def admin_lectures(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/admin/lectures", "Failed to load lectures")

    def admin_delete_lecture(self, lecture_id: str) -> Any:
        return self._json("DELETE", f"/admin/lectures/{lecture_id}", "Failed to delete lecture")
