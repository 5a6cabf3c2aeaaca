"""Domain exceptions.

Each carries the HTTP status and machine-readable code it maps to; the
handler in ``middleware/exception_handler.py`` renders them as
``{"error": code, "message": ..., "details": {...}}``.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    UI_NOT_FOUND = "UI_NOT_FOUND"
    SUBPROMPT_NOT_FOUND = "SUBPROMPT_NOT_FOUND"
    CODE_NOT_FOUND = "CODE_NOT_FOUND"
    REVISION_CONFLICT = "REVISION_CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    RATE_LIMITED = "RATE_LIMITED"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class EditorException(Exception):
    """Base for every error the API reports deliberately."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error_code.value, "message": self.message, "details": self.details}


# --- 404 ---

class UiNotFoundError(EditorException):
    def __init__(self, ui_id: str):
        super().__init__(
            f"UI not found: {ui_id}", ErrorCode.UI_NOT_FOUND, 404, {"ui_id": ui_id}
        )


class SubPromptNotFoundError(EditorException):
    def __init__(self, subprompt_id: str):
        super().__init__(
            f"Subprompt not found: {subprompt_id}",
            ErrorCode.SUBPROMPT_NOT_FOUND,
            404,
            {"subprompt_id": subprompt_id},
        )


class CodeNotFoundError(EditorException):
    def __init__(self, code_id: str):
        super().__init__(
            f"Code not found: {code_id}", ErrorCode.CODE_NOT_FOUND, 404, {"code_id": code_id}
        )


# --- 4xx caller errors ---

class ValidationError(EditorException):
    """Request was well-formed but its content is unacceptable."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message, ErrorCode.VALIDATION_ERROR, 400, {"field": field} if field else None
        )


class AuthenticationError(EditorException):
    def __init__(self, message: str = "Invalid or missing authentication token"):
        super().__init__(message, ErrorCode.UNAUTHORIZED, 401)


class ForbiddenError(EditorException):
    """Caller is known but may not act on this resource."""

    def __init__(self, message: str = "Not allowed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.FORBIDDEN, 403, details)


class SelfForkError(ForbiddenError):
    def __init__(self, ui_id: str):
        super().__init__("Cannot fork your own UI", details={"ui_id": ui_id})


class RevisionConflictError(EditorException):
    """No free sub_id could be taken for a new revision."""

    def __init__(self, ui_id: str, sub_id: str):
        super().__init__(
            f"Revision {sub_id} already exists in UI {ui_id}",
            ErrorCode.REVISION_CONFLICT,
            409,
            {"ui_id": ui_id, "sub_id": sub_id},
        )


# --- 5xx ---

class DatabaseError(EditorException):
    """Storage failed; the transaction was rolled back."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {"original_error": str(original_error)} if original_error else None
        super().__init__(message, ErrorCode.DATABASE_ERROR, 500, details)
