from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    PACKAGE_NOT_FOUND = "PACKAGE_NOT_FOUND"
    NETWORK_ERROR = "NETWORK_ERROR"
    CACHE_ERROR = "CACHE_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
    INVALID_INPUT = "INVALID_INPUT"


class NpmDocsError(Exception):
    """Raised for every classified failure in the documentation lookup path.

    The ``code`` is the only thing callers should branch on. Registry client
    errors (PACKAGE_NOT_FOUND, NETWORK_ERROR) propagate through DocService
    unchanged; server.py serialises them into the MCP tool error envelope.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable
        self.status_code = status_code

    def to_dict(self) -> dict:
        error: dict = {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "recoverable": self.recoverable,
        }
        if self.status_code is not None:
            error["status_code"] = self.status_code
        return {"error": error}
