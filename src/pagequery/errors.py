from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_INPUT = "INVALID_INPUT"
    EVALUATION_FAILED = "EVALUATION_FAILED"
    NAVIGATION_FAILED = "NAVIGATION_FAILED"


class PageQueryError(Exception):
    """Expected failure raised by tool handlers and the page runtime wrapper.

    server.py turns it into the MCP tool error envelope. Business logic lets it
    propagate; nothing below the MCP layer catches it.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
