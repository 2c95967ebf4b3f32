"""
errors.py -- Error taxonomy shared by the engine, the service and the CLI.

Every failure that reaches a caller is described by an AppError. Code that
must abort raises ScripturePalError, which carries one.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    BIBLE_API_ERROR = "BIBLE_API_ERROR"
    VOICE_INPUT_ERROR = "VOICE_INPUT_ERROR"
    TTS_ERROR = "TTS_ERROR"
    AI_PROCESSING_ERROR = "AI_PROCESSING_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    MICROPHONE_PERMISSION_DENIED = "MICROPHONE_PERMISSION_DENIED"
    WAKE_WORD_TIMEOUT = "WAKE_WORD_TIMEOUT"
    INVALID_CONFIG = "INVALID_CONFIG"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# Transient failures the user can simply try again after.
RECOVERABLE_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.BIBLE_API_ERROR,
    ErrorCode.VOICE_INPUT_ERROR,
    ErrorCode.TTS_ERROR,
    ErrorCode.AI_PROCESSING_ERROR,
    ErrorCode.NETWORK_ERROR,
    ErrorCode.WAKE_WORD_TIMEOUT,
})


class AppError(BaseModel):
    """Structured description of a failure."""

    code: ErrorCode
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)
    context: Optional[dict[str, Any]] = None
    recoverable: bool = False


def make_error(
    code: ErrorCode,
    message: str,
    details: Optional[str] = None,
    context: Optional[dict[str, Any]] = None,
    recoverable: Optional[bool] = None,
) -> AppError:
    """Build an AppError, defaulting `recoverable` from the error code."""
    if recoverable is None:
        recoverable = code in RECOVERABLE_CODES
    return AppError(
        code=code,
        message=message,
        details=details,
        context=context,
        recoverable=recoverable,
    )


class ScripturePalError(Exception):
    """Raised when an operation cannot complete. Carries an AppError."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.error = make_error(code, message, details, context, recoverable)

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def recoverable(self) -> bool:
        return self.error.recoverable
