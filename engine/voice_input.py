"""
voice_input.py -- Cancellable speech capture.

A SpeechRecognizer is any engine that can ask for microphone permission,
start recognition and push results to a listener. VoiceInputService wraps
one listen operation in a ListenSession whose future always settles:
final result, recognizer error, end of speech, timeout, stop() or
cancellation of the awaiting task.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from pydantic import BaseModel, Field

from engine.classifier import build_user_request
from engine.config import VoiceInputConfig
from engine.errors import ErrorCode, ScripturePalError
from engine.models import InputSource, UserRequest

logger = logging.getLogger(__name__)


class SpeechAlternative(BaseModel):
    transcript: str
    confidence: float = 0.0


class SpeechResult(BaseModel):
    """One recognition event. Only final results complete a listen."""
    transcript: str
    confidence: float = 0.0
    is_final: bool = False
    alternatives: list[SpeechAlternative] = Field(default_factory=list)


class VoiceInputState(BaseModel):
    is_listening: bool = False
    is_processing: bool = False
    transcript: str = ""
    confidence: float = 0.0
    error: Optional[str] = None
    wake_word_detected: bool = False


class RecognitionListener(Protocol):
    def on_result(self, result: SpeechResult) -> None: ...
    def on_error(self, message: str) -> None: ...
    def on_end(self) -> None: ...


class SpeechRecognizer(Protocol):
    """The speech engine seam. Implementations live outside this package."""

    async def request_permission(self) -> bool: ...

    def start(self, config: VoiceInputConfig, listener: RecognitionListener) -> None: ...

    def stop(self) -> None: ...


class ListenSession:
    """Listener for one listen operation, backed by a future that always settles."""

    def __init__(self, state: VoiceInputState) -> None:
        self._future: asyncio.Future[Optional[SpeechResult]] = (
            asyncio.get_running_loop().create_future()
        )
        self._state = state

    @property
    def done(self) -> bool:
        return self._future.done()

    def on_result(self, result: SpeechResult) -> None:
        if self.done:
            return
        self._state.transcript = result.transcript
        self._state.confidence = result.confidence
        logger.debug("Heard: %s (final=%s)", result.transcript, result.is_final)
        if result.is_final:
            self._future.set_result(result)

    def on_error(self, message: str) -> None:
        if self.done:
            return
        self._future.set_exception(
            ScripturePalError(ErrorCode.VOICE_INPUT_ERROR, "Speech recognition failed", details=message)
        )

    def on_end(self) -> None:
        if self.done:
            return
        self._future.set_exception(
            ScripturePalError(ErrorCode.VOICE_INPUT_ERROR, "No speech detected")
        )

    def cancel(self) -> None:
        """Settle the session with no result."""
        if not self.done:
            self._future.set_result(None)

    async def wait(self, timeout: float) -> Optional[SpeechResult]:
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout)
        except asyncio.TimeoutError:
            self.cancel()
            raise ScripturePalError(
                ErrorCode.WAKE_WORD_TIMEOUT,
                f"No speech within {timeout:.1f} seconds",
            ) from None


class VoiceInputService:
    """Runs listen operations against a SpeechRecognizer."""

    def __init__(self, recognizer: SpeechRecognizer, config: VoiceInputConfig) -> None:
        self.recognizer = recognizer
        self.config = config
        self.state = VoiceInputState()
        self._session: Optional[ListenSession] = None

    async def listen(self) -> Optional[UserRequest]:
        """
        Capture one utterance.

        Returns the UserRequest, or None when stop() was called first.
        Raises ScripturePalError for denied permission, recognizer errors,
        silence and timeouts.
        """
        if self._session is not None and not self._session.done:
            raise ScripturePalError(ErrorCode.VOICE_INPUT_ERROR, "Already listening")

        if not await self.recognizer.request_permission():
            logger.warning("Microphone permission denied")
            self.state.error = "Microphone permission denied"
            raise ScripturePalError(
                ErrorCode.MICROPHONE_PERMISSION_DENIED, "Microphone permission denied",
            )

        self.state = VoiceInputState(is_listening=True)
        session = ListenSession(self.state)
        self._session = session
        logger.info("Listening (language=%s, timeout=%dms)", self.config.language, self.config.timeout_ms)

        self.recognizer.start(self.config, session)
        try:
            result = await session.wait(self.config.timeout_ms / 1000.0)
        except ScripturePalError as exc:
            self.state.error = exc.error.message
            self.recognizer.stop()
            raise
        except asyncio.CancelledError:
            logger.info("Listen cancelled")
            session.cancel()
            self.recognizer.stop()
            raise
        finally:
            self.state.is_listening = False

        if result is None:
            logger.info("Listening stopped before a final result")
            return None

        self.recognizer.stop()
        return build_user_request(result.transcript, InputSource.VOICE)

    def stop(self) -> None:
        """Stop the recognizer and settle any pending listen with None."""
        logger.info("Stopping speech recognition")
        if self._session is not None:
            self._session.cancel()
        self.recognizer.stop()
        self.state.is_listening = False
