"""Tests for VoiceInputService against a scripted recognizer."""

import asyncio

import pytest

from engine.config import VoiceInputConfig
from engine.errors import ErrorCode, ScripturePalError
from engine.models import InputSource
from engine.voice_input import SpeechResult, VoiceInputService

from tests.fakes import FakeRecognizer


def _final(text):
    return lambda listener: listener.on_result(SpeechResult(transcript=text, confidence=0.9, is_final=True))


def _interim(text):
    return lambda listener: listener.on_result(SpeechResult(transcript=text, confidence=0.4))


async def _until_started(recognizer):
    for _ in range(20):
        if recognizer.listener is not None:
            return
        await asyncio.sleep(0)
    raise AssertionError("recognizer never started")


@pytest.mark.asyncio
async def test_final_result_becomes_voice_request():
    recognizer = FakeRecognizer(script=[_interim("I'm really"), _final("I'm really Anxious")])
    service = VoiceInputService(recognizer, VoiceInputConfig())
    request = await service.listen()
    assert request.source == InputSource.VOICE
    assert request.original_text == "I'm really Anxious"
    assert request.processed_text == "i'm really anxious"
    assert service.state.transcript == "I'm really Anxious"
    assert not service.state.is_listening
    assert recognizer.stopped == 1


@pytest.mark.asyncio
async def test_permission_denied():
    recognizer = FakeRecognizer(permission=False)
    service = VoiceInputService(recognizer, VoiceInputConfig())
    with pytest.raises(ScripturePalError) as exc_info:
        await service.listen()
    assert exc_info.value.code == ErrorCode.MICROPHONE_PERMISSION_DENIED
    assert not exc_info.value.recoverable
    assert recognizer.started == 0


@pytest.mark.asyncio
async def test_recognizer_error():
    recognizer = FakeRecognizer(script=[lambda listener: listener.on_error("audio-capture")])
    service = VoiceInputService(recognizer, VoiceInputConfig())
    with pytest.raises(ScripturePalError) as exc_info:
        await service.listen()
    assert exc_info.value.code == ErrorCode.VOICE_INPUT_ERROR
    assert exc_info.value.error.details == "audio-capture"
    assert service.state.error == "Speech recognition failed"


@pytest.mark.asyncio
async def test_end_without_speech():
    recognizer = FakeRecognizer(script=[lambda listener: listener.on_end()])
    service = VoiceInputService(recognizer, VoiceInputConfig())
    with pytest.raises(ScripturePalError, match="No speech detected"):
        await service.listen()


@pytest.mark.asyncio
async def test_timeout():
    recognizer = FakeRecognizer()
    service = VoiceInputService(recognizer, VoiceInputConfig(timeout_ms=50))
    with pytest.raises(ScripturePalError) as exc_info:
        await service.listen()
    assert exc_info.value.code == ErrorCode.WAKE_WORD_TIMEOUT
    assert recognizer.stopped == 1
    assert not service.state.is_listening


@pytest.mark.asyncio
async def test_stop_settles_pending_listen():
    recognizer = FakeRecognizer()
    service = VoiceInputService(recognizer, VoiceInputConfig())
    task = asyncio.create_task(service.listen())
    await _until_started(recognizer)
    assert service.state.is_listening

    service.stop()
    assert await asyncio.wait_for(task, 1.0) is None
    assert not service.state.is_listening


@pytest.mark.asyncio
async def test_second_listen_while_active_is_rejected():
    recognizer = FakeRecognizer()
    service = VoiceInputService(recognizer, VoiceInputConfig())
    task = asyncio.create_task(service.listen())
    await _until_started(recognizer)

    with pytest.raises(ScripturePalError, match="Already listening"):
        await service.listen()

    service.stop()
    assert await asyncio.wait_for(task, 1.0) is None


@pytest.mark.asyncio
async def test_late_events_are_ignored():
    recognizer = FakeRecognizer(script=[_final("I feel alone"), lambda listener: listener.on_error("late")])
    service = VoiceInputService(recognizer, VoiceInputConfig())
    request = await service.listen()
    assert request.processed_text == "i feel alone"


@pytest.mark.asyncio
async def test_cancelled_listen_releases_the_recognizer():
    recognizer = FakeRecognizer()
    service = VoiceInputService(recognizer, VoiceInputConfig())
    task = asyncio.create_task(service.listen())
    await _until_started(recognizer)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert recognizer.stopped == 1
    assert not service.state.is_listening

    recognizer.script = [_final("I feel so alone")]
    request = await service.listen()
    assert request.processed_text == "i feel so alone"
    assert recognizer.started == 2
