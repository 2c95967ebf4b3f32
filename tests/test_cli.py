"""Tests for the scripture-pal command line."""

import json

import pytest

from engine.cli import main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ("OPENAI_API_TIMEOUT", "VOICE_INPUT_TIMEOUT", "ENABLE_LOGGING", "APP_ENV", "LOG_TO_FILE"):
        monkeypatch.delenv(key, raising=False)


def test_match_prints_json(capsys):
    assert main(["I'm", "really", "anxious", "about", "tomorrow"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["primaryVerse"] == "PHP.4.6-PHP.4.7"
    assert out["category"] == "anxiety"


def test_options_shape_the_response(capsys):
    assert main(["--max-alternatives", "4", "--no-explanation", "--translation", "kjv", "I feel so alone"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert len(out["alternativeVerses"]) == 4
    assert out["explanation"] is None
    assert out["translation"] == "kjv"


def test_validate_config_fails_on_short_timeout(capsys, monkeypatch):
    monkeypatch.setenv("OPENAI_API_TIMEOUT", "500")
    assert main(["--validate-config"]) == 1
    out = json.loads(capsys.readouterr().out)
    assert out["isValid"] is False


def test_validate_config_passes_by_default(capsys):
    assert main(["--validate-config"]) == 0
    assert json.loads(capsys.readouterr().out) == {"isValid": True, "errors": []}
