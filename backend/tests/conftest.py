"""
Shared fixtures and test doubles for the quiz service tests.
"""

import io
import json
from types import SimpleNamespace

import httpx
import openai
import pytest
from fastapi.testclient import TestClient
from PyPDF2 import PdfWriter

from quizgen.config import Settings
from quizgen.main import create_app
from quizgen.utils.question_generation import QuizGenerator

CHAT_URL = "https://api.openai.com/v1/chat/completions"

PHOTOSYNTHESIS = "Photosynthesis converts light into chemical energy."

THREE_QUESTIONS = [
    {
        "question": "What does photosynthesis convert light into?",
        "options": ["Chemical energy", "Heat", "Sound", "Motion"],
        "correctAnswer": "Chemical energy",
    },
    {
        "question": "Which input drives photosynthesis?",
        "options": ["Light", "Wind", "Gravity", "Magnetism"],
        "correctAnswer": "Light",
    },
    {
        "question": "Photosynthesis is a process of...",
        "options": ["Energy conversion", "Digestion", "Erosion", "Combustion"],
        "correctAnswer": "Energy conversion",
    },
]


def make_completion(content):
    """Chat-completion envelope with a single choice."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def connection_refused():
    return openai.APIConnectionError(request=httpx.Request("POST", CHAT_URL))


class FakeCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeOpenAIClient:
    """Stands in for openai.AsyncOpenAI; records every completion request."""

    def __init__(self, response=None, error=None):
        self.completions = FakeCompletions(response=response, error=error)
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self):
        return self.completions.calls


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's environment and .env out of every test."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings():
    return Settings(openai_api_key="sk-test")


@pytest.fixture
def valid_client():
    return FakeOpenAIClient(response=make_completion(json.dumps(THREE_QUESTIONS)))


@pytest.fixture
def blank_pdf_bytes():
    """A real one-page PDF with no text layer."""
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def make_test_client(settings):
    """Build a TestClient around a fake upstream and an optional fake PDF reader."""

    def _make(upstream, pdf_reader=None):
        kwargs = {"quiz_generator": QuizGenerator(upstream)}
        if pdf_reader is not None:
            kwargs["pdf_reader"] = pdf_reader
        return TestClient(create_app(settings, **kwargs))

    return _make
