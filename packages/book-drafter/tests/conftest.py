"""Pytest configuration and fixtures for book-drafter tests."""

import asyncio
import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from llm_core import ModelConfig

from book_drafter.config import DrafterSettings
from book_drafter.models import (
    BookBrief,
    Chapter,
    ChapterContentResponse,
    ChapterStatus,
    OutlineChapterResponse,
    OutlineResponse,
    Project,
    ProjectStatus,
)
from book_drafter.orchestrator import GenerationOrchestrator
from book_drafter.state import InMemoryProjectStore


@pytest.fixture(autouse=True)
def mock_api_keys():
    """Mock the API key so cloud handles can be built without a real account."""
    with patch.dict(os.environ, {"GEMINI_API_KEY": "test-gemini-key"}):
        yield


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def brief():
    return BookBrief(
        description="A beginner's guide to sourdough",
        target_audience="home cooks",
        language="English",
        difficulty_level="Beginner",
        number_of_chapters=3,
    )


class FakeHandle:
    """Stands in for a ProviderHandle.

    Each call pops the next scripted reply: a string becomes chapter content, an
    OutlineResponse is returned as is and an exception is raised. When ``gate`` is set
    the call blocks on it after signalling ``entered``.
    """

    def __init__(self, model_id="ollama/gemma"):
        self.model = ModelConfig(provider="ollama", model_id=model_id)
        self.replies = []
        self.calls = []
        self.entered = asyncio.Event()
        self.gate = None

    @property
    def model_id(self):
        return self.model.model_id

    def push(self, *replies):
        self.replies.extend(replies)
        return self

    async def generate_structured(self, messages, response_schema, temperature=None, seed=None):
        self.calls.append(
            {"messages": messages, "schema": response_schema, "temperature": temperature, "seed": seed}
        )
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()

        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, str):
            return ChapterContentResponse(chapter_content=reply)
        return reply

    def user_prompt(self, index):
        """The user message of the ``index``-th call."""
        return self.calls[index]["messages"][-1]["content"]

    async def close(self):
        pass


class FakeProviderConfig:
    """Stands in for ProviderConfig, always handing out the same FakeHandle."""

    def __init__(self, handle, error=None):
        self.handle = handle
        self.error = error
        self.selections = []
        self.closed = False

    async def configure(self, selection=None):
        self.selections.append(selection)
        if self.error is not None:
            raise self.error
        return self.handle

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_handle():
    return FakeHandle()


@pytest.fixture
def provider_config(fake_handle):
    return FakeProviderConfig(fake_handle)


@pytest.fixture
def settings():
    return DrafterSettings(_env_file=None)


@pytest.fixture
def make_project(brief):
    """Build a project from (title, content, status) tuples."""

    def _make(*chapters):
        return Project(
            brief=brief,
            status=ProjectStatus.EDITING,
            chapters=[
                Chapter(title=title, content=content, status=ChapterStatus(status))
                for title, content, status in chapters
            ],
        )

    return _make


@pytest.fixture
def make_orchestrator(provider_config, settings):
    """Build an orchestrator over an in-memory store holding ``project``."""

    def _make(project=None, progress_callback=None, **kwargs):
        return GenerationOrchestrator(
            store=InMemoryProjectStore(project),
            settings=kwargs.pop("settings", settings),
            provider_config=kwargs.pop("provider_config", provider_config),
            progress_callback=progress_callback,
            **kwargs,
        )

    return _make


@pytest.fixture
def outline_response():
    return OutlineResponse(
        outline=[
            OutlineChapterResponse(chapter_title="Understanding Starters", subchapters=["What is a starter"]),
            OutlineChapterResponse(chapter_title="Mixing and Folding", subchapters=["Autolyse", "Stretch and fold"]),
            OutlineChapterResponse(chapter_title="Baking Day", subchapters=[]),
        ]
    )
