"""Pytest configuration for llm-core tests."""

import os
from unittest.mock import patch

import pytest
from loguru import logger
from pydantic import BaseModel


@pytest.fixture(autouse=True)
def mock_api_keys():
    """Mock all API keys for tests."""
    with patch.dict(
        os.environ,
        {
            "GEMINI_API_KEY": "test-gemini-key",
        },
    ):
        yield


class Answer(BaseModel):
    """Small schema used for structured-response tests."""

    text: str
    score: int = 0


@pytest.fixture
def answer_schema():
    return Answer


@pytest.fixture
def messages():
    return [
        {"role": "system", "content": "You are terse."},
        {"role": "user", "content": "Say hi."},
    ]


@pytest.fixture
def log_messages():
    """Collect loguru output as ``LEVEL | message`` lines."""
    collected = []
    handler_id = logger.add(lambda message: collected.append(message.rstrip("\n")), format="{level} | {message}")
    yield collected
    logger.remove(handler_id)
