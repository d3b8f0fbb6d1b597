"""Pytest configuration and shared fixtures."""

import pytest

from llmrelay.domain.models.relay_request import ChatMessage, RelayRequest


@pytest.fixture
def chat_messages() -> list[dict[str, str]]:
    """A short conversation in wire format."""
    return [
        {"role": "system", "content": "You are a helpful assistant"},
        {"role": "user", "content": "What is the capital of France?"},
        {"role": "assistant", "content": "Paris."},
        {"role": "user", "content": "And of Italy?"},
    ]


@pytest.fixture
def relay_request(chat_messages: list[dict[str, str]]) -> RelayRequest:
    """A validated non-streaming relay request."""
    return RelayRequest(
        model_name="openai/gpt-4o",
        messages=[ChatMessage(**message) for message in chat_messages],
    )
