"""Shared request builders and helpers for the test suite."""

from typing import Any

import pytest

from chatroute.bus.events import Request
from chatroute.context import Context


def block_action_body(block_id: str = "b1", action_id: str = "a1") -> dict[str, Any]:
    return {
        "type": "block_actions",
        "user": {"id": "U9"},
        "actions": [{"type": "button", "block_id": block_id, "action_id": action_id}],
    }


def message_body(text: str | None = "hello", **fields: Any) -> dict[str, Any]:
    event: dict[str, Any] = {"type": "message", "channel": "C1", "user": "U9", **fields}
    if text is not None:
        event["text"] = text
    return {"type": "event_callback", "event": event}


@pytest.fixture
def block_action():
    def _make(block_id: str = "b1", action_id: str = "a1") -> Request:
        return Request.from_action(block_action_body(block_id, action_id))
    return _make


@pytest.fixture
def interactive_message():
    def _make(callback_id: str = "cb1") -> Request:
        return Request.from_action({
            "type": "interactive_message",
            "callback_id": callback_id,
            "actions": [{"name": "approve", "value": "yes"}],
        })
    return _make


@pytest.fixture
def slash_command():
    def _make(command: str = "/deploy", text: str = "") -> Request:
        return Request.from_command({"command": command, "text": text, "user_id": "U9"})
    return _make


@pytest.fixture
def block_suggestion():
    def _make(block_id: str = "b1", action_id: str = "a1", value: str = "") -> Request:
        return Request.from_options({
            "type": "block_suggestion",
            "block_id": block_id,
            "action_id": action_id,
            "value": value,
        })
    return _make


@pytest.fixture
def message():
    def _make(text: str | None = "hello", **fields: Any) -> Request:
        return Request.from_event(message_body(text, **fields))
    return _make


@pytest.fixture
def event():
    def _make(type: str = "reaction_added", **fields: Any) -> Request:
        return Request.from_event({"type": "event_callback", "event": {"type": type, **fields}})
    return _make


@pytest.fixture
def invoke():
    """Run a single middleware with a recording continuation.

    Returns ``(calls, context)`` where ``calls`` lists the arguments ``next``
    received (``None`` for a plain continue).
    """
    async def _invoke(middleware, request: Request, context: Context | None = None):
        context = context if context is not None else Context()
        calls: list[Any] = []

        async def next_(error=None):
            calls.append(error)

        await middleware(request, context, next_)
        return calls, context
    return _invoke
