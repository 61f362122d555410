"""Request envelope types.

A :class:`Request` is built once by the transport and is read-only from then
on.  Its :class:`RequestKind` and :class:`BodyType` tags are fixed at
construction, so middleware never has to guess the payload shape from which
fields happen to be present.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class RequestKind(str, Enum):
    """The four interaction kinds a listener can receive."""

    ACTION = "action"
    COMMAND = "command"
    OPTIONS = "options"
    EVENT = "event"


class BodyType(str, Enum):
    """Platform body kinds, keyed by the body's ``type`` field."""

    BLOCK_ACTIONS = "block_actions"
    BLOCK_SUGGESTION = "block_suggestion"
    INTERACTIVE_MESSAGE = "interactive_message"
    DIALOG_SUBMISSION = "dialog_submission"
    DIALOG_SUGGESTION = "dialog_suggestion"
    MESSAGE_ACTION = "message_action"
    SLASH_COMMAND = "slash_command"
    EVENT_CALLBACK = "event_callback"


# Payloads that carry block_id / action_id
BLOCK_BODY_TYPES = frozenset({BodyType.BLOCK_ACTIONS, BodyType.BLOCK_SUGGESTION})

# Bodies that carry callback_id
CALLBACK_BODY_TYPES = frozenset({
    BodyType.INTERACTIVE_MESSAGE,
    BodyType.DIALOG_SUBMISSION,
    BodyType.MESSAGE_ACTION,
    BodyType.DIALOG_SUGGESTION,
})

_ACTION_BODY_TYPES = frozenset({
    BodyType.BLOCK_ACTIONS,
    BodyType.INTERACTIVE_MESSAGE,
    BodyType.DIALOG_SUBMISSION,
    BodyType.MESSAGE_ACTION,
})

_OPTIONS_BODY_TYPES = frozenset({
    BodyType.BLOCK_SUGGESTION,
    BodyType.INTERACTIVE_MESSAGE,
    BodyType.DIALOG_SUGGESTION,
})


def _body_type(body: Mapping[str, Any], allowed: frozenset[BodyType]) -> BodyType:
    raw = body.get("type")
    try:
        body_type = BodyType(raw)
    except ValueError:
        raise ValueError(f"Unknown body type: {raw!r}") from None
    if body_type not in allowed:
        raise ValueError(f"Body type {raw!r} is not valid here")
    return body_type


@dataclass(frozen=True)
class Request:
    """An incoming interaction, tagged by kind and body type."""

    kind: RequestKind
    body_type: BodyType
    body: Mapping[str, Any] = field(repr=False)
    payload: Mapping[str, Any]

    def __post_init__(self) -> None:
        # Freeze the top level so middleware cannot rewrite the envelope
        object.__setattr__(self, "body", MappingProxyType(dict(self.body)))
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    # -- constructors (transport boundary) -------------------------------

    @classmethod
    def from_action(
        cls, body: Mapping[str, Any], payload: Mapping[str, Any] | None = None
    ) -> Request:
        """Build an action request.

        For ``block_actions`` bodies the payload is the single element
        action being dispatched (``body["actions"][0]`` when not given);
        for the other action kinds it is the body itself.
        """
        body_type = _body_type(body, _ACTION_BODY_TYPES)
        if payload is None:
            if body_type is BodyType.BLOCK_ACTIONS:
                actions = body.get("actions") or [{}]
                payload = actions[0]
            else:
                payload = body
        return cls(RequestKind.ACTION, body_type, body, payload)

    @classmethod
    def from_command(cls, body: Mapping[str, Any]) -> Request:
        return cls(RequestKind.COMMAND, BodyType.SLASH_COMMAND, body, body)

    @classmethod
    def from_options(cls, body: Mapping[str, Any]) -> Request:
        return cls(RequestKind.OPTIONS, _body_type(body, _OPTIONS_BODY_TYPES), body, body)

    @classmethod
    def from_event(cls, body: Mapping[str, Any]) -> Request:
        event = body.get("event")
        if event is None:
            raise ValueError("Event body has no 'event' field")
        return cls(RequestKind.EVENT, BodyType.EVENT_CALLBACK, body, event)

    # -- views -----------------------------------------------------------

    def _view(self, kind: RequestKind) -> Mapping[str, Any] | None:
        return self.payload if self.kind is kind else None

    @property
    def action(self) -> Mapping[str, Any] | None:
        return self._view(RequestKind.ACTION)

    @property
    def command(self) -> Mapping[str, Any] | None:
        return self._view(RequestKind.COMMAND)

    @property
    def options(self) -> Mapping[str, Any] | None:
        return self._view(RequestKind.OPTIONS)

    @property
    def event(self) -> Mapping[str, Any] | None:
        return self._view(RequestKind.EVENT)

    @property
    def message(self) -> Mapping[str, Any] | None:
        """The event when it is a ``message`` event, else ``None``."""
        event = self.event
        if event is not None and event.get("type") == "message":
            return event
        return None

    # -- tags ------------------------------------------------------------

    @property
    def is_block_payload(self) -> bool:
        """True when the payload identifies a block element (block_id/action_id)."""
        return self.body_type in BLOCK_BODY_TYPES

    @property
    def is_callback_identified(self) -> bool:
        """True when the body carries a ``callback_id``."""
        return self.body_type in CALLBACK_BODY_TYPES
