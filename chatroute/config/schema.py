"""Configuration schema using Pydantic."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

if TYPE_CHECKING:
    from chatroute.middleware.base import MiddlewareFn


def _compile(value: Any) -> Any:
    """Turn ``{"pattern": "...", "ignore_case": bool}`` into a compiled regex."""
    if isinstance(value, dict) and "pattern" in value:
        flags = re.IGNORECASE if value.get("ignore_case") else 0
        return re.compile(value["pattern"], flags)
    return value


def _dump(value: str | re.Pattern | None) -> Any:
    if isinstance(value, re.Pattern):
        out: dict[str, Any] = {"pattern": value.pattern}
        if value.flags & re.IGNORECASE:
            out["ignore_case"] = True
        return out
    return value


class ActionConstraints(BaseModel):
    """Identifier constraints for an action or options listener.

    Each field is either an exact string or a compiled regular expression;
    unset fields match anything.
    """

    model_config = ConfigDict(frozen=True)

    block_id: str | re.Pattern | None = None
    action_id: str | re.Pattern | None = None
    callback_id: str | re.Pattern | None = None

    @field_validator("block_id", "action_id", "callback_id", mode="before")
    @classmethod
    def _compile_patterns(cls, v: Any) -> Any:
        return _compile(v)

    @field_serializer("block_id", "action_id", "callback_id")
    def _serialize_patterns(self, v: str | re.Pattern | None) -> Any:
        return _dump(v)


class ListenerConfig(BaseModel):
    """A listener declared in configuration rather than in code."""

    name: str
    constraints: ActionConstraints | None = None
    command: str | None = None
    event_type: str | None = None
    message: str | re.Pattern | None = None
    direct_mention: bool = False

    @field_validator("message", mode="before")
    @classmethod
    def _compile_message(cls, v: Any) -> Any:
        return _compile(v)

    @field_serializer("message")
    def _serialize_message(self, v: str | re.Pattern | None) -> Any:
        return _dump(v)

    def build_middleware(self) -> list[MiddlewareFn]:
        """Return the filters this declaration implies, in evaluation order."""
        from chatroute.middleware import builtin

        links: list[MiddlewareFn] = []
        if self.constraints is not None:
            links.append(builtin.match_constraints(self.constraints))
        if self.command is not None:
            links += [builtin.only_commands, builtin.match_command_name(self.command)]
        if self.event_type is not None:
            links += [builtin.only_events, builtin.match_event_type(self.event_type)]
        if self.direct_mention or self.message is not None:
            links += [builtin.only_events, builtin.match_event_type("message")]
        if self.direct_mention:
            links.append(builtin.direct_mention())
        if self.message is not None:
            links.append(builtin.match_message(self.message))
        return links


class Config(BaseModel):
    """Root configuration for chatroute."""

    ignore_self: bool = True
    log_level: str = "INFO"
    listeners: list[ListenerConfig] = Field(default_factory=list)

    def get_listener(self, name: str) -> ListenerConfig | None:
        for listener in self.listeners:
            if listener.name == name:
                return listener
        return None
