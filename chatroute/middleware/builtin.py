"""Built-in listener filters.

Every filter here is a :class:`~chatroute.middleware.base.Filter`: its
decision lives in :meth:`check` and is mapped onto the continuation by the
base class.  Filters never log and never raise for a non-matching request.
"""

from __future__ import annotations

from typing import Mapping

from chatroute.bus.events import Request, RequestKind
from chatroute.config.schema import ActionConstraints
from chatroute.context import (
    ACTION_ID_MATCHES,
    BLOCK_ID_MATCHES,
    CALLBACK_ID_MATCHES,
    BOT_ID,
    BOT_USER_ID,
    MATCHES,
    Context,
)
from chatroute.errors import context_missing_property_error
from chatroute.middleware.base import Filter, StepResult
from chatroute.middleware.matching import (
    StrOrPattern,
    contains_pattern,
    match_pattern,
    parse_link,
)


# -----------------------------------------------------------------------
# Type filters
# -----------------------------------------------------------------------

class OnlyKind(Filter):
    """Pass only requests of one :class:`RequestKind`."""

    def __init__(self, kind: RequestKind) -> None:
        self.kind = kind

    def check(self, request: Request, context: Context) -> StepResult:
        if request.kind is not self.kind:
            return StepResult.filtered()
        return StepResult.matched()

    def __repr__(self) -> str:
        return f"OnlyKind({self.kind.value})"


only_actions = OnlyKind(RequestKind.ACTION)
only_commands = OnlyKind(RequestKind.COMMAND)
only_options = OnlyKind(RequestKind.OPTIONS)
only_events = OnlyKind(RequestKind.EVENT)


# -----------------------------------------------------------------------
# Constraint matching
# -----------------------------------------------------------------------

class MatchConstraints(Filter):
    """Match block_id, action_id and callback_id constraints, in that order.

    The first unmet constraint filters the request.  Regex constraints that
    match store their groups under ``block_id_matches``,
    ``action_id_matches`` or ``callback_id_matches``.
    """

    def __init__(self, constraints: ActionConstraints) -> None:
        self.constraints = constraints

    def check(self, request: Request, context: Context) -> StepResult:
        c = self.constraints
        payload = request.payload

        for field, key in (("block_id", BLOCK_ID_MATCHES), ("action_id", ACTION_ID_MATCHES)):
            constraint = getattr(c, field)
            if constraint is None:
                continue
            if not request.is_block_payload:
                return StepResult.filtered()
            m = match_pattern(payload.get(field), constraint)
            if not m:
                return StepResult.filtered()
            if m.groups is not None:
                context[key] = m.groups

        if c.callback_id is not None:
            if not request.is_callback_identified:
                return StepResult.filtered()
            m = match_pattern(request.body.get("callback_id"), c.callback_id)
            if not m:
                return StepResult.filtered()
            if m.groups is not None:
                context[CALLBACK_ID_MATCHES] = m.groups

        return StepResult.matched()

    def __repr__(self) -> str:
        return f"MatchConstraints({self.constraints!r})"


def match_constraints(
    constraints: ActionConstraints | Mapping[str, StrOrPattern],
) -> MatchConstraints:
    """Filter action/options requests by identifier constraints."""
    if not isinstance(constraints, ActionConstraints):
        constraints = ActionConstraints.model_validate(dict(constraints))
    return MatchConstraints(constraints)


# -----------------------------------------------------------------------
# Message / command / event matching
# -----------------------------------------------------------------------

class MatchMessage(Filter):
    def __init__(self, pattern: StrOrPattern) -> None:
        self.pattern = pattern

    def check(self, request: Request, context: Context) -> StepResult:
        message = request.message
        if message is None:
            return StepResult.filtered()
        m = contains_pattern(message.get("text"), self.pattern)
        if not m:
            return StepResult.filtered()
        if m.groups is not None:
            context[MATCHES] = m.groups
        return StepResult.matched()

    def __repr__(self) -> str:
        return f"MatchMessage({self.pattern!r})"


def match_message(pattern: StrOrPattern) -> MatchMessage:
    """Pass messages containing ``pattern`` (substring or regex search)."""
    return MatchMessage(pattern)


class _FieldEquals(Filter):
    """Pass when ``getattr(request, view)[key] == expected``."""

    view = ""
    key = ""

    def __init__(self, expected: str) -> None:
        self.expected = expected

    def check(self, request: Request, context: Context) -> StepResult:
        source = getattr(request, self.view)
        if source is None or source.get(self.key) != self.expected:
            return StepResult.filtered()
        return StepResult.matched()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.expected!r})"


class MatchCommandName(_FieldEquals):
    view = "command"
    key = "command"


class MatchEventType(_FieldEquals):
    view = "event"
    key = "type"


class MatchSubtype(_FieldEquals):
    view = "message"
    key = "subtype"


def match_command_name(name: str) -> MatchCommandName:
    return MatchCommandName(name)


def match_event_type(type: str) -> MatchEventType:
    return MatchEventType(type)


def subtype(subtype: str) -> MatchSubtype:
    return MatchSubtype(subtype)


# -----------------------------------------------------------------------
# Bot identity filters
# -----------------------------------------------------------------------

class IgnoreSelf(Filter):
    """Drop events the app itself produced.

    Needs ``bot_id`` in the context; ``bot_user_id`` is used when present.
    """

    def check(self, request: Request, context: Context) -> StepResult:
        bot_id = context.get(BOT_ID)
        if bot_id is None:
            return StepResult.errored(context_missing_property_error(
                "bot_id",
                "Cannot ignore events from the app without a bot ID. "
                "Ensure authorize callback returns a bot_id.",
            ))

        event = request.event
        if event is not None:
            message = request.message
            if (
                message is not None
                and message.get("subtype") == "bot_message"
                and message.get("bot_id") == bot_id
            ):
                return StepResult.filtered()

            # Any event type can carry our own user ID
            bot_user_id = context.get(BOT_USER_ID)
            if bot_user_id is not None and event.get("user") == bot_user_id:
                return StepResult.filtered()

        return StepResult.matched()


def ignore_self() -> IgnoreSelf:
    return IgnoreSelf()


class DirectMention(Filter):
    """Pass messages that open with a mention of the app's bot user."""

    def check(self, request: Request, context: Context) -> StepResult:
        bot_user_id = context.get(BOT_USER_ID)
        if bot_user_id is None:
            return StepResult.errored(context_missing_property_error(
                "bot_user_id",
                "Cannot match direct mentions of the app without a bot user ID. "
                "Ensure authorize callback returns a bot_user_id.",
            ))

        message = request.message
        text = message.get("text") if message is not None else None
        if text is None:
            return StepResult.filtered()

        link = parse_link(text.strip())
        if (
            link is None
            or link.start != 0
            or link.type != "@"
            or link.link != bot_user_id
        ):
            return StepResult.filtered()
        return StepResult.matched()


def direct_mention() -> DirectMention:
    return DirectMention()


__all__ = [
    "OnlyKind",
    "only_actions",
    "only_commands",
    "only_options",
    "only_events",
    "MatchConstraints",
    "match_constraints",
    "MatchMessage",
    "match_message",
    "MatchCommandName",
    "match_command_name",
    "MatchEventType",
    "match_event_type",
    "MatchSubtype",
    "subtype",
    "IgnoreSelf",
    "ignore_self",
    "DirectMention",
    "direct_mention",
]
