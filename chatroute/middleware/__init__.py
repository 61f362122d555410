"""Listener middleware: filters that decide whether a request reaches a handler.

Each listener owns an ordered chain of middleware followed by its handler.
Every link receives the request, the per-request context and a ``next``
continuation, and does exactly one of:

1. **Continue** — ``await next()``; the following link runs.
2. **Abort** — ``await next(error)``; the chain stops and the coded error
   is routed to the error handler.
3. **Filter** — return without calling ``next``; the chain stops silently.

Architecture
------------
ListenerChain
  └── Middleware (chain)
        ├── Filter            – pure ``check()`` returning a StepResult
        │     ├── OnlyKind          – only_actions / only_commands / ...
        │     ├── MatchConstraints  – block_id / action_id / callback_id
        │     ├── MatchMessage, MatchCommandName, MatchEventType, MatchSubtype
        │     └── IgnoreSelf, DirectMention
        └── async functions   – ``fn(request, context, next)``
"""

from chatroute.middleware.base import Filter, Middleware, Next, Outcome, StepResult
from chatroute.middleware.builtin import (
    direct_mention,
    ignore_self,
    match_command_name,
    match_constraints,
    match_event_type,
    match_message,
    only_actions,
    only_commands,
    only_events,
    only_options,
    subtype,
)
from chatroute.middleware.chain import ListenerChain, build_listener_chain

__all__ = [
    "Filter",
    "ListenerChain",
    "Middleware",
    "Next",
    "Outcome",
    "StepResult",
    "build_listener_chain",
    "direct_mention",
    "ignore_self",
    "match_command_name",
    "match_constraints",
    "match_event_type",
    "match_message",
    "only_actions",
    "only_commands",
    "only_events",
    "only_options",
    "subtype",
]
