"""
chatroute - listener middleware for chat-platform apps.
"""

__version__ = "0.1.0"

from chatroute.bus.events import BodyType, Request, RequestKind
from chatroute.context import Context
from chatroute.errors import CodedError, ContextMissingPropertyError, ErrorCode

__all__ = [
    "BodyType",
    "CodedError",
    "Context",
    "ContextMissingPropertyError",
    "ErrorCode",
    "Request",
    "RequestKind",
]
