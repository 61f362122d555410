"""Request envelope types shared by transports and middleware."""

from chatroute.bus.events import BodyType, Request, RequestKind

__all__ = ["BodyType", "Request", "RequestKind"]
