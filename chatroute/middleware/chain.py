"""Listener chain runner."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, MutableMapping

from loguru import logger

from chatroute.bus.events import Request
from chatroute.context import Context
from chatroute.errors import CodedError
from chatroute.middleware.base import MiddlewareFn, StepResult
from chatroute.middleware.builtin import ignore_self

if TYPE_CHECKING:
    from chatroute.config.schema import Config

Handler = Callable[[Request, Context], Awaitable[None]]
ErrorHandler = Callable[[CodedError, Request, Context], Awaitable[None]]


class ListenerChain:
    """Runs middleware in registration order, then the handler.

    Each link receives a continuation.  The run ends as soon as a link
    returns without calling it (filtered) or passes it an error (errored).
    Exceptions raised by middleware or the handler are not caught here.
    """

    def __init__(
        self,
        middleware: Iterable[MiddlewareFn] = (),
        handler: Handler | None = None,
        *,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self._middleware: list[MiddlewareFn] = list(middleware)
        self.handler = handler
        self.error_handler = error_handler

    def use(self, middleware: MiddlewareFn) -> ListenerChain:
        """Append a link to the chain."""
        self._middleware.append(middleware)
        return self

    @property
    def middleware(self) -> tuple[MiddlewareFn, ...]:
        return tuple(self._middleware)

    async def run(
        self, request: Request, context: MutableMapping[str, Any] | None = None
    ) -> StepResult:
        """Process one request through the chain.

        ``context`` may be any mutable mapping; it is used as-is, so writes
        made by the chain stay visible on the caller's object.  A fresh
        :class:`Context` is created when none is given.

        Returns
        -------
        StepResult
            * ``matched``  – every link continued and the handler ran.
            * ``filtered`` – some link dropped the request.
            * ``errored``  – some link aborted with a coded error.
        """
        if context is None:
            context = Context()
        state: dict[str, StepResult] = {"result": StepResult.filtered()}

        async def dispatch(index: int) -> None:
            if index == len(self._middleware):
                if self.handler is not None:
                    await self.handler(request, context)
                state["result"] = StepResult.matched()
                return

            link = self._middleware[index]
            called = False

            async def next_(error: CodedError | None = None) -> None:
                nonlocal called
                if called:
                    raise RuntimeError(f"next() called multiple times by {link!r}")
                called = True
                if error is not None:
                    state["result"] = StepResult.errored(error)
                    return
                await dispatch(index + 1)

            await link(request, context, next_)
            if not called:
                logger.debug(f"Request {request.kind.value} filtered by {link!r}")

        await dispatch(0)

        result = state["result"]
        if result.is_errored:
            error = result.error
            logger.warning(f"Listener chain aborted: {error!r}")
            if self.error_handler is not None:
                await self.error_handler(error, request, context)
        return result

    def __repr__(self) -> str:
        return f"ListenerChain(middleware={len(self._middleware)})"


def build_listener_chain(
    config: Config,
    *middleware: MiddlewareFn,
    handler: Handler | None = None,
    error_handler: ErrorHandler | None = None,
) -> ListenerChain:
    """Build a chain for one listener, honouring app-wide settings.

    ``ignore_self`` is installed ahead of the listener's own middleware when
    ``config.ignore_self`` is enabled.
    """
    links: list[MiddlewareFn] = []
    if config.ignore_self:
        links.append(ignore_self())
    links.extend(middleware)
    return ListenerChain(links, handler, error_handler=error_handler)
