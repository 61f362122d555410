"""Continuation protocol shared by every middleware.

See :mod:`chatroute.middleware` package docstring for the overall
architecture.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Protocol

from chatroute.bus.events import Request
from chatroute.context import Context
from chatroute.errors import CodedError


class Next(Protocol):
    """The continuation handed to each middleware.

    * ``await next()``       – proceed to the following link.
    * ``await next(error)``  – abort the chain with a coded error.
    * not calling it         – silently filter; nothing downstream runs.
    """

    def __call__(self, error: CodedError | None = None) -> Awaitable[None]: ...


MiddlewareFn = Callable[[Request, Context, Next], Awaitable[None]]


# -----------------------------------------------------------------------
# Step outcomes
# -----------------------------------------------------------------------

class Outcome(str, Enum):
    MATCHED = "matched"
    FILTERED = "filtered"
    ERRORED = "errored"


@dataclass(frozen=True)
class StepResult:
    """Outcome of one filter step (or of a whole chain run)."""

    outcome: Outcome
    error: CodedError | None = None

    @classmethod
    def matched(cls) -> StepResult:
        return _MATCHED

    @classmethod
    def filtered(cls) -> StepResult:
        return _FILTERED

    @classmethod
    def errored(cls, error: CodedError) -> StepResult:
        return cls(Outcome.ERRORED, error)

    @property
    def is_matched(self) -> bool:
        return self.outcome is Outcome.MATCHED

    @property
    def is_filtered(self) -> bool:
        return self.outcome is Outcome.FILTERED

    @property
    def is_errored(self) -> bool:
        return self.outcome is Outcome.ERRORED

    def __str__(self) -> str:
        if self.error is not None:
            return f"{self.outcome.value}: {self.error}"
        return self.outcome.value


_MATCHED = StepResult(Outcome.MATCHED)
_FILTERED = StepResult(Outcome.FILTERED)


# -----------------------------------------------------------------------
# Middleware
# -----------------------------------------------------------------------

class Middleware(abc.ABC):
    """Base class for chain links.

    A link inspects the request and either awaits ``next()`` to continue,
    awaits ``next(error)`` to abort, or returns without calling ``next`` to
    drop the request.  Plain ``async def fn(request, context, next)``
    functions are accepted by the chain as well.
    """

    @abc.abstractmethod
    async def __call__(self, request: Request, context: Context, next: Next) -> None:
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Filter(Middleware):
    """A middleware whose decision is a pure function of request and context.

    Subclasses implement :meth:`check`; this class maps its
    :class:`StepResult` onto the continuation protocol.
    """

    @abc.abstractmethod
    def check(self, request: Request, context: Context) -> StepResult:
        """Decide the step outcome.

        May write the keys this filter owns into ``context``; must not
        touch any other key.
        """
        ...

    async def __call__(self, request: Request, context: Context, next: Next) -> None:
        result = self.check(request, context)
        if result.is_matched:
            await next()
        elif result.is_errored:
            await next(result.error)
