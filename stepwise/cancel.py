"""Cooperative cancellation signals

A cancellation signal is just a flag which someone, possibly on another
thread, can set, and which a computation checks at its step boundaries.
Nothing is ever interrupted; setting the flag only changes what the next
check returns.

Signals are made active for a region of code with `cancel_scope`:

```
token = CancelToken()
with cancel_scope(token):
    computation.compute()
```

Every engine checks the active signals before it runs a step, and a step
which does a lot of work may also call `cancellation_outcome` itself, at
whatever granularity it suspends at. The active signals are tracked in a
context variable, so they follow trio tasks around and nest as expected.

"""
from __future__ import annotations
from stepwise.completable import Completable, Cancelled
import abc
import contextlib
import contextvars
import logging
import outcome
import threading
import trio
import typing as t

__all__ = [
    'CancelSignal', 'CancelToken', 'TrioCancelToken',
    'cancel_scope', 'current_signals',
    'check_cancelled', 'cancellation_outcome',
]

logger = logging.getLogger(__name__)

class CancelSignal(abc.ABC):
    "Something which can be asked, cheaply, whether cancellation was requested."
    @property
    @abc.abstractmethod
    def cancelled(self) -> bool: ...

    @property
    def reason(self) -> t.Optional[str]:
        return None

class CancelToken(CancelSignal):
    """A cancellation flag which can be set and cleared from any thread.

    Clearing the flag lets a previously cancelled computation proceed the next
    time it's polled; its state was never touched by the cancellation.

    """
    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: t.Optional[str] = None

    def cancel(self, reason: t.Optional[str]=None) -> None:
        self._reason = reason
        self._event.set()

    def clear(self) -> None:
        self._event.clear()
        self._reason = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> t.Optional[str]:
        return self._reason

    def __repr__(self) -> str:
        return f"<CancelToken cancelled={self.cancelled} reason={self._reason!r}>"

class TrioCancelToken(CancelSignal):
    """Reports cancellation once a trio CancelScope has been cancelled.

    This lets a computation being driven from inside a trio program notice
    that the program has cancelled it, even while it's running synchronously
    in a tight `compute` loop which never reaches a trio checkpoint.

    """
    def __init__(self, scope: trio.CancelScope) -> None:
        self.scope = scope

    @property
    def cancelled(self) -> bool:
        return self.scope.cancel_called

    @property
    def reason(self) -> t.Optional[str]:
        return "trio cancel scope cancelled" if self.scope.cancel_called else None

_active_signals: contextvars.ContextVar[t.Tuple[CancelSignal, ...]] = \
    contextvars.ContextVar('stepwise_active_signals', default=())

@contextlib.contextmanager
def cancel_scope(*signals: CancelSignal) -> t.Iterator[t.Tuple[CancelSignal, ...]]:
    "Make these signals active, in addition to any already active, for the duration of the block."
    for signal in signals:
        if not isinstance(signal, CancelSignal):
            raise TypeError("not a CancelSignal", signal)
    active = _active_signals.get() + signals
    reset_token = _active_signals.set(active)
    try:
        yield active
    finally:
        _active_signals.reset(reset_token)

def current_signals() -> t.Tuple[CancelSignal, ...]:
    return _active_signals.get()

def check_cancelled() -> t.Optional[Cancelled]:
    "Return a Cancelled for the first active signal which requests cancellation, else None."
    for signal in _active_signals.get():
        if signal.cancelled:
            logger.debug("cancellation requested by %s", signal)
            return Cancelled(signal.reason)
    return None

def cancellation_outcome() -> t.Optional[Completable[t.Any]]:
    "Like check_cancelled, but return a ready-to-return outcome for use inside a step."
    exn = check_cancelled()
    if exn is None:
        return None
    return outcome.Error(exn)
