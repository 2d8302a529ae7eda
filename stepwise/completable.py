"""The outcome of polling a computation: done, suspended, cancelled or exhausted

A poll either produces a value or it doesn't. We represent that split with
the `outcome` library: `outcome.Value` holds the produced value and
`outcome.Error` holds an `Incomplete` explaining why nothing was produced.

The `Incomplete` exceptions are never raised across a step boundary; steps
return them wrapped in an `outcome.Error`. They only become real exceptions
when a convenience driver such as `Computable.compute` unwraps an outcome
that can't be retried.

"""
from __future__ import annotations
import outcome
import typing as t

__all__ = [
    'Completable',
    'Incomplete', 'Suspended', 'Cancelled', 'Exhausted',
    'done', 'suspended', 'cancelled', 'exhausted',
    'is_done', 'is_suspended', 'is_cancelled', 'is_exhausted',
]

T = t.TypeVar('T')

Completable = outcome.Outcome
"""`outcome.Value` if the poll produced a value, otherwise `outcome.Error` of an `Incomplete`

Annotate as `Completable[T]`.

"""

class Incomplete(Exception):
    "The value of a computation is not available from this poll."
    message = "Computation incomplete"

    def __str__(self) -> str:
        return self.message

class Suspended(Incomplete):
    """The computation reached one of its suspend points and can be polled again.

    This is not an error; it is how a step yields control back to whoever is
    driving it.

    """
    message = "Operation suspended"

class Cancelled(Incomplete):
    """A cancellation request was observed at a step boundary.

    The state of the computation is still consistent; whether to resume it
    is up to the caller.

    """
    message = "Operation cancelled"

    def __init__(self, reason: t.Optional[str]=None) -> None:
        super().__init__(reason)
        self.reason = reason

    def __str__(self) -> str:
        if self.reason is None:
            return self.message
        return f"{self.message}: {self.reason}"

class Exhausted(Incomplete):
    "The computation already produced its final result and has nothing more to give."
    message = "Computation exhausted"

def done(value: T) -> Completable[T]:
    return outcome.Value(value)

def suspended() -> Completable[t.Any]:
    return outcome.Error(Suspended())

def cancelled(reason: t.Optional[str]=None) -> Completable[t.Any]:
    return outcome.Error(Cancelled(reason))

def exhausted() -> Completable[t.Any]:
    return outcome.Error(Exhausted())

def _incomplete_is(result: Completable[t.Any], kind: t.Type[Incomplete]) -> bool:
    return isinstance(result, outcome.Error) and isinstance(result.error, kind)

def is_done(result: Completable[t.Any]) -> bool:
    return isinstance(result, outcome.Value)

def is_suspended(result: Completable[t.Any]) -> bool:
    return _incomplete_is(result, Suspended)

def is_cancelled(result: Completable[t.Any]) -> bool:
    return _incomplete_is(result, Cancelled)

def is_exhausted(result: Completable[t.Any]) -> bool:
    return _incomplete_is(result, Exhausted)

def check_completable(result: t.Any, source: t.Any) -> Completable[t.Any]:
    "Make sure a step actually returned an outcome; anything else is a programming error."
    if isinstance(result, outcome.Value):
        return result
    elif isinstance(result, outcome.Error):
        if not isinstance(result.error, Incomplete):
            raise TypeError("step", source, "returned an Error which isn't Incomplete", result.error)
        return result
    raise TypeError("step", source, "returned something other than an outcome", result)
