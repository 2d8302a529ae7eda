"Computations which produce a single value, polled until they're done."
from __future__ import annotations
from stepwise.completable import (
    Completable,
    done, exhausted, is_done, is_suspended,
)
import abc
import typing as t

__all__ = [
    'Computable',
    'ComputableResult',
    'ComputableIdentity',
]

T = t.TypeVar('T')

class Computable(t.Generic[T]):
    """Something which can be polled, one bounded unit of work at a time, until it produces a value.

    Once a value has been produced, the computable is exhausted, and further
    polls return `Exhausted`.

    """
    @abc.abstractmethod
    def try_compute(self) -> Completable[T]:
        "Advance this computation by one step, returning the value if that step finished it."
        pass

    def compute_completable(self) -> Completable[T]:
        """Poll until we get something other than Suspended, and return that.

        This loops forever if the computation never stops suspending.

        """
        while True:
            result = self.try_compute()
            if not is_suspended(result):
                return result

    def compute(self) -> T:
        """Run this computation to completion, without interleaving anything else.

        Raises Cancelled if a cancellation request is observed, and Exhausted if
        the computation already produced its value.

        """
        return self.compute_completable().unwrap()

class ComputableResult(Computable[T]):
    """Remembers the value produced by a Computable so it can be fetched repeatedly.

    The wrapped computable is polled until it produces a value; after that, every
    call to `try_compute` returns the same remembered value, so unlike most
    computables this one is never exhausted.

    """
    def __init__(self, computable: Computable[T]) -> None:
        self._computable = computable
        self._result: t.Optional[T] = None
        self._has_result = False

    def try_compute(self) -> Completable[T]:
        if not self._has_result:
            result = self._computable.try_compute()
            if not is_done(result):
                return result
            self._result = result.unwrap()
            self._has_result = True
        return done(t.cast(T, self._result))

    @property
    def has_result(self) -> bool:
        return self._has_result

    @property
    def result(self) -> t.Optional[T]:
        "The remembered value, or None if it hasn't been computed yet."
        return self._result

    @property
    def computable(self) -> Computable[T]:
        return self._computable

    def __repr__(self) -> str:
        if self._has_result:
            return f"ComputableResult(result={self._result!r})"
        return f"ComputableResult(computable={self._computable!r})"

class ComputableIdentity(Computable[T]):
    """A computation whose value is already known.

    Returns the value on the first poll and is exhausted afterwards. Useful
    wherever a Computable is expected but the work has already been done.

    """
    def __init__(self, value: T) -> None:
        self._value = value
        self._taken = False

    def try_compute(self) -> Completable[T]:
        if self._taken:
            return exhausted()
        self._taken = True
        return done(self._value)

    def __repr__(self) -> str:
        return f"ComputableIdentity({self._value!r}, taken={self._taken})"
