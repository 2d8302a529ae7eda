"Computations which produce a sequence of values, one per successful poll."
from __future__ import annotations
from stepwise.completable import (
    Completable,
    done, exhausted, suspended, is_done, is_exhausted, is_suspended,
)
from stepwise.computable import Computable
import abc
import logging
import typing as t

__all__ = [
    'Generatable',
    'Collector',
]

logger = logging.getLogger(__name__)

T = t.TypeVar('T')
C = t.TypeVar('C')

class Generatable(t.Generic[T]):
    """Something which can be polled for the next value of a sequence.

    `try_next` returns None once there are no more values, ever. Otherwise it
    returns an outcome: a value, or the reason there wasn't one this time.

    A Generatable is also a Python iterator. Iterating skips over suspensions,
    stops at the end of the sequence, and raises Cancelled if a cancellation
    request is observed; iterating again afterwards resumes where it left off.

    """
    @abc.abstractmethod
    def try_next(self) -> t.Optional[Completable[T]]:
        pass

    def __iter__(self) -> Generatable[T]:
        return self

    def __next__(self) -> T:
        while True:
            result = self.try_next()
            if result is None or is_exhausted(result):
                raise StopIteration
            if not is_suspended(result):
                return result.unwrap()

    def computation(self, factory: t.Callable[[t.List[T]], C]=list) -> Collector[T, C]: # type: ignore
        "Make a Computable which collects every value of this sequence with `factory`."
        return Collector(self, factory)

class Collector(Computable[C], t.Generic[T, C]):
    """Turns a Generatable into a Computable producing a collection of all its values.

    Each poll of the collector polls the generator once; a value is stashed away
    and reported as Suspended, so the collector suspends just as often as the
    generator does. When the generator runs out, the stashed values are passed
    to `factory` and the result is the value of the computation.

    """
    def __init__(self, generator: Generatable[T],
                 factory: t.Callable[[t.List[T]], C]=list) -> None: # type: ignore
        self.generator = generator
        self.factory = factory
        self._items: t.Optional[t.List[T]] = []

    def try_compute(self) -> Completable[C]:
        if self._items is None:
            return exhausted()
        result = self.generator.try_next()
        if result is None:
            items, self._items = self._items, None
            logger.debug("Collector(%s): generator finished after %d items", self.generator, len(items))
            return done(self.factory(items))
        elif is_done(result):
            self._items.append(result.unwrap())
            return suspended()
        else:
            return result

    @property
    def items(self) -> t.List[T]:
        "The values collected so far."
        return list(self._items or [])

    def __repr__(self) -> str:
        return f"Collector({self.generator!r}, collected={self._items!r})"
