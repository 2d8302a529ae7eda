"""Advancing many engines on one thread

Every poll of a Computable or Generatable is a single bounded step which
leaves the engine's state consistent, so an owner can hold any number of
engines and poll them in any order, with any amount of other work in
between, without affecting what any of them computes. That's the whole
scheduling contract; nothing here knows anything else about the engines.

This module has a couple of ready-made owners, which are mostly useful as
examples of the pattern:
- RoundRobin polls engines in turn;
- PriorityInterleaver polls whichever engine's state scores lowest.

It also has trio drivers, which poll an engine and pass through a trio
checkpoint between polls, so a computation can share a trio program's event
loop with everything else in the program. Trio cancellation can only be
delivered at those checkpoints, which are always between steps.

"""
from __future__ import annotations
from stepwise.completable import Completable, check_completable, is_done, is_exhausted, is_suspended, is_cancelled
from stepwise.computable import Computable
from stepwise.generatable import Generatable
from stepwise.stateful import Stateful
import abc
import itertools
import logging
import trio
import typing as t

__all__ = [
    'Interleaver',
    'RoundRobin',
    'PriorityInterleaver',
    'compute_async',
    'agenerate',
]

logger = logging.getLogger(__name__)

T = t.TypeVar('T')

Engine = t.Union[Computable[t.Any], Generatable[t.Any]]

class Interleaver:
    """Owns a collection of engines and advances them one poll at a time.

    Subclasses decide which engine gets the next poll. Bookkeeping is the same
    for all of them:
    - a Computable which produces a value is retired, and its value stored in
      `results`;
    - a Generatable's values are appended to its list in `results`, and it's
      retired when its sequence ends;
    - an engine which reports cancellation is moved to `cancelled`, from where
      `resume_cancelled` can put it back into rotation;
    - an exhausted engine is retired.

    An engine can only be added once while it's active or cancelled.

    """
    def __init__(self, engines: t.Iterable[Engine]=()) -> None:
        self._active: t.List[Engine] = []
        self._order: t.Dict[Engine, int] = {}
        self._counter = itertools.count()
        self.results: t.Dict[Engine, t.Any] = {}
        self.cancelled: t.List[Engine] = []
        for engine in engines:
            self.add(engine)

    def add(self, engine: Engine) -> None:
        if not isinstance(engine, (Computable, Generatable)):
            raise TypeError("can only interleave a Computable or a Generatable", engine)
        if engine in self._order:
            raise ValueError("engine already added", engine)
        self._order[engine] = next(self._counter)
        if isinstance(engine, Generatable):
            self.results.setdefault(engine, [])
        self._active.append(engine)

    @property
    def active(self) -> t.List[Engine]:
        return list(self._active)

    def __len__(self) -> int:
        return len(self._active)

    @abc.abstractmethod
    def _pick(self) -> int:
        "Return the index into self._active of the engine to poll next."
        pass

    def _retire(self, engine: Engine, why: str) -> None:
        logger.debug("%s: retiring %s, %s", type(self).__name__, engine, why)
        del self._order[engine]

    def poll(self) -> t.Tuple[Engine, t.Optional[Completable[t.Any]]]:
        """Poll one engine once, and return it along with what it returned.

        The returned outcome has not been unwrapped, so the caller can still
        unwrap it. If the poll raises, the engine stays where it was, and the
        exception propagates.

        """
        if not self._active:
            raise IndexError("poll from an interleaver with no active engines")
        index = self._pick()
        engine = self._active[index]
        result: t.Optional[Completable[t.Any]]
        if isinstance(engine, Generatable):
            result = engine.try_next()
        else:
            result = engine.try_compute()
        if result is not None:
            check_completable(result, engine)
        del self._active[index]
        if result is None:
            self._retire(engine, "end of sequence")
        elif is_done(result):
            if isinstance(engine, Generatable):
                self.results[engine].append(result.value)
                self._active.append(engine)
            else:
                self.results[engine] = result.value
                self._retire(engine, "done")
        elif is_suspended(result):
            self._active.append(engine)
        elif is_cancelled(result):
            logger.debug("%s: %s was cancelled", type(self).__name__, engine)
            self.cancelled.append(engine)
        elif is_exhausted(result):
            self._retire(engine, "exhausted")
        return engine, result

    def resume_cancelled(self) -> None:
        "Put every cancelled engine back into rotation; they continue from their current state."
        cancelled, self.cancelled = self.cancelled, []
        self._active.extend(cancelled)

    def run(self) -> t.Dict[Engine, t.Any]:
        "Poll until no engines are active, and return the results."
        while self._active:
            self.poll()
        return self.results

    async def arun(self) -> t.Dict[Engine, t.Any]:
        "Like run, but pass through a trio checkpoint after every poll."
        while self._active:
            self.poll()
            await trio.lowlevel.checkpoint()
        return self.results

class RoundRobin(Interleaver):
    "Poll each active engine in turn."
    def _pick(self) -> int:
        return 0

class PriorityInterleaver(Interleaver):
    """Always poll the engine whose state has the lowest score.

    `key` is called on the state of each active engine before every poll, so
    scores may change as the engines make progress. Ties go to whichever engine
    was added first.

    """
    def __init__(self, key: t.Callable[[t.Any], t.Any], engines: t.Iterable[Engine]=()) -> None:
        self.key = key
        super().__init__(engines)

    def add(self, engine: Engine) -> None:
        if not isinstance(engine, Stateful):
            raise TypeError("can only prioritize engines with a state", engine)
        super().add(engine)

    def _pick(self) -> int:
        def score(index: int) -> t.Tuple[t.Any, int]:
            engine = self._active[index]
            return self.key(t.cast(Stateful, engine).state), self._order[engine]
        return min(range(len(self._active)), key=score)

async def compute_async(computable: Computable[T]) -> T:
    """Run this computation to completion, checkpointing between steps.

    Raises Cancelled if the computation observes a cancellation request, and
    trio.Cancelled if the surrounding trio cancel scope is cancelled, in which
    case the computation is left consistent and can be resumed later.

    """
    while True:
        result = computable.try_compute()
        if not is_suspended(result):
            return result.unwrap()
        await trio.lowlevel.checkpoint()

async def agenerate(generatable: Generatable[T]) -> t.AsyncIterator[T]:
    "Yield each value of this sequence, checkpointing between steps."
    while True:
        result = generatable.try_next()
        if result is None or is_exhausted(result):
            return
        if not is_suspended(result):
            yield result.unwrap()
        await trio.lowlevel.checkpoint()
