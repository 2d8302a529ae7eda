"""The default single-value engine: a step function driven to a final value

```
@computation_step
def count(target: int, state: Counter) -> Completable[int]:
    state.value += 1
    if state.value < target:
        return suspended()
    return done(state.value)

Computation(count, 5, Counter(0)).compute()
```

"""
from __future__ import annotations
from dataclasses import dataclass
from stepwise.cancel import check_cancelled
from stepwise.completable import Completable, check_completable, exhausted, is_done
from stepwise.stateful import Algorithm
import abc
import logging
import outcome
import typing as t

__all__ = [
    'ComputationStep',
    'computation_step',
    'Computation',
]

logger = logging.getLogger(__name__)

T = t.TypeVar('T')
CTX = t.TypeVar('CTX')
STATE = t.TypeVar('STATE')

class ComputationStep(t.Generic[CTX, STATE, T]):
    """One bounded unit of progress towards a value.

    `step` gets the context and the state, does a small amount of work, records
    that work in the state, and returns:
    - `done(value)` if the computation is finished;
    - `suspended()` if there's more to do;
    - `cancelled()` if it checked for cancellation itself and found it requested.

    The state must be fully updated whenever `step` returns, since the engine
    may be paused, saved, or dropped right after. The context must never be
    modified. Cancellation is checked by the engine before each step, so a
    step only needs its own check if it does a lot of work at once.

    A step holds no state of its own; everything goes in `state`.

    """
    @abc.abstractmethod
    def step(self, context: CTX, state: STATE) -> Completable[T]:
        pass

@dataclass(frozen=True)
class FunctionComputationStep(ComputationStep[CTX, STATE, T]):
    func: t.Callable[[CTX, STATE], Completable[T]]

    def step(self, context: CTX, state: STATE) -> Completable[T]:
        return self.func(context, state)

def computation_step(func: t.Callable[[CTX, STATE], Completable[T]]) -> ComputationStep[CTX, STATE, T]:
    "Decorator making a ComputationStep out of a plain function of (context, state)."
    return FunctionComputationStep(func)

def _as_step(step: t.Any) -> ComputationStep:
    if isinstance(step, ComputationStep):
        return step
    elif callable(step):
        return FunctionComputationStep(step)
    raise TypeError("not a ComputationStep or a function of (context, state)", step)

class Computation(Algorithm[CTX, STATE, T]):
    """Drives a ComputationStep against a context and a state.

    Each `try_compute` runs the step exactly once, so each poll is a point
    where the computation can safely be paused, inspected, or abandoned. Once
    the step has produced a value, the computation is exhausted.

    """
    def __init__(self, step: t.Union[ComputationStep[CTX, STATE, T], t.Callable[[CTX, STATE], Completable[T]]],
                 context: CTX, state: STATE) -> None:
        super().__init__(context, state)
        self._step = _as_step(step)
        self._finished = False

    @property
    def step(self) -> ComputationStep[CTX, STATE, T]:
        return self._step

    @property
    def finished(self) -> bool:
        "True once this computation has produced its value."
        return self._finished

    def try_compute(self) -> Completable[T]:
        if self._finished:
            logger.debug("%s: polled after producing its value", self)
            return exhausted()
        exn = check_cancelled()
        if exn is not None:
            logger.debug("%s: not stepping, cancellation requested", self)
            return outcome.Error(exn)
        result = check_completable(self._step.step(self._context, self._state), self._step)
        if is_done(result):
            self._finished = True
        return result

    def __repr__(self) -> str:
        return f"Computation({self._step!r}, {self._context!r}, {self._state!r})"
