"The default stream engine: a step function driven to a sequence of values"
from __future__ import annotations
from dataclasses import dataclass
from stepwise.cancel import check_cancelled
from stepwise.completable import Completable, check_completable, is_done, is_exhausted
from stepwise.stateful import GenAlgorithm
import abc
import logging
import outcome
import typing as t

__all__ = [
    'GeneratorStep',
    'generator_step',
    'Generator',
]

logger = logging.getLogger(__name__)

T = t.TypeVar('T')
CTX = t.TypeVar('CTX')
STATE = t.TypeVar('STATE')

class GeneratorStep(t.Generic[CTX, STATE, T]):
    """One bounded unit of progress towards the next value of a sequence.

    Like ComputationStep, except that finishing is reported with `done(None)`:
    `done(value)` produces the next value and leaves the sequence open,
    `done(None)` says there are no more values. Since None marks the end, it
    can't itself be a value of the sequence. Returning `exhausted()` also ends
    the sequence.

    """
    @abc.abstractmethod
    def step(self, context: CTX, state: STATE) -> Completable[t.Optional[T]]:
        pass

@dataclass(frozen=True)
class FunctionGeneratorStep(GeneratorStep[CTX, STATE, T]):
    func: t.Callable[[CTX, STATE], Completable[t.Optional[T]]]

    def step(self, context: CTX, state: STATE) -> Completable[t.Optional[T]]:
        return self.func(context, state)

def generator_step(func: t.Callable[[CTX, STATE], Completable[t.Optional[T]]]) -> GeneratorStep[CTX, STATE, T]:
    "Decorator making a GeneratorStep out of a plain function of (context, state)."
    return FunctionGeneratorStep(func)

def _as_step(step: t.Any) -> GeneratorStep:
    if isinstance(step, GeneratorStep):
        return step
    elif callable(step):
        return FunctionGeneratorStep(step)
    raise TypeError("not a GeneratorStep or a function of (context, state)", step)

class Generator(GenAlgorithm[CTX, STATE, T]):
    """Drives a GeneratorStep against a context and a state.

    Each `try_next` runs the step exactly once. Once the step has reported the
    end of the sequence, the generator never runs it again, and every later
    `try_next` returns None.

    """
    def __init__(self, step: t.Union[GeneratorStep[CTX, STATE, T], t.Callable[[CTX, STATE], Completable[t.Optional[T]]]],
                 context: CTX, state: STATE) -> None:
        super().__init__(context, state)
        self._step = _as_step(step)
        self._exhausted = False

    @property
    def step(self) -> GeneratorStep[CTX, STATE, T]:
        return self._step

    @property
    def exhausted(self) -> bool:
        "True once the step has reported the end of the sequence."
        return self._exhausted

    def try_next(self) -> t.Optional[Completable[T]]:
        if self._exhausted:
            return None
        exn = check_cancelled()
        if exn is not None:
            logger.debug("%s: not stepping, cancellation requested", self)
            return outcome.Error(exn)
        result = check_completable(self._step.step(self._context, self._state), self._step)
        if (is_done(result) and result.value is None) or is_exhausted(result):
            logger.debug("%s: end of sequence", self)
            self._exhausted = True
            return None
        return result

    def __repr__(self) -> str:
        return f"Generator({self._step!r}, {self._context!r}, {self._state!r})"
