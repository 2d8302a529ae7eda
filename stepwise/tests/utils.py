"Small algorithms shared between the tests."
from __future__ import annotations
from dataclasses import dataclass, field
from stepwise import (
    CancelSignal, Completable, ComputationStep, GeneratorStep,
    cancellation_outcome, computation_step, generator_step,
    done, suspended,
)
import typing as t

@dataclass
class Counter:
    value: int = 0

@computation_step
def count_to(target: int, state: Counter) -> Completable[int]:
    "Count up by one per step, finishing at target."
    state.value += 1
    if state.value < target:
        return suspended()
    return done(state.value)

@computation_step
def never_finish(context: t.Any, state: Counter) -> Completable[int]:
    state.value += 1
    return suspended()

@generator_step
def up_to(maximum: int, state: Counter) -> Completable[t.Optional[int]]:
    "Produce 1, 2, ... maximum, one per step."
    state.value += 1
    if state.value <= maximum:
        return done(state.value)
    return done(None)

@dataclass
class SlowRangeState:
    value: int = 0
    halfway: bool = False

class SlowRange(GeneratorStep[int, SlowRangeState, int]):
    "Like up_to, but every value takes two steps."
    def step(self, maximum: int, state: SlowRangeState) -> Completable[t.Optional[int]]:
        if state.value >= maximum:
            return done(None)
        if not state.halfway:
            state.halfway = True
            return suspended()
        state.halfway = False
        state.value += 1
        return done(state.value)

@dataclass
class SumState:
    index: int = 0
    total: int = 0
    history: t.List[int] = field(default_factory=list)

class Sum(ComputationStep[t.Tuple[int, ...], SumState, int]):
    "Add up the context, one element per step, remembering each partial sum."
    def step(self, numbers: t.Tuple[int, ...], state: SumState) -> Completable[int]:
        if state.index < len(numbers):
            state.total += numbers[state.index]
            state.index += 1
            state.history.append(state.total)
            return suspended()
        return done(state.total)

class BatchSum(ComputationStep[t.Tuple[int, ...], SumState, int]):
    """Add up the context, up to 3 elements per step.

    Checks for cancellation before each element, so a cancellation can land in
    the middle of a batch; each element is added completely or not at all.

    """
    batch = 3

    def step(self, numbers: t.Tuple[int, ...], state: SumState) -> Completable[int]:
        for _ in range(self.batch):
            if state.index >= len(numbers):
                return done(state.total)
            cancelled = cancellation_outcome()
            if cancelled is not None:
                return cancelled
            state.total += numbers[state.index]
            state.index += 1
            state.history.append(state.total)
        return suspended()

class CountdownSignal(CancelSignal):
    "Requests cancellation once it has been checked `checks` times."
    def __init__(self, checks: int) -> None:
        self.remaining = checks

    @property
    def cancelled(self) -> bool:
        if self.remaining <= 0:
            return True
        self.remaining -= 1
        return False

    @property
    def reason(self) -> t.Optional[str]:
        return "countdown expired"
