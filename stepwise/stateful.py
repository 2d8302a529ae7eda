"""Engines which expose their context and state

An algorithm is a computation split into two parts: an immutable context,
fixed when the algorithm is created, and a mutable state which is updated by
each step. Everything about an in-progress algorithm is in those two parts,
so an owner can look at the state between polls to decide what to run next,
save both parts somewhere, and later build a new engine from them which
continues exactly where the old one stopped.

"""
from __future__ import annotations
from stepwise.computable import Computable
from stepwise.generatable import Generatable
import typing as t

__all__ = [
    'Stateful',
    'Algorithm',
    'GenAlgorithm',
]

T = t.TypeVar('T')
CTX = t.TypeVar('CTX')
STATE = t.TypeVar('STATE')

class Stateful(t.Generic[CTX, STATE]):
    "Holds an immutable context and the mutable state which steps operate on."
    def __init__(self, context: CTX, state: STATE) -> None:
        self._context = context
        self._state = state

    @property
    def context(self) -> CTX:
        return self._context

    @property
    def state(self) -> STATE:
        return self._state

    @state.setter
    def state(self, state: STATE) -> None:
        """Replace the state wholesale.

        The next step will run against whatever is put here, so it had better be
        a state that the algorithm could have reached by itself. This is for
        restoring saved state and similar rare, well-defined situations.

        """
        self._state = state

    def into_parts(self) -> t.Tuple[CTX, STATE]:
        return self._context, self._state

class Algorithm(Computable[T], Stateful[CTX, STATE], t.Generic[CTX, STATE, T]):
    "A Computable with an exposed context and state."
    @classmethod
    def run(cls, *args: t.Any, **kwargs: t.Any) -> T:
        "Construct this algorithm and immediately run it to completion."
        return cls(*args, **kwargs).compute()

class GenAlgorithm(Generatable[T], Stateful[CTX, STATE], t.Generic[CTX, STATE, T]):
    "A Generatable with an exposed context and state."
    pass
