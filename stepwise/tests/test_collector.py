from __future__ import annotations
import typing as t
import unittest
from stepwise import (
    Collector, Generatable, Generator, Completable, CancelToken,
    cancel_scope, done, cancelled,
    is_cancelled, is_exhausted, is_suspended,
)
from stepwise.tests.utils import Counter, SlowRange, SlowRangeState, up_to

class ListGenerator(Generatable[int]):
    "A hand-written Generatable over a list."
    def __init__(self, items: t.List[int]) -> None:
        self.items = items
        self.index = 0

    def try_next(self) -> t.Optional[Completable[int]]:
        if self.index < len(self.items):
            item = self.items[self.index]
            self.index += 1
            return done(item)
        return None

class CancelsFirst(Generatable[int]):
    def __init__(self) -> None:
        self.was_cancelled = False

    def try_next(self) -> t.Optional[Completable[int]]:
        if not self.was_cancelled:
            self.was_cancelled = True
            return cancelled()
        return None

class TestCollector(unittest.TestCase):
    def test_polls(self) -> None:
        collector = Collector(ListGenerator([1, 2, 3]))
        for _ in range(3):
            self.assertTrue(is_suspended(collector.try_compute()))
        self.assertEqual(collector.items, [1, 2, 3])
        self.assertEqual(collector.try_compute().unwrap(), [1, 2, 3])

    def test_compute(self) -> None:
        self.assertEqual(Collector(ListGenerator([10, 20, 30])).compute(), [10, 20, 30])

    def test_empty(self) -> None:
        collector = Collector(ListGenerator([]))
        self.assertEqual(collector.try_compute().unwrap(), [])

    def test_factory(self) -> None:
        collector = Collector(ListGenerator([1, 2, 2, 3]), set)
        self.assertEqual(collector.compute(), {1, 2, 3})
        collector = ListGenerator([3, 1, 2]).computation(sorted)
        self.assertEqual(collector.compute(), [1, 2, 3])

    def test_exhausted_after_done(self) -> None:
        collector = Collector(ListGenerator([1]))
        self.assertTrue(is_suspended(collector.try_compute()))
        self.assertEqual(collector.try_compute().unwrap(), [1])
        self.assertTrue(is_exhausted(collector.try_compute()))

    def test_generator_suspensions(self) -> None:
        "The collector suspends once per generator suspension, and once per item."
        collector = Generator(SlowRange(), 3, SlowRangeState()).computation()
        polls = 1
        while is_suspended(collector.try_compute()):
            polls += 1
        self.assertEqual(polls, 7)

    def test_generator_suspensions_value(self) -> None:
        collector = Generator(SlowRange(), 3, SlowRangeState()).computation(tuple)
        self.assertEqual(collector.compute(), (1, 2, 3))

    def test_cancellation(self) -> None:
        collector = Collector(CancelsFirst())
        self.assertTrue(is_cancelled(collector.try_compute()))
        self.assertEqual(collector.try_compute().unwrap(), [])

    def test_cancellation_keeps_items(self) -> None:
        token = CancelToken()
        collector = Generator(up_to, 5, Counter(0)).computation()
        with cancel_scope(token):
            collector.try_compute()
            collector.try_compute()
            token.cancel()
            self.assertTrue(is_cancelled(collector.try_compute()))
            self.assertEqual(collector.items, [1, 2])
            token.clear()
            self.assertEqual(collector.compute(), [1, 2, 3, 4, 5])
