"""
Records module behavioral tests (parse slots and the release lifecycle).

Scope
- Validate fresh records and value queries on a State.
- Validate release(): declaration order, exactly-once, skipped uninitialized
  records, grouped releaser failures.
- Validate reset() and the context-manager form.

Conventions
- Test method names follow CamelCase per project convention.
- Records are filled by hand here; matching/materialization have their own tests.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from declargs import Argument, Schema, State, Record, ReleaseError, FaultCode, Unset


def _fill(state, id, value):
    record = state[id]
    record.present = True
    record.value = value
    record.initialized = True


class TestRecord(TestCase):
    """Behavioral tests for Record slots."""

    def testFreshRecordIsZeroed(self):
        r = Record()
        self.assertFalse(r.present)
        self.assertEqual(r.values, ())
        self.assertFalse(r.initialized)
        self.assertIs(r.value, Unset)

    def testClear(self):
        r = Record()
        r.present, r.values, r.initialized, r.value = True, ("1",), True, 1
        r.clear()
        self.assertFalse(r.present)
        self.assertEqual(r.values, ())
        self.assertFalse(r.initialized)
        self.assertIs(r.value, Unset)


class TestState(TestCase):
    """Behavioral tests for State queries and the release lifecycle."""

    def setUp(self):
        self.released = []

        def releaser(tag):
            return lambda value: self.released.append((tag, value))

        self.schema = Schema(
            Argument("alpha", arity=1, releaser=releaser("alpha")),
            Argument("beta", arity=1, releaser=releaser("beta")),
            Argument("gamma", arity=1, releaser=releaser("gamma")),
        )

    def testRecordsKeyedById(self):
        state = State(self.schema)
        self.assertEqual([id for id, _ in state], ["alpha", "beta", "gamma"])
        self.assertIsInstance(state["alpha"], Record)
        with self.assertRaises(KeyError):
            state["delta"]

    def testStateRequiresSchema(self):
        with self.assertRaises(TypeError):
            State([Argument("alpha")])

    def testValueOfUninitializedRaises(self):
        state = State(self.schema)
        with self.assertRaises(LookupError):
            state.value("alpha")

    def testValuesOnlyHoldsInitialized(self):
        state = State(self.schema)
        _fill(state, "beta", 2)
        self.assertEqual(dict(state.values()), {"beta": 2})
        self.assertEqual(state.value("beta"), 2)

    def testReleaseWithoutAttemptIsNoop(self):
        state = State(self.schema)
        _fill(state, "alpha", 1)
        state.release()
        self.assertEqual(self.released, [])
        self.assertTrue(state["alpha"].initialized)

    def testReleaseInDeclarationOrderSkippingUninitialized(self):
        state = State(self.schema)
        _fill(state, "gamma", 3)
        _fill(state, "alpha", 1)
        state.attempted = True
        state.release()
        self.assertEqual(self.released, [("alpha", 1), ("gamma", 3)])
        self.assertFalse(state["alpha"].initialized)
        self.assertIs(state["gamma"].value, Unset)

    def testReleaseHappensExactlyOnce(self):
        state = State(self.schema)
        _fill(state, "alpha", 1)
        state.attempted = True
        state.release()
        state.release()
        self.assertEqual(self.released, [("alpha", 1)])
        self.assertFalse(state.attempted)

    def testReleaseWithoutReleaserClearsValue(self):
        schema = Schema(Argument("alpha", arity=1))
        state = State(schema)
        _fill(state, "alpha", object())
        state.attempted = True
        state.release()
        self.assertFalse(state["alpha"].initialized)

    def testFailingReleasersAreGrouped(self):
        def broken(value):
            raise OSError("cannot close %r" % value)

        schema = Schema(
            Argument("alpha", arity=1, releaser=broken),
            Argument("beta", arity=1, releaser=lambda value: self.released.append(value)),
            Argument("gamma", arity=1, releaser=broken),
        )
        state = State(schema)
        for id, value in (("alpha", 1), ("beta", 2), ("gamma", 3)):
            _fill(state, id, value)
        state.attempted = True

        with self.assertRaises(ReleaseError) as context:
            state.release()

        self.assertEqual(self.released, [2])
        self.assertEqual(len(context.exception.exceptions), 2)
        self.assertEqual(context.exception.options["code"], FaultCode.RELEASE_FAILED)
        self.assertFalse(any(record.initialized for _, record in state))

    def testReleaseErrorSplitKeepsType(self):
        group = ReleaseError([OSError("a"), ValueError("b")], code=FaultCode.RELEASE_FAILED)
        matched, rest = group.split(OSError)
        self.assertIsInstance(matched, ReleaseError)
        self.assertEqual(matched.options["code"], FaultCode.RELEASE_FAILED)
        self.assertIsInstance(rest.exceptions[0], ValueError)

    def testResetReleasesAndZeroes(self):
        state = State(self.schema)
        _fill(state, "beta", 2)
        state["beta"].values = ("2",)
        state.index = 4
        state.attempted = True
        state.reset()
        self.assertEqual(self.released, [("beta", 2)])
        self.assertEqual(state.index, 0)
        self.assertFalse(state.attempted)
        self.assertFalse(state["beta"].present)
        self.assertEqual(state["beta"].values, ())

    def testContextManagerReleasesOnExit(self):
        with State(self.schema) as state:
            _fill(state, "alpha", 1)
            state.attempted = True
        self.assertEqual(self.released, [("alpha", 1)])

    def testContextManagerReleasesOnError(self):
        with self.assertRaises(RuntimeError):
            with State(self.schema) as state:
                _fill(state, "gamma", 3)
                state.attempted = True
                raise RuntimeError("boom")
        self.assertEqual(self.released, [("gamma", 3)])


if __name__ == "__main__":
    unittest.main()
