"""
Materializing module behavioral tests (readers, defaults, required checks).

Scope
- Validate reader and default-provider dispatch and the initialized flags.
- Validate invalid-value and missing-required faults.
- Validate that values produced before a failure are still released.
- Validate required predicates that depend on other arguments.

Conventions
- Test method names follow CamelCase per project convention.
- Each test matches its own token list before materializing.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from declargs import (
    Argument,
    Schema,
    Status,
    Unset,
    FaultCode,
    InvalidValueError,
    MissingRequiredError,
    match,
    materialize,
    verify,
)


class TestMaterialize(TestCase):
    """Behavioral tests for materialize() and verify()."""

    def testReaderProducesTypedValue(self):
        schema = Schema(Argument("count", "-c", 1, required=True, reader=int))
        state = match(schema, ["-c", "5"]).state
        result = materialize(state)
        self.assertIs(result.status, Status.OK)
        self.assertEqual(state.value("count"), 5)
        self.assertTrue(state["count"].initialized)
        state.release()

    def testMissingRequired(self):
        schema = Schema(
            Argument("verbose", "-v"),
            Argument("count", "-c", 1, required=True, reader=int),
        )
        state = match(schema, ["-v"]).state
        result = materialize(state)
        self.assertIs(result.status, Status.ERROR)
        self.assertIsInstance(result.fault, MissingRequiredError)
        self.assertEqual(result.fault.options["id"], "count")
        self.assertIs(result.fault.code, FaultCode.MISSING_REQUIRED)
        state.release()

    def testDefaultDoesNotSatisfyRequired(self):
        schema = Schema(Argument("count", arity=1, required=True, default=lambda: 1))
        state = match(schema, []).state
        result = materialize(state)
        self.assertIsInstance(result.fault, MissingRequiredError)
        self.assertEqual(state.value("count"), 1)
        state.release()

    def testVerifyBeforeMaterialize(self):
        schema = Schema(Argument("count", arity=1, required=True))
        state = match(schema, []).state
        result = verify(state)
        self.assertIs(result.status, Status.ERROR)
        self.assertIsInstance(result.fault, MissingRequiredError)
        self.assertFalse(state.attempted)

    def testInvalidValueChainsReaderError(self):
        schema = Schema(Argument("count", "-c", 1, reader=int))
        state = match(schema, ["-c", "five"]).state
        result = materialize(state)
        self.assertIs(result.status, Status.ERROR)
        self.assertIsInstance(result.fault, InvalidValueError)
        self.assertIsInstance(result.fault.__cause__, ValueError)
        self.assertEqual(result.fault.options["values"], ("five",))
        self.assertFalse(state["count"].initialized)
        state.release()

    def testDefaultUsedWithoutReader(self):
        calls = []

        def reader(value):
            calls.append(value)
            return value

        schema = Schema(Argument("name", arity=1, reader=reader, default=lambda: "anonymous"))
        state = match(schema, []).state
        materialize(state)
        self.assertEqual(state.value("name"), "anonymous")
        self.assertEqual(calls, [])
        state.release()

    def testUnsetDefaultLeavesUninitialized(self):
        schema = Schema(
            Argument("name", arity=1),
            Argument("other", arity=1, default=lambda: Unset),
        )
        state = match(schema, []).state
        self.assertTrue(materialize(state))
        self.assertFalse(state["name"].initialized)
        self.assertFalse(state["other"].initialized)
        self.assertEqual(dict(state.values()), {})

    def testSwitchValues(self):
        schema = Schema(Argument("verbose", "-v"), Argument("quiet", "-q"))
        state = match(schema, ["-q"]).state
        materialize(state)
        self.assertEqual(dict(state.values()), {"verbose": False, "quiet": True})

    def testMultiArityReader(self):
        schema = Schema(Argument("point", arity=2, reader=lambda x, y: (int(x), int(y))))
        state = match(schema, ["--point", "3", "4"]).state
        materialize(state)
        self.assertEqual(state.value("point"), (3, 4))

    def testEarlierValuesReleasedAfterLaterFailure(self):
        released = []
        schema = Schema(
            Argument("log", arity=1, reader=lambda path: "handle:" + path, releaser=released.append),
            Argument("count", arity=1, reader=int),
        )
        with match(schema, ["--log", "out.txt", "--count", "x"]).state as state:
            result = materialize(state)
            self.assertIsInstance(result.fault, InvalidValueError)
            self.assertTrue(state["log"].initialized)
        self.assertEqual(released, ["handle:out.txt"])

    def testSkippedReleaseForUninitialized(self):
        released = []
        schema = Schema(
            Argument("count", arity=1, reader=int),
            Argument("log", arity=1, reader=str, releaser=released.append),
        )
        with match(schema, ["--count", "x", "--log", "out.txt"]).state as state:
            materialize(state)
        self.assertEqual(released, [])

    def testRequiredPredicateOnOtherPresence(self):
        schema = Schema(
            Argument("output", "-o", 1),
            Argument("format", "-f", 1, required=lambda state: state.present("output")),
        )
        self.assertTrue(materialize(match(schema, []).state))
        result = materialize(match(schema, ["-o", "a.txt"]).state)
        self.assertIsInstance(result.fault, MissingRequiredError)
        self.assertEqual(result.fault.options["id"], "format")
        self.assertTrue(materialize(match(schema, ["-f", "csv", "-o", "a.txt"]).state))

    def testSecondAttemptRequiresReset(self):
        schema = Schema(Argument("verbose", "-v"))
        state = match(schema, ["-v"]).state
        materialize(state)
        with self.assertRaises(RuntimeError):
            materialize(state)
        state.reset()
        match(schema, [], state=state)
        materialize(state)
        self.assertIs(state.value("verbose"), False)

    def testStateRequired(self):
        with self.assertRaises(TypeError):
            materialize(Schema())
        with self.assertRaises(TypeError):
            verify(Schema())


if __name__ == "__main__":
    unittest.main()
