"""
Execution result and single-use builder tests.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from commandtools import ExecutionResult
from commandtools.faults import InvalidStateError, FaultCode


class TestExecutionResultBuilder(TestCase):
    """The builder is usable exactly once."""

    def testDefaultIsSuccess(self):
        result = ExecutionResult.Builder().build()
        self.assertTrue(result.success)
        self.assertTrue(result)

    def testSetSuccessIsFluent(self):
        result = ExecutionResult.Builder().set_success(False).build()
        self.assertFalse(result.success)
        self.assertEqual(result, ExecutionResult(False))

    def testSecondBuildRaises(self):
        builder = ExecutionResult.Builder()
        builder.build()
        self.assertTrue(builder.built)
        with self.assertRaises(InvalidStateError) as context:
            builder.build()
        self.assertEqual(context.exception.options["code"], FaultCode.INVALID_STATE)

    def testSetAfterBuildRaises(self):
        builder = ExecutionResult.Builder()
        builder.build()
        with self.assertRaises(InvalidStateError):
            builder.set_success(False)

    def testSuccessMustBeABoolean(self):
        with self.assertRaises(TypeError):
            ExecutionResult.Builder().set_success(1)
        with self.assertRaises(TypeError):
            ExecutionResult("yes")


if __name__ == "__main__":
    unittest.main()
