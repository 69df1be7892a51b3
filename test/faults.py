"""
Faults module tests (messages, copies with overrides, exit statuses).

Scope
- Validate fault messages, options and rich rendering.
- Validate replace() for regular faults and ExitCode.
- Validate exit_code() for every outcome category.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from cmdtree.faults import (
    FaultCode,
    CommandException,
    UsageError,
    UnknownCommandError,
    ConfigurationError,
    HelpRequested,
    ExitCode,
    replace,
    exit_code,
)


class TestFaults(TestCase):
    """Fault construction and copies."""

    def testMessageAndOptions(self):
        fault = UnknownCommandError('prog: unknown command "x"', path=("prog",))
        self.assertEqual(str(fault), 'prog: unknown command "x"')
        self.assertEqual(fault.path, ("prog",))
        self.assertEqual(fault.code, FaultCode.UNKNOWN_COMMAND)
        self.assertIsInstance(fault, UsageError)

    def testDefaultMessage(self):
        self.assertEqual(str(UsageError()), "")
        self.assertIsNone(UsageError("x").path)

    def testRichRendering(self):
        self.assertEqual(UsageError("bad").__rich__().plain, "ERROR: bad")

    def testReplaceKeepsTypeAndOptions(self):
        fault = ConfigurationError("broken", hint="declare children")
        copy = replace(fault, message="prog: broken", path=("prog",))
        self.assertIsInstance(copy, ConfigurationError)
        self.assertEqual(copy.message, "prog: broken")
        self.assertEqual(dict(copy.options), {"hint": "declare children", "path": ("prog",)})
        self.assertIsNone(fault.path)

    def testReplaceExitCodeKeepsStatus(self):
        copy = replace(ExitCode(4), path=("prog",))
        self.assertEqual(copy.status, 4)
        self.assertEqual(copy.path, ("prog",))

    def testReplaceRequiresReplaceMethod(self):
        with self.assertRaises(TypeError):
            replace(ValueError("x"), message="y")

    def testExitCodeStatusMustBeAnInteger(self):
        with self.assertRaises(TypeError):
            ExitCode("1")
        with self.assertRaises(TypeError):
            ExitCode(True)

    def testControlFlowFaultsAreNotUsageErrors(self):
        self.assertNotIsInstance(HelpRequested(), UsageError)
        self.assertNotIsInstance(ExitCode(), UsageError)


class TestExitCode(TestCase):
    """exit_code() statuses and printing."""

    def setUp(self):
        self.output = io.StringIO()
        self.console = Console(file=self.output, width=80, highlight=False)

    def testSuccess(self):
        self.assertEqual(exit_code(None, console=self.console), 0)

    def testUsageErrorIsSilent(self):
        self.assertEqual(exit_code(UnknownCommandError("x"), console=self.console), 2)
        self.assertEqual(self.output.getvalue(), "")

    def testRequestedStatus(self):
        self.assertEqual(exit_code(ExitCode(0), console=self.console), 0)
        self.assertEqual(exit_code(ExitCode(7), console=self.console), 7)
        self.assertEqual(self.output.getvalue(), "")

    def testOtherErrorsArePrinted(self):
        self.assertEqual(exit_code(RuntimeError("boom"), console=self.console), 1)
        self.assertEqual(exit_code(CommandException("bad state"), console=self.console), 1)
        self.assertEqual(self.output.getvalue(), "ERROR: boom\nERROR: bad state\n")


if __name__ == "__main__":
    unittest.main()
