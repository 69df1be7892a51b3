"""
Usage assembler tests (section layout, first-call details, error blocks).

Scope
- Validate the order and presence of every usage section.
- Validate the differences between first-call and nested blocks.
- Validate option descriptions and the contextual error block.

Conventions
- Test method names follow CamelCase per project convention.
- Blocks are rendered directly from paths, without dispatching.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from cmdtree import Command, Topic, Option, Flag, OptionSet
from cmdtree.usage import route, describe, usage, error

from fixtures import GLOBALS, GLOBAL_FLAGS, onecmd, toplevelprog, cmdrun


class TestUsage(TestCase):
    """usage() for single paths."""

    def testRoute(self):
        program = toplevelprog()
        self.assertEqual(route((program, program.children[0])), "toplevelprog echoprog")
        self.assertEqual(route(()), "")

    def testWithoutGlobals(self):
        self.assertEqual(usage((onecmd(),), width=80, globals=OptionSet()), """Onecmd only has the echo command.

Usage:
   onecmd <command>

The onecmd commands are:
   echo        Print strings on stdout
   help        Display help for commands or topics
Run "onecmd help [command]" for command usage.
""")

    def testNestedBlockOmitsHelpRowHintsAndGlobals(self):
        program = toplevelprog()
        self.assertEqual(usage((program,), width=80, globals=GLOBALS, first_call=False), """Toplevelprog has the echo subprogram and the hello command.

Usage:
   toplevelprog [flags] <command>

The toplevelprog commands are:
   echoprog    Set of echo commands
   hello       Print strings on stdout preceded by "Hello"

The toplevelprog additional help topics are:
   topic1      Help topic 1 short
   topic2      Help topic 2 short

The toplevelprog flags are:
 -tlextra=false
   Print an extra arg for all commands
""")

    def testBothUsageLines(self):
        block = usage((cmdrun(),), width=80, globals=GLOBALS)
        self.assertIn("Usage:\n   cmdrun <command>\n   cmdrun\n\n", block)

    def testMisconfiguredCommand(self):
        self.assertEqual(
            usage((Command("broken"),), width=80, globals=OptionSet()),
            "Usage:\n   broken [ERROR: neither Children nor Run is specified]\n",
        )

    def testArgsLongRequiresRun(self):
        group = Command("group", args_long="Ignored without a handler.", children=[Command("a", run=print)])
        self.assertNotIn("Ignored", usage((group,), width=80, globals=OptionSet()))

    def testTopicsOnlyOnCommandsWithThem(self):
        program = Command("prog", run=print, topics=[Topic("intro", short="Introduction")])
        self.assertEqual(usage((program,), width=80, globals=GLOBALS), """Usage:
   prog

The prog additional help topics are:
   intro       Introduction
Run "prog help [topic]" for topic details.
""" + GLOBAL_FLAGS)

    def testOptionsSortedByName(self):
        options = OptionSet(Option("zeta", "z", "last"), Flag("alpha", descr="first"), Option("mid", 3))
        self.assertEqual(describe(options, 80), [
            " -alpha=false",
            "   first",
            " -mid=3",
            " -zeta=z",
            "   last",
        ])

    def testOptionDescriptionWraps(self):
        options = OptionSet(Flag("x", descr="one two three"))
        self.assertEqual(describe(options, 11), [" -x=false", "   one two\n   three"])


class TestErrorBlock(TestCase):
    """error() renders the message then the first-call usage."""

    def testErrorBlock(self):
        block = error('onecmd: unknown command "foo"', (onecmd(),), width=80, globals=GLOBALS)
        self.assertTrue(block.startswith('ERROR: onecmd: unknown command "foo"\n\nOnecmd only has the echo command.\n'))
        self.assertTrue(block.endswith(GLOBAL_FLAGS))

    def testLongMessageWraps(self):
        block = error("word " * 20, (Command("leaf", run=print),), width=20, globals=OptionSet())
        self.assertTrue(block.startswith("ERROR: word word\nword word word word\n"))


if __name__ == "__main__":
    unittest.main()
