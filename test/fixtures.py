"""
Shared command trees and helpers for the dispatcher and help tests.

Scope
- Sample programs (nocmds, onecmd, multi, toplevelprog, prog1, cmdargs,
  cmdrun, program) covering leaves, nested groups, topics, per-level options
  and commands that both run and have children.
- GLOBALS: the global option set used by every execution (global1, global2).
- execute(): run a tree with captured sinks at a fixed width of 80.

Conventions
- Handlers echo their positional arguments the way the samples' texts expect:
  "[a b]" for echo-like commands, "Hello a b" for hello-like commands.
"""
import io

from cmdtree import Command, Topic, Option, Flag, OptionSet

ENVIRON = {"CMDLINE_WIDTH": "80"}

GLOBALS = OptionSet(
    Option("global1", "", "global test flag 1"),
    Option("global2", 0, "global test flag 2"),
)

GLOBAL_FLAGS = """
The global flags are:
 -global1=
   global test flag 1
 -global2=0
   global test flag 2
"""


class EchoError(Exception):
    """Domain error raised by the echo handlers for the "error" argument."""


def run_echo(context, args):
    if len(args) == 1:
        if args[0] == "error":
            raise EchoError("echo error")
        elif args[0] == "bad_arg":
            raise context.usage_error("Invalid argument %s", args[0])
    args = list(args)
    if context.flags.get("extra"):
        args.append("extra")
    if context.flags.get("tlextra"):
        args.append("tlextra")
    context.stdout.write("[%s]" % " ".join(args) + ("" if context.flags.get("n") else "\n"))


def run_hello(context, args):
    args = list(args)
    if context.flags.get("tlextra"):
        args.append("tlextra")
    context.stdout.write(" ".join(["Hello", *args]) + "\n")


def execute(program, *argv, environ=ENVIRON):
    """
    Run program with argv; return (error or None, stdout text, stderr text).
    """
    stdout, stderr = io.StringIO(), io.StringIO()
    try:
        program.execute(list(argv), globals=GLOBALS, stdout=stdout, stderr=stderr, environ=environ)
    except Exception as error:
        return error, stdout.getvalue(), stderr.getvalue()
    return None, stdout.getvalue(), stderr.getvalue()


def echo(name="echo"):
    return Command(
        name,
        short="Print strings on stdout",
        long="\nEcho prints any strings passed in to stdout.\n",
        args_name="[strings]",
        args_long="[strings] are arbitrary strings that will be echoed.",
        run=run_echo,
    )


def echoopt():
    return Command(
        "echoopt",
        short="Print strings on stdout, with opts",
        long="Echoopt prints any args passed in to stdout.\n\n\n",
        args_name="[args]",
        args_long="[args] are arbitrary strings that will be echoed.",
        options=Flag("n", descr="Do not output trailing newline"),
        run=run_echo,
    )


def hello(name="hello"):
    return Command(
        name,
        short='Print strings on stdout preceded by "Hello"',
        long='\nHello prints any strings passed in to stdout preceded by "Hello".\n',
        args_name="[strings]",
        args_long="[strings] are arbitrary strings that will be printed.",
        run=run_hello,
    )


def nocmds():
    return Command("nocmds", short="Nocmds is invalid.", long="Nocmds has no commands and no run function.")


def onecmd():
    return Command("onecmd", short="Onecmd program.", long="Onecmd only has the echo command.", children=[echo()])


def multi():
    return Command(
        "multi",
        short="Multi test command",
        long="Multi has two variants of echo.",
        options=Flag("extra", descr="Print an extra arg"),
        children=[echo(), echoopt()],
    )


def toplevelprog():
    echoprog = Command(
        "echoprog",
        short="Set of echo commands",
        long="Echoprog has two variants of echo.",
        options=Flag("extra", descr="Print an extra arg"),
        children=[echo(), echoopt()],
        topics=[Topic("topic3", short="Help topic 3 short", long="Help topic 3 long.")],
    )
    return Command(
        "toplevelprog",
        short="Top level prog",
        long="Toplevelprog has the echo subprogram and the hello command.",
        options=Flag("tlextra", descr="Print an extra arg for all commands"),
        children=[echoprog, hello()],
        topics=[
            Topic("topic1", short="Help topic 1 short", long="Help topic 1 long."),
            Topic("topic2", short="Help topic 2 short", long="Help topic 2 long."),
        ],
    )


def prog1():
    prog3 = Command(
        "prog3",
        short="Set of hello commands",
        long="Prog3 has two variants of hello.",
        children=[hello("hello31"), hello("hello32")],
    )
    prog2 = Command(
        "prog2",
        short="Set of hello commands",
        long="Prog2 has two variants of hello and a subprogram prog3.",
        children=[hello("hello21"), prog3, hello("hello22")],
    )
    return Command(
        "prog1",
        short="Set of hello commands",
        long="Prog1 has two variants of hello and a subprogram prog2.",
        children=[hello("hello11"), hello("hello12"), prog2],
    )


def cmdargs():
    return Command(
        "cmdargs",
        short="Cmdargs program.",
        long="Cmdargs has the echo command and a Run function with args.",
        args_name="[strings]",
        args_long="[strings] are arbitrary strings that will be printed.",
        children=[echo()],
        run=run_hello,
    )


def cmdrun():
    return Command(
        "cmdrun",
        short="Cmdrun program.",
        long="Cmdrun has the echo command and a Run function with no args.",
        children=[echo()],
        run=run_hello,
    )


def program():
    return Command(
        "program",
        short="Test help strings when there are long commands.",
        long="Test help strings when there are long commands.",
        children=[
            Command("x", short="description of short command.", long="blah blah blah", run=run_echo),
            Command(
                "thisisaverylongcommand",
                short="the short description of the very long command is very long, and will have to be wrapped",
                long="The long description of the very long command is also very long, and will similarly have to be wrapped",
                run=run_echo,
            ),
        ],
    )
