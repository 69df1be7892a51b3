from rich.pretty import pprint

from cmdtree import *

GLOBALS = OptionSet(
    Option("color", "auto", "When to decorate output: always, never or auto."),
    Option("verbosity", 0, "Number of diagnostic levels to print."),
)


@command("echo", short="Print strings on stdout", args_name="[strings]",
         args_long="[strings] are arbitrary strings that will be echoed.",
         options=Flag("n", descr="Do not output trailing newline"))
def echo(context, args):
    """
    Echo prints any strings passed in to stdout.
    """
    if context.flags["loud"]:
        args = [arg.upper() for arg in args]
    context.stdout.write("[%s]" % " ".join(args) + ("" if context.flags["n"] else "\n"))


@command("tree", short="Show the command tree")
def tree(context, args):
    """
    Tree pretty-prints the command tree of this program.
    """
    pprint(context.path[0], expand_all=True)


program = Command(
    "demo",
    short="Demo program.",
    long="Demo shows how commands, topics and options fit together.",
    options=Flag("loud", descr="Upper-case everything that is echoed"),
    children=[echo, tree],
    topics=[Topic("width", short="How help output is wrapped", long=(
        "Help output is wrapped to the terminal width. Set CMDLINE_WIDTH to a positive "
        "number to force a width, or to a negative number to disable wrapping."
    ))],
)


if __name__ == '__main__':
    main(program, globals=GLOBALS)
