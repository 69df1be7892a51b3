"""
cmdtree command layer: build command trees, dispatch argument vectors, run handlers.

What this module provides
- Command: one node of the tree (name, descriptions, positional contract,
  option set, children, topics, optional handler). Immutable once built.
- Topic: a help-only leaf listed and looked up by "help", never dispatched.
- Context: per-execution state handed to handlers (sinks, width, resolved
  path, chained option values, global option values).
- HELP: the synthesized "help" command, reachable from every command with
  children through Command.effective_children; never stored in a tree.
- command(...): build a Command from a handler function (decorator form).
- invoke(obj, prompt): run a command from a shell-like string or token list.
- main(command): program entry point mapping the outcome to an exit status.

Resolution (per level, starting at the root)
1. Leading option tokens are parsed against the level's own options; the
   root level also accepts the global options.
2. A following token naming a child (or "help") descends into it.
3. Otherwise the level's handler runs with the remaining tokens. A level
   with children and no args_name rejects leftovers as unknown commands.
4. Without a handler: "neither Children nor Run is specified" for a level
   without children, else "unknown command" or "no command specified".

Usage failures are rendered on the error sink ("ERROR: ..." followed by the
usage of the failing level) and raised as UsageError; exceptions raised by
handlers for any other reason propagate untouched.

Quick start
    from cmdtree import Command, Flag, OptionSet, command, invoke

    @command("echo", short="Print strings on stdout", args_name="[strings]")
    def echo(context, args):
        print(args, file=context.stdout)

    prog = Command("prog", short="Prog program.", children=[echo])
    invoke(prog, "echo foo bar")
"""
import inspect
import logging
import re
import shlex
import sys
from collections import ChainMap
from collections.abc import Iterable
from types import MappingProxyType

from . import help
from .faults import *
from .formatting import resolve_width
from .options import Option, OptionSet
from .usage import MISCONFIGURED, error, route, usage
from .utils import *

logger = logging.getLogger(__name__)


def _sanitize_name(cls, name):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} name must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} name cannot be empty")
    elif not re.fullmatch(r"[^\s-]\S*", name):
        raise ValueError(f"{cls.__typename__} name must be a single word not starting with '-', got {name!r}")
    return name


def _sanitize_strings(cls, metadata):
    """
    Internal: validate descriptive fields, normalizing None to "".

    The short description is kept on one line; multi-line texts are stored
    as given and trimmed at render time.
    """
    for field, text in metadata.items():
        if text is None:
            metadata[field] = ""
        elif not isinstance(text, str):
            raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    metadata["short"] = " ".join(metadata["short"].split())


def _sanitize_members(cls, name, options, children, topics, run):
    """
    Internal: validate the structural fields of a command.

    Raises
    - TypeError: wrong member types, non-callable handler.
    - ValueError: duplicate sibling names, or a child named "help" (the name
      is reserved for the synthesized help command).
    """
    if isinstance(options, Option):
        options = OptionSet(options)
    elif not isinstance(options, OptionSet):
        if not isinstance(options, Iterable):
            raise TypeError(f"{cls.__typename__} 'options' must be an option-set or an iterable of options")
        options = OptionSet(*options)

    if not isinstance(children, Iterable) or not isinstance(topics, Iterable):
        raise TypeError(f"{cls.__typename__} 'children' and 'topics' must be iterables")

    children = tuple(children)
    names = set()
    for child in children:
        if not isinstance(child, Command):
            raise TypeError(f"{cls.__typename__} children must be commands")
        if child.name == help.NAME:
            raise ValueError(f"{cls.__typename__} {name!r} cannot declare a child named {help.NAME!r}")
        if child.name in names:
            raise ValueError(f"{cls.__typename__} {name!r} declares child {child.name!r} twice")
        names.add(child.name)

    topics = tuple(topics)
    names = set()
    for topic in topics:
        if not isinstance(topic, Topic):
            raise TypeError(f"{cls.__typename__} topics must be topics")
        if topic.name in names:
            raise ValueError(f"{cls.__typename__} {name!r} declares topic {topic.name!r} twice")
        names.add(topic.name)

    if run is not None and not callable(run):
        raise TypeError(f"{cls.__typename__} 'run' must be callable")

    return options, children, topics


class Topic(metaclass=ModelType):
    """
    Help-only entry: listed under "additional help topics" and printed by
    "help <name>" (long description only).
    """

    __introspectable__ = (
        "name",
        "short",
        "long",
    )

    def __init__(self, name, /, short=None, long=None):
        metadata = {"short": short, "long": long}
        _sanitize_strings(type(self), metadata)
        self._name = _sanitize_name(type(self), name)
        self._short = metadata["short"]
        self._long = metadata["long"]


class Command(metaclass=ModelType):
    """
    One node of a command tree.

    Parameters
    - name: str
      Word matched against the argument vector; unique among siblings.
    - short: str | None
      One-line description shown in the parent's commands table.
    - long: str | None
      Multi-paragraph description heading the usage block.
    - args_name: str | None
      Positional-argument placeholder shown on the usage line ("[strings]").
    - args_long: str | None
      Paragraph describing the positional arguments.
    - options: OptionSet | Iterable[Option]
      Options accepted at this level only.
    - children: Iterable[Command]
      Subcommands, in display and lookup order.
    - topics: Iterable[Topic]
      Help topics, in display order.
    - run: Callable[[Context, list[str]], Any] | None
      Handler invoked with the execution context and the positional args.

    Notes
    - A command needs children, a handler, or both. A command with neither
      is accepted here and reported as a usage error when dispatched, so
      partially-built trees can still be rendered.
    - The tree is never mutated after construction; the same tree can be
      executed any number of times.
    """

    __introspectable__ = (
        "name",
        "short",
        "long",
        "args_name",
        "args_long",
        "options",
        "children",
        "topics",
        "run",
    )
    # Subset of fields for compact displays of nested trees.
    __displayable__ = (
        "name",
        "short",
        "options",
        "children",
        "topics",
    )

    def __init__(
            self,
            name,
            /,
            short=None,
            long=None,
            args_name=None,
            args_long=None,
            options=(),
            children=(),
            topics=(),
            run=None,
    ):
        cls = type(self)
        name = _sanitize_name(cls, name)
        metadata = {"short": short, "long": long, "args_name": args_name, "args_long": args_long}
        _sanitize_strings(cls, metadata)
        metadata["args_name"] = metadata["args_name"].strip()
        options, children, topics = _sanitize_members(cls, name, options, children, topics, run)

        self._name = name
        for field, text in metadata.items():
            setattr(self, "_" + field, text)
        self._options = options
        self._children = children
        self._topics = topics
        self._run = run

    @property
    def executable(self):
        """
        Whether dispatch can succeed at this command (children or a handler).
        """
        return bool(self._children) or self._run is not None

    @property
    def effective_children(self):
        """
        Children as seen by dispatch and help: the declared children followed
        by the synthesized help command (none for a command without children).
        """
        return (*self._children, HELP) if self._children else ()

    def execute(self, argv=Unset, /, *, globals=Unset, stdout=Unset, stderr=Unset, environ=Unset):
        """
        Resolve argv against this tree and run the selected handler.

        Parameters
        - argv: Iterable[str]
          Tokens to resolve; defaults to sys.argv[1:].
        - globals: OptionSet
          Global options, accepted before the first command name and listed
          in every usage block printed for the user.
        - stdout, stderr:
          Sinks with a write() method; default to sys.stdout/sys.stderr.
        - environ: Mapping[str, str]
          Environment consulted for CMDLINE_WIDTH; defaults to os.environ.

        Returns
        - Whatever the handler returns (None for help output).

        Raises
        - UsageError: after rendering the error block on stderr.
        - Anything else a handler raises, untouched.
        """
        globals = coalesce(globals) or OptionSet()
        if not isinstance(globals, OptionSet):
            raise TypeError("execute() 'globals' must be an option-set")

        context = Context(
            stdout=coalesce(stdout, sys.stdout),
            stderr=coalesce(stderr, sys.stderr),
            width=resolve_width(environ),
            global_options=globals,
        )

        try:
            return _resolve(context, (self,), list(coalesce(argv, sys.argv[1:])))
        except UsageError as fault:
            path = fault.path or (self,)
            logger.debug("usage error at %r: %s", route(path), fault.message)
            context.stderr.write(error(fault.message, path, width=context.width, globals=globals))
            raise

    def __invoke__(self, prompt=Unset, /, **options):
        """
        Execute this command with a token stream.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used as given.
        - options: forwarded to execute() (globals, stdout, stderr, environ).

        Raises
        - TypeError: when prompt is not Unset/str/Iterable[str].
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        return self.execute(tokens, **options)


class Context:
    """
    Per-execution state handed to handlers.

    Attributes (read-only)
    - stdout, stderr: the sinks of this execution.
    - width: resolved target width (-1 when unlimited).
    - path: resolved commands from the root; command is the last one.
    - flags: option values of every resolved level, innermost first, then
      the global option values.
    - globals: global option values.
    - global_options: the global option set itself.

    A context lives for a single execute() call and is not reused.
    """
    stdout = mirror("stdout")
    stderr = mirror("stderr")
    width = mirror("width")
    path = mirror("path")
    flags = mirror("flags")
    globals = mirror("globals")
    global_options = mirror("global_options")

    def __init__(self, *, stdout, stderr, width, global_options):
        self._stdout = stdout
        self._stderr = stderr
        self._width = width
        self._global_options = global_options
        self._globals = MappingProxyType(global_options.defaults())
        self._path = ()
        self._flags = ChainMap(self._globals)

    @property
    def command(self):
        return self._path[-1] if self._path else None

    @property
    def route(self):
        """
        Space-joined names of the resolved path ("prog sub").
        """
        return route(self._path)

    def usage_error(self, message, /, *args):
        """
        Build a usage error for the running command; raise the result.

        The message is %-formatted with args when any are given. The error is
        rendered like the built-in usage errors, with the running command's
        usage block and without a path prefix.
        """
        return UsageError(message % args if args else message)

    def _enter(self, path, values, globals=Unset):
        if globals is not Unset:
            self._globals = globals
            self._flags = ChainMap(globals)
        self._path = tuple(path)
        self._flags = self._flags.new_child(values)


def _resolve(context, path, tokens):
    """
    Internal: resolve tokens at the last command of path (see module docstring).
    """
    command = path[-1]
    prefix = route(path)
    root = len(path) == 1
    scope = command.options.merge(context.global_options) if root else command.options

    try:
        values, rest = scope.parse(tokens)
    except HelpRequested:
        logger.debug("help flag given at %r", prefix)
        context.stdout.write(usage(path, width=context.width, globals=context.global_options))
        return None
    except UsageError as fault:
        raise replace(fault, message=f"{prefix}: {fault.message}", path=path) from None

    if root:
        context._enter(
            path,
            MappingProxyType({option.name: values[option.name] for option in command.options}),
            MappingProxyType({option.name: values[option.name] for option in context.global_options}),
        )
    else:
        context._enter(path, values)

    if rest:
        for child in command.effective_children:
            if child.name == rest[0]:
                logger.debug("descending from %r into %r", prefix, child.name)
                return _resolve(context, (*path, child), rest[1:])

    if command.run is not None:
        if rest and command.children and not command.args_name:
            raise UnknownCommandError(f"{prefix}: unknown command {quote(rest[0])}", path=path)
        logger.debug("running %r with %d argument(s)", prefix, len(rest))
        try:
            return command.run(context, rest)
        except UsageError as fault:
            if fault.path is None:
                raise replace(fault, path=path) from None
            raise

    if not command.children:
        raise ConfigurationError(f"{prefix}: {MISCONFIGURED}", path=path)
    if rest:
        raise UnknownCommandError(f"{prefix}: unknown command {quote(rest[0])}", path=path)
    raise MissingCommandError(f"{prefix}: no command specified", path=path)


HELP = Command(
    help.NAME,
    short=help.SHORT,
    long=help.LONG,
    args_name=help.ARGS_NAME,
    args_long=help.ARGS_LONG,
    options=OptionSet(Option("style", "text", help.STYLE_DESCR, choices=help.STYLES)),
    run=help.run,
)


def command(source=Unset, /, **kwargs):
    """
    Create a Command from a handler, or return a decorator that does.

    Invocation modes
    - Bare decorator:
        @command
        def echo(context, args): ...
      The command is named after the function.

    - Decorator factory:
        @command("echo", short="Print strings on stdout", args_name="[strings]")
        def echo(context, args): ...

    - Direct:
        echo = command(handler, short=...)

    In every mode the long description defaults to the handler's docstring.

    Returns
    - Command | Callable[[Callable], Command]
    """
    @rename("command")
    def wrapper(run, /):
        if not callable(run):
            raise TypeError("@command() must be applied to a callable")
        name = source if isinstance(source, str) else run.__name__
        return Command(name, run=run, **({"long": inspect.getdoc(run)} | kwargs))

    if callable(source):
        return wrapper(source)
    if source is not Unset and not isinstance(source, str):
        raise TypeError("command() argument must be a name or a callable")
    return wrapper


def invoke(object, prompt=Unset, /, **options):
    """
    Convenience runner for commands or handlers.

    Parameters
    - object: a Command (anything with __invoke__) or a plain handler, which
      is wrapped with command() first.
    - prompt: Unset (sys.argv[1:]) | str (shlex-split) | Iterable[str].
    - options: forwarded to Command.execute().

    Raises
    - TypeError: when object cannot be invoked.
    - UsageError and handler exceptions, as Command.execute() does.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt, **options)

    if callable(object):
        return invoke(command(object), prompt, **options)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


def main(command, argv=Unset, /, **options):
    """
    Program entry point: execute command and exit the process.

    The exit status follows exit_code(): 0 on success, 2 on usage errors
    (already rendered), the requested status for ExitCode, 1 for anything
    else after printing "ERROR: <error>" on stderr.
    """
    try:
        command.execute(argv, **options)
    except Exception as fault:
        status = exit_code(fault)
    else:
        status = 0
    logger.debug("exiting with status %d", status)
    sys.exit(status)


__all__ = (
    "Command",
    "Topic",
    "Context",
    "HELP",
    "command",
    "invoke",
    "main",
)
