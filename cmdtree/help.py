"""
cmdtree help subsystem: the implicit "help" command and its rendering modes.

Modes (relative to the command enclosing "help")
- help                 usage of the enclosing command
- help ...             recursive dump of the enclosing command, its children
                       (depth first, declared order) and its topics
- help a b             usage of child "a"'s child "b", or the long text of a
                       topic, resolved level by level (children before topics)

Styles
- text: nested blocks start with a rule line and a "Prog Sub" title.
- annotated: nested blocks start with a blank line and the title only.

The help command itself is declared in cmdtree.commands (HELP); this module
only holds its texts and its handler so it does not depend on the tree model.
"""
from .faults import ConfigurationError, UnknownTopicError
from .formatting import rule, wrap
from .usage import route, usage
from .utils import quote

NAME = "help"
SHORT = "Display help for commands or topics"
LONG = """
Help with no args displays the usage of the parent command.

Help with args displays the usage of the specified sub-command or help topic.

"help ..." recursively displays help for all commands and topics.

The output is formatted to a target width in runes.  The target width is
determined by checking the environment variable CMDLINE_WIDTH, falling back on
the terminal width from the OS, falling back on 80 chars.  By setting
CMDLINE_WIDTH=x, if x > 0 the width is x, if x < 0 the width is unlimited, and
if x == 0 or is unset one of the fallbacks is used.
"""
ARGS_NAME = "[command/topic ...]"
ARGS_LONG = "[command/topic ...] optionally identifies a specific sub-command or help topic."

STYLES = ("text", "annotated")
STYLE_DESCR = 'The formatting style for help output, either "text" or "annotated".'

RECURSIVE = "..."


def title(path, /):
    """
    Heading of a nested block: path names with their first letter upper-cased.
    """
    return " ".join(command.name[:1].upper() + command.name[1:] for command in path)


def separator(style, width):
    return "\n" if style == "annotated" else rule(width) + "\n"


def usage_all(path, /, *, style, width, globals, first_call=True):
    """
    Recursive dump of path's command, its children, then its topics.

    Only the first block is a first call: nested blocks omit the help row,
    the hints and the global flags, and the help command is visited (last)
    only below the first block.
    """
    command = path[-1]
    blocks = []
    if not first_call:
        blocks.append(separator(style, width))
        blocks.append(wrap(title(path), width) + "\n\n")
    blocks.append(usage(path, width=width, globals=globals, first_call=first_call))

    for child in command.effective_children if first_call else command.children:
        blocks.append(usage_all((*path, child), style=style, width=width, globals=globals, first_call=False))

    for topic in command.topics:
        blocks.append(separator(style, width))
        blocks.append(wrap(f"{title(path)} {title((topic,))} - help topic", width) + "\n\n")
        blocks.append(wrap(topic.long.strip(), width) + "\n")

    return "".join(blocks)


def render(path, names, /, *, style, width, globals):
    """
    Help text for names looked up relative to path's command.

    Raises
    - UnknownTopicError: bound to the scope where a name failed to match.
    """
    if not names:
        return usage(path, width=width, globals=globals)
    if names[0] == RECURSIVE:
        return usage_all(path, style=style, width=width, globals=globals)

    command = path[-1]
    name, *names = names
    for child in command.effective_children:
        if child.name == name:
            return render((*path, child), names, style=style, width=width, globals=globals)
    for topic in command.topics:
        if topic.name == name:
            if not names:
                return wrap(topic.long.strip(), width) + "\n"
            name = names[0]  # topics have no children
            break

    raise UnknownTopicError(f"{route(path)}: unknown command or topic {quote(name)}", path=tuple(path))


def run(context, args):
    """
    Handler of the help command: renders help for the enclosing command.

    Raises
    - ConfigurationError: help was executed as a root, with no enclosing command.
    """
    if len(context.path) < 2:
        raise ConfigurationError(f"{context.route}: no enclosing command to describe", path=tuple(context.path))
    context.stdout.write(render(
        context.path[:-1],
        list(args),
        style=context.flags["style"],
        width=context.width,
        globals=context.global_options,
    ))


__all__ = (
    "title",
    "usage_all",
    "render",
    "run",
)
