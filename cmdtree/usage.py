"""
cmdtree usage assembler: the usage block of one resolved command path.

Layout (each section separated by a blank line, absent sections skipped)
- the command's long description;
- "Usage:" and the usage lines;
- "The <path> commands are:" table, with the help row and hint on first call;
- the positional arguments description;
- "The <path> additional help topics are:" table, with a hint on first call;
- "The <path> flags are:" for the command's own options;
- "The global flags are:" on first call.

"First call" is the block printed for the command the user asked about; the
blocks nested inside a recursive help dump are not first calls and omit the
help row, the hints and the global flags.
"""
from .formatting import wrap, table

MISCONFIGURED = "neither Children nor Run is specified"


def route(path, /):
    """
    Space-joined names of a resolution path ("prog sub1 sub2").
    """
    return " ".join(command.name for command in path)


def describe(options, width):
    """
    Lines listing options sorted by name: " -name=default" then the wrapped description.
    """
    lines = []
    for option in options.sorted():
        lines.append(f" -{option.name}={option.render()}")
        if option.descr:
            lines.append(wrap(option.descr, width, "   "))
    return lines


def usage(path, /, *, width, globals, first_call=True):
    """
    Render the usage block for the last command of path.

    Parameters
    - path: Sequence[Command]
      Resolution path from the root to the described command.
    - width: int
      Target width (negative means unlimited).
    - globals: OptionSet
      Global option schema, listed on first call when non-empty.
    - first_call: bool

    Returns
    - str: the block, newline-terminated.
    """
    command = path[-1]
    prefix = route(path)
    flags = " [flags]" if command.options else ""
    lines = []

    if long := command.long.strip():
        lines += [wrap(long, width), ""]

    lines.append("Usage:")
    if command.children:
        lines.append(f"   {prefix}{flags} <command>")
    if command.run is not None:
        lines.append(f"   {prefix}{flags}" + (f" {command.args_name}" if command.args_name else ""))
    if not command.executable:
        lines.append(f"   {prefix} [ERROR: {MISCONFIGURED}]")

    if command.children:
        children = command.effective_children if first_call else command.children
        lines += ["", wrap(f"The {prefix} commands are:", width)]
        lines += table(((child.name, child.short) for child in children), width)
        if first_call:
            lines.append(wrap(f'Run "{prefix} help [command]" for command usage.', width))

    if command.run is not None and (args := command.args_long.strip()):
        lines += ["", wrap(args, width)]

    if command.topics:
        lines += ["", wrap(f"The {prefix} additional help topics are:", width)]
        lines += table(((topic.name, topic.short) for topic in command.topics), width)
        if first_call:
            lines.append(wrap(f'Run "{prefix} help [topic]" for topic details.', width))

    if command.options:
        lines += ["", wrap(f"The {prefix} flags are:", width), *describe(command.options, width)]

    if first_call and globals:
        lines += ["", wrap("The global flags are:", width), *describe(globals, width)]

    return "\n".join(lines) + "\n"


def error(message, path, /, *, width, globals):
    """
    Render the contextual error block: "ERROR: <message>", a blank line, then
    the first-call usage of path.
    """
    return f"{wrap(f'ERROR: {message}', width)}\n\n{usage(path, width=width, globals=globals)}"


__all__ = (
    "route",
    "describe",
    "usage",
    "error",
)
