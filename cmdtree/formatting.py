"""
cmdtree text formatting: width resolution, paragraph wrapping and two-column tables.

Scope
- resolve_width(): target width in code points for every rendered help text.
  Order: the CMDLINE_WIDTH variable (x > 0 wraps at x, x < 0 is unlimited,
  0/unset/garbage falls through), then the terminal width as probed by rich,
  then DEFAULT_WIDTH.
- wrap(): greedy paragraph filler with per-line indents.
- table(): name/description rows with a hanging indent under the description.
- rule(): separator line used by the recursive help dump.

Wrapping rules
- Paragraphs are separated by blank lines; runs of blank lines collapse into
  one and leading/trailing blank lines are dropped.
- Input lines starting with whitespace are emitted verbatim (prefixed by the
  current indent), which keeps hand-aligned examples intact.
- Whitespace between two words of the same input line is kept as written;
  a line break between two words becomes a single space.
- A word wider than the target width is never split; it takes its own line.
- No emitted line carries trailing whitespace.
"""
import logging
import os
import re

from rich.console import Console

from .utils import Unset, coalesce

logger = logging.getLogger(__name__)

WIDTH_VARIABLE = "CMDLINE_WIDTH"
DEFAULT_WIDTH = 80
UNLIMITED = -1
# Minimum width of the name column in command and topic tables.
COLUMN_WIDTH = 11


def resolve_width(environ=Unset, console=Unset):
    """
    Resolve the target width for help output.

    Parameters
    - environ: Mapping[str, str]
      Environment to consult; defaults to os.environ.
    - console: rich.console.Console
      Console used to probe the terminal; a fresh Console() by default. rich
      honors COLUMNS and falls back on 80 columns when the output is not a
      terminal.

    Returns
    - int: a positive width, or UNLIMITED (-1) to disable wrapping.
    """
    environ = coalesce(environ, os.environ)
    if value := environ.get(WIDTH_VARIABLE, "").strip():
        try:
            width = int(value)
        except ValueError:
            logger.debug("ignoring %s=%r: not an integer", WIDTH_VARIABLE, value)
            width = 0
        if width > 0:
            logger.debug("width %d taken from %s", width, WIDTH_VARIABLE)
            return width
        if width < 0:
            logger.debug("wrapping disabled by %s", WIDTH_VARIABLE)
            return UNLIMITED

    console = coalesce(console) or Console()
    if (width := console.width) > 0:
        logger.debug("width %d probed from the terminal", width)
        return width
    return DEFAULT_WIDTH


def wrap(text, width=DEFAULT_WIDTH, indents=("",)):
    """
    Fill text to the target width.

    Parameters
    - text: str
    - width: int
      Target width in code points; negative means unlimited.
    - indents: str | Sequence[str]
      Line n of each paragraph is prefixed by indents[n], the last indent
      repeating for the remaining lines.

    Returns
    - str: the wrapped lines joined by newlines, without a trailing newline.
    """
    if isinstance(indents, str):
        indents = (indents,)
    indents = tuple(indents) or ("",)

    lines = []
    count = 0  # lines emitted in the current paragraph
    current = None  # line being filled, without its indent

    def margin():
        return indents[min(count, len(indents) - 1)]

    def flush():
        nonlocal count, current
        if current is not None:
            lines.append((margin() + current).rstrip())
            count += 1
            current = None

    for line in text.splitlines():
        if not line.strip():
            flush()
            if lines and lines[-1]:
                lines.append("")
            count = 0
            continue

        if line[0].isspace():
            flush()
            lines.append((margin() + line).rstrip())
            count += 1
            continue

        for index, match in enumerate(re.finditer(r"(\s*)(\S+)", line)):
            gap, word = match.groups()
            if current is None:
                current = word
                continue
            candidate = current + (gap if index else " ") + word
            if width < 0 or len(margin()) + len(candidate) <= width:
                current = candidate
            else:
                flush()
                current = word

    flush()
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def table(rows, width=DEFAULT_WIDTH):
    """
    Render (name, description) rows as an aligned two-column table.

    The name column is max(COLUMN_WIDTH, longest name) wide and indented by
    three spaces; descriptions wrap under their own first line.

    Returns
    - list[str]: one (possibly multi-line) string per row.
    """
    rows = list(rows)
    column = max([COLUMN_WIDTH, *(len(name) for name, _ in rows)])
    hanging = " " * (3 + column + 1)
    return [wrap(f"{name.ljust(column)} {descr}", width, ("   ", hanging)) for name, descr in rows]


def rule(width=DEFAULT_WIDTH):
    """
    Separator line spanning the target width (DEFAULT_WIDTH when unlimited).
    """
    return "=" * (width if width > 0 else DEFAULT_WIDTH)


__all__ = (
    "WIDTH_VARIABLE",
    "DEFAULT_WIDTH",
    "UNLIMITED",
    "resolve_width",
    "wrap",
    "table",
    "rule",
)
