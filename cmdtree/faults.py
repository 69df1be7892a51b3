"""
cmdtree faults (errors) and exit-status mapping.

Scope
- FaultCode: canonical, stable numeric identifiers for every usage-class failure.
  Codes are grouped by domain to keep logs and searches predictable.
- CommandException: base type carrying a message plus keyword options. The
  "path" option binds a fault to the resolution path whose usage block is
  rendered alongside it.
- UsageError and its subclasses: the usage category. The dispatcher renders
  them on the error sink before raising, so callers can rely on a plain
  `except UsageError` to tell usage failures from handler-domain errors.
- HelpRequested / ExitCode: control-flow faults (undeclared -h/-help, and a
  handler asking for a specific exit status).
- replace(): copy a fault with overrides (used to bind a fault to a path).
- exit_code(): process exit status for the outcome of an execution.

Rendering
- Every fault is a rich renderable (__rich__) producing "ERROR: <message>"
  without styling; help text itself is rendered by cmdtree.usage.
"""
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

console = Console(stderr=True, highlight=False)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the dispatcher (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND, UNKNOWN_TOPIC, MISSING_COMMAND
    - options (1111x/1112x)
      • MALFORMED_OPTION, UNKNOWN_OPTION, OPTION_VALUE_REQUIRED, INVALID_OPTION_VALUE
    - handler-signaled (1113x)
      • INVALID_ARGUMENT
    - tree configuration (1115x)
      • CONFIGURATION
    - control flow (1190x)
      • HELP_REQUESTED, EXIT_REQUESTED
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101
    UNKNOWN_TOPIC               = 11102
    MISSING_COMMAND             = 11103

    # --- option errors (11xxx) ---
    MALFORMED_OPTION            = 11111
    UNKNOWN_OPTION              = 11112
    OPTION_VALUE_REQUIRED       = 11117
    INVALID_OPTION_VALUE        = 11124

    # --- handler-signaled errors (11xxx) ---
    INVALID_ARGUMENT            = 11131

    # --- configuration errors (11xxx) ---
    CONFIGURATION               = 11151

    # --- control flow (11xxx) ---
    HELP_REQUESTED              = 11901
    EXIT_REQUESTED              = 11902


class CommandException(Exception):
    code = FaultCode.INVALID_ARGUMENT

    def __init__(self, message="", /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def path(self):
        """
        Resolution path (tuple of commands) this fault is bound to, or None.
        """
        return self.options.get("path")

    def __str__(self):
        return self.message

    def __rich__(self):
        return Text(f"ERROR: {self.message}")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        message = overrides.pop("message", self.message)
        return type(self)(message, **{**self.options, **overrides})


class UsageError(CommandException): ...


class UnknownCommandError(UsageError):
    code = FaultCode.UNKNOWN_COMMAND


class UnknownTopicError(UsageError):
    code = FaultCode.UNKNOWN_TOPIC


class MissingCommandError(UsageError):
    code = FaultCode.MISSING_COMMAND


class MalformedOptionError(UsageError):
    code = FaultCode.MALFORMED_OPTION


class UnknownOptionError(UsageError):
    code = FaultCode.UNKNOWN_OPTION


class OptionValueRequiredError(UsageError):
    code = FaultCode.OPTION_VALUE_REQUIRED


class InvalidOptionValueError(UsageError):
    code = FaultCode.INVALID_OPTION_VALUE


class ConfigurationError(UsageError):
    code = FaultCode.CONFIGURATION


class HelpRequested(CommandException):
    code = FaultCode.HELP_REQUESTED


class ExitCode(CommandException):
    code = FaultCode.EXIT_REQUESTED

    def __init__(self, status=1, /, **options):
        if not isinstance(status, int) or isinstance(status, bool):
            raise TypeError("exit code must be an integer")
        super().__init__(f"exit code {status}", **options)
        self.status = status

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        overrides.pop("message", None)
        return type(self)(self.status, **{**self.options, **overrides})


def replace(fault, /, **overrides):
    """
    return a copy of fault with its message or options overridden.

    contract
    - fault must provide a __replace__ method (see CommandException).
    - "message" replaces the message; any other keyword is merged into the options.
    """
    if not hasattr(fault, "__replace__") or not callable(fault.__replace__):
        raise TypeError("replace() argument must have a __replace__ method")
    return fault.__replace__(**overrides)


def exit_code(error, /, console=console):
    """
    map the outcome of an execution to a process exit status.

    contract
    - None: 0 (success).
    - ExitCode: its status, nothing is printed.
    - UsageError: 2; the error block has already been rendered by the dispatcher.
    - anything else: 1, after printing "ERROR: <error>" on the console.
    """
    if error is None:
        return 0
    if isinstance(error, ExitCode):
        return error.status
    if isinstance(error, UsageError):
        return 2
    if isinstance(error, CommandException):
        console.print(error)
    else:
        console.print(Text(f"ERROR: {error}"))
    return 1


__all__ = (
    "FaultCode",
    "CommandException",
    "UsageError",
    "UnknownCommandError",
    "UnknownTopicError",
    "MissingCommandError",
    "MalformedOptionError",
    "UnknownOptionError",
    "OptionValueRequiredError",
    "InvalidOptionValueError",
    "ConfigurationError",
    "HelpRequested",
    "ExitCode",
    "replace",
    "exit_code",
)
