"""
cmdtree options: per-level option declarations and the flag-style token parser.

What this module provides
- Option: a named, value-bearing option ("-name value", "-name=value").
- Flag: a boolean option ("-name", "-name=false").
- OptionSet: an ordered collection of options scoped to one command level,
  with parse(tokens) returning fresh values and the unparsed remainder.

Token grammar
- Parsing stops at the first token that is not an option: a token not
  starting with "-", or the lone "-".
- "--" ends option parsing and is consumed.
- One or two leading dashes are accepted: "-name" and "--name" are the same.
- Non-boolean options take an inline value ("-name=value") or consume the
  next token ("-name value").
- Boolean options only take inline values; accepted spellings are
  1, t, T, TRUE, true, True, 0, f, F, FALSE, false, False.
- Repeated options are allowed; the last occurrence wins.

Faults (raised without a path; the dispatcher binds them to the level)
- MalformedOptionError: "bad flag syntax: ---x"
- UnknownOptionError: "flag provided but not defined: -x"
- OptionValueRequiredError: "flag needs an argument: -x"
- InvalidOptionValueError: 'invalid value "v" for flag -x: ...' or
  'invalid boolean value "v" for -x: parse error'
- HelpRequested: "-h"/"-help" when no option of that name is declared.
"""
import builtins
import re
from types import MappingProxyType

from .faults import *
from .utils import *

_TRUTHS = ("1", "t", "T", "TRUE", "true", "True")
_FALSITIES = ("0", "f", "F", "FALSE", "false", "False")


class Option(metaclass=ModelType):
    """
    Named, value-bearing option declaration.

    Parameters
    - name: str
      Option name without dashes ("extra", "global1"). It must start with a
      letter or digit and cannot contain "=" or whitespace.
    - default: Any
      Value reported when the option is absent; rendered in help as
      " -name=<default>" (booleans as true/false, None as nothing).
    - descr: str | None
      Help description, wrapped under the option line.
    - type: Callable[[str], Any]
      Converter applied to the token; defaults to the type of the default
      (str when the default is None). bool selects flag semantics.
    - choices: Iterable
      Allowed converted values; empty means unrestricted.
    """

    __introspectable__ = (
        "name",
        "default",
        "descr",
        "type",
        "choices",
    )

    def __init__(self, name, /, default=None, descr=None, *, type=Unset, choices=()):
        cls = builtins.type(self)
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} name must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} name cannot be empty")
        elif not re.fullmatch(r"[^\W_][\w.-]*", name):
            raise ValueError(f"{cls.__typename__} name must be a valid flag name, got {name!r}")

        if not isinstance(descr, str | None):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")

        if type is Unset:
            type = builtins.type(default) if default is not None else str
        if not callable(type):
            raise TypeError(f"{cls.__typename__} 'type' must be callable")

        sanitized = []
        for choice in choices:
            if choice in sanitized:
                raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
            sanitized.append(choice)

        self._name = name
        self._default = default
        self._descr = descr.strip() if descr else ""
        self._type = type
        self._choices = tuple(sanitized)

    @property
    def boolean(self):
        """
        Whether the option follows flag semantics (no separate value token).
        """
        return self._type is bool

    def render(self):
        """
        Render the default value the way help output shows it.
        """
        if isinstance(self._default, bool):
            return "true" if self._default else "false"
        return "" if self._default is None else str(self._default)

    def convert(self, value, /):
        """
        Convert a raw token into the option value.

        Raises
        - InvalidOptionValueError: when the token cannot be converted or is
          not one of the declared choices.
        """
        if self.boolean:
            if value in _TRUTHS:
                return True
            if value in _FALSITIES:
                return False
            raise InvalidOptionValueError(f"invalid boolean value {quote(value)} for -{self._name}: parse error")

        try:
            object = self._type(value)
        except (TypeError, ValueError) as error:
            raise InvalidOptionValueError(f"invalid value {quote(value)} for flag -{self._name}: {error}") from None

        if self._choices and object not in self._choices:
            raise InvalidOptionValueError(
                f"invalid value {quote(value)} for flag -{self._name}: must be one of "
                f"{', '.join(quote(str(choice)) for choice in self._choices)}"
            )
        return object


class Flag(Option):
    """
    Boolean option declaration ("-name" sets it, "-name=false" clears it).
    """

    def __init__(self, name, /, default=False, descr=None):
        super().__init__(name, bool(default), descr, type=bool)


class OptionSet:
    """
    Ordered set of options declared at one command level.

    Behavior
    - Iteration yields options in declaration order; sorted() orders them by
      name, as help output does.
    - Truthiness reflects whether any option is declared ("[flags]" marker).
    - parse() never mutates the set: each call returns fresh values.
    """

    def __init__(self, *options):
        self._options = {}
        for option in options:
            if not isinstance(option, Option):
                raise TypeError(f"option-set items must be options, got {type(option).__name__}")
            if option.name in self._options:
                raise ValueError(f"option-set cannot declare {option.name!r} twice")
            self._options[option.name] = option

    def __iter__(self):
        return iter(self._options.values())

    def __len__(self):
        return len(self._options)

    def __contains__(self, name):
        return name in self._options

    def __getitem__(self, name):
        return self._options[name]

    def __repr__(self):
        return f"option-set({', '.join(map(repr, self._options))})"

    def __rich_repr__(self):
        yield from self._options.values()

    def sorted(self):
        """
        Options ordered by name.
        """
        return sorted(self._options.values(), key=lambda option: option.name)

    def defaults(self):
        """
        Fresh mapping of option names to their default values.
        """
        return {name: option.default for name, option in self._options.items()}

    def merge(self, other, /):
        """
        Return a new set holding the options of both sets.

        Raises
        - ValueError: when both sets declare the same name.
        """
        if not isinstance(other, OptionSet):
            raise TypeError("merge() argument must be an option-set")
        return OptionSet(*self, *other)

    def parse(self, tokens, /):
        """
        Parse the leading option tokens.

        Parameters
        - tokens: Iterable[str]

        Returns
        - tuple[MappingProxyType, list[str]]: every declared option's value
          (defaults for absent ones) and the tokens left after the options.

        Raises
        - UsageError subclasses described in the module docstring, and
          HelpRequested for an undeclared -h/-help.
        """
        values = self.defaults()
        rest = list(tokens)

        while rest:
            token = rest[0]
            if len(token) < 2 or token[0] != "-":
                break

            dashes = 1
            if token[1] == "-":
                if len(token) == 2:
                    del rest[0]  # "--" terminates option parsing
                    break
                dashes = 2

            name = token[dashes:]
            if not name or name[0] in "-=":
                raise MalformedOptionError(f"bad flag syntax: {token}")
            del rest[0]

            value = Unset
            if "=" in name:
                name, value = name.split("=", 1)

            if (option := self._options.get(name)) is None:
                if name in ("h", "help"):
                    raise HelpRequested(f"help requested: -{name}")
                raise UnknownOptionError(f"flag provided but not defined: -{name}")

            if option.boolean:
                value = coalesce(value, "true")
            elif value is Unset:
                if not rest:
                    raise OptionValueRequiredError(f"flag needs an argument: -{name}")
                value = rest.pop(0)

            values[name] = option.convert(value)

        return MappingProxyType(values), rest


__all__ = (
    "Option",
    "Flag",
    "OptionSet",
)
