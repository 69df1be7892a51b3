"""
cmdtree helpers shared by the tree model, the option layer and the renderers.

- Unset: the "argument not given" marker, so that None, 0 and "" stay usable
  as real values (a None default, an empty argv, a zero width).
- coalesce(): replace Unset by a fallback.
- rename(): give generated methods and properties a readable name in
  tracebacks and reprs.
- mirror(): read-only property over a private field; containers come back
  frozen (tuples, frozensets, mapping proxies), so a built tree and a running
  context cannot be changed through their public attributes.
- ModelType: metaclass giving commands, topics and options their type
  name, mirrored fields and reprs.
- quote(): how user tokens appear inside messages (unknown command "foo").

    >>> coalesce(Unset, 80)
    80
    >>> coalesce(None, 80) is None
    True
    >>> quote("foo")
    '"foo"'
"""
import functools
import re
from collections.abc import Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker; one instance per process, always falsey.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    object, or default when object is Unset.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator setting __name__ and __qualname__ of the decorated callable.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _freeze(object):
    # Nodes, option sets, sinks and callables are returned as they are.
    if isinstance(object, list):
        return tuple(object)
    if isinstance(object, Mapping) and not isinstance(object, MappingProxyType):
        return MappingProxyType(object)
    if isinstance(object, Set) and not isinstance(object, frozenset):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Read-only property returning the frozen value of self._<name>.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter, doc=f"Read-only {name.replace('_', ' ')}.")


class ModelType(type):
    """
    Metaclass of the declarative objects (commands, topics and options).

    - __typename__: class name in lower kebab case ("command", "option"), used
      to prefix construction errors.
    - A mirror() property for each name in __introspectable__.
    - __repr__ and __rich_repr__ listing __displayable__ (or, when unset,
      __introspectable__) as keyword fields.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        namespace = dict(namespace)
        namespace["__typename__"] = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "-", name).lower()
        for field in namespace.get("__introspectable__", ()):
            namespace[field] = mirror(field)
        namespace.setdefault("__repr__", _model_repr)
        namespace.setdefault("__rich_repr__", _model_rich_repr)
        return super().__new__(cls, name, bases, namespace, **options)


@rename("__rich_repr__")
def _model_rich_repr(self):
    cls = type(self)
    for field in coalesce(cls.__displayable__, cls.__introspectable__):
        yield field, getattr(self, field)


@rename("__repr__")
def _model_repr(self):
    return "%s(%s)" % (type(self).__typename__, ", ".join("%s=%r" % item for item in self.__rich_repr__()))


def quote(text, /):
    """
    Double-quote text for a message, escaping backslashes and double quotes;
    empty and blank tokens stay visible ("").
    """
    if not isinstance(text, str):
        raise TypeError("quote() argument must be a string")
    return '"%s"' % text.replace("\\", "\\\\").replace('"', '\\"')


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
    "ModelType",
    "quote",
)
