r"""
Declargs argument descriptors and schemas.

Overview
- Argument: one static, immutable descriptor per accepted command-line argument.
  • name: canonical long name, matched as "--name" with '_' spelled '-'.
  • short: optional exact-match alias (e.g., "-c").
  • arity: number of whitespace-separated tokens consumed after the flag.
  • required: bool or predicate over the parse state, evaluated after matching.
  • help: free text (explicit newlines are preserved by the help renderer).
  • default / reader / releaser: small callables that materialize and release values.

- Schema: the ordered, validated list of descriptors a parse runs against.

Example
    >>> schema = Schema(
    ...     Argument("count", "-c", 1, required=True, reader=int, help="how many"),
    ...     Argument("verbose", "-v", help="talk more"),
    ... )
    >>> schema.switches["--count"] is schema["count"]
    True

Validation highlights
- Names must match r"[^\W\d]\w*" (identifier-shaped, unicode letters allowed).
- Short aliases are compared exactly; they must be non-empty and whitespace-free.
- Ids, long forms and short aliases are unique within a schema, and no two
  descriptors can be selected by the same token.
- When the schema recognizes help ("--help"/"-h"), no argument may claim those tokens.

Public API
- Classes: Argument, Schema
- Constants: HELP
"""
import functools
import operator
import re
from types import MappingProxyType

from .utils import *

HELP = ("--help", "-h")
"""
tokens recognized as the help trigger when a schema enables its helper.
"""


def _false():
    return False


def _true():
    return True


def _single(value, /):
    return value


def _many(*values):
    return values


class ArgumentType(type):
    """
    Metaclass that turns descriptor classes into introspectable, read-only specs.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      backed by guarded '-<name>' storage (see StorageGuard/view).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in error messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in nullify(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate 'name', 'short' and 'id'.

    - name: required identifier-shaped string; the long form is derived from it.
    - short: Unset or a non-empty, whitespace-free string compared exactly.
    - id: Unset (defaults to name) or a non-empty string.

    Mutates the metadata dict in place.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not re.fullmatch(r"[^\W\d]\w*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be an identifier-like name (unicodes are allowed)")

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and not re.fullmatch(r"\S+", short):
        raise ValueError(f"{cls.__typename__} 'short' must be a non-empty token without whitespace")

    if not isinstance(id := metadata["id"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'id' must be a string")
    elif isinstance(id, str) and not id.strip():
        raise ValueError(f"{cls.__typename__} 'id' cannot be empty")
    metadata["id"] = nullify(id, name)


def _sanitize_arity(cls, metadata, /):
    # bool is an int subclass, but arity=True is always a mistake
    if not isinstance(arity := metadata["arity"], int) or isinstance(arity, bool):
        raise TypeError(f"{cls.__typename__} 'arity' must be an integer")
    if arity < 0:
        raise ValueError(f"{cls.__typename__} 'arity' cannot be negative")


def _sanitize_hooks(cls, metadata, /):
    """
    Internal: validate and complete the behavior hooks.

    Defaults
    - required: plain booleans are kept; any other value must be a predicate.
    - default: arity-0 arguments (switches) default to False; the rest keep Unset,
      meaning "no default".
    - reader: arity 0 reads True, arity 1 passes the raw string through, larger
      arities produce the tuple of raw strings.
    - releaser: Unset means nothing to release.
    """
    if not isinstance(required := metadata["required"], bool) and not callable(required):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean or a predicate")

    if not isinstance(metadata["help"], str):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")

    arity = metadata["arity"]

    if (default := metadata["default"]) is Unset:
        metadata["default"] = _false if arity == 0 else Unset
    elif not callable(default):
        raise TypeError(f"{cls.__typename__} 'default' must be a callable provider")

    if (reader := metadata["reader"]) is Unset:
        metadata["reader"] = _true if arity == 0 else _single if arity == 1 else _many
    elif not callable(reader):
        raise TypeError(f"{cls.__typename__} 'reader' must be callable")

    if (releaser := metadata["releaser"]) is not Unset and not callable(releaser):
        raise TypeError(f"{cls.__typename__} 'releaser' must be callable")


class Argument[_T](StorageGuard, metaclass=ArgumentType):
    """
    Static declaration of one accepted argument.

    Argument instances are created once, at startup, and never change. The
    parse engine reads them; per-parse mutable data lives in records (see
    declargs.records), never on the descriptor.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - long: the "--name" token form (underscores spelled as dashes).
    """

    __introspectable__ = (
        "id",
        "name",
        "short",
        "arity",
        "required",
        "help",
        "default",
        "reader",
        "releaser",
    )
    __displayable__ = (
        "id",
        "name",
        "short",
        "arity",
        "required",
    )

    def __new__(
            cls,
            name,
            short=Unset,
            /,
            arity=0,
            *,
            id=Unset,
            required=False,
            help="",
            default=Unset,
            reader=Unset,
            releaser=Unset,
    ):
        """
        Construct an Argument descriptor.

        Parameters
        - name: str
          Canonical name; the long token is "--" + name with '_' replaced by '-'.
        - short: Unset | str
          Exact alternate token such as "-c".
        - arity: int
          Number of value tokens consumed after the flag (>= 0).
        - id: Unset | str
          Stable identifier for lookups and diagnostics; defaults to name.
        - required: bool | Callable[[State], bool]
          Evaluated after all tokens are matched, so it may consult the presence
          of other arguments.
        - help: str
          Help text; may contain explicit line breaks.
        - default: Unset | Callable[[], Any]
          Provider invoked when the argument is absent. Returning Unset means
          "no default".
        - reader: Unset | Callable[..., Any]
          Called with the raw value tokens; raising ValueError or TypeError marks
          the input as invalid.
        - releaser: Unset | Callable[[Any], None]
          Releases resources held by a materialized value.
        """
        metadata = {
            "id": id,
            "name": name,
            "short": short,
            "arity": arity,
            "required": required,
            "help": help,
            "default": default,
            "reader": reader,
            "releaser": releaser,
        }
        _sanitize_names(cls, metadata)
        _sanitize_arity(cls, metadata)
        _sanitize_hooks(cls, metadata)

        with super().__new__(cls) as self:
            for name, object in metadata.items():
                setattr(self, "-" + name, object)

        return self

    @property
    def long(self):
        return "--" + self.name.replace("_", "-")

    def matches(self, token, /):
        """
        tell whether a raw token names this argument.

        the long form compares with underscores in the name equated to dashes in
        the token; the short alias compares exactly (no normalization).
        """
        return token == self.long or (self.short is not Unset and token == self.short)

    def requires(self, state, /):
        """
        evaluate the required predicate against a parse state.
        """
        if isinstance(self.required, bool):
            return self.required
        return bool(self.required(state))


class Schema:
    """
    Ordered, validated collection of Argument descriptors.

    Invariants
    - ids are unique.
    - every token selects at most one descriptor: long forms and short aliases
      never collide, with each other or among themselves.
    - when helper is True, "--help" and "-h" are reserved for the help trigger.

    Access
    - iteration yields descriptors in declaration order.
    - schema[id] returns the descriptor with that id (KeyError otherwise).
    - schema.switches maps every accepted token to its descriptor.
    """

    def __init__(self, *arguments, helper=True, descr=Unset):
        """
        Parameters
        - *arguments: Argument
          Descriptors in declaration order.
        - helper: bool
          Recognize "--help"/"-h" as the help trigger.
        - descr: Unset | str
          Preamble printed before the argument entries in help output.
        """
        if not isinstance(helper, bool):
            raise TypeError("schema 'helper' must be a boolean")
        if not isinstance(descr, str | Unset):
            raise TypeError("schema 'descr' must be a string")
        elif isinstance(descr, str) and not descr.strip():
            raise ValueError("schema 'descr' cannot be empty")

        ids = {}
        switches = {}
        for argument in arguments:
            if not isinstance(argument, Argument):
                raise TypeError("schema arguments must be argument descriptors")
            if argument.id in ids:
                raise ValueError("schema ids cannot contain duplicates (%r)" % argument.id)
            ids[argument.id] = argument

            for token in filter(lambda x: x is not Unset, (argument.long, argument.short)):
                if token in switches:
                    raise ValueError("schema tokens cannot contain duplicates (%r)" % token)
                if helper and token in HELP:
                    raise ValueError("schema token %r is reserved for help" % token)
                switches[token] = argument

        self._arguments = tuple(arguments)
        self._ids = ids
        self._switches = switches
        self._helper = helper
        self._descr = descr

    @property
    def arguments(self):
        return self._arguments

    @property
    def switches(self):
        return MappingProxyType(self._switches)

    @property
    def helper(self):
        return self._helper

    @property
    def descr(self):
        return self._descr

    def ishelp(self, token, /):
        """
        tell whether a token triggers help for this schema.
        """
        return self._helper and token in HELP

    def __getitem__(self, id, /):
        return self._ids[id]

    def __contains__(self, id, /):
        return id in self._ids

    def __iter__(self):
        return iter(self._arguments)

    def __len__(self):
        return len(self._arguments)

    def __repr__(self):
        return f"schema({", ".join(argument.id for argument in self._arguments)})"

    def __rich_repr__(self):
        yield from self._arguments
        yield "helper", self._helper


__all__ = (
    "HELP",
    "Argument",
    "Schema",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
