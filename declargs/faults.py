"""
Declargs faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ArgumentsException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, actionable way.
- ReleaseError: exception group bundling releaser failures.
- trigger(): central entry point to surface any fault (raise or render).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- InsufficientValuesError: a matched argument ran out of value tokens.
- InvalidValueError: a reader rejected the captured raw values.
- MissingRequiredError: a required argument was absent after matching.
- Help requests are not faults; they are reported through the parse status.

Integration
- The engine never raises these itself: matching and materialization return
  them inside their result, and the caller decides what to do with them.
- trigger(fault, shell=False) raises; trigger(fault, shell=True) renders to
  stderr via rich and returns.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - matching (1111x)
      • INSUFFICIENT_VALUES
    - materialization (1112x)
      • INVALID_VALUE, MISSING_REQUIRED
    - lifecycle (1113x)
      • RELEASE_FAILED

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- matching errors (11xxx) ---
    INSUFFICIENT_VALUES = 11111

    # --- materialization errors (11xxx) ---
    INVALID_VALUE       = 11121
    MISSING_REQUIRED    = 11122

    # --- lifecycle errors (11xxx) ---
    RELEASE_FAILED      = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(sys.modules["__main__"], "__codes__", {}).get(self, self.value))


def _palette(defaults):
    return defaultdict(str, defaults | getattr(sys.modules["__main__"], "__styles__", {}))


class ArgumentsException(Exception):
    """
    base class of all argument faults.

    attributes
    - message: str | Unset
      one lowercased sentence describing the problem.
    - options: MappingProxyType
      context for renderers and callers (code, title, hint, id, index, argument,
      and the runtime switches shell/colorful/fancy).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        styles = _palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })
        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = getattr(sys.modules["__main__"], "__prog__", self.options.get("prog", "declargs"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else code, "code"),
            " | ",
            text(str(self.options.get("title", "error")).title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        hint = Text("")
        if self.options.get("hint"):
            hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options["hint"], "hint"))

        if self.options.get("fancy", False):
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class InsufficientValuesError(ArgumentsException): ...
class InvalidValueError(ArgumentsException): ...
class MissingRequiredError(ArgumentsException): ...


class ReleaseError(ExceptionGroup):
    """
    one or more releasers raised while the parse state was torn down.

    every initialized value is still released before this group is raised.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "release failed", exceptions)

    def __init__(self, exceptions, **options):
        super().__init__("release failed", tuple(exceptions))
        self.options = MappingProxyType(options)

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArgumentsException).
    - options are merged into a copy of the fault via copy.replace() before triggering.
    - shell=True renders via the rich console; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when not found.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(sys.modules["__main__"], "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "ArgumentsException",
    "InsufficientValuesError",
    "InvalidValueError",
    "MissingRequiredError",
    "ReleaseError",
    "trigger",
    "getdoc",
)
