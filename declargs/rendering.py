"""
Declargs help renderer.

Layout
- optional schema preamble (Schema.descr), wrapped to the full terminal width.
- one entry per argument, each preceded by a blank line:

    --name, -s   help text wrapped to the remaining columns, continuation
                 lines aligned under the help column

- the header column is as wide as the widest "--name[, -s]" header, plus one
  separating space.
- lines that exactly fill the available width get no newline of their own
  (the terminal wraps them); shorter lines end with one.

Width
- terminal_width() reads the COLUMNS hint: missing → 80, zero/negative/garbage
  → unbounded (None). Unbounded help is only broken at explicit newlines.

Styling
- output goes through a rich Console; header names are colored from a palette
  that __main__.__styles__ may override. With colors off the text is identical.
"""
import os
import re
import sys
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .arguments import Schema
from .utils import Unset, nullify
from .wrapping import nextline

DEFAULT_WIDTH = 80
ENCODING = "utf-8"


def terminal_width(environ=Unset, /, variable="COLUMNS"):
    """
    return the terminal width from the environment hint, or None when unbounded.

    the hint is parsed like C's atoi: leading blanks, an optional sign, digits;
    anything else parses as zero.
    """
    environ = nullify(environ, os.environ)
    try:
        hint = environ[variable]
    except KeyError:
        return DEFAULT_WIDTH
    match = re.match(r"\s*([+-]?\d+)", hint)
    width = int(match[1]) if match else 0
    return width if width > 0 else None


def header(argument, /):
    """
    return the "--name" or "--name, -s" header of an argument.
    """
    if argument.short is Unset:
        return argument.long
    return "%s, %s" % (argument.long, argument.short)


def header_width(schema, /):
    return max((len(header(argument)) for argument in schema), default=0)


def _paragraph(output, text, indent, available, /):
    """
    append `text` wrapped to `available` columns, continuation lines indented.
    """
    data = text.encode(ENCODING)
    offset = 0
    while offset < len(data):
        line = nextline(data[offset:], available, ENCODING)
        output.append(data[offset:offset + line.size].decode(ENCODING, "replace"))
        if available is None or line.columns < available:
            output.append("\n")
        offset += line.offset
        if offset < len(data) and indent:
            output.append(" " * indent)


def render(schema, /, width=Unset, *, console=Unset, colorful=True):
    """
    print the help of a schema.

    parameters
    - schema: Schema
    - width: Unset | int | None
      terminal width; Unset reads terminal_width(), None means unbounded.
    - console: Unset | rich.console.Console
      destination; defaults to a stdout console.
    - colorful: bool
      style the argument names.
    """
    if not isinstance(schema, Schema):
        raise TypeError("render() argument must be a schema")

    width = terminal_width() if width is Unset else width
    if width is not None and width < 1:
        width = None
    console = nullify(console, Console(highlight=False))

    styles = defaultdict(str, {
        "preamble": "italic #A3A3A3",  # neutral gray
        "long-name": "bold #00E6FF",  # cyan long forms
        "short-name": "bold #22C55E",  # green short aliases
        "argument-help": "",
    } | getattr(sys.modules["__main__"], "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    output = Text(end="")

    if schema.descr:
        preamble = Text(end="")
        _paragraph(preamble, schema.descr, 0, width)
        preamble.stylize(styler("preamble"))
        output.append_text(preamble)

    column = header_width(schema)
    available = None if width is None or width - column - 1 < 1 else width - column - 1

    for argument in schema:
        output.append("\n")
        output.append(argument.long, styler("long-name"))
        if argument.short is not Unset:
            output.append(", ").append(argument.short, styler("short-name"))
        if not argument.help:
            output.append("\n")
            continue
        output.append(" " * (column - len(header(argument)) + 1))

        body = Text(end="")
        _paragraph(body, argument.help, column + 1, available)
        body.stylize(styler("argument-help"))
        output.append_text(body)

    console.print(output, end="", soft_wrap=True, highlight=False)


__all__ = (
    "DEFAULT_WIDTH",
    "terminal_width",
    "header",
    "header_width",
    "render",
)
