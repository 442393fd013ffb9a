"""
Declargs program layer: run a callback with arguments parsed from a schema.

What this module provides
- Program: binds a Schema to a callback (plus optional setup/teardown hooks)
  and maps parse outcomes to process exit codes.
- program(...): create a Program or a decorator that produces one.
- invoke(program, prompt): convenience runner for Programs.

Run sequence
1. match the tokens; "--help" prints the help and exits with 0.
2. an argument that ran out of values → `invalid` exit code (110).
3. a required argument that is missing → `missing` exit code (120).
4. setup(); a non-zero result ends the run with that code.
5. materialize the values; a rejected value → `invalid` exit code.
6. callback(*leftover_tokens, **values); its int result is the exit code.
   arguments that ended without a value (no default) are left out of values.
7. always: release every materialized value, then teardown() if setup succeeded.

Quick start
    from declargs import Argument, Schema, program, invoke

    @program(Schema(
        Argument("count", "-c", 1, required=True, reader=int, help="how many"),
        Argument("verbose", "-v", help="talk more"),
    ))
    def tool(*rest, count, verbose):
        print(count, verbose, rest)

    if __name__ == "__main__":
        raise SystemExit(invoke(tool))

Faults
- shell=True (default) renders faults to stderr through rich and returns the
  exit code; shell=False raises them, after the values have been released.
"""
import logging
import shlex
import sys
from collections.abc import Iterable

from .arguments import Schema
from .faults import trigger
from .matching import Status, match
from .materializing import materialize, verify
from .records import State
from .rendering import render
from .utils import Unset, nullify, rename

logger = logging.getLogger(__name__)

PARAMETER_INVALID = 110
"""
exit code when an argument value is invalid or its values ran out.
"""

PARAMETER_MISSING = 120
"""
exit code when a required argument is missing.
"""


class Program:
    """
    Executable binding of a Schema to a callback.

    Attributes
    - schema, callback, setup, teardown: as given.
    - name: program name shown in fault headers (defaults to the callback name).
    - shell/colorful/fancy: fault and help rendering switches.
    - invalid/missing: exit codes for the two fault families.
    """

    def __init__(
            self,
            schema,
            callback,
            /,
            *,
            setup=Unset,
            teardown=Unset,
            name=Unset,
            shell=True,
            colorful=True,
            fancy=False,
            invalid=PARAMETER_INVALID,
            missing=PARAMETER_MISSING,
    ):
        if not isinstance(schema, Schema):
            raise TypeError("Program() first argument must be a schema")
        if not callable(callback):
            raise TypeError("Program() second argument must be callable")
        for hook, label in ((setup, "setup"), (teardown, "teardown")):
            if hook is not Unset and not callable(hook):
                raise TypeError(f"program '{label}' must be callable")
        if not isinstance(name, str | Unset):
            raise TypeError("program 'name' must be a string")
        for code, label in ((invalid, "invalid"), (missing, "missing")):
            if not isinstance(code, int) or isinstance(code, bool):
                raise TypeError(f"program '{label}' must be an integer exit code")

        self.schema = schema
        self.callback = callback
        self.setup = setup
        self.teardown = teardown
        self.name = nullify(name, getattr(callback, "__name__", "program"))
        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)
        self.invalid = invalid
        self.missing = missing

    def __repr__(self):
        return f"program(name={self.name!r}, schema={self.schema!r})"

    def trigger(self, fault, /):
        trigger(fault, prog=self.name, shell=self.shell, colorful=self.colorful, fancy=self.fancy)

    def help(self, *, console=Unset):
        render(self.schema, console=console, colorful=self.colorful)

    def run(self, tokens, /, *, console=Unset):
        """
        parse `tokens` (argv without the program name) and run the callback.

        returns the exit code.
        """
        tokens = tuple(tokens)
        state = State(self.schema)

        result = match(self.schema, tokens, state=state)
        if result.status is Status.HELP:
            self.help(console=console)
            return 0
        if result.status is Status.ERROR:
            self.trigger(result.fault)
            return self.invalid

        if not (result := verify(state)):
            self.trigger(result.fault)
            return self.missing

        if self.setup is not Unset and (code := self.setup()):
            logger.debug("setup of %r ended the run with %r", self.name, code)
            return code

        try:
            with state:
                if not (result := materialize(state)):
                    self.trigger(result.fault)
                    return self.invalid
                code = self.callback(*tokens[result.index:], **state.values())
                return 0 if code is None else code
        finally:
            if self.teardown is not Unset:
                self.teardown()

    def __invoke__(self, prompt=Unset):
        """
        run with a token stream.

        prompt
        - Unset: read tokens from sys.argv[1:].
        - str: shell-like string; split via shlex.split.
        - Iterable[str]: pre-tokenized sequence.
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
        return self.run(tokens)


def program(schema, callback=Unset, /, **options):
    """
    Create a Program or return a decorator to build it later.

    - program(schema, func, ...) → Program
    - @program(schema, ...) def func(...): ... → Program
    """
    @rename("program")
    def wrapper(callback, /):
        return Program(schema, callback, **options)

    return wrapper(callback) if callback is not Unset else wrapper


def invoke(object, prompt=Unset, /):
    """
    run a Program and return its exit code.

    raises TypeError when `object` does not implement __invoke__.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)
    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "PARAMETER_INVALID",
    "PARAMETER_MISSING",
    "Program",
    "program",
    "invoke",
)
