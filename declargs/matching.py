"""
Declargs token matcher.

match() walks the argument vector left to right, resolves each token against
the schema and captures the declared number of trailing value tokens.

Rules
- "--help"/"-h" (when the schema's helper is on) stop the scan at once with
  Status.HELP; later tokens are never looked at.
- a token selects an argument by its long form ("--name", '_' spelled '-') or
  by its exact short alias.
- a selected argument consumes exactly `arity` following tokens; running out of
  tokens is terminal (Status.ERROR with an InsufficientValuesError).
- an unrecognized token ends the scan without error; the returned index points
  at it and the caller decides what leftovers mean.
"""
import logging
from enum import IntEnum
from typing import NamedTuple, Any

from .arguments import Schema
from .faults import FaultCode, InsufficientValuesError, getdoc
from .records import State
from .utils import Unset, ordinal

logger = logging.getLogger(__name__)


class Status(IntEnum):
    """
    outcome of a matching or materialization pass.
    """
    OK = 0
    ERROR = 1
    HELP = 2


class Result(NamedTuple):
    """
    status of a pass, the first unconsumed token index, the state it worked on,
    and the fault that stopped it (None unless status is ERROR).
    """
    status: Status
    index: int
    state: State
    fault: Any = None

    def __bool__(self):
        return self.status is Status.OK


def match(schema, tokens, /, index=0, state=Unset):
    """
    match raw tokens against a schema.

    parameters
    - schema: Schema
      the descriptors to match against.
    - tokens: Sequence[str]
      the argument vector without the program name.
    - index: int
      position of the first token to examine (negative values clamp to 0).
    - state: Unset | State
      records to fill; a fresh State is created when omitted.

    returns
    - Result(status, index, state, fault)
      • OK: scan ended at the end of tokens or at the first unrecognized token.
      • HELP: index points at the help token.
      • ERROR: index points at the flag whose values ran out.

    notes
    - a repeated argument overwrites the raw values of its earlier occurrence.
    """
    if not isinstance(schema, Schema):
        raise TypeError("match() argument must be a schema")
    if state is Unset:
        state = State(schema)
    elif state.schema is not schema:
        raise ValueError("match() state was built for another schema")

    tokens = tuple(tokens)
    index = max(index, 0)

    while index < len(tokens):
        token = tokens[index]

        if schema.ishelp(token):
            logger.debug("help requested at %d", index)
            state.index = index
            return Result(Status.HELP, index, state)

        try:
            argument = schema.switches[token]
        except KeyError:
            logger.debug("unrecognized token %r at %d ends matching", token, index)
            break

        record = state[argument.id]
        record.present = True

        if index + argument.arity >= len(tokens):
            record.values = ()
            state.index = index
            available = len(tokens) - index - 1
            return Result(Status.ERROR, index, state, InsufficientValuesError(
                "argument %r at %s position needs %d value(s) but got %d" % (
                    token, ordinal(index + 1), argument.arity, available
                ),
                title="insufficient values",
                code=FaultCode.INSUFFICIENT_VALUES,
                hint="pass %d value(s) after %s" % (argument.arity, token),
                id=argument.id,
                index=index,
                token=token,
                argument=argument,
                docs=getdoc(FaultCode.INSUFFICIENT_VALUES),
            ))

        record.values = tokens[index + 1:index + 1 + argument.arity]
        logger.debug("matched %r at %d with %r", argument.id, index, record.values)
        index += 1 + argument.arity

    state.index = index
    return Result(Status.OK, index, state)


__all__ = (
    "Status",
    "Result",
    "match",
)
