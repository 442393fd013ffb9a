"""
Declargs value materializer.

materialize() turns the raw values captured by match() into typed values:
present arguments go through their reader, absent ones through their default
provider. verify() is the required pass: it runs once every presence flag is
final, so required predicates may depend on other arguments.

Both stop at the first failure and report it inside the returned Result.
Values initialized before a failure stay initialized; State.release() still
releases them.
"""
import logging

from .faults import FaultCode, InvalidValueError, MissingRequiredError, getdoc
from .matching import Status, Result
from .records import State
from .utils import Unset

logger = logging.getLogger(__name__)


def verify(state, /):
    """
    check every required argument for presence.

    returns
    - Result with Status.OK, or Status.ERROR carrying a MissingRequiredError for
      the first (in declaration order) required argument that was not present.

    notes
    - presence is what counts: a default value never satisfies a required argument.
    """
    if not isinstance(state, State):
        raise TypeError("verify() argument must be a parse state")

    for argument in state.schema:
        if argument.requires(state) and not state.present(argument.id):
            logger.debug("required argument %r is missing", argument.id)
            return Result(Status.ERROR, state.index, state, MissingRequiredError(
                "required argument %r is missing" % argument.long,
                title="missing argument",
                code=FaultCode.MISSING_REQUIRED,
                hint="pass %s on the command line" % argument.long,
                id=argument.id,
                argument=argument,
                docs=getdoc(FaultCode.MISSING_REQUIRED),
            ))

    return Result(Status.OK, state.index, state)


def materialize(state, /):
    """
    produce typed values for every argument of a matched state.

    phases
    - value pass (declaration order)
      • present: value = reader(*raw_values); ValueError/TypeError from the
        reader stops the pass with an InvalidValueError (the reader's
        exception is chained as its cause).
      • absent: value = default(); Unset (or no provider at all) leaves the
        record uninitialized.
      • a produced value marks the record initialized.
    - required pass: see verify().

    errors
    - RuntimeError when the state was already materialized and not reset.
    """
    if not isinstance(state, State):
        raise TypeError("materialize() argument must be a parse state")
    if state.attempted:
        raise RuntimeError("state was already materialized; reset() it before reuse")

    state.attempted = True

    for argument in state.schema:
        record = state[argument.id]

        if record.present:
            try:
                value = argument.reader(*record.values)
            except (ValueError, TypeError) as exception:
                logger.debug("reader of %r rejected %r", argument.id, record.values)
                fault = InvalidValueError(
                    "invalid value %s for argument %r" % (" ".join(map(repr, record.values)) or "(none)", argument.long),
                    title="invalid value",
                    code=FaultCode.INVALID_VALUE,
                    hint=str(exception) or "check the value passed to %s" % argument.long,
                    id=argument.id,
                    values=record.values,
                    argument=argument,
                    docs=getdoc(FaultCode.INVALID_VALUE),
                )
                fault.__cause__ = exception
                return Result(Status.ERROR, state.index, state, fault)
        elif argument.default is Unset or (value := argument.default()) is Unset:
            continue

        record.value = value
        record.initialized = True

    return verify(state)


__all__ = (
    "verify",
    "materialize",
)
