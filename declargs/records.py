"""
Declargs parse records and the lifecycle tracker.

What this module provides
- Record: the mutable, per-argument slot filled during one parse
  (present → values → initialized/value).
- State: the set of records for one schema plus the lifecycle tracker that
  guarantees every initialized value is released exactly once.

Lifecycle
- records start zeroed; matching sets present/values, materialization sets
  initialized/value, release() tears them down.
- release() only acts after a materialization attempt and only once per attempt;
  records that never reached initialized are skipped.
- State is a context manager, so the release pass can wrap the whole
  parse-and-run sequence:

    with State(schema) as state:
        match(schema, tokens, state=state)
        materialize(state)
        ...
    # every initialized value has been released here
"""
import logging
from types import MappingProxyType

from .arguments import Schema
from .faults import FaultCode, ReleaseError
from .utils import Unset

logger = logging.getLogger(__name__)


class Record:
    """
    per-argument parse slot.

    fields
    - present: the argument's token was found.
    - values: raw value tokens captured after the flag (len == arity when present).
    - initialized: a typed value was produced (by the reader or the default).
    - value: the materialized value, owned by the record until released.
    """
    __slots__ = ("present", "values", "initialized", "value")

    def __init__(self):
        self.clear()

    def clear(self):
        self.present = False
        self.values = ()
        self.initialized = False
        self.value = Unset

    def __repr__(self):
        return "record(present=%r, values=%r, initialized=%r, value=%r)" % (
            self.present, self.values, self.initialized, self.value
        )


class State:
    """
    records of one parse invocation, keyed by argument id.

    attributes
    - schema: the Schema this state was built for.
    - index: position of the first unconsumed token after the last match.
    - attempted: a materialization pass has run and its values are not yet released.
    """

    def __init__(self, schema, /):
        if not isinstance(schema, Schema):
            raise TypeError("State() argument must be a schema")
        self.schema = schema
        self.index = 0
        self.attempted = False
        self._records = {argument.id: Record() for argument in schema}

    def __getitem__(self, id, /):
        return self._records[id]

    def __iter__(self):
        return iter(self._records.items())

    def present(self, id, /):
        return self._records[id].present

    def value(self, id, /):
        """
        return the materialized value of an argument.

        raises LookupError when the argument has no initialized value.
        """
        if not (record := self._records[id]).initialized:
            raise LookupError("argument %r has no value" % id)
        return record.value

    def values(self):
        """
        read-only mapping of id → value for every initialized record.
        """
        return MappingProxyType({
            id: record.value for id, record in self._records.items() if record.initialized
        })

    def release(self):
        """
        run the releaser of every initialized record, in declaration order.

        guarantees
        - a no-op unless a materialization attempt is pending release, so calling
          it more than once never releases a value twice.
        - a raising releaser does not prevent the others from running; the
          failures are raised together as a ReleaseError once all are done.
        """
        if not self.attempted:
            return
        self.attempted = False

        failures = []
        for argument in self.schema:
            record = self._records[argument.id]
            if not record.initialized:
                continue
            value, record.value, record.initialized = record.value, Unset, False
            if argument.releaser is Unset:
                continue
            logger.debug("releasing %r", argument.id)
            try:
                argument.releaser(value)
            except Exception as exception:
                failures.append(exception)

        if failures:
            raise ReleaseError(failures, code=FaultCode.RELEASE_FAILED)

    def reset(self):
        """
        make the state reusable for another parse.

        pending values are released first, then every record is zeroed.
        """
        try:
            self.release()
        finally:
            for record in self._records.values():
                record.clear()
            self.index = 0
            self.attempted = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.release()

    def __repr__(self):
        return "state(%s)" % ", ".join("%s=%r" % item for item in self._records.items())

    def __rich_repr__(self):
        yield from self._records.items()


__all__ = (
    "Record",
    "State",
)
