"""
Declargs line wrapping.

nextline() finds where the next printed line of a help text ends and where the
line after it starts. It works on encoded bytes, decoding one character at a
time, so columns are counted per character whatever its byte length.

Rules
- a newline ends the line; the next line starts right after it.
- lines break after the last whole word that fits in `maxcolumns` columns.
- a word wider than `maxcolumns` is cut at exactly `maxcolumns` columns and
  continues on the next line (no byte is skipped).
- spaces at the break are skipped, so no line starts with a space.
- bytes that do not decode are skipped one at a time and take no column.

Example
    >>> [line for line in lines(b"abc def ghijklmnop", 7)]
    ['abc def', 'ghijklm', 'nop']
"""
import codecs
import string
from typing import NamedTuple

MAXSEQUENCE = 4
"""
longest multibyte sequence tried before a byte is declared undecodable.
"""

WHITESPACE = frozenset(string.whitespace)
NEWLINE = ord("\n")
SPACE = ord(" ")


class Line(NamedTuple):
    """
    size: bytes to print from the current offset.
    offset: bytes to advance to reach the start of the next line.
    columns: characters in the printed part.
    """
    size: int
    offset: int
    columns: int


def _decode(data, index, decoder):
    """
    decode the character starting at data[index].

    returns (character, next index), or (None, index + 1) when the bytes at
    index are invalid or an incomplete sequence.
    """
    decoder.reset()
    for end in range(index + 1, min(len(data), index + MAXSEQUENCE) + 1):
        try:
            character = decoder.decode(data[end - 1:end])
        except UnicodeDecodeError:
            break
        if character:
            return character, end
    return None, index + 1


def nextline(data, maxcolumns, /, encoding="utf-8"):
    """
    locate the next line of `data`.

    parameters
    - data: bytes
      text starting at the first character of a line.
    - maxcolumns: int | None
      widest line allowed, in columns; None means no limit (only newlines break).
    - encoding: str
      codec used to decode characters.

    returns
    - Line(size, offset, columns)

    errors
    - ValueError if maxcolumns is lower than 1.
    """
    if maxcolumns is None:
        limit = len(data) + 1
    elif maxcolumns < 1:
        raise ValueError("nextline() maxcolumns must be positive")
    else:
        limit = maxcolumns

    decoder = codecs.getincrementaldecoder(encoding)()

    # candidate break (size/columns) and candidate start of the next line
    size = columns = offset = 0
    # hard cut position, used when whitespace at the line start leaves no break
    cut = cutcolumns = 0
    count = index = 0
    space = seen = False

    # one column beyond the limit is scanned to learn whether a word ends there
    while index < len(data) and count <= limit:
        if data[index] == NEWLINE:
            size, columns, offset = index, count, index + 1
            break

        cut, cutcolumns = index, count

        if not seen:
            # no word boundary yet: the line can be cut right here
            size, columns, offset = index, count, index

        character, next = _decode(data, index, decoder)
        if character is not None:
            count += 1
            if (blank := character in WHITESPACE) and not space:
                size, columns = index, count - 1
            elif not blank and space:
                offset = index
            seen |= blank
            space = blank
        index = next

        if index == len(data) and count <= limit:
            size, columns, offset = index, count, index

    if offset < size:
        offset = size
    elif not offset and data:
        size, columns, offset = cut, cutcolumns, cut

    while offset < len(data) and data[offset] == SPACE:
        offset += 1

    return Line(size, offset, columns)


def lines(data, maxcolumns, /, encoding="utf-8"):
    """
    yield the decoded lines of a whole text, wrapped at `maxcolumns`.

    `data` may be bytes or str (str is encoded with `encoding` first).
    """
    if isinstance(data, str):
        data = data.encode(encoding)
    offset = 0
    while offset < len(data):
        line = nextline(data[offset:], maxcolumns, encoding)
        yield data[offset:offset + line.size].decode(encoding, "replace")
        offset += line.offset


__all__ = (
    "Line",
    "nextline",
    "lines",
)
