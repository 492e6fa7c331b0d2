"""
Batch splitter – cuts a script into the units a server executes one at a
time, at lines holding only the batch separator (``GO`` by convention):

    select 1;
    GO 2          <- run the previous batch twice
    select 2;

A separator inside a ``'string'``, a ``-- line comment`` or a
``/* block comment */`` is ordinary text.  Backslash line-continuations are
removed before scanning.
"""
from __future__ import annotations

import enum
import logging
import re
import string
import typing as t

from sqlbatch.constants import MAX_REPEAT_COUNT

log = logging.getLogger(__name__)

_TERMINATOR_RE = re.compile(r"(\r\n|\n|\r)")
_TERMINATORS = frozenset(("\r\n", "\n", "\r"))
_ASCII_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_INLINE_SPACE = " \t\f\v"
_MAX_REPEAT_DIGITS = str(MAX_REPEAT_COUNT)


class _State(enum.Enum):
    CODE = enum.auto()
    SINGLE_QUOTE = enum.auto()
    LINE_COMMENT = enum.auto()
    BLOCK_COMMENT = enum.auto()


class Batch(t.NamedTuple):
    """One batch body and the number of times it has to be run."""

    sql: str
    count: int = 1


def normalize_continuations(sql: str) -> str:
    """
    Remove every backslash that is directly followed by a line terminator
    (``\\r\\n``, ``\\n`` or ``\\r``), joining the two lines.

    A backslash uncovered by a removal and itself followed by a terminator
    goes as well, so the result never contains a continuation.
    """
    if "\\" not in sql:
        return sql

    out: list[str] = []
    for piece in _TERMINATOR_RE.split(sql):
        if piece in _TERMINATORS:
            if out and out[-1].endswith("\\"):
                out[-1] = out[-1][:-1]
                if not out[-1]:
                    out.pop()
                continue
            out.append(piece)
        elif piece:
            out.append(piece)
    return "".join(out)


def has_prefix_fold(s: str, prefix: str) -> bool:
    """True if *s* starts with *prefix*, ignoring ASCII letter case only."""
    if len(s) < len(prefix):
        return False
    head = s[: len(prefix)]
    return head == prefix or head.translate(_ASCII_FOLD) == prefix.translate(_ASCII_FOLD)


def _is_word_char(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _repeat_count(digits: str) -> int:
    if not digits:
        return 1
    digits = digits.lstrip("0") or "0"
    # compare as text; int() refuses very long digit strings
    too_long = len(digits) > len(_MAX_REPEAT_DIGITS)
    if too_long or (len(digits) == len(_MAX_REPEAT_DIGITS) and digits > _MAX_REPEAT_DIGITS):
        log.debug("repeat count of %d digit(s) out of range; running the batch once", len(digits))
        return 1
    return max(int(digits), 1)


def _separator_line(text: str, pos: int, separator: str) -> tuple[int, int] | None:
    """
    Check for *separator* at line start *pos*.  Returns ``(count, end)`` where
    *end* is the offset of the line terminator closing the separator line
    (or ``len(text)``), or ``None`` when *pos* does not hold a separator.
    """
    if not has_prefix_fold(text[pos : pos + len(separator)], separator):
        return None

    n = len(text)
    i = pos + len(separator)
    if i < n and _is_word_char(text[i]):
        return None

    while i < n and text[i] in _INLINE_SPACE:
        i += 1
    digits_start = i
    while i < n and "0" <= text[i] <= "9":
        i += 1
    count = _repeat_count(text[digits_start:i])

    while i < n and text[i] not in "\r\n":
        i += 1
    return count, i


def scan(sql: str, separator: str) -> list[Batch]:
    """
    Split *sql* into :class:`Batch` records, repeat counts not expanded.

    Never raises: unterminated strings and comments simply run to the end of
    the last batch.
    """
    if not separator:
        return [Batch(sql)] if sql else []

    text = normalize_continuations(sql)
    n = len(text)
    batches: list[Batch] = []

    state = _State.CODE
    start = 0
    i = 0
    line_start = True
    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if state is _State.CODE:
            if line_start:
                found = _separator_line(text, i, separator)
                if found is not None:
                    count, end = found
                    if i > start:
                        batches.append(Batch(text[start:i], count))
                    start = i = end
                    line_start = False
                    continue

            line_start = ch in "\r\n"
            if ch == "'":
                state = _State.SINGLE_QUOTE
            elif ch == "-" and nxt == "-":
                state = _State.LINE_COMMENT
                i += 1
            elif ch == "/" and nxt == "*":
                state = _State.BLOCK_COMMENT
                i += 1
            i += 1

        elif state is _State.SINGLE_QUOTE:
            if ch == "'":
                if nxt == "'":
                    i += 1
                else:
                    state = _State.CODE
            i += 1

        elif state is _State.LINE_COMMENT:
            # the terminator is left for CODE so it opens a new line
            if ch in "\r\n":
                state = _State.CODE
            else:
                i += 1

        else:
            if ch == "*" and nxt == "/":
                state = _State.CODE
                i += 1
            i += 1

    if start < n:
        batches.append(Batch(text[start:]))
    return batches


def split(sql: str, separator: str) -> list[str]:
    """
    Split *sql* on lines holding *separator* and return the batch bodies in
    source order, each repeated as many times as its ``GO n`` count asks.

    An empty *separator* turns splitting off: the text comes back as the
    only batch (no batch at all for empty text).
    """
    return [b.sql for b in scan(sql, separator) for _ in range(b.count)]
