"""
Statement level splitting inside one batch.

A batch may hold several statements; servers that refuse multi‑statement
requests need them one by one.  ``sqlparse`` knows about literals, comments
and ``BEGIN … END`` blocks, which a plain ``;`` split does not.
"""
from __future__ import annotations
import sqlparse
from sqlparse import tokens as T
from sqlparse.sql import Comment, Statement


def _is_noise(stmt: Statement) -> bool:
    # nothing but whitespace and comments, e.g. a trailing `/* done */`
    return all(
        tok.is_whitespace or isinstance(tok, Comment) or tok.ttype in T.Comment
        for tok in stmt.tokens
    )


def split_statements(batch: str) -> list[str]:
    """
    Return the statements of *batch* in order, surrounding whitespace
    stripped.  Chunks holding only comments have nothing to execute and are
    left out.
    """
    return [str(stmt).strip() for stmt in sqlparse.parse(batch) if not _is_noise(stmt)]
