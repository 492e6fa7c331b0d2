from __future__ import annotations
import hashlib
import logging
import pathlib

from sqlbatch.batch import Batch, scan, split
from sqlbatch.constants import DEFAULT_ENCODING

log = logging.getLogger(__name__)


class ScriptError(RuntimeError):
    """Raised when a script cannot be read."""


def calculate_checksum(sql_text: str) -> str:
    """Return a SHA‑256 hex digest of the given SQL text."""
    return hashlib.sha256(sql_text.encode("utf-8", "surrogateescape")).hexdigest()


class ScriptFile:
    """Representation of one SQL script on disk."""

    def __init__(self, path: pathlib.Path, encoding: str = DEFAULT_ENCODING) -> None:
        self.path: pathlib.Path = path
        try:
            self.sql: str = path.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError, LookupError) as exc:
            raise ScriptError(f"Cannot read {path}: {exc}") from exc
        self.checksum: str = calculate_checksum(self.sql)

    def scan(self, separator: str) -> list[Batch]:
        batches = scan(self.sql, separator)
        log.debug("%s: %d batch(es) on separator %r", self.path, len(batches), separator)
        return batches

    def batches(self, separator: str) -> list[str]:
        return split(self.sql, separator)


def discover(path: pathlib.Path, encoding: str = DEFAULT_ENCODING) -> list[ScriptFile]:
    """
    Return the scripts found at *path*: the file itself, or every ``*.sql``
    file below a directory in **sorted** path order.
    """
    if path.is_dir():
        files = sorted(p for p in path.glob("**/*.sql") if p.is_file())
        log.debug("%s: found %d script(s)", path, len(files))
        return [ScriptFile(p, encoding) for p in files]
    return [ScriptFile(path, encoding)]
