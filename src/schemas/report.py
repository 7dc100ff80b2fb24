"""Validation report schemas.

A ValidationReport accumulates everything noticed while parsing or building a
package. Entries are append-only: nothing is ever removed, so a failed run
still leaves an inspectable record of what went wrong and where.
"""

import threading
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, PrivateAttr

from .codes import message_for


class ValidationLevel(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class ValidationEntry(BaseModel):
    """A single report entry.

    Attributes:
        level: Severity of the entry
        code: Stable message code (see schemas.codes)
        message: Human-readable message
        source: Description of the offending object (div label, section id, ...)
        path: Package-relative path the entry is about, if any
        cause: Text of the underlying exception, if any
        timestamp: When the entry was recorded (UTC)
    """

    level: ValidationLevel
    code: str
    message: str = ""
    source: str | None = None
    path: str | None = None
    cause: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        parts = [f"[{self.level.value}] {self.code}"]
        if self.message:
            parts.append(self.message)
        if self.path:
            parts.append(f"({self.path})")
        return " ".join(parts)


class ValidationReport(BaseModel):
    """Ordered, append-only collection of validation entries.

    Appends are serialized with a lock so resolvers running on worker threads
    can share one report.
    """

    records: list[ValidationEntry] = Field(default_factory=list)

    _lock: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    def add(
        self,
        level: ValidationLevel,
        code: str,
        message: str | None = None,
        source: str | None = None,
        path: str | None = None,
        cause: BaseException | str | None = None,
    ) -> ValidationEntry:
        """Append an entry and return it.

        Args:
            level: Severity
            code: Message code
            message: Message text (defaults to the code's registered message)
            source: Description of the offending object
            path: Package-relative path
            cause: Exception (or its text) that triggered the entry
        """
        if message is None:
            message = message_for(code)
        if isinstance(cause, BaseException):
            cause = f"{type(cause).__name__}: {cause}"

        entry = ValidationEntry(
            level=level,
            code=code,
            message=message,
            source=source,
            path=path,
            cause=cause,
        )
        with self._lock:
            self.records.append(entry)
        return entry

    def info(self, code: str, message: str | None = None, **kwargs) -> ValidationEntry:
        return self.add(ValidationLevel.INFO, code, message, **kwargs)

    def warn(self, code: str, message: str | None = None, **kwargs) -> ValidationEntry:
        return self.add(ValidationLevel.WARN, code, message, **kwargs)

    def error(self, code: str, message: str | None = None, **kwargs) -> ValidationEntry:
        return self.add(ValidationLevel.ERROR, code, message, **kwargs)

    def entries(self) -> tuple[ValidationEntry, ...]:
        with self._lock:
            return tuple(self.records)

    def is_valid(self) -> bool:
        """True when no ERROR entry has been recorded."""
        return not any(e.level is ValidationLevel.ERROR for e in self.entries())

    def errors(self) -> list[ValidationEntry]:
        return [e for e in self.entries() if e.level is ValidationLevel.ERROR]

    def warnings(self) -> list[ValidationEntry]:
        return [e for e in self.entries() if e.level is ValidationLevel.WARN]

    def has(self, code: str, level: ValidationLevel | None = None) -> bool:
        """Check whether an entry with ``code`` (and optionally ``level``) exists."""
        return any(
            e.code == code and (level is None or e.level is level)
            for e in self.entries()
        )

    def codes(self) -> list[str]:
        return [e.code for e in self.entries()]
