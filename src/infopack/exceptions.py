"""Custom exceptions for infopack.

Structural problems found in a package are recorded in its ValidationReport;
these exceptions cover what cannot be expressed as a report entry.
"""


class InfopackError(Exception):
    """Base exception for all infopack errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class ParseError(InfopackError):
    """Raised when a package cannot be read at all."""

    pass


class BuildError(InfopackError):
    """Raised when a package cannot be written."""

    pass


class ContainerError(InfopackError):
    """Raised when a package container (zip or directory) cannot be opened."""

    pass


class MetsReadError(InfopackError):
    """Raised when a METS document is malformed or fails schema validation."""

    def __init__(self, message: str, errors: list | None = None, *args, **kwargs):
        self.errors = errors or []
        super().__init__(message, *args, **kwargs)


class IntegrityError(InfopackError):
    """Raised when file content cannot be verified."""

    pass


class ChecksumMismatchError(IntegrityError):
    """Raised when a computed checksum differs from the declared one."""

    def __init__(self, expected: str, actual: str, path: str | None = None):
        self.expected = expected
        self.actual = actual
        self.path = path
        super().__init__(f"Checksum mismatch for {path}: expected {expected}, got {actual}")


class UnknownAlgorithmError(IntegrityError):
    """Raised when a checksum algorithm is not supported."""

    def __init__(self, algorithm: str | None):
        self.algorithm = algorithm
        super().__init__(f"Unknown checksum algorithm: {algorithm}")


class OperationCancelled(InfopackError):
    """Raised when a parse or build is cancelled."""

    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message)
