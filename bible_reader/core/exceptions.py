"""Core exception types shared across layers."""


class LocalDatabaseUnavailableError(Exception):
    """Raised when the local database is missing, stale, or cannot be opened."""


class EngineQueryError(Exception):
    """Raised when an engine query failed on every permitted attempt."""


class V11nImportError(Exception):
    """Raised when a versification rules file cannot be imported.

    Carries the 1-based ``line_number`` of the offending input line.
    """

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class UnknownBookError(V11nImportError):
    """Raised when a reference names a book with no known OSIS id."""


class UnknownSourceTypeError(V11nImportError):
    """Raised when a rule names an unrecognized source type."""


class InvalidActionError(V11nImportError):
    """Raised when a rule's action is outside the supported set."""


class MalformedReferenceError(V11nImportError):
    """Raised when a reference field does not parse into numbers."""


__all__ = [
    "LocalDatabaseUnavailableError",
    "EngineQueryError",
    "V11nImportError",
    "UnknownBookError",
    "UnknownSourceTypeError",
    "InvalidActionError",
    "MalformedReferenceError",
]
