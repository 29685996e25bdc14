"""
Exception hierarchy for the Semantix engine.

Every failure raised by the core is a subclass of SemantixError so callers can
handle engine faults with a single except clause, or pick out the specific
condition they care about.
"""


class SemantixError(Exception):
    """Base exception for all Semantix engine errors."""

    pass


class InvalidDocumentError(SemantixError):
    """Raised when a document cannot be stored (bad id, vector or metadata)."""

    pass


class DimensionMismatchError(SemantixError):
    """Exception raised for vector length mismatches."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Vector dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class DegenerateVectorError(SemantixError):
    """Raised when a zero-length vector is normalized or compared."""

    def __init__(self, message: str = "Zero vector cannot be normalized"):
        super().__init__(message)


class PersistenceIOError(SemantixError, OSError):
    """File system failure while exporting or importing documents."""

    def __init__(self, message: str, path=None):
        SemantixError.__init__(self, message)
        self.path = path
        self.filename = str(path) if path is not None else None

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


class SerializationError(SemantixError):
    """Malformed or incomplete JSON encountered while importing documents."""

    pass


class ConfigValidationError(SemantixError):
    """Raised when configuration validation fails"""

    pass
