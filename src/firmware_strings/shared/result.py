"""Result objects and error values for firmware string handling.

Every fallible operation in this package returns a result object instead of
raising: character conversions, buffer validation and text encoding all report
what went wrong and where, so callers can produce precise diagnostics or retry
with a larger buffer.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    INFO = auto()       # Informational messages (e.g. truncation)
    ERROR = auto()      # Conditions that aborted an operation


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


class CharConversionError(Enum):
    """Reasons a character conversion can fail."""

    TOO_WIDE = "too_wide"          # Valid scalar value, too wide for the kind
    INVALID_CHAR = "invalid_char"  # Not a valid Unicode scalar value


class FromIntsErrorKind(Enum):
    """Reasons an integer sequence is not a valid NUL-terminated string."""

    INVALID_CHAR = "invalid_char"
    INTERIOR_NUL = "interior_nul"
    NOT_NUL_TERMINATED = "not_nul_terminated"


class EncodeErrorKind(Enum):
    """Reasons text cannot be encoded into a firmware string."""

    BUFFER_TOO_SMALL = "buffer_too_small"
    UNSUPPORTED_CHAR = "unsupported_char"
    INTERIOR_NUL = "interior_nul"


@dataclass(frozen=True)
class FromIntsWithNulError:
    """Error raised by checked integer sequence to string conversions.

    Attributes:
        kind: What went wrong
        position: Index of the offending unit, ``None`` for
            ``NOT_NUL_TERMINATED``
    """

    kind: FromIntsErrorKind
    position: Optional[int] = None

    def __post_init__(self) -> None:
        """Check that a position is present exactly when it is meaningful."""
        if self.kind is FromIntsErrorKind.NOT_NUL_TERMINATED:
            if self.position is not None:
                raise ValueError("NOT_NUL_TERMINATED carries no position")
        elif self.position is None or self.position < 0:
            raise ValueError(f"{self.kind.name} requires a position >= 0")

    def __str__(self) -> str:
        if self.kind is FromIntsErrorKind.INVALID_CHAR:
            return f"invalid character at position {self.position}"
        if self.kind is FromIntsErrorKind.INTERIOR_NUL:
            return f"interior NUL at position {self.position}"
        return "sequence is not NUL-terminated"


@dataclass(frozen=True)
class StrEncodeError:
    """Error produced while encoding text into a firmware string.

    Attributes:
        kind: What went wrong
        offset: Index into the input text of the offending character,
            ``None`` for ``BUFFER_TOO_SMALL``
    """

    kind: EncodeErrorKind
    offset: Optional[int] = None

    def __post_init__(self) -> None:
        """Check that an offset is present exactly when it is meaningful."""
        if self.kind is EncodeErrorKind.BUFFER_TOO_SMALL:
            if self.offset is not None:
                raise ValueError("BUFFER_TOO_SMALL carries no offset")
        elif self.offset is None or self.offset < 0:
            raise ValueError(f"{self.kind.name} requires an offset >= 0")

    def __str__(self) -> str:
        if self.kind is EncodeErrorKind.UNSUPPORTED_CHAR:
            return f"unsupported character at offset {self.offset}"
        if self.kind is EncodeErrorKind.INTERIOR_NUL:
            return f"interior NUL at offset {self.offset}"
        return "buffer too small to hold any grapheme cluster"


class StringError(ValueError):
    """Exception form of a failed result, raised only by ``unwrap()``."""

    def __init__(self, error: Any) -> None:
        super().__init__(str(error))
        self.error = error


@dataclass
class _Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[Any] = None

    def __post_init__(self) -> None:
        """A result holds a value or an error, never both."""
        if (self.value is None) == (self.error is None):
            raise ValueError("Result must hold exactly one of value or error")

    @property
    def success(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise ``StringError`` carrying the error."""
        if self.error is not None:
            raise StringError(self.error)
        return self.value  # type: ignore[return-value]


@dataclass
class ConversionResult(_Result[T]):
    """Outcome of a character conversion; ``error`` is a ``CharConversionError``."""


@dataclass
class ValidationResult(_Result[T]):
    """Outcome of a checked string construction; ``error`` is a
    ``FromIntsWithNulError``."""


@dataclass
class EncodeStatistics:
    """Counters describing how much work an encode call committed."""

    clusters_committed: int = 0
    units_written: int = 0
    characters_consumed: int = 0

    @property
    def expansion_ratio(self) -> float:
        """Output units per consumed input character."""
        if self.characters_consumed == 0:
            return 0.0
        return self.units_written / self.characters_consumed


@dataclass
class EncodeResult(Generic[T]):
    """Outcome of encoding text into a caller buffer.

    Attributes:
        string: The NUL-terminated view over the committed output, or ``None``
        remainder: Unconsumed input, starting at a grapheme cluster boundary,
            or ``None`` when everything was encoded
        error: ``StrEncodeError`` on failure
        statistics: Committed progress counters
        diagnostics: Diagnostic entries collected during the call
    """

    string: Optional[T] = None
    remainder: Optional[str] = None
    error: Optional[StrEncodeError] = None
    statistics: EncodeStatistics = field(default_factory=EncodeStatistics)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate result consistency."""
        if (self.string is None) == (self.error is None):
            raise ValueError("EncodeResult must hold exactly one of string or error")
        if self.error is not None and self.remainder is not None:
            raise ValueError("A failed EncodeResult has no remainder")

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def truncated(self) -> bool:
        """True when part of the input did not fit the buffer."""
        return self.remainder is not None

    def unwrap(self) -> T:
        """Return the encoded string, or raise ``StringError``."""
        if self.error is not None:
            raise StringError(self.error)
        return self.string  # type: ignore[return-value]

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Append a diagnostic entry."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                position=position,
                details=details,
                correlation_id=correlation_id,
            )
        )
