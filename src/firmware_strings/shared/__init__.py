"""Shared utilities for firmware string handling.

This module provides the result and error values, configuration objects and
logging helpers used by the character, string and CLI layers.
"""

from .result import (
    CharConversionError,
    ConversionResult,
    DiagnosticEntry,
    DiagnosticSeverity,
    EncodeErrorKind,
    EncodeResult,
    EncodeStatistics,
    FromIntsErrorKind,
    FromIntsWithNulError,
    StrEncodeError,
    StringError,
    ValidationResult,
)
from .config import (
    CLIConfig,
    EncoderConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "CharConversionError",
    "ConversionResult",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "EncodeErrorKind",
    "EncodeResult",
    "EncodeStatistics",
    "FromIntsErrorKind",
    "FromIntsWithNulError",
    "StrEncodeError",
    "StringError",
    "ValidationResult",
    "CLIConfig",
    "EncoderConfig",
    "CorrelationLogger",
    "get_logger",
]
