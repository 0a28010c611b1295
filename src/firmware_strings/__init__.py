"""Firmware Strings.

Safe, zero-copy handling of the fixed-width, NUL-terminated strings used by
firmware interfaces that mix Latin-1 and UCS-2 text.

Progressive API Disclosure:
- Level 1: Simple functions - encode(), iter_encode()
- Level 2: String views - CStr8 / CStr16 validation and pointer wrapping
- Level 3: Character kinds - Char8 / Char16 checked conversions
"""

__version__ = "0.1.0"
__author__ = "Firmware Strings Team"

# Progressive API disclosure - Level 1: Simple functions
from .string.encoder import encode, iter_encode

# Progressive API disclosure - Level 2: String views
from .string.view import CStr, CStr8, CStr16

# Progressive API disclosure - Level 3: Character kinds
from .character.kinds import Char8, Char16, Character

# Configuration classes for advanced usage
from .shared.config import EncoderConfig

# Result objects and error values for all API levels
from .shared.result import (
    CharConversionError,
    EncodeErrorKind,
    EncodeResult,
    FromIntsErrorKind,
    FromIntsWithNulError,
    StrEncodeError,
    StringError,
    ValidationResult,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Encoding functions
    "encode",
    "iter_encode",

    # Level 2: String views
    "CStr",
    "CStr8",
    "CStr16",

    # Level 3: Character kinds
    "Character",
    "Char8",
    "Char16",

    # Configuration
    "EncoderConfig",

    # Result objects and error values
    "CharConversionError",
    "EncodeErrorKind",
    "EncodeResult",
    "FromIntsErrorKind",
    "FromIntsWithNulError",
    "StrEncodeError",
    "StringError",
    "ValidationResult",
]
