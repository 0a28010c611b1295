"""String layer for firmware strings.

This module provides NUL-terminated string views over caller-owned buffers and
the encoder that produces them from Python text.
"""

from .view import (
    CStr,
    CStr8,
    CStr16,
    find_first_error,
    unit_view,
)
from .encoder import (
    GRAPHEME_CLUSTER,
    encode,
    iter_encode,
)

__all__ = [
    # Views
    "CStr",
    "CStr8",
    "CStr16",
    "find_first_error",
    "unit_view",
    # Encoding
    "GRAPHEME_CLUSTER",
    "encode",
    "iter_encode",
]
