"""Character layer for firmware strings.

This module provides the Latin-1 (``Char8``) and UCS-2 (``Char16``) character
kinds together with their checked conversions.
"""

from .kinds import (
    CHARACTER_KINDS,
    Char8,
    Char16,
    Character,
    is_scalar_value,
    kind_by_name,
)

__all__ = [
    "CHARACTER_KINDS",
    "Char8",
    "Char16",
    "Character",
    "is_scalar_value",
    "kind_by_name",
]
