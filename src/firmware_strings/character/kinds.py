"""Firmware character kinds.

Firmware interfaces use both Latin-1 and UCS-2 text. This module implements
the two matching character types, ``Char8`` and ``Char16``. Each kind declares
its in-memory layout exactly once (array typecode, ctypes unit type and width
in bits); class creation fails if those three disagree, which is what makes
reinterpreting character storage as integer storage legal elsewhere in the
package.

Checked conversions return ``ConversionResult`` objects. Direct construction
with an invalid value raises ``ValueError``, so every live instance holds a
valid Unicode scalar value that fits its width.
"""

import ctypes
import struct
from functools import total_ordering
from typing import Any, ClassVar, Dict, Type, TypeVar

from firmware_strings.shared.result import CharConversionError, ConversionResult

# Unicode code space limits
UNICODE_MAX = 0x10FFFF
SURROGATE_RANGE_START = 0xD800
SURROGATE_RANGE_END = 0xDFFF

# Control characters used by the encoder
NUL_CODE = 0x00
LINE_FEED_CODE = 0x0A
CARRIAGE_RETURN_CODE = 0x0D

C = TypeVar("C", bound="Character")


def is_scalar_value(code_point: int) -> bool:
    """Check whether ``code_point`` is a Unicode scalar value.

    Python strings can hold lone surrogates, which are code points but never
    scalar values on their own.
    """
    return (
        0 <= code_point <= UNICODE_MAX
        and not SURROGATE_RANGE_START <= code_point <= SURROGATE_RANGE_END
    )


@total_ordering
class Character:
    """Base class for firmware character kinds.

    Subclasses declare ``TYPECODE`` (``array``/``memoryview`` format),
    ``CTYPE`` (ctypes unit type), ``WIDTH_BITS`` and ``REPLACEMENT_CODE``.
    The sentinels ``NUL``, ``REPLACEMENT``, ``CARRIAGE_RETURN`` and
    ``LINE_FEED`` are derived from those declarations.
    """

    __slots__ = ("_value",)

    TYPECODE: ClassVar[str]
    CTYPE: ClassVar[Any]
    WIDTH_BITS: ClassVar[int]
    REPLACEMENT_CODE: ClassVar[int]
    MAX_VALUE: ClassVar[int]

    NUL: ClassVar["Character"]
    REPLACEMENT: ClassVar["Character"]
    CARRIAGE_RETURN: ClassVar["Character"]
    LINE_FEED: ClassVar["Character"]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        unit_size = cls.WIDTH_BITS // 8
        if struct.calcsize(cls.TYPECODE) != unit_size:
            raise TypeError(
                f"{cls.__name__}: typecode {cls.TYPECODE!r} is not {unit_size} bytes wide"
            )
        if ctypes.sizeof(cls.CTYPE) != unit_size:
            raise TypeError(
                f"{cls.__name__}: {cls.CTYPE.__name__} is not {unit_size} bytes wide"
            )
        cls.MAX_VALUE = (1 << cls.WIDTH_BITS) - 1
        cls.NUL = cls(NUL_CODE)
        cls.REPLACEMENT = cls(cls.REPLACEMENT_CODE)
        cls.CARRIAGE_RETURN = cls(CARRIAGE_RETURN_CODE)
        cls.LINE_FEED = cls(LINE_FEED_CODE)

    def __init__(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"{type(self).__name__} expects an int, got {type(value).__name__}"
            )
        if not self.is_valid_int(value):
            raise ValueError(f"{value:#x} is not a valid {type(self).__name__}")
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def is_valid_int(cls, value: int) -> bool:
        """Check whether an integer unit holds a valid character of this kind."""
        return 0 <= value <= cls.MAX_VALUE and is_scalar_value(value)

    @classmethod
    def from_scalar(cls: Type[C], ch: str) -> ConversionResult[C]:
        """Convert a single-character string to this kind.

        Args:
            ch: String of exactly one code point

        Returns:
            ConversionResult holding the character, or ``TOO_WIDE`` when the
            scalar value does not fit, or ``INVALID_CHAR`` for lone surrogates
        """
        if not isinstance(ch, str):
            raise TypeError(f"expected str, got {type(ch).__name__}")
        if len(ch) != 1:
            raise ValueError(f"expected a single character, got {len(ch)}")

        code_point = ord(ch)
        if not is_scalar_value(code_point):
            return ConversionResult(error=CharConversionError.INVALID_CHAR)
        if code_point > cls.MAX_VALUE:
            return ConversionResult(error=CharConversionError.TOO_WIDE)
        return ConversionResult(value=cls(code_point))

    @classmethod
    def from_int(cls: Type[C], value: int) -> ConversionResult[C]:
        """Interpret an integer unit as a character of this kind.

        Values outside the unit range and (for ``Char16``) surrogate halves
        fail with ``INVALID_CHAR``; nothing is truncated.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        if not cls.is_valid_int(value):
            return ConversionResult(error=CharConversionError.INVALID_CHAR)
        return ConversionResult(value=cls(value))

    @classmethod
    def format_unit(cls, value: int) -> str:
        """Render a raw unit for display, using the replacement if invalid."""
        if cls.is_valid_int(value):
            return chr(value)
        return cls.REPLACEMENT.to_scalar()

    @classmethod
    def debug_unit(cls, value: int) -> str:
        """Render a raw unit for debugging, annotating invalid values."""
        if cls.is_valid_int(value):
            return f"{cls.__name__}({chr(value)!r})"
        return f"{cls.__name__}({value:#0{2 + cls.WIDTH_BITS // 4}x})"

    def to_scalar(self) -> str:
        return chr(self._value)

    def to_int(self) -> int:
        return self._value

    def __int__(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value  # type: ignore[attr-defined]

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value < other._value  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._value))

    def __str__(self) -> str:
        return self.format_unit(self._value)

    def __repr__(self) -> str:
        return self.debug_unit(self._value)

    def __reduce__(self) -> Any:
        return (type(self), (self._value,))


class Char8(Character):
    """A Latin-1 character."""

    __slots__ = ()

    TYPECODE = "B"
    CTYPE = ctypes.c_uint8
    WIDTH_BITS = 8
    REPLACEMENT_CODE = ord("?")


class Char16(Character):
    """A UCS-2 code point."""

    __slots__ = ()

    TYPECODE = "H"
    CTYPE = ctypes.c_uint16
    WIDTH_BITS = 16
    REPLACEMENT_CODE = 0xFFFD


# Command-line and config names for each kind
CHARACTER_KINDS: Dict[str, Type[Character]] = {
    "latin1": Char8,
    "ucs2": Char16,
}


def kind_by_name(name: str) -> Type[Character]:
    """Look up a character kind by its CLI name ('latin1' or 'ucs2')."""
    try:
        return CHARACTER_KINDS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown character kind: {name!r} (expected one of {sorted(CHARACTER_KINDS)})"
        ) from None
