"""NUL-terminated firmware string views.

``CStr`` generalizes a C string view to firmware use cases: it supports both
Latin-1 (``CStr8``) and UCS-2 (``CStr16``) storage, and it never owns its
memory. A view wraps a ``memoryview`` cast to the character kind's typecode,
so integer views handed out by ``to_ints()`` and ``to_ints_with_nul()`` alias
the caller's buffer instead of copying it.

Views are built in one of three ways:

- ``from_ints_with_nul`` validates a buffer or integer sequence and reports the
  first offending position,
- ``from_ints_with_nul_unchecked`` trusts the caller,
- ``from_ptr`` wraps memory handed over by the firmware call layer.
"""

import ctypes
import sys
from array import array
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Type, Union

from firmware_strings.character.kinds import NUL_CODE, Char8, Char16, Character
from firmware_strings.shared.logging import CorrelationLogger, get_logger
from firmware_strings.shared.result import (
    FromIntsErrorKind,
    FromIntsWithNulError,
    ValidationResult,
)

logger = get_logger(__name__, component="string_view")

IntsSource = Union[bytes, bytearray, memoryview, array, Iterable[int]]

# Byte buffers are raw dumps and are reinterpreted in place
RAW_BYTE_FORMATS = frozenset("Bc")
INTEGER_FORMATS = frozenset("bBhHiIlLqQnN")

_NATIVE_ORDER_PREFIXES = ("@", "=", "<" if sys.byteorder == "little" else ">")


def unit_view(kind: Type[Character], data: Any) -> memoryview:
    """Reinterpret a buffer-protocol object as units of ``kind``.

    The returned view shares memory with ``data``. Units are read in native
    byte order.

    Raises:
        TypeError: ``data`` does not support the buffer protocol
        ValueError: ``data`` is not contiguous or its size is not a multiple
            of the unit size
    """
    view = data if isinstance(data, memoryview) else memoryview(data)
    if view.ndim == 1 and view.format == kind.TYPECODE:
        return view
    if not view.c_contiguous:
        raise ValueError("buffer must be C-contiguous")
    unit_size = kind.WIDTH_BITS // 8
    if view.nbytes % unit_size:
        raise ValueError(
            f"buffer of {view.nbytes} bytes is not a whole number of "
            f"{unit_size}-byte {kind.__name__} units"
        )
    return view.cast("B").cast(kind.TYPECODE)


def _item_format(view: memoryview) -> str:
    # ctypes arrays report e.g. "<H"; a native byte order prefix is dropped
    item_format = view.format
    if item_format[:1] in _NATIVE_ORDER_PREFIXES:
        item_format = item_format[1:]
    return item_format


def _address_of(ptr: Any) -> int:
    if isinstance(ptr, bool):
        raise TypeError("expected a pointer or address, got bool")
    if isinstance(ptr, int):
        return ptr
    if isinstance(ptr, ctypes.c_void_p):
        return ptr.value or 0
    if isinstance(ptr, ctypes._Pointer):  # type: ignore[attr-defined]
        return ctypes.cast(ptr, ctypes.c_void_p).value or 0
    if isinstance(ptr, ctypes.Array):
        return ctypes.addressof(ptr)
    raise TypeError(f"cannot take an address from {type(ptr).__name__}")


def find_first_error(
    kind: Type[Character], codes: Sequence[int]
) -> Optional[FromIntsWithNulError]:
    """Scan ``codes`` as a NUL-terminated string of ``kind``.

    Checks run left to right in priority order (invalid unit, then NUL), so
    the earliest offending position is the one reported and a NUL in the last
    position is never an error. An empty sequence is not NUL-terminated.

    Returns:
        ``None`` if ``codes`` is a valid NUL-terminated string, else the error
    """
    last = len(codes) - 1
    for pos, code in enumerate(codes):
        if not kind.is_valid_int(code):
            return FromIntsWithNulError(FromIntsErrorKind.INVALID_CHAR, pos)
        if code == NUL_CODE:
            if pos == last:
                return None
            return FromIntsWithNulError(FromIntsErrorKind.INTERIOR_NUL, pos)
    return FromIntsWithNulError(FromIntsErrorKind.NOT_NUL_TERMINATED)


class CStr:
    """Borrowed, immutable, NUL-terminated string of one character kind.

    Do not instantiate directly; use ``from_ints_with_nul``,
    ``from_ints_with_nul_unchecked`` or ``from_ptr`` on ``CStr8`` / ``CStr16``.
    ``len()`` counts characters without the terminator.
    """

    KIND: ClassVar[Type[Character]]
    _VIEW_TYPES: ClassVar[Dict[Type[Character], Type["CStr"]]] = {}
    _logger: ClassVar[CorrelationLogger] = logger

    __slots__ = ("_units",)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        CStr._VIEW_TYPES[cls.KIND] = cls
        cls._logger = logger.bind(view_type=cls.__name__, kind=cls.KIND.__name__)

    def __init__(self, units: memoryview) -> None:
        if type(self) is CStr:
            raise TypeError("CStr is abstract; use CStr8, CStr16 or CStr.of(kind)")
        self._units = units

    @staticmethod
    def of(kind: Type[Character]) -> Type["CStr"]:
        """Return the view class for a character kind."""
        try:
            return CStr._VIEW_TYPES[kind]
        except KeyError:
            raise TypeError(f"{kind!r} is not a character kind") from None

    @classmethod
    def from_ptr(cls, ptr: Any) -> "CStr":
        """Wrap a NUL-terminated string owned by the firmware call layer.

        ``ptr`` may be a ctypes pointer, a ``ctypes.c_void_p``, a ctypes array
        or an integer address. The view spans from ``ptr`` through the first
        NUL unit and aliases that memory.

        This is an unchecked boundary. The caller guarantees that the memory
        is readable up to and including the first NUL unit, that the units
        form a well-formed string of this kind, and that the memory outlives
        the returned view. Breaking any of these is undefined behavior (the
        interpreter may crash); nothing is reported.

        Raises:
            ValueError: ``ptr`` is NULL
        """
        address = _address_of(ptr)
        if not address:
            raise ValueError("cannot wrap a NULL pointer")

        ctype = cls.KIND.CTYPE
        unit_size = ctypes.sizeof(ctype)
        length = 0
        while ctype.from_address(address + length * unit_size).value != NUL_CODE:
            length += 1

        storage = (ctype * (length + 1)).from_address(address)
        return cls(unit_view(cls.KIND, storage))

    @classmethod
    def from_ints_with_nul(cls, codes: IntsSource) -> ValidationResult["CStr"]:
        """Create a view from a NUL-terminated run of integer units.

        Unlike a plain C string check, this also verifies that every unit is a
        valid character of the kind, as UCS-2 data requires.

        Args:
            codes: A byte buffer or an array of this kind's typecode
                (reinterpreted in place, native byte order), or any other
                integer array or iterable of ints (validated by value, then
                copied into an ``array.array``)

        Returns:
            ValidationResult with the view, or the first error found
        """
        units, values = cls._materialize(codes)
        error = find_first_error(cls.KIND, values)
        if error is not None:
            cls._logger.debug(
                "Rejected string candidate",
                extra={"error_kind": error.kind.value, "position": error.position},
            )
            return ValidationResult(error=error)
        if units is None:
            units = memoryview(array(cls.KIND.TYPECODE, values))
        return ValidationResult(value=cls(units))

    @classmethod
    def from_ints_with_nul_unchecked(cls, codes: IntsSource) -> "CStr":
        """Create a view without validation.

        The caller guarantees that ``codes`` ends with its only NUL unit and
        that every unit is a valid character of this kind.
        """
        units, values = cls._materialize(codes)
        if units is None:
            units = memoryview(array(cls.KIND.TYPECODE, values))
        return cls(units)

    @classmethod
    def _materialize(
        cls, codes: IntsSource
    ) -> Tuple[Optional[memoryview], Sequence[int]]:
        try:
            view = codes if isinstance(codes, memoryview) else memoryview(codes)
        except TypeError:
            values: List[int] = list(codes)  # type: ignore[arg-type]
            return None, values

        item_format = _item_format(view)
        if item_format == cls.KIND.TYPECODE or item_format in RAW_BYTE_FORMATS:
            units = unit_view(cls.KIND, view)
            return units, units
        if item_format not in INTEGER_FORMATS or view.ndim != 1:
            raise TypeError(
                f"cannot read {cls.KIND.__name__} units from a buffer of "
                f"format {view.format!r}"
            )
        # Other integer arrays hold values, not storage
        return None, view.tolist()

    def as_ptr(self) -> Any:
        """Return a ctypes pointer to the first unit of the backing storage.

        No ownership is transferred; the pointer is only valid while the
        backing buffer is alive and unmodified.

        Raises:
            TypeError: The backing storage is read-only (e.g. ``bytes``)
        """
        if self._units.readonly:
            raise TypeError(
                f"{type(self).__name__} is backed by read-only memory; "
                "copy it into a writable buffer to pass it to firmware"
            )
        ctype = self.KIND.CTYPE
        storage = (ctype * len(self._units)).from_buffer(self._units)
        return ctypes.cast(storage, ctypes.POINTER(ctype))

    def to_ints(self) -> memoryview:
        """Integer units without the trailing NUL (zero-copy, read-only)."""
        return self._units[:-1].toreadonly()

    def to_ints_with_nul(self) -> memoryview:
        """Integer units including the trailing NUL (zero-copy, read-only)."""
        return self._units.toreadonly()

    def __len__(self) -> int:
        return max(len(self._units) - 1, 0)

    def __getitem__(self, index: Union[int, slice]) -> Union[Character, List[Character]]:
        units = self.to_ints()
        if isinstance(index, slice):
            return [self.KIND(code) for code in units[index]]
        return self.KIND(units[index])

    def __iter__(self) -> Iterator[Character]:
        for code in self.to_ints():
            yield self.KIND(code)

    def __str__(self) -> str:
        return "".join(self.KIND.format_unit(code) for code in self.to_ints())

    def __repr__(self) -> str:
        codes = self.to_ints()
        if all(self.KIND.is_valid_int(code) for code in codes):
            body = repr(str(self))
        else:
            body = "[" + ", ".join(self.KIND.debug_unit(code) for code in codes) + "]"
        return f"{type(self).__name__}({body})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            return str(self) == other
        if type(other) is not type(self):
            return NotImplemented
        return self.to_ints_with_nul() == other.to_ints_with_nul()  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]


class CStr8(CStr):
    """A Latin-1 NUL-terminated string."""

    __slots__ = ()
    KIND = Char8


class CStr16(CStr):
    """A UCS-2 NUL-terminated string."""

    __slots__ = ()
    KIND = Char16
