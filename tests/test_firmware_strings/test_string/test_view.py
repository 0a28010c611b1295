"""Tests for NUL-terminated string views."""

import ctypes
from array import array

import pytest

from firmware_strings.character.kinds import Char8, Char16
from firmware_strings.shared.result import FromIntsErrorKind, StringError
from firmware_strings.string.view import CStr, CStr8, CStr16, find_first_error, unit_view


class TestFromIntsWithNul:
    """Test checked construction from integer sequences."""

    def test_valid_sequence(self):
        """A properly terminated sequence produces a view."""
        result = CStr16.from_ints_with_nul([65, 66, 0])

        assert result.success
        assert result.value == "AB"
        assert len(result.value) == 2

    def test_interior_nul(self):
        result = CStr16.from_ints_with_nul([65, 0, 66, 0])

        assert not result.success
        assert result.error.kind is FromIntsErrorKind.INTERIOR_NUL
        assert result.error.position == 1

    def test_not_nul_terminated(self):
        result = CStr8.from_ints_with_nul([65, 66])

        assert result.error.kind is FromIntsErrorKind.NOT_NUL_TERMINATED
        assert result.error.position is None

    def test_empty_sequence_is_not_nul_terminated(self):
        """An empty buffer runs out before any terminator is found."""
        result = CStr16.from_ints_with_nul([])

        assert result.error.kind is FromIntsErrorKind.NOT_NUL_TERMINATED

    def test_lone_nul_is_empty_string(self):
        result = CStr16.from_ints_with_nul([0])

        assert result.value == ""
        assert len(result.value) == 0

    def test_invalid_char(self):
        """Surrogate halves are not valid UCS-2 characters."""
        result = CStr16.from_ints_with_nul([0x41, 0xD800, 0])

        assert result.error.kind is FromIntsErrorKind.INVALID_CHAR
        assert result.error.position == 1

    def test_earliest_error_wins(self):
        """The first offending position is reported, whatever its kind."""
        assert CStr16.from_ints_with_nul([0, 0xD800, 0]).error.position == 0
        assert (
            CStr16.from_ints_with_nul([0, 0xD800, 0]).error.kind
            is FromIntsErrorKind.INTERIOR_NUL
        )
        assert (
            CStr16.from_ints_with_nul([0xD800, 0, 0]).error.kind
            is FromIntsErrorKind.INVALID_CHAR
        )

    def test_out_of_range_ints_are_invalid(self):
        """Integers that do not fit the unit width are reported, not truncated."""
        result = CStr8.from_ints_with_nul([0x41, 0x141, 0])

        assert result.error.kind is FromIntsErrorKind.INVALID_CHAR
        assert result.error.position == 1

    def test_signed_array_values_are_checked(self):
        """A negative value is invalid, not reinterpreted as 0xFFFF."""
        result = CStr16.from_ints_with_nul(array("h", [-1, 0]))

        assert result.error.kind is FromIntsErrorKind.INVALID_CHAR
        assert result.error.position == 0

    def test_wider_array_values_are_checked(self):
        """A 16-bit item that does not fit Char8 is invalid, not split into bytes."""
        result = CStr8.from_ints_with_nul(array("H", [0x141, 0]))

        assert result.error.kind is FromIntsErrorKind.INVALID_CHAR
        assert result.error.position == 0

    def test_wider_array_with_valid_values(self):
        """Values of a 32-bit array are validated and copied into UCS-2 units."""
        source = array("I", [65, 66, 0])

        view = CStr16.from_ints_with_nul(source).unwrap()

        assert view == "AB"
        assert view.to_ints_with_nul().format == "H"
        source[0] = 67
        assert view == "AB"

    def test_ctypes_array_is_not_copied(self):
        storage = (ctypes.c_uint16 * 3)(ord("O"), ord("K"), 0)

        view = CStr16.from_ints_with_nul(storage).unwrap()
        storage[0] = ord("o")

        assert view == "oK"

    def test_non_integer_buffer_is_rejected(self):
        with pytest.raises(TypeError, match="format"):
            CStr16.from_ints_with_nul(array("d", [65.0, 0.0]))

    def test_unwrap_failure(self):
        with pytest.raises(StringError, match="interior NUL at position 0"):
            CStr8.from_ints_with_nul([0, 0]).unwrap()

    def test_buffer_is_not_copied(self):
        """Views over buffers see later writes to the buffer."""
        buffer = array("H", [ord("H"), ord("i"), 0])
        view = CStr16.from_ints_with_nul(buffer).unwrap()

        buffer[0] = ord("J")

        assert view == "Ji"

    def test_bytes_backing(self):
        view = CStr8.from_ints_with_nul(b"caf\xe9\x00").unwrap()

        assert str(view) == "caf\xe9"
        assert view.to_ints().tobytes() == b"caf\xe9"


class TestUnchecked:
    """Test construction without validation."""

    def test_trusted_sequence(self):
        view = CStr8.from_ints_with_nul_unchecked([104, 105, 0])

        assert view == "hi"

    def test_invalid_units_are_formatted_safely(self):
        """Bad units from trusted data render as replacement or raw values."""
        view = CStr16.from_ints_with_nul_unchecked([0x41, 0xD800, 0])

        assert str(view) == "A\ufffd"
        assert repr(view) == "CStr16([Char16('A'), Char16(0xd800)])"


class TestIntegerViews:
    """Test zero-copy integer accessors."""

    def test_with_and_without_nul(self):
        view = CStr16.from_ints_with_nul([0x48, 0x49, 0]).unwrap()

        assert view.to_ints().tolist() == [0x48, 0x49]
        assert view.to_ints_with_nul().tolist() == [0x48, 0x49, 0]

    def test_views_are_read_only(self):
        buffer = array("H", [0x48, 0])
        view = CStr16.from_ints_with_nul(buffer).unwrap()

        ints = view.to_ints_with_nul()

        assert ints.readonly
        with pytest.raises(TypeError):
            ints[0] = 0x49


class TestPointers:
    """Test the raw pointer boundary."""

    def test_as_ptr_round_trip(self):
        """A pointer lent by a view can be wrapped again."""
        buffer = array("H", [0x48, 0x49, 0])
        view = CStr16.from_ints_with_nul(buffer).unwrap()

        ptr = view.as_ptr()

        assert ptr[0] == 0x48
        assert CStr16.from_ptr(ptr) == view

    def test_from_ptr_on_ctypes_array(self):
        storage = (ctypes.c_uint16 * 8)(0x41, 0x42, 0)

        view = CStr16.from_ptr(storage)

        assert view == "AB"
        assert view.to_ints_with_nul().tolist() == [0x41, 0x42, 0]

    def test_from_ptr_accepts_addresses(self):
        storage = (ctypes.c_uint8 * 4)(0x6F, 0x6B, 0)
        address = ctypes.addressof(storage)

        assert CStr8.from_ptr(address) == "ok"
        assert CStr8.from_ptr(ctypes.c_void_p(address)) == "ok"

    def test_from_ptr_stops_at_first_nul(self):
        storage = (ctypes.c_uint8 * 6)(65, 0, 66, 0)

        view = CStr8.from_ptr(storage)

        assert view == "A"
        assert len(view.to_ints_with_nul()) == 2

    def test_from_ptr_aliases_memory(self):
        storage = (ctypes.c_uint16 * 3)(0x61, 0x62, 0)
        view = CStr16.from_ptr(storage)

        storage[1] = 0x63

        assert view == "ac"

    def test_null_pointer_raises(self):
        with pytest.raises(ValueError, match="NULL"):
            CStr16.from_ptr(ctypes.c_void_p())
        with pytest.raises(ValueError):
            CStr16.from_ptr(0)

    def test_unsupported_handle_raises(self):
        with pytest.raises(TypeError):
            CStr16.from_ptr("0x1000")

    def test_read_only_backing_cannot_lend_pointer(self):
        view = CStr8.from_ints_with_nul(b"A\x00").unwrap()

        with pytest.raises(TypeError, match="read-only"):
            view.as_ptr()


class TestSequenceProtocol:
    """Test indexing, iteration and comparison."""

    def test_iteration_and_indexing(self):
        view = CStr16.from_ints_with_nul([0x48, 0x69, 0]).unwrap()

        assert list(view) == [Char16(0x48), Char16(0x69)]
        assert view[0] == Char16(0x48)
        assert view[-1] == Char16(0x69)
        assert view[0:1] == [Char16(0x48)]
        with pytest.raises(IndexError):
            view[2]

    def test_equality(self):
        first = CStr8.from_ints_with_nul([0x61, 0]).unwrap()
        second = CStr8.from_ints_with_nul(bytearray(b"a\x00")).unwrap()
        wide = CStr16.from_ints_with_nul([0x61, 0]).unwrap()

        assert first == second
        assert first != wide
        assert first == "a"
        assert first != "b"

    def test_unhashable(self):
        view = CStr8.from_ints_with_nul([0]).unwrap()

        with pytest.raises(TypeError):
            hash(view)

    def test_repr(self):
        assert repr(CStr8.from_ints_with_nul([0x61, 0]).unwrap()) == "CStr8('a')"


class TestHelpers:
    """Test view class lookup and buffer reinterpretation."""

    def test_of(self):
        assert CStr.of(Char8) is CStr8
        assert CStr.of(Char16) is CStr16
        with pytest.raises(TypeError):
            CStr.of(int)

    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            CStr(memoryview(b"\x00"))

    def test_unit_view_reinterprets_bytes(self):
        units = unit_view(Char16, bytearray(4))

        assert units.format == "H"
        assert len(units) == 2

    def test_unit_view_rejects_partial_units(self):
        with pytest.raises(ValueError, match="whole number"):
            unit_view(Char16, bytearray(3))

    def test_unit_view_rejects_non_buffers(self):
        with pytest.raises(TypeError):
            unit_view(Char8, [1, 2, 3])

    def test_find_first_error(self):
        assert find_first_error(Char8, [0x41, 0]) is None
        assert find_first_error(Char8, []).kind is FromIntsErrorKind.NOT_NUL_TERMINATED
