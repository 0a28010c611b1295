"""Encoding of Python text into firmware strings.

``encode`` writes text into a caller-supplied buffer as ``Char8`` or
``Char16`` units followed by a NUL terminator. When the buffer is too small,
output is truncated at the previous extended grapheme cluster boundary so a
base character is never separated from its combining marks, and the
unconsumed input is returned so the caller can continue with a fresh buffer.
"""

from array import array
from typing import Any, Iterator, Optional, Type

import regex

from firmware_strings.character.kinds import NUL_CODE, Char16, Character, is_scalar_value
from firmware_strings.shared.config import EncoderConfig
from firmware_strings.shared.logging import CorrelationLogger, get_logger
from firmware_strings.shared.result import (
    DiagnosticSeverity,
    EncodeErrorKind,
    EncodeResult,
    EncodeStatistics,
    StrEncodeError,
)
from firmware_strings.string.view import CStr, unit_view

# Extended grapheme clusters (UAX #29)
GRAPHEME_CLUSTER = regex.compile(r"\X")

COMPONENT = "encoder"


def _first_content_error(
    kind: Type[Character], text: str, start: int = 0
) -> Optional[StrEncodeError]:
    max_value = kind.MAX_VALUE
    for offset in range(start, len(text)):
        code = ord(text[offset])
        if code == NUL_CODE:
            return StrEncodeError(EncodeErrorKind.INTERIOR_NUL, offset)
        if code > max_value or not is_scalar_value(code):
            return StrEncodeError(EncodeErrorKind.UNSUPPORTED_CHAR, offset)
    return None


def _failed(
    error: StrEncodeError, config: EncoderConfig, logger: CorrelationLogger
) -> EncodeResult:
    logger.debug(
        "Encoding failed",
        extra={"error_kind": error.kind.value, "offset": error.offset},
    )
    result: EncodeResult = EncodeResult(error=error)
    if config.enable_diagnostics:
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            str(error),
            COMPONENT,
            position=error.offset,
            correlation_id=config.correlation_id,
        )
    return result


def encode(
    text: str,
    buffer: Any,
    kind: Type[Character] = Char16,
    config: Optional[EncoderConfig] = None,
) -> EncodeResult:
    """Encode ``text`` into ``buffer`` as a NUL-terminated string of ``kind``.

    The last unit of the buffer is reserved for the terminator. Each line feed
    is preceded by a carriage return unless the configuration disables line
    ending translation; the CR counts against capacity and belongs to the same
    grapheme cluster as its LF.

    Interior NULs and characters that ``kind`` cannot represent abort the whole
    call wherever they occur in ``text``, even past the point where the buffer
    filled up. Running out of space is only an error when not even the first
    grapheme cluster fits.

    Args:
        text: Text to encode
        buffer: Writable buffer (``bytearray``, ``array.array``, ctypes array,
            writable ``memoryview``) reinterpreted as units of ``kind``
        kind: ``Char8`` or ``Char16``
        config: Encoder configuration, defaults to ``EncoderConfig()``

    Returns:
        EncodeResult holding the view over the committed output (aliasing
        ``buffer``) and the unconsumed remainder of ``text``, or the error.
        Error offsets are code point indices into ``text`` (``text[offset]``
        is the offending character), not UTF-8 byte offsets; the two agree
        for ASCII input.

    Raises:
        TypeError: ``text`` is not a str, or ``buffer`` is not a writable buffer
        ValueError: ``buffer`` size is not a whole number of units
    """
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text).__name__}")
    return _encode(text, buffer, kind, config or EncoderConfig(), check_tail=True)


def _encode(
    text: str,
    buffer: Any,
    kind: Type[Character],
    config: EncoderConfig,
    check_tail: bool,
) -> EncodeResult:
    logger = get_logger(__name__, config.correlation_id, COMPONENT, kind=kind.__name__)

    units = unit_view(kind, buffer)
    if units.readonly:
        raise TypeError("output buffer must be writable")
    view_type = CStr.of(kind)

    capacity = max(len(units) - 1, 0)
    carriage_return = kind.CARRIAGE_RETURN.to_int()

    committed_input = committed_output = clusters = 0
    output_idx = 0
    exhausted = False
    for match in GRAPHEME_CLUSTER.finditer(text):
        start, end = match.span()
        for offset in range(start, end):
            ch = text[offset]
            if ch == "\0":
                return _failed(
                    StrEncodeError(EncodeErrorKind.INTERIOR_NUL, offset), config, logger
                )

            if ch == "\n" and config.translate_line_endings:
                if output_idx < capacity:
                    units[output_idx] = carriage_return
                    output_idx += 1
                else:
                    exhausted = True
                    break

            converted = kind.from_scalar(ch)
            if not converted.success:
                return _failed(
                    StrEncodeError(EncodeErrorKind.UNSUPPORTED_CHAR, offset),
                    config,
                    logger,
                )

            if output_idx < capacity:
                units[output_idx] = converted.value.to_int()
                output_idx += 1
            else:
                exhausted = True
                break

        if exhausted:
            # Nothing more is written, but the rest of the input must still
            # be free of content errors
            if check_tail:
                error = _first_content_error(kind, text, start)
                if error is not None:
                    return _failed(error, config, logger)
            break

        committed_input = end
        committed_output = output_idx
        clusters += 1

    if len(units) == 0 or (committed_input == 0 and text):
        return _failed(StrEncodeError(EncodeErrorKind.BUFFER_TOO_SMALL), config, logger)

    units[committed_output] = kind.NUL.to_int()
    result: EncodeResult = EncodeResult(
        string=view_type(units[: committed_output + 1]),
        remainder=text[committed_input:] if committed_input < len(text) else None,
        statistics=EncodeStatistics(
            clusters_committed=clusters,
            units_written=committed_output,
            characters_consumed=committed_input,
        ),
    )

    if result.truncated:
        logger.debug(
            "Truncated input at grapheme cluster boundary",
            extra={
                "offset": committed_input,
                "input_length": len(text),
                "capacity": capacity,
            },
        )
        if config.enable_diagnostics:
            result.add_diagnostic(
                DiagnosticSeverity.INFO,
                "Output truncated at a grapheme cluster boundary",
                COMPONENT,
                position=committed_input,
                details={"capacity": capacity, "remaining": len(text) - committed_input},
                correlation_id=config.correlation_id,
            )
    return result


def iter_encode(
    text: str,
    capacity: int,
    kind: Type[Character] = Char16,
    config: Optional[EncoderConfig] = None,
) -> Iterator[EncodeResult]:
    """Encode ``text`` in chunks of at most ``capacity`` units each.

    Every chunk gets a fresh ``array.array`` of ``capacity`` units, terminator
    included. ``text`` is checked for content errors once, up front: if it
    holds an interior NUL or an unsupported character, the only result is
    that failure, with its offset into ``text``. Otherwise iteration stops
    after the last chunk, or after a chunk whose first grapheme cluster does
    not fit.
    """
    if capacity < 1:
        raise ValueError("capacity must be >= 1")
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text).__name__}")
    config = config or EncoderConfig()

    error = _first_content_error(kind, text)
    if error is not None:
        logger = get_logger(__name__, config.correlation_id, COMPONENT, kind=kind.__name__)
        yield _failed(error, config, logger)
        return

    remaining = text
    while True:
        buffer = array(kind.TYPECODE, bytes(capacity * (kind.WIDTH_BITS // 8)))
        result = _encode(remaining, buffer, kind, config, check_tail=False)
        yield result
        if not result.success or result.remainder is None:
            return
        remaining = result.remainder
