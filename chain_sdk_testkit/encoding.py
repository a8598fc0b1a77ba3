"""Big integer to hex conversion matching the gateway's uint64 convention.

The REST gateway reports 64-bit identifiers (mosaic and namespace ids) as
unsigned values, while some companion SDKs hand out the same ids as signed
64-bit integers. Both forms must produce the same 16 digit hex string, so
negative inputs are reinterpreted as unsigned 64-bit before formatting:

    uint64(-8884663987180930485) == 9562080086528621131 -> "84b3552d375ffa4b"
"""

from chain_sdk_testkit.exceptions import EncodingError
from chain_sdk_testkit.validators import parse_decimal_literal, parse_hex_literal

UINT64_MASK = (1 << 64) - 1
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
HEX_WIDTH = 16


def to_uint64(value: int) -> int:
    """Reinterpret a signed 64-bit value as unsigned.

    Raises:
        EncodingError: If value is below the signed 64-bit range.
    """
    if value < INT64_MIN:
        raise EncodingError(
            f"Value {value} is below the signed 64-bit range",
            EncodingError.ERR_OUT_OF_RANGE,
            hint="Negative values must fit in int64",
        )
    if value < 0:
        return value & UINT64_MASK
    return value


def to_int64(value: int) -> int:
    """Reinterpret an unsigned 64-bit value as signed."""
    if not 0 <= value <= UINT64_MASK:
        raise EncodingError(
            f"Value {value} is outside the unsigned 64-bit range",
            EncodingError.ERR_OUT_OF_RANGE,
        )
    if value > INT64_MAX:
        return value - (1 << 64)
    return value


def big_integer_to_hex(value: int) -> str:
    """Format an integer as lower-case hex without prefix.

    Values inside the 64-bit range always produce exactly 16 digits. Wider
    values are rendered in full, padded to an even number of digits.

    Args:
        value: Signed or unsigned integer.

    Returns:
        Hex string.

    Raises:
        EncodingError: If value is negative and below the signed 64-bit range.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(
            f"Expected an integer, got {type(value).__name__}",
            EncodingError.ERR_INVALID_LITERAL,
        )

    digits = format(to_uint64(value), "x")
    if len(digits) <= HEX_WIDTH:
        return digits.zfill(HEX_WIDTH)
    return digits.zfill(len(digits) + len(digits) % 2)


def decimal_to_hex(literal: str) -> str:
    """Parse a base-10 literal and format it with ``big_integer_to_hex``.

    Raises:
        EncodingError: ERR_INVALID_LITERAL if literal is not a base-10 integer.
    """
    return big_integer_to_hex(parse_decimal_literal(literal))


def hex_to_big_integer(hex_str: str) -> int:
    """Parse a hex string produced by ``big_integer_to_hex`` back to an int."""
    return parse_hex_literal(hex_str)
