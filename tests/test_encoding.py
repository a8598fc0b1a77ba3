import pytest

from chain_sdk_testkit.encoding import (
    big_integer_to_hex,
    decimal_to_hex,
    hex_to_big_integer,
    to_int64,
    to_uint64,
)
from chain_sdk_testkit.exceptions import EncodingError


class TestBigIntegerToHex:
    @pytest.mark.parametrize(
        "literal, expected",
        [
            ("9562080086528621131", "84b3552d375ffa4b"),
            ("15358872602548358953", "d525ad41d95fcf29"),
        ],
    )
    def test_xpx_mosaic_ids(self, literal, expected):
        """Test known unsigned 64-bit ids."""
        assert decimal_to_hex(literal) == expected

    def test_signed_id_matches_unsigned(self):
        """Test signed form of an id gives the same hex."""
        assert big_integer_to_hex(-8884663987180930485) == "84b3552d375ffa4b"

    def test_small_value_zero_padded(self):
        """Test short values are padded to 16 digits."""
        assert big_integer_to_hex(255) == "00000000000000ff"
        assert big_integer_to_hex(0) == "0000000000000000"

    def test_minus_one(self):
        """Test -1 wraps to the max uint64."""
        assert big_integer_to_hex(-1) == "ffffffffffffffff"

    def test_max_uint64(self):
        """Test the largest 64-bit value."""
        assert big_integer_to_hex((1 << 64) - 1) == "ffffffffffffffff"

    def test_wider_than_64_bits(self):
        """Test wider values are rendered in full with even length."""
        assert big_integer_to_hex(1 << 64) == "010000000000000000"
        assert big_integer_to_hex(1 << 68) == "1" + "0" * 17

    def test_below_int64_range(self):
        """Test negatives below int64 are rejected."""
        with pytest.raises(EncodingError) as exc_info:
            big_integer_to_hex(-(1 << 63) - 1)
        assert exc_info.value.code == EncodingError.ERR_OUT_OF_RANGE

    def test_non_integer(self):
        """Test non-int input is rejected."""
        with pytest.raises(EncodingError):
            big_integer_to_hex(1.5)
        with pytest.raises(EncodingError):
            big_integer_to_hex(True)


class TestDecimalToHex:
    @pytest.mark.parametrize("literal", ["not-a-number", "", "12a", "0x10", "1.0", " "])
    def test_invalid_literal(self, literal):
        """Test non base-10 input fails with invalid literal."""
        with pytest.raises(EncodingError) as exc_info:
            decimal_to_hex(literal)
        assert exc_info.value.code == EncodingError.ERR_INVALID_LITERAL

    def test_signed_literal(self):
        """Test sign and surrounding whitespace are accepted."""
        assert decimal_to_hex(" -8884663987180930485\n") == "84b3552d375ffa4b"
        assert decimal_to_hex("+255") == "00000000000000ff"


class TestReinterpretation:
    def test_to_uint64(self):
        """Test signed to unsigned reinterpretation."""
        assert to_uint64(-8884663987180930485) == 9562080086528621131
        assert to_uint64(42) == 42

    def test_to_int64(self):
        """Test unsigned to signed reinterpretation."""
        assert to_int64(9562080086528621131) == -8884663987180930485
        assert to_int64(42) == 42

    def test_to_int64_out_of_range(self):
        """Test to_int64 rejects values outside uint64."""
        with pytest.raises(EncodingError):
            to_int64(1 << 64)
        with pytest.raises(EncodingError):
            to_int64(-1)

    def test_hex_to_big_integer(self):
        """Test hex parsing with and without prefix."""
        assert hex_to_big_integer("d525ad41d95fcf29") == 15358872602548358953
        assert hex_to_big_integer("0x00000000000000ff") == 255

    def test_hex_to_big_integer_invalid(self):
        """Test invalid hex is rejected."""
        with pytest.raises(EncodingError) as exc_info:
            hex_to_big_integer("xyz")
        assert exc_info.value.code == EncodingError.ERR_INVALID_HEX
