"""Unit tests for address validation and wide-integer conversion."""

from __future__ import annotations

import pytest

from conftest import USER, USER_CHECKSUMMED
from resolvewallet.codec import to_checksum_address, to_display, to_wide, validate_address
from resolvewallet.errors import InvalidAddressError, InvalidNumberError
from resolvewallet.models import Address, WideUint


class TestValidateAddress:
    """Tests for validate_address."""

    def test_lowercase_returned_unchanged(self) -> None:
        assert validate_address(USER, "USER_ADDR") == Address(USER)

    def test_checksummed_normalized_to_lowercase(self) -> None:
        assert validate_address(USER_CHECKSUMMED, "USER_ADDR").value == USER

    def test_all_uppercase_body_accepted(self) -> None:
        upper = "0x" + USER[2:].upper()
        assert validate_address(upper, "USER_ADDR").value == USER

    @pytest.mark.parametrize(
        "candidate",
        [
            "",
            None,
            "0x",
            "70997970c51812dc3a010c7d01b50e0d17dc79c8",
            "0X70997970c51812dc3a010c7d01b50e0d17dc79c8",
            "0x70997970c51812dc3a010c7d01b50e0d17dc79c",
            "0x70997970c51812dc3a010c7d01b50e0d17dc79c8a",
            "0x70997970c51812dc3a010c7d01b50e0d17dc79cg",
            "0x 70997970c51812dc3a010c7d01b50e0d17dc79c8",
        ],
    )
    def test_malformed_rejected(self, candidate) -> None:
        with pytest.raises(InvalidAddressError) as excinfo:
            validate_address(candidate, "USER_ADDR")
        assert excinfo.value.label == "USER_ADDR"
        assert excinfo.value.value == candidate

    @pytest.mark.parametrize("padding", [" ", "\n", "\t "])
    def test_surrounding_whitespace_stripped(self, padding: str) -> None:
        padded = padding + USER_CHECKSUMMED + padding
        assert validate_address(padded, "USER_ADDR").value == USER

    def test_bad_checksum_rejected(self) -> None:
        # flip the case of one checksummed letter
        broken = USER_CHECKSUMMED.replace("C5", "c5", 1)
        assert broken != USER_CHECKSUMMED
        with pytest.raises(InvalidAddressError):
            validate_address(broken, "CONTRACT")

    def test_error_message_names_label_and_value(self) -> None:
        with pytest.raises(InvalidAddressError) as excinfo:
            validate_address("0x1234", "USER_ADDR")
        assert 'USER_ADDR "0x1234" is invalid' in str(excinfo.value)


class TestChecksum:
    def test_known_vector(self) -> None:
        assert to_checksum_address(USER) == USER_CHECKSUMMED

    def test_eip55_reference_vector(self) -> None:
        expected = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        assert to_checksum_address(expected.lower()) == expected


class TestToWide:
    """Tests for to_wide."""

    def test_simple(self) -> None:
        assert to_wide("100") == WideUint(100)

    def test_zero(self) -> None:
        assert to_wide("0") == WideUint(0)

    def test_leading_zeros_normalized(self) -> None:
        assert to_display(to_wide("000042")) == "42"

    def test_beyond_float_precision(self) -> None:
        literal = "115792089237316195423570985008687907853269984665640564039457584007913129639935"
        assert to_display(to_wide(literal)) == literal

    def test_surrounding_whitespace_stripped(self) -> None:
        assert to_wide(" 7 ") == WideUint(7)

    def test_uint256_max_with_leading_zeros(self) -> None:
        literal = "000" + str(2**256 - 1)
        assert to_wide(literal).value == 2**256 - 1

    @pytest.mark.parametrize("external", ["1" * 79, "1" * 5000])
    def test_too_many_digits_rejected(self, external: str) -> None:
        with pytest.raises(InvalidNumberError) as excinfo:
            to_wide(external, "amount")
        assert excinfo.value.value == external

    @pytest.mark.parametrize(
        "external",
        ["", "-5", "+5", "3.5", "1e18", "1,000", "1_000", "0x10", "abc", "²", "١٢", " ", None],
    )
    def test_rejected(self, external) -> None:
        with pytest.raises(InvalidNumberError) as excinfo:
            to_wide(external, "amount")
        assert excinfo.value.label == "amount"


class TestToDisplay:
    """Tests for to_display."""

    def test_large_value_printed_literally(self) -> None:
        assert to_display(WideUint(500000000000000000)) == "500000000000000000"

    def test_no_exponent_for_huge_values(self) -> None:
        text = to_display(WideUint(10**40))
        assert text == "1" + "0" * 40
        assert "e" not in text

    def test_address(self) -> None:
        assert to_display(Address(USER)) == USER

    def test_bool(self) -> None:
        assert to_display(True) == "true"
        assert to_display(False) == "false"

    def test_plain_int(self) -> None:
        assert to_display(12345678901234567890) == "12345678901234567890"
