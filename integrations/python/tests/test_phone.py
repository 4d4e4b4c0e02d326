import pytest

from voicehook_core import LibPhoneNumberService, PhoneNumberError, format_number, is_valid_number


def test_format_number_to_e164():
    assert format_number("8005642365") == "+18005642365"
    assert format_number("(800) 564-2365") == "+18005642365"
    assert format_number("+18005642365") == "+18005642365"


def test_format_number_uses_region():
    assert format_number("020 8366 1177", region="GB") == "+442083661177"


@pytest.mark.parametrize("raw", ["", "hello", "123", "sip:8005642365@host"])
def test_format_number_rejects(raw):
    with pytest.raises(PhoneNumberError):
        format_number(raw)


def test_is_valid_number():
    assert is_valid_number("+18005642365") is True
    assert is_valid_number("123") is False


def test_service_wraps_parse_errors():
    with pytest.raises(PhoneNumberError) as excinfo:
        LibPhoneNumberService().parse("not a number", "US")
    assert excinfo.value.__cause__ is not None
