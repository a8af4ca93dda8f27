"""Tests for the phone sign-in dialog state machine."""

import pytest

from app.core.errors import AuthGatewayError, InvalidInput
from app.services.phone_auth import PhoneAuthFlow, PhoneAuthStep, normalize_phone

from conftest import VALID_CODE, FakeAuthGateway


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("(555) 123-4567", "+15551234567"),
        ("555.123.4567", "+15551234567"),
        ("+44 20 7946 0958", "+442079460958"),
        ("  +1 555 000 1111 ", "+15550001111"),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_normalize_phone_uses_default_country_code():
    assert normalize_phone("612 345 678", default_country_code="+34") == "+34612345678"


@pytest.mark.parametrize("raw", ["", "   ", "+", "call me"])
def test_normalize_phone_rejects_input_without_digits(raw):
    with pytest.raises(InvalidInput):
        normalize_phone(raw)


def test_full_sign_in():
    gateway = FakeAuthGateway()
    flow = PhoneAuthFlow()

    phone = flow.submit_phone(gateway, "(555) 123-4567")
    assert phone == "+15551234567"
    assert flow.step is PhoneAuthStep.AWAITING_CODE
    assert flow.phone == phone
    assert gateway.requested == [phone]

    identity = flow.submit_code(gateway, VALID_CODE)
    assert identity.phone == phone
    assert flow.step is PhoneAuthStep.AWAITING_PHONE
    assert flow.phone is None


def test_request_failure_stays_on_phone_entry():
    gateway = FakeAuthGateway()
    gateway.fail_requests = True
    flow = PhoneAuthFlow()

    with pytest.raises(AuthGatewayError):
        flow.submit_phone(gateway, "5551234567")

    assert flow.step is PhoneAuthStep.AWAITING_PHONE
    assert flow.phone is None


def test_wrong_code_stays_on_code_entry():
    gateway = FakeAuthGateway()
    flow = PhoneAuthFlow()
    flow.submit_phone(gateway, "5551234567")

    with pytest.raises(AuthGatewayError):
        flow.submit_code(gateway, "000000")

    assert flow.step is PhoneAuthStep.AWAITING_CODE
    assert flow.phone == "+15551234567"

    identity = flow.submit_code(gateway, VALID_CODE)
    assert identity.phone == "+15551234567"


@pytest.mark.parametrize("code", ["12345", "1234567", "12a456", "", "１２３４５６"])
def test_malformed_code_is_not_sent_to_gateway(code):
    gateway = FakeAuthGateway()
    flow = PhoneAuthFlow()
    flow.submit_phone(gateway, "5551234567")

    with pytest.raises(InvalidInput):
        flow.submit_code(gateway, code)

    assert gateway.verified == []
    assert flow.step is PhoneAuthStep.AWAITING_CODE


def test_code_before_phone_is_rejected():
    gateway = FakeAuthGateway()
    flow = PhoneAuthFlow()

    with pytest.raises(InvalidInput):
        flow.submit_code(gateway, VALID_CODE)

    assert gateway.verified == []


def test_code_length_is_configurable():
    gateway = FakeAuthGateway()
    flow = PhoneAuthFlow(code_length=4)
    flow.submit_phone(gateway, "5551234567")

    with pytest.raises(InvalidInput):
        flow.submit_code(gateway, VALID_CODE)


def test_change_phone_goes_back_to_phone_entry():
    gateway = FakeAuthGateway()
    flow = PhoneAuthFlow()
    flow.submit_phone(gateway, "5551234567")

    flow.change_phone()

    assert flow.step is PhoneAuthStep.AWAITING_PHONE
    with pytest.raises(InvalidInput):
        flow.submit_code(gateway, VALID_CODE)

    flow.submit_phone(gateway, "5559876543")
    assert flow.submit_code(gateway, VALID_CODE).phone == "+15559876543"


def test_close_resets_the_dialog():
    gateway = FakeAuthGateway()
    flow = PhoneAuthFlow()
    flow.submit_phone(gateway, "5551234567")

    flow.close()

    view = flow.view()
    assert view.step == "awaiting_phone"
    assert view.phone is None
