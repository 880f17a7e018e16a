import base64
import json

import pytest

from paidagent.domain.exceptions import PaymentChallengeError
from paidagent.infrastructure.payments import (
    decode_challenge,
    decode_header,
    decode_payment_response,
    encode_header,
)
from paidagent.infrastructure.payments.codec import challenge_from_document

RECEIPT = {"transaction": "0xabc", "network": "base-sepolia", "payer": "0x123"}


def test_decode_payment_response() -> None:
    value = base64.b64encode(json.dumps(RECEIPT).encode()).decode()

    receipt = decode_payment_response(value)

    assert receipt.transaction == "0xabc"
    assert receipt.network == "base-sepolia"
    assert receipt.payer == "0x123"
    assert receipt.success is None


def test_decode_header_accepts_urlsafe_without_padding() -> None:
    document = {"note": "??>>"}
    value = base64.urlsafe_b64encode(json.dumps(document).encode()).decode().rstrip("=")

    assert decode_header(value) == document


def test_encode_header_is_compact_json() -> None:
    value = encode_header({"a": 1, "b": "two"})

    assert base64.b64decode(value) == b'{"a":1,"b":"two"}'


@pytest.mark.parametrize(
    "value",
    [
        "not base64 at all!",
        base64.b64encode(b"not json").decode(),
        base64.b64encode(b"[1, 2]").decode(),
    ],
)
def test_decode_header_rejects_garbage(value: str) -> None:
    with pytest.raises(ValueError):
        decode_header(value)


def test_receipt_missing_fields_is_rejected() -> None:
    with pytest.raises(ValueError):
        decode_payment_response(encode_header({"transaction": "0xabc"}))


def test_decode_flat_challenge_header() -> None:
    header = encode_header(
        {"price": "$0.01", "network": "base-sepolia", "payTo": "0xpay", "scheme": "exact"}
    )

    challenge = decode_challenge(header)

    assert challenge.price == "$0.01"
    assert challenge.network == "base-sepolia"
    assert challenge.pay_to == "0xpay"
    assert challenge.scheme == "exact"
    assert challenge.header == header


def test_challenge_from_x402_body_uses_first_requirement() -> None:
    body = {
        "x402Version": 1,
        "error": "X-PAYMENT header is required",
        "accepts": [
            {
                "scheme": "exact",
                "network": "base-sepolia",
                "maxAmountRequired": 10000,
                "resource": "http://localhost:41243/",
                "payTo": "0xpay",
                "asset": "0xusdc",
            },
            {"scheme": "exact", "network": "base"},
        ],
    }

    challenge = challenge_from_document(body)

    assert challenge.network == "base-sepolia"
    assert challenge.max_amount_required == "10000"
    assert challenge.asset == "0xusdc"
    assert challenge.raw == body
    assert challenge.header is None


def test_empty_accepts_is_a_challenge_error() -> None:
    with pytest.raises(PaymentChallengeError):
        challenge_from_document({"accepts": []})


def test_undecodable_challenge_header_is_a_challenge_error() -> None:
    with pytest.raises(PaymentChallengeError):
        decode_challenge("%%%")
