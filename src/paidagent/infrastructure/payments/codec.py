from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from pydantic import ValidationError

from paidagent.domain.exceptions import PaymentChallengeError
from paidagent.domain.models.payment import PaymentChallenge, PaymentReceipt

CHALLENGE_HEADER = "X-402"
PAYMENT_HEADER = "X-PAYMENT"
PAYMENT_RESPONSE_HEADER = "X-PAYMENT-RESPONSE"


def encode_header(document: dict[str, Any]) -> str:
    raw = json.dumps(document, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_header(value: str) -> dict[str, Any]:
    """Decode a base64 (standard or url-safe, padding optional) JSON object."""
    text = value.strip()
    padded = text + "=" * (-len(text) % 4)
    try:
        raw = base64.b64decode(padded.replace("-", "+").replace("_", "/"), validate=True)
        document = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("Header is not base64-encoded JSON") from exc
    if not isinstance(document, dict):
        raise ValueError("Header JSON must be an object")
    return document


def decode_payment_response(value: str) -> PaymentReceipt:
    try:
        return PaymentReceipt.model_validate(decode_header(value))
    except ValidationError as exc:
        raise ValueError("Payment response is missing settlement fields") from exc


def challenge_from_document(document: dict[str, Any], header: str | None = None) -> PaymentChallenge:
    """Build a challenge from either a flat requirements object or an x402 body.

    The x402 body form carries a list of acceptable requirements under
    ``accepts``; the first entry is used.
    """
    requirements = document
    accepts = document.get("accepts")
    if isinstance(accepts, list):
        if not accepts or not isinstance(accepts[0], dict):
            raise PaymentChallengeError("Challenge lists no acceptable payment requirements")
        requirements = accepts[0]
    fields = {
        key: str(requirements[key])
        for key in (
            "price",
            "scheme",
            "network",
            "payTo",
            "asset",
            "maxAmountRequired",
            "resource",
            "description",
        )
        if requirements.get(key) is not None
    }
    return PaymentChallenge.model_validate({**fields, "raw": document, "header": header})


def decode_challenge(value: str) -> PaymentChallenge:
    try:
        document = decode_header(value)
    except ValueError as exc:
        raise PaymentChallengeError(str(exc)) from exc
    return challenge_from_document(document, header=value)
