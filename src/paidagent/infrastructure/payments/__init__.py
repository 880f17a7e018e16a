from paidagent.infrastructure.payments.client import (
    PaidResponse,
    PaymentAttempt,
    PaymentChallengeClient,
    PaymentState,
)
from paidagent.infrastructure.payments.codec import (
    decode_challenge,
    decode_header,
    decode_payment_response,
    encode_header,
)

__all__ = [
    "PaidResponse",
    "PaymentAttempt",
    "PaymentChallengeClient",
    "PaymentState",
    "decode_challenge",
    "decode_header",
    "decode_payment_response",
    "encode_header",
]
