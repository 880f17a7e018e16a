from typing import Any

from pydantic import Field

from paidagent.domain.models.base import WireModel


class PaymentChallenge(WireModel):
    """Payment requirements a server attached to a 402 response.

    Every field is optional: an unparseable challenge is still handed to the
    signer with only ``header`` set.
    """

    price: str | None = Field(default=None, description="Human-readable price, e.g. '$0.01'.")
    scheme: str | None = None
    network: str | None = None
    pay_to: str | None = Field(default=None, description="Recipient address.")
    asset: str | None = None
    max_amount_required: str | None = None
    resource: str | None = None
    description: str | None = None
    raw: dict[str, Any] | None = Field(
        default=None, description="Decoded challenge document as received."
    )
    header: str | None = Field(default=None, description="Raw challenge header value.")


class PaymentProof(WireModel):
    header: str = Field(description="Value sent in the X-PAYMENT request header.")


class PaymentReceipt(WireModel):
    transaction: str = Field(description="Settlement transaction hash.")
    network: str = Field(description="Network the payment settled on.")
    payer: str = Field(description="Address that paid.")
    success: bool | None = None
