from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from paidagent.domain.exceptions import (
    PaymentChallengeError,
    PaymentRequestError,
    RequestFailed,
)
from paidagent.domain.models.payment import PaymentChallenge, PaymentProof, PaymentReceipt
from paidagent.domain.repositories import PaymentSigner
from paidagent.infrastructure.payments.codec import (
    CHALLENGE_HEADER,
    PAYMENT_HEADER,
    PAYMENT_RESPONSE_HEADER,
    challenge_from_document,
    decode_challenge,
    decode_payment_response,
)

logger = logging.getLogger(__name__)

PAYMENT_REQUIRED = 402


class PaymentState(str, Enum):
    INITIAL = "initial"
    RETRIED = "retried"


@dataclass
class PaymentAttempt:
    """Two-state tracker for one logical request: at most one paid retry."""

    state: PaymentState = PaymentState.INITIAL
    requests_sent: int = 0

    def advance(self) -> None:
        if self.state is PaymentState.RETRIED:
            raise PaymentRequestError("Payment retry already used for this request")
        self.state = PaymentState.RETRIED


@dataclass
class PaidResponse:
    response: httpx.Response
    attempts: int
    challenge: PaymentChallenge | None = None
    receipt: PaymentReceipt | None = None

    @property
    def paid(self) -> bool:
        return self.challenge is not None

    def json(self) -> Any:
        try:
            return self.response.json()
        except ValueError as exc:
            raise RequestFailed(
                "Response body is not valid JSON",
                status_code=self.response.status_code,
                body=self.response.text,
            ) from exc


class PaymentChallengeClient:
    """HTTP client that transparently pays for 402-protected resources.

    A 402 answer is satisfied once: the challenge is handed to the signer, the
    proof is attached to a copy of the request and that copy is sent exactly
    one more time. Whatever the retry returns is final.
    """

    def __init__(
        self,
        signer: PaymentSigner,
        *,
        base_url: str = "",
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._signer = signer
        self._client = client or httpx.AsyncClient(
            base_url=base_url, timeout=httpx.Timeout(timeout_seconds)
        )

    async def perform_paid_request(self, endpoint: str, payload: Any) -> Any:
        """POST ``payload`` as JSON to ``endpoint`` and return the decoded body."""
        paid = await self.request("POST", endpoint, json=payload)
        if paid.paid:
            logger.info(
                "Paid request completed",
                extra={
                    "url": endpoint,
                    "attempts": paid.attempts,
                    "transaction": paid.receipt.transaction if paid.receipt else None,
                },
            )
        return paid.json()

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any | None = None,
        content: bytes | str | None = None,
        headers: dict[str, str] | None = None,
    ) -> PaidResponse:
        attempt = PaymentAttempt()
        request = self._client.build_request(
            method, url, json=json, content=content, headers=headers
        )
        logger.info("Requesting resource", extra={"method": method, "url": str(request.url)})

        response = await self._send(request, attempt)
        if response.status_code != PAYMENT_REQUIRED:
            if not response.is_success:
                raise RequestFailed(
                    f"Request to {request.url} failed with status {response.status_code}",
                    status_code=response.status_code,
                    body=response.text,
                )
            return PaidResponse(response=response, attempts=attempt.requests_sent)

        challenge = self._read_challenge(response)
        proof = await self._sign(challenge)
        attempt.advance()
        logger.info("Retrying with payment", extra={"url": str(request.url)})
        response = await self._send(self._with_proof(request, proof), attempt)
        if not response.is_success:
            raise PaymentRequestError(
                f"Paid request to {request.url} failed with status {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return PaidResponse(
            response=response,
            attempts=attempt.requests_sent,
            challenge=challenge,
            receipt=self._read_receipt(response),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, request: httpx.Request, attempt: PaymentAttempt) -> httpx.Response:
        attempt.requests_sent += 1
        try:
            return await self._client.send(request)
        except httpx.HTTPError as exc:
            error_type = (
                PaymentRequestError if attempt.state is PaymentState.RETRIED else RequestFailed
            )
            raise error_type(f"Request to {request.url} failed: {exc}") from exc

    async def _sign(self, challenge: PaymentChallenge) -> PaymentProof:
        try:
            return await self._signer.sign(challenge)
        except RequestFailed:
            raise
        except Exception as exc:
            raise PaymentRequestError(f"Could not build payment proof: {exc}") from exc

    @staticmethod
    def _with_proof(request: httpx.Request, proof: PaymentProof) -> httpx.Request:
        headers = request.headers.copy()
        headers[PAYMENT_HEADER] = proof.header
        return httpx.Request(
            request.method, request.url, headers=headers, content=request.content
        )

    @staticmethod
    def _read_challenge(response: httpx.Response) -> PaymentChallenge:
        header = response.headers.get(CHALLENGE_HEADER)
        try:
            if header:
                challenge = decode_challenge(header)
            else:
                try:
                    document = response.json()
                except ValueError as exc:
                    raise PaymentChallengeError("402 response carries no challenge") from exc
                if not isinstance(document, dict):
                    raise PaymentChallengeError("402 body is not a JSON object")
                challenge = challenge_from_document(document)
        except PaymentChallengeError as exc:
            logger.info("Server requires payment", extra={"challenge_error": str(exc)})
            return PaymentChallenge(header=header)

        if challenge.price:
            logger.info(
                "Server requires payment of %s",
                challenge.price,
                extra={"network": challenge.network, "pay_to": challenge.pay_to},
            )
        else:
            logger.info("Server requires payment", extra={"network": challenge.network})
        return challenge

    @staticmethod
    def _read_receipt(response: httpx.Response) -> PaymentReceipt | None:
        header = response.headers.get(PAYMENT_RESPONSE_HEADER)
        if not header:
            logger.info("Payment was processed automatically")
            return None
        try:
            receipt = decode_payment_response(header)
        except ValueError as exc:
            logger.warning("Could not decode payment response", extra={"error": str(exc)})
            return None
        logger.info(
            "Payment processed successfully",
            extra={
                "transaction": receipt.transaction,
                "network": receipt.network,
                "payer": receipt.payer,
            },
        )
        return receipt
