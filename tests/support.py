"""Stubs and helpers shared by the test modules."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from uuid import uuid4

import httpx

from paidagent.application.event_bus import ExecutionEventBus
from paidagent.domain.events.task_event import AgentEvent
from paidagent.domain.models import Message, PaymentChallenge, PaymentProof, Role, TextPart
from paidagent.domain.repositories import ContentGenerator, PaymentSigner


class StubGenerator(ContentGenerator):
    """In-memory ContentGenerator replacement for tests.

    With ``hold=True`` every call parks until ``release()`` so tests can act
    while the generator is in flight.
    """

    def __init__(
        self,
        text: str = "Sydney Sweeney is an American actress.",
        *,
        error: Exception | None = None,
        hold: bool = False,
    ) -> None:
        self.text = text
        self.error = error
        self.prompts: list[str] = []
        self.started = asyncio.Event()
        self._hold = hold
        self._released = asyncio.Event()

    def release(self) -> None:
        self._released.set()

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        self.started.set()
        if self._hold:
            await self._released.wait()
        if self.error is not None:
            raise self.error
        return self.text


class RecordingSigner(PaymentSigner):
    def __init__(self, header: str = "signed-proof") -> None:
        self.header = header
        self.challenges: list[PaymentChallenge] = []

    async def sign(self, challenge: PaymentChallenge) -> PaymentProof:
        self.challenges.append(challenge)
        return PaymentProof(header=self.header)


def user_message(text: str | None = "who is Sydney Sweeney?", **kwargs) -> Message:
    parts = [TextPart(text=text)] if text is not None else []
    return Message(message_id=str(uuid4()), role=Role.USER, parts=parts, **kwargs)


async def collect(bus: ExecutionEventBus) -> list[AgentEvent]:
    return [event async for event in bus.subscribe(replay=True)]


def kinds(events: list[AgentEvent]) -> list[str]:
    """Compact event labels: task state for Task/status events, kind otherwise."""
    labels = []
    for event in events:
        if event.kind == "task":
            labels.append(event.status.state.value)
        elif event.kind == "status-update":
            labels.append(event.status.state.value)
        else:
            labels.append(event.kind)
    return labels


class MockServer:
    """Scripted ``httpx.MockTransport`` handler that records every request."""

    def __init__(self, responses: list[httpx.Response | Callable[[httpx.Request], httpx.Response]]):
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0)
        if callable(response):
            return response(request)
        return response

    def client(self, base_url: str = "http://agent.test") -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=base_url, transport=httpx.MockTransport(self))


def make_signer(*, private_key: str, network: str, facilitator_url: str) -> RecordingSigner:
    """Signer factory loadable through ``PAYMENT_SIGNER=support:make_signer``."""
    signer = RecordingSigner(header=f"{network}:{private_key}")
    signer.facilitator_url = facilitator_url
    return signer
