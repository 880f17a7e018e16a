from __future__ import annotations

from typing import Protocol

from paidagent.domain.models.payment import PaymentChallenge, PaymentProof
from paidagent.domain.models.task import Task


class TaskStore(Protocol):
    """Repository contract for task snapshots keyed by task id."""

    async def save(self, task: Task) -> None:
        """Insert or replace the snapshot for ``task.id``."""

    async def get(self, task_id: str) -> Task | None:
        """Return a copy of the snapshot, or ``None`` for an unknown id."""

    async def delete(self, task_id: str) -> None:
        """Drop the snapshot for ``task_id`` if present."""

    async def list_tasks(self, context_id: str | None = None) -> list[Task]:
        """Return copies of all snapshots, optionally limited to one context."""


class ContentGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        """Return generated text; raise ``GeneratorError`` on any failure."""


class PaymentSigner(Protocol):
    async def sign(self, challenge: PaymentChallenge) -> PaymentProof:
        """Build a proof that satisfies ``challenge``."""
