from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

import inject

from paidagent.application.event_bus import ExecutionEventBus
from paidagent.application.prompts import BASE_PROMPT
from paidagent.domain.events.task_event import (
    TaskArtifactUpdateEvent,
    TaskStatusUpdateEvent,
)
from paidagent.domain.exceptions import GeneratorError
from paidagent.domain.models import (
    Artifact,
    Message,
    Task,
    TaskState,
    TaskStatus,
    TextPart,
)
from paidagent.domain.repositories import ContentGenerator

logger = logging.getLogger(__name__)

WORKING_TEXT = "Finding your movie information..."
FALLBACK_TEXT = "Sorry, there was an error contacting the Anthropic API."


@dataclass(frozen=True)
class RequestContext:
    """Everything an executor needs to know about one inbound message."""

    task_id: str
    context_id: str
    user_message: Message
    task: Task | None = None


class AgentExecutor(Protocol):
    async def execute(self, context: RequestContext, event_bus: ExecutionEventBus) -> None:
        """Drive the task to a terminal state, publishing every step on ``event_bus``."""

    async def cancel_task(self, task_id: str, event_bus: ExecutionEventBus | None) -> bool:
        """Request cooperative cancellation; return False when the task already finished."""


class ContentAgentExecutor(AgentExecutor):
    """Answers a user message with a single generated text artifact.

    Lifecycle: ``submitted`` (new tasks only) -> ``working`` -> artifact +
    ``completed``, or ``canceled`` when a cancel request was recorded by the
    time the generator returns. Generator failures degrade to a fixed
    apology instead of failing the task.
    """

    def __init__(
        self,
        generator: ContentGenerator | None = None,
        *,
        prompt: str = BASE_PROMPT,
        work_delay: float = 0.0,
    ) -> None:
        self._generator = generator or inject.instance(ContentGenerator)
        self._prompt = prompt
        self._work_delay = work_delay
        self._cancelled: set[str] = set()

    async def cancel_task(self, task_id: str, event_bus: ExecutionEventBus | None) -> bool:
        if event_bus is None or event_bus.is_sealed:
            logger.info("Cancel ignored, task already finished", extra={"task_id": task_id})
            return False
        self._cancelled.add(task_id)
        logger.info("Cancel recorded", extra={"task_id": task_id})
        return True

    async def execute(self, context: RequestContext, event_bus: ExecutionEventBus) -> None:
        user_message = context.user_message
        task_id = context.task_id
        context_id = context.context_id
        message_text = user_message.first_text()

        logger.info(
            "Processing message",
            extra={
                "task_id": task_id,
                "context_id": context_id,
                "message_id": user_message.message_id,
            },
        )

        if context.task is None:
            event_bus.publish(
                Task(
                    id=task_id,
                    context_id=context_id,
                    status=TaskStatus(state=TaskState.SUBMITTED),
                    history=[user_message],
                    artifacts=[],
                    metadata=user_message.metadata,
                )
            )

        event_bus.publish(
            TaskStatusUpdateEvent(
                task_id=task_id,
                context_id=context_id,
                status=TaskStatus(
                    state=TaskState.WORKING,
                    message=Message.agent_text(
                        WORKING_TEXT, task_id=task_id, context_id=context_id
                    ),
                ),
                final=False,
            )
        )

        try:
            if self._work_delay > 0:
                await asyncio.sleep(self._work_delay)
            try:
                response_text = await self._generator.generate(self._prompt + message_text)
            except GeneratorError as exc:
                logger.warning(
                    "Content generation failed, using fallback text",
                    extra={"task_id": task_id, "error": str(exc), "status_code": exc.status_code},
                )
                response_text = FALLBACK_TEXT
            cancelled = task_id in self._cancelled
        finally:
            self._cancelled.discard(task_id)

        if cancelled:
            logger.info("Request cancelled", extra={"task_id": task_id})
            event_bus.publish(
                TaskStatusUpdateEvent(
                    task_id=task_id,
                    context_id=context_id,
                    status=TaskStatus(state=TaskState.CANCELED),
                    final=True,
                )
            )
            event_bus.finished()
            return

        event_bus.publish(
            TaskArtifactUpdateEvent(
                task_id=task_id,
                context_id=context_id,
                artifact=Artifact(
                    artifact_id=f"artifact-{uuid4()}",
                    name=f"Generated Response {uuid4().hex[:8]}",
                    parts=[TextPart(text=response_text)],
                ),
                append=False,
                last_chunk=True,
            )
        )
        event_bus.publish(
            TaskStatusUpdateEvent(
                task_id=task_id,
                context_id=context_id,
                status=TaskStatus(
                    state=TaskState.COMPLETED,
                    message=Message.agent_text(None, task_id=task_id, context_id=context_id),
                ),
                final=True,
            )
        )
        event_bus.finished()
