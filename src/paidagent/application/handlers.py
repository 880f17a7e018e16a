import logging
from collections.abc import Awaitable, Callable

import inject

from paidagent.domain.events.task_event import (
    AgentEvent,
    TaskArtifactUpdateEvent,
    TaskStatusUpdateEvent,
)
from paidagent.domain.exceptions import TaskNotFoundError
from paidagent.domain.models.artifact import Artifact
from paidagent.domain.models.task import Task
from paidagent.domain.repositories import TaskStore

logger = logging.getLogger(__name__)


class TaskEventHandler:
    """Applies published events to the stored task snapshot."""

    def __init__(self, store: TaskStore | None = None) -> None:
        self._store = store or inject.instance(TaskStore)
        self._handlers: dict[str, Callable[..., Awaitable[None]]] = {
            "task": self.handle_task_event,
            "status-update": self.handle_status_event,
            "artifact-update": self.handle_artifact_event,
        }

    async def apply(self, event: AgentEvent) -> None:
        """Route ``event`` to the handler for its ``kind``."""
        await self._handlers[event.kind](event)

    async def handle_task_event(self, event: Task) -> None:
        await self._store.save(event)

    async def handle_status_event(self, event: TaskStatusUpdateEvent) -> None:
        task = await self._load(event.task_id)
        # The replaced status message becomes part of the conversation.
        if task.status.message is not None:
            task.history.append(task.status.message)
        task.status = event.status
        if event.metadata:
            task.metadata = {**(task.metadata or {}), **event.metadata}
        await self._store.save(task)
        if event.final:
            logger.info(
                "Task reached terminal state",
                extra={"task_id": task.id, "state": task.status.state.value},
            )

    async def handle_artifact_event(self, event: TaskArtifactUpdateEvent) -> None:
        task = await self._load(event.task_id)
        incoming = event.artifact
        index = _artifact_index(task.artifacts, incoming.artifact_id)
        if index is None:
            task.artifacts.append(incoming)
        elif event.append:
            existing = task.artifacts[index]
            existing.parts.extend(incoming.parts)
            if incoming.metadata:
                existing.metadata = {**(existing.metadata or {}), **incoming.metadata}
        else:
            task.artifacts[index] = incoming
        await self._store.save(task)

    async def _load(self, task_id: str) -> Task:
        task = await self._store.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task


def _artifact_index(artifacts: list[Artifact], artifact_id: str) -> int | None:
    for idx, artifact in enumerate(artifacts):
        if artifact.artifact_id == artifact_id:
            return idx
    return None
