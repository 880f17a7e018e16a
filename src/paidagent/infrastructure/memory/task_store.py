from __future__ import annotations

import logging

from paidagent.domain.models.task import Task
from paidagent.domain.repositories import TaskStore

logger = logging.getLogger(__name__)


class InMemoryTaskStore(TaskStore):
    """Process-local task storage.

    Snapshots are copied on the way in and on the way out so callers can never
    mutate stored state through a returned object.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    async def save(self, task: Task) -> None:
        self._tasks[task.id] = task.model_copy(deep=True)
        logger.debug(
            "Task saved",
            extra={"task_id": task.id, "state": task.status.state.value},
        )

    async def get(self, task_id: str) -> Task | None:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        return task.model_copy(deep=True)

    async def delete(self, task_id: str) -> None:
        self._tasks.pop(task_id, None)

    async def list_tasks(self, context_id: str | None = None) -> list[Task]:
        return [
            task.model_copy(deep=True)
            for task in self._tasks.values()
            if context_id is None or task.context_id == context_id
        ]
