from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter

from paidagent.domain.models.artifact import Artifact
from paidagent.domain.models.base import WireModel
from paidagent.domain.models.message import Message
from paidagent.domain.models.task import Task
from paidagent.domain.models.task_status import TaskStatus


class TaskStatusUpdateEvent(WireModel):
    kind: Literal["status-update"] = "status-update"
    task_id: str
    context_id: str
    status: TaskStatus
    final: bool = Field(default=False, description="True only on the last event of a task.")
    metadata: dict[str, Any] | None = None


class TaskArtifactUpdateEvent(WireModel):
    kind: Literal["artifact-update"] = "artifact-update"
    task_id: str
    context_id: str
    artifact: Artifact
    append: bool = Field(
        default=False, description="Extend a previously sent artifact instead of replacing it."
    )
    last_chunk: bool = Field(default=True, description="No more chunks follow for this artifact.")
    metadata: dict[str, Any] | None = None


AgentEvent = Annotated[
    Union[Task, TaskStatusUpdateEvent, TaskArtifactUpdateEvent],
    Field(discriminator="kind"),
]

SendMessageResult = Annotated[Union[Task, Message], Field(discriminator="kind")]

send_result_adapter: TypeAdapter[SendMessageResult] = TypeAdapter(SendMessageResult)


def event_task_id(event: AgentEvent) -> str:
    if isinstance(event, Task):
        return event.id
    return event.task_id


def is_final_event(event: AgentEvent) -> bool:
    return isinstance(event, TaskStatusUpdateEvent) and event.final
