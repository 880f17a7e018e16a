from typing import Any, Literal

from pydantic import Field

from paidagent.domain.models.artifact import Artifact
from paidagent.domain.models.base import WireModel
from paidagent.domain.models.message import Message
from paidagent.domain.models.task_status import TaskStatus


class Task(WireModel):
    kind: Literal["task"] = "task"
    id: str = Field(description="Unique task identifier.")
    context_id: str = Field(description="Conversation grouping id.")
    status: TaskStatus = Field(description="Current status information.")
    history: list[Message] = Field(
        default_factory=list, description="Messages exchanged so far, oldest first."
    )
    artifacts: list[Artifact] = Field(
        default_factory=list, description="Outputs produced by the task."
    )
    metadata: dict[str, Any] | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.state.is_terminal
