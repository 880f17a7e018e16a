from datetime import datetime, timezone

from pydantic import Field

from paidagent.domain.models.base import WireModel
from paidagent.domain.models.message import Message
from paidagent.domain.models.task_state import TaskState


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStatus(WireModel):
    state: TaskState = Field(description="Lifecycle state.")
    timestamp: datetime = Field(default_factory=_utcnow, description="When the state was entered.")
    message: Message | None = Field(
        default=None, description="Optional human-readable status message."
    )
