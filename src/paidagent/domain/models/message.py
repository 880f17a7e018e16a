from enum import Enum
from typing import Any, Literal
from uuid import uuid4

from pydantic import Field

from paidagent.domain.models.base import WireModel
from paidagent.domain.models.parts import Part, TextPart


class Role(str, Enum):
    USER = "user"
    AGENT = "agent"


class Message(WireModel):
    kind: Literal["message"] = "message"
    message_id: str = Field(description="Sender-generated id, unique per send.")
    role: Role = Field(description="Author of the message.")
    parts: list[Part] = Field(default_factory=list, description="Ordered content parts.")
    task_id: str | None = Field(default=None, description="Task this message belongs to.")
    context_id: str | None = Field(default=None, description="Conversation grouping id.")
    metadata: dict[str, Any] | None = None

    def first_text(self) -> str:
        """Text of the first part, or an empty string when it is not a text part."""
        if self.parts and isinstance(self.parts[0], TextPart):
            return self.parts[0].text
        return ""

    @classmethod
    def agent_text(
        cls, text: str | None, *, task_id: str, context_id: str
    ) -> "Message":
        parts = [TextPart(text=text)] if text is not None else []
        return cls(
            message_id=str(uuid4()),
            role=Role.AGENT,
            parts=parts,
            task_id=task_id,
            context_id=context_id,
        )
