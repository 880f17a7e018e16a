from typing import Any

from pydantic import Field

from paidagent.domain.models.base import WireModel
from paidagent.domain.models.parts import Part


class Artifact(WireModel):
    artifact_id: str = Field(description="Unique artifact identifier within the task.")
    name: str | None = None
    description: str | None = None
    parts: list[Part] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None
