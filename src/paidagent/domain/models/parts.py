from typing import Annotated, Any, Literal, Union

from pydantic import Field

from paidagent.domain.models.base import WireModel


class TextPart(WireModel):
    kind: Literal["text"] = "text"
    text: str = Field(description="Plain text content.")
    metadata: dict[str, Any] | None = None


class DataPart(WireModel):
    """Structured part; accepted on input but never produced by the agent."""

    kind: Literal["data"] = "data"
    data: dict[str, Any] = Field(description="Arbitrary JSON object.")
    metadata: dict[str, Any] | None = None


Part = Annotated[Union[TextPart, DataPart], Field(discriminator="kind")]
