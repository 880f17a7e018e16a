from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from paidagent.domain.models.base import WireModel
from paidagent.domain.models.message import Message
from paidagent.domain.models.task import Task

JSONRPC_VERSION = "2.0"


class MessageSendConfiguration(WireModel):
    blocking: bool = Field(
        default=True, description="Wait for the terminal event before answering."
    )
    accepted_output_modes: list[str] | None = None
    history_length: int | None = Field(default=None, ge=0)


class MessageSendParams(WireModel):
    message: Message
    configuration: MessageSendConfiguration | None = None
    metadata: dict[str, Any] | None = None


class TaskQueryParams(WireModel):
    id: str = Field(description="Task identifier.")
    history_length: int | None = Field(default=None, ge=0)


class TaskIdParams(WireModel):
    id: str = Field(description="Task identifier.")


class CancelTaskResult(WireModel):
    """Outcome of a cancel request; ``accepted`` is false once the task has finished."""

    task_id: str
    accepted: bool
    task: Task | None = None
    reason: str | None = None


class JSONRPCRequest(WireModel):
    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: str | int | None = None
    method: str
    params: dict[str, Any] | None = None


class JSONRPCError(WireModel):
    code: int
    message: str
    data: Any | None = None


class JSONRPCResponse(WireModel):
    """Either ``result`` or ``error`` is set, never both."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: str | int | None = None
    result: Any | None = None
    error: JSONRPCError | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_wire(self) -> dict[str, Any]:
        body: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            body["error"] = self.error.to_wire()
        else:
            body["result"] = self.result
        return body
