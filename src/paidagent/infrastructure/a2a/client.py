from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from paidagent.domain.events.task_event import SendMessageResult, send_result_adapter
from paidagent.domain.exceptions import RequestFailed
from paidagent.domain.models import (
    AgentCard,
    CancelTaskResult,
    JSONRPCRequest,
    JSONRPCResponse,
    MessageSendParams,
    Task,
)
from paidagent.infrastructure.payments.client import PaymentChallengeClient

logger = logging.getLogger(__name__)

AGENT_CARD_PATH = "/.well-known/agent-card.json"


class A2AClient:
    """JSON-RPC client for the agent, routed through the payment client.

    JSON-RPC errors come back as values (``response.error``); only transport
    and payment failures raise.
    """

    def __init__(self, base_url: str, http: PaymentChallengeClient, rpc_path: str = "/") -> None:
        self._base_url = base_url.rstrip("/")
        self._rpc_url = self._base_url + rpc_path
        self._http = http

    async def get_agent_card(self) -> AgentCard:
        paid = await self._http.request("GET", self._base_url + AGENT_CARD_PATH)
        return AgentCard.model_validate(paid.json())

    async def send_message(self, params: MessageSendParams) -> JSONRPCResponse:
        return await self._call("message/send", params.to_wire())

    async def get_task(self, task_id: str, history_length: int | None = None) -> JSONRPCResponse:
        params: dict[str, Any] = {"id": task_id}
        if history_length is not None:
            params["historyLength"] = history_length
        return await self._call("tasks/get", params)

    async def cancel_task(self, task_id: str) -> JSONRPCResponse:
        return await self._call("tasks/cancel", {"id": task_id})

    async def _call(self, method: str, params: dict[str, Any]) -> JSONRPCResponse:
        request = JSONRPCRequest(id=str(uuid4()), method=method, params=params)
        logger.info("A2A request", extra={"method": method, "url": self._rpc_url})
        body = await self._http.perform_paid_request(self._rpc_url, request.to_wire())
        try:
            return JSONRPCResponse.model_validate(body)
        except ValidationError as exc:
            raise RequestFailed(f"Malformed JSON-RPC response for {method}", body=body) from exc


def parse_send_result(response: JSONRPCResponse) -> SendMessageResult:
    """Interpret a successful ``message/send`` result as a Task or a Message."""
    return send_result_adapter.validate_python(response.result)


def parse_task(response: JSONRPCResponse) -> Task:
    return Task.model_validate(response.result)


def parse_cancel_result(response: JSONRPCResponse) -> CancelTaskResult:
    return CancelTaskResult.model_validate(response.result)
