from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import inject
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from paidagent.application.services import TaskService
from paidagent.domain.exceptions import (
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
)
from paidagent.domain.models import (
    AgentCard,
    JSONRPCError,
    JSONRPCRequest,
    JSONRPCResponse,
    MessageSendParams,
    TaskIdParams,
    TaskQueryParams,
)

router = APIRouter(tags=["a2a"])
logger = logging.getLogger(__name__)


def _service() -> TaskService:
    return inject.instance(TaskService)


def _error_response(request_id: str | int | None, exc: ProtocolError) -> JSONRPCResponse:
    return JSONRPCResponse(
        id=request_id,
        error=JSONRPCError(code=exc.code, message=exc.message, data=exc.data),
    )


def _validate(model: type, params: dict[str, Any] | None):
    try:
        return model.model_validate(params or {})
    except ValidationError as exc:
        raise InvalidParamsError(
            "Invalid parameters", data=exc.errors(include_url=False, include_context=False)
        ) from exc


async def _parse_request(request: Request) -> JSONRPCRequest:
    try:
        body = await request.json()
    except ValueError as exc:
        raise ParseError("Request body is not valid JSON") from exc
    try:
        return JSONRPCRequest.model_validate(body)
    except ValidationError as exc:
        raise InvalidRequestError(
            "Request is not a valid JSON-RPC 2.0 request",
            data=exc.errors(include_url=False, include_context=False),
        ) from exc


async def _dispatch(rpc: JSONRPCRequest) -> Any:
    service = _service()
    if rpc.method == "message/send":
        params = _validate(MessageSendParams, rpc.params)
        task = await service.send_message(params)
        return task.to_wire()
    if rpc.method == "tasks/get":
        query = _validate(TaskQueryParams, rpc.params)
        task = await service.get_task(query.id, history_length=query.history_length)
        return task.to_wire()
    if rpc.method == "tasks/cancel":
        ids = _validate(TaskIdParams, rpc.params)
        result = await service.cancel_task(ids.id)
        return result.to_wire()
    raise MethodNotFoundError(rpc.method)


async def _stream(rpc: JSONRPCRequest, params: MessageSendParams) -> AsyncIterator[str]:
    events = _service().stream_message(params)
    try:
        async for event in events:
            response = JSONRPCResponse(id=rpc.id, result=event.to_wire())
            yield f"data: {json.dumps(response.to_wire())}\n\n"
    except ProtocolError as exc:
        yield f"data: {json.dumps(_error_response(rpc.id, exc).to_wire())}\n\n"


@router.post(
    "/",
    summary="A2A JSON-RPC endpoint",
    description=(
        "Dispatches `message/send`, `message/stream`, `tasks/get` and `tasks/cancel`. "
        "Errors are returned as JSON-RPC error objects with HTTP 200."
    ),
)
async def jsonrpc(request: Request):
    request_id: str | int | None = None
    try:
        rpc = await _parse_request(request)
        request_id = rpc.id
        if rpc.method == "message/stream":
            params = _validate(MessageSendParams, rpc.params)
            return StreamingResponse(_stream(rpc, params), media_type="text/event-stream")
        result = await _dispatch(rpc)
        response = JSONRPCResponse(id=request_id, result=result)
    except ProtocolError as exc:
        logger.info(
            "JSON-RPC request rejected",
            extra={"code": exc.code, "error": exc.message},
        )
        response = _error_response(request_id, exc)
    except Exception as exc:
        logger.exception("JSON-RPC request failed")
        response = _error_response(request_id, ProtocolError(f"Internal error: {exc}"))
    return JSONResponse(response.to_wire())


@router.get(
    "/.well-known/agent-card.json",
    summary="Agent card",
    description="Describes the agent's identity, capabilities and skills.",
)
async def agent_card():
    return JSONResponse(inject.instance(AgentCard).to_wire())
