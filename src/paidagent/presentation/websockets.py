from __future__ import annotations

import logging

import inject
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from paidagent.application.services import TaskService
from paidagent.domain.exceptions import TaskNotFoundError

router = APIRouter(tags=["ws"])
logger = logging.getLogger(__name__)

TASK_NOT_FOUND_CLOSE_CODE = 4404


@router.websocket("/ws/tasks/{task_id}")
async def task_updates(websocket: WebSocket, task_id: str) -> None:
    """Send every event of the task (past and live), then close."""
    service = inject.instance(TaskService)
    await websocket.accept()
    try:
        async for event in service.subscribe(task_id):
            await websocket.send_json(event.to_wire())
        await websocket.close()
    except TaskNotFoundError as exc:
        await websocket.close(code=TASK_NOT_FOUND_CLOSE_CODE, reason=exc.message)
    except WebSocketDisconnect:
        logger.info("Task stream client disconnected", extra={"task_id": task_id})
