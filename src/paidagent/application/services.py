from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from uuid import uuid4

import inject

from paidagent.application.event_bus import (
    EventBusManager,
    EventSubscription,
    ExecutionEventBus,
)
from paidagent.application.executor import AgentExecutor, RequestContext
from paidagent.application.handlers import TaskEventHandler
from paidagent.domain.events.task_event import AgentEvent, TaskStatusUpdateEvent, is_final_event
from paidagent.domain.exceptions import InvalidParamsError, TaskNotFoundError
from paidagent.domain.models import (
    CancelTaskResult,
    Message,
    MessageSendParams,
    Task,
    TaskState,
    TaskStatus,
)
from paidagent.domain.repositories import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class _Execution:
    task_id: str
    context_id: str
    bus: ExecutionEventBus
    message: Message
    is_new: bool
    first_applied: asyncio.Event = field(default_factory=asyncio.Event)
    applied: asyncio.Event = field(default_factory=asyncio.Event)


class TaskService:
    """Entry point for agent requests: starts executions and answers queries."""

    def __init__(
        self,
        store: TaskStore | None = None,
        executor: AgentExecutor | None = None,
        buses: EventBusManager | None = None,
        handler: TaskEventHandler | None = None,
    ) -> None:
        self._store = store or inject.instance(TaskStore)
        self._executor = executor or inject.instance(AgentExecutor)
        self._buses = buses or inject.instance(EventBusManager)
        self._handler = handler or TaskEventHandler(self._store)
        self._executions: dict[str, _Execution] = {}
        self._background: set[asyncio.Task] = set()

    async def send_message(self, params: MessageSendParams) -> Task:
        """Start processing ``params.message`` and return the task snapshot.

        Blocking requests (the default) answer once the terminal event has
        been applied to the store; non-blocking ones after the first event.
        """
        execution = await self._start_execution(params.message)
        configuration = params.configuration
        if configuration is None or configuration.blocking:
            await execution.applied.wait()
        else:
            await execution.first_applied.wait()
        history_length = configuration.history_length if configuration else None
        return await self.get_task(execution.task_id, history_length=history_length)

    async def stream_message(self, params: MessageSendParams) -> AsyncIterator[AgentEvent]:
        """Start processing ``params.message`` and yield its events until the task ends."""
        execution = await self._start_execution(params.message)
        subscription = execution.bus.subscribe(replay=True)
        try:
            async for event in subscription:
                yield event
        finally:
            subscription.close()

    async def get_task(self, task_id: str, history_length: int | None = None) -> Task:
        task = await self._store.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        if history_length is not None:
            task.history = task.history[-history_length:] if history_length else []
        return task

    async def cancel_task(self, task_id: str) -> CancelTaskResult:
        task = await self.get_task(task_id)
        if task.is_terminal:
            logger.info(
                "Cancel requested for finished task",
                extra={"task_id": task_id, "state": task.status.state.value},
            )
            return CancelTaskResult(
                task_id=task_id,
                accepted=False,
                task=task,
                reason=f"Task is already {task.status.state.value}.",
            )
        accepted = await self._executor.cancel_task(task_id, self._buses.get(task_id))
        return CancelTaskResult(
            task_id=task_id,
            accepted=accepted,
            task=await self.get_task(task_id),
            reason=None if accepted else "Task is no longer running.",
        )

    async def subscribe(self, task_id: str) -> AsyncIterator[AgentEvent]:
        """Replay a task's events so far, then follow it until its terminal event."""
        task = await self.get_task(task_id)
        bus = self._buses.get(task_id)
        if bus is None:
            yield task
            return
        subscription = bus.subscribe(replay=True)
        try:
            async for event in subscription:
                yield event
        finally:
            subscription.close()

    async def _start_execution(self, message: Message) -> _Execution:
        existing: Task | None = None
        if message.task_id:
            previous = self._executions.get(message.task_id)
            if previous is not None:
                if not previous.bus.is_sealed:
                    raise InvalidParamsError(
                        f"Task '{message.task_id}' is already being processed."
                    )
                # The store trails the bus until the consumer has applied every event.
                await previous.applied.wait()
            existing = await self._store.get(message.task_id)
            if existing is None:
                raise TaskNotFoundError(message.task_id)
            if existing.is_terminal:
                raise InvalidParamsError(
                    f"Task '{existing.id}' is in terminal state "
                    f"'{existing.status.state.value}' and accepts no more messages."
                )
            if message.context_id and message.context_id != existing.context_id:
                raise InvalidParamsError(
                    f"Message context '{message.context_id}' does not match task context "
                    f"'{existing.context_id}'."
                )
            task_id = existing.id
            context_id = existing.context_id
        else:
            task_id = uuid4().hex
            context_id = message.context_id or uuid4().hex

        bus = self._buses.create(task_id)
        message = message.model_copy(update={"task_id": task_id, "context_id": context_id})
        if existing is not None:
            existing.history.append(message)
            await self._store.save(existing)

        execution = _Execution(
            task_id=task_id,
            context_id=context_id,
            bus=bus,
            message=message,
            is_new=existing is None,
        )
        self._executions[task_id] = execution
        # Subscribe before the executor can publish anything.
        subscription = bus.subscribe()
        self._spawn(self._consume(execution, subscription))
        context = RequestContext(
            task_id=task_id, context_id=context_id, user_message=message, task=existing
        )
        self._spawn(self._run(execution, context))
        logger.info(
            "Execution started",
            extra={"task_id": task_id, "context_id": context_id, "new_task": existing is None},
        )
        return execution

    async def _run(self, execution: _Execution, context: RequestContext) -> None:
        try:
            await self._executor.execute(context, execution.bus)
        except Exception as exc:
            logger.exception("Executor failed", extra={"task_id": execution.task_id})
            self._ensure_terminal(execution, f"Task failed: {exc}")
        else:
            self._ensure_terminal(execution, "Task ended without a final status.")

    def _ensure_terminal(self, execution: _Execution, reason: str) -> None:
        bus = execution.bus
        if bus.is_sealed:
            return
        if bus.events and is_final_event(bus.events[-1]):
            bus.finished()
            return
        if execution.is_new and not any(isinstance(event, Task) for event in bus.events):
            bus.publish(
                Task(
                    id=execution.task_id,
                    context_id=execution.context_id,
                    status=TaskStatus(state=TaskState.SUBMITTED),
                    history=[execution.message],
                )
            )
        bus.publish(
            TaskStatusUpdateEvent(
                task_id=execution.task_id,
                context_id=execution.context_id,
                status=TaskStatus(
                    state=TaskState.FAILED,
                    message=Message.agent_text(
                        reason, task_id=execution.task_id, context_id=execution.context_id
                    ),
                ),
                final=True,
            )
        )
        bus.finished()

    async def _consume(self, execution: _Execution, subscription: EventSubscription) -> None:
        try:
            async for event in subscription:
                try:
                    await self._handler.apply(event)
                except Exception:
                    logger.exception(
                        "Failed to apply event",
                        extra={"task_id": execution.task_id, "kind": event.kind},
                    )
                execution.first_applied.set()
        finally:
            execution.first_applied.set()
            execution.applied.set()
            if self._executions.get(execution.task_id) is execution:
                del self._executions[execution.task_id]

    def _spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
