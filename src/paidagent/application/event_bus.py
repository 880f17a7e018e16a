from __future__ import annotations

import asyncio
import logging

from paidagent.domain.events.task_event import AgentEvent, event_task_id
from paidagent.domain.exceptions import EventBusClosedError, InvalidParamsError

logger = logging.getLogger(__name__)

_SEALED = object()


class EventSubscription:
    """Async iterator over one subscriber's view of a task's events.

    Iteration stops once the bus has been sealed and every queued event has
    been delivered.
    """

    def __init__(self, bus: ExecutionEventBus, queue: asyncio.Queue) -> None:
        self._bus = bus
        self._queue = queue

    def __aiter__(self) -> EventSubscription:
        return self

    async def __anext__(self) -> AgentEvent:
        item = await self._queue.get()
        if item is _SEALED:
            self.close()
            raise StopAsyncIteration
        return item

    def close(self) -> None:
        self._bus._unsubscribe(self._queue)


class ExecutionEventBus:
    """Ordered, append-only event channel for a single task."""

    def __init__(self, task_id: str) -> None:
        self._task_id = task_id
        self._events: list[AgentEvent] = []
        self._subscribers: list[asyncio.Queue] = []
        self._sealed = False

    @property
    def task_id(self) -> str:
        return self._task_id

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def events(self) -> tuple[AgentEvent, ...]:
        return tuple(self._events)

    def publish(self, event: AgentEvent) -> None:
        if self._sealed:
            raise EventBusClosedError(self._task_id)
        if event_task_id(event) != self._task_id:
            raise InvalidParamsError(
                f"Event for task '{event_task_id(event)}' published on bus of task '{self._task_id}'."
            )
        self._events.append(event)
        for queue in self._subscribers:
            queue.put_nowait(event)

    def finished(self) -> None:
        if self._sealed:
            return
        self._sealed = True
        for queue in self._subscribers:
            queue.put_nowait(_SEALED)
        logger.debug(
            "Event bus sealed",
            extra={"task_id": self._task_id, "events": len(self._events)},
        )

    def subscribe(self, *, replay: bool = False) -> EventSubscription:
        """Register a subscriber now; with ``replay`` it first sees past events."""
        queue: asyncio.Queue = asyncio.Queue()
        if replay:
            for event in self._events:
                queue.put_nowait(event)
        if self._sealed:
            queue.put_nowait(_SEALED)
        else:
            self._subscribers.append(queue)
        return EventSubscription(self, queue)

    def _unsubscribe(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)


class EventBusManager:
    """Owns one bus per task id."""

    def __init__(self) -> None:
        self._buses: dict[str, ExecutionEventBus] = {}

    def create(self, task_id: str) -> ExecutionEventBus:
        existing = self._buses.get(task_id)
        if existing is not None and not existing.is_sealed:
            raise InvalidParamsError(f"Task '{task_id}' is already being processed.")
        bus = ExecutionEventBus(task_id)
        self._buses[task_id] = bus
        return bus

    def get(self, task_id: str) -> ExecutionEventBus | None:
        return self._buses.get(task_id)

    def close(self, task_id: str) -> None:
        bus = self._buses.pop(task_id, None)
        if bus is not None:
            bus.finished()
