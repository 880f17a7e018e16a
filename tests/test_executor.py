import asyncio

import pytest

from support import StubGenerator, collect, kinds, user_message
from paidagent.application.event_bus import ExecutionEventBus
from paidagent.application.executor import (
    FALLBACK_TEXT,
    WORKING_TEXT,
    ContentAgentExecutor,
    RequestContext,
)
from paidagent.application.prompts import BASE_PROMPT
from paidagent.domain.events.task_event import TaskArtifactUpdateEvent, TaskStatusUpdateEvent
from paidagent.domain.exceptions import GeneratorError
from paidagent.domain.models import DataPart, Message, Role, Task, TaskState, TaskStatus


def _context(message: Message, task: Task | None = None) -> RequestContext:
    return RequestContext(task_id="task-1", context_id="ctx-1", user_message=message, task=task)


@pytest.mark.asyncio
async def test_new_task_publishes_full_lifecycle() -> None:
    generator = StubGenerator("Sydney Sweeney starred in Euphoria.")
    executor = ContentAgentExecutor(generator)
    bus = ExecutionEventBus("task-1")
    message = user_message("who is Sydney Sweeney?")

    await executor.execute(_context(message), bus)
    events = await collect(bus)

    assert kinds(events) == ["submitted", "working", "artifact-update", "completed"]
    submitted, working, artifact, completed = events
    assert isinstance(submitted, Task)
    assert submitted.history == [message]
    assert submitted.artifacts == []
    assert working.status.message.first_text() == WORKING_TEXT
    assert working.final is False
    assert isinstance(artifact, TaskArtifactUpdateEvent)
    assert artifact.append is False
    assert artifact.last_chunk is True
    assert artifact.artifact.parts[0].text == "Sydney Sweeney starred in Euphoria."
    assert isinstance(completed, TaskStatusUpdateEvent)
    assert completed.final is True
    assert completed.status.message.parts == []
    assert [e.final for e in events if isinstance(e, TaskStatusUpdateEvent)] == [False, True]
    assert bus.is_sealed
    assert generator.prompts == [BASE_PROMPT + "who is Sydney Sweeney?"]


@pytest.mark.asyncio
async def test_generator_failure_degrades_to_fallback_text() -> None:
    executor = ContentAgentExecutor(StubGenerator(error=GeneratorError("quota", status_code=429)))
    bus = ExecutionEventBus("task-1")

    await executor.execute(_context(user_message()), bus)
    events = await collect(bus)

    assert kinds(events) == ["submitted", "working", "artifact-update", "completed"]
    assert events[2].artifact.parts[0].text == FALLBACK_TEXT


@pytest.mark.asyncio
async def test_existing_task_skips_submitted() -> None:
    executor = ContentAgentExecutor(StubGenerator())
    bus = ExecutionEventBus("task-1")
    existing = Task(id="task-1", context_id="ctx-1", status=TaskStatus(state=TaskState.WORKING))

    await executor.execute(_context(user_message(), task=existing), bus)

    assert kinds(await collect(bus)) == ["working", "artifact-update", "completed"]


@pytest.mark.asyncio
async def test_message_without_leading_text_part_uses_empty_text() -> None:
    generator = StubGenerator()
    executor = ContentAgentExecutor(generator, prompt="PROMPT:")
    message = Message(message_id="m-1", role=Role.USER, parts=[DataPart(data={"q": 1})])

    await executor.execute(_context(message), ExecutionEventBus("task-1"))

    assert generator.prompts == ["PROMPT:"]


@pytest.mark.asyncio
async def test_cancel_while_generating_ends_canceled_without_artifact() -> None:
    generator = StubGenerator(hold=True)
    executor = ContentAgentExecutor(generator)
    bus = ExecutionEventBus("task-1")

    running = asyncio.create_task(executor.execute(_context(user_message()), bus))
    await generator.started.wait()
    assert await executor.cancel_task("task-1", bus) is True
    generator.release()
    await running

    events = await collect(bus)
    assert kinds(events) == ["submitted", "working", "canceled"]
    assert events[-1].final is True
    assert events[-1].status.message is None
    assert not any(isinstance(e, TaskArtifactUpdateEvent) for e in events)


@pytest.mark.asyncio
async def test_cancel_recorded_before_execution_takes_effect_at_check() -> None:
    executor = ContentAgentExecutor(StubGenerator())
    bus = ExecutionEventBus("task-1")

    assert await executor.cancel_task("task-1", bus) is True
    await executor.execute(_context(user_message()), bus)

    assert kinds(await collect(bus))[-1] == "canceled"


@pytest.mark.asyncio
async def test_cancel_after_terminal_event_is_a_noop() -> None:
    executor = ContentAgentExecutor(StubGenerator())
    bus = ExecutionEventBus("task-1")
    await executor.execute(_context(user_message()), bus)
    published = bus.events

    assert await executor.cancel_task("task-1", bus) is False
    assert await executor.cancel_task("task-1", None) is False
    assert bus.events == published


@pytest.mark.asyncio
async def test_cancellation_state_is_per_executor_instance() -> None:
    first = ContentAgentExecutor(StubGenerator())
    second = ContentAgentExecutor(StubGenerator())
    first_bus = ExecutionEventBus("task-1")
    second_bus = ExecutionEventBus("task-1")

    await first.cancel_task("task-1", first_bus)
    await second.execute(_context(user_message()), second_bus)
    await first.execute(_context(user_message()), first_bus)

    assert kinds(await collect(second_bus))[-1] == "completed"
    assert kinds(await collect(first_bus))[-1] == "canceled"


@pytest.mark.asyncio
async def test_concurrent_tasks_do_not_interfere() -> None:
    generator = StubGenerator(hold=True)
    executor = ContentAgentExecutor(generator)
    buses = {task_id: ExecutionEventBus(task_id) for task_id in ("a", "b")}

    runs = [
        asyncio.create_task(
            executor.execute(
                RequestContext(task_id=task_id, context_id="ctx", user_message=user_message()),
                bus,
            )
        )
        for task_id, bus in buses.items()
    ]
    await generator.started.wait()
    await executor.cancel_task("a", buses["a"])
    generator.release()
    await asyncio.gather(*runs)

    assert kinds(await collect(buses["a"]))[-1] == "canceled"
    assert kinds(await collect(buses["b"]))[-1] == "completed"


@pytest.mark.asyncio
async def test_cancel_request_is_cleared_when_generation_crashes() -> None:
    generator = StubGenerator(error=RuntimeError("socket closed"))
    executor = ContentAgentExecutor(generator)
    crashed_bus = ExecutionEventBus("task-1")

    assert await executor.cancel_task("task-1", crashed_bus) is True
    with pytest.raises(RuntimeError):
        await executor.execute(_context(user_message()), crashed_bus)

    generator.error = None
    retry_bus = ExecutionEventBus("task-1")
    await executor.execute(_context(user_message()), retry_bus)

    assert kinds(await collect(retry_bus))[-1] == "completed"
