import inject

from paidagent.application.event_bus import EventBusManager
from paidagent.application.executor import AgentExecutor, ContentAgentExecutor
from paidagent.application.services import TaskService
from paidagent.domain.models import AgentCard
from paidagent.domain.repositories import ContentGenerator, TaskStore
from paidagent.infrastructure.anthropic.generator import AnthropicContentGenerator
from paidagent.infrastructure.memory.task_store import InMemoryTaskStore
from paidagent.setup.agent_card import build_agent_card
from paidagent.setup.api_config import ApiSettings, get_api_settings


def configure_di(
    settings: ApiSettings | None = None,
    *,
    generator: ContentGenerator | None = None,
) -> None:
    """Bind the server's collaborators into the DI container.

    Raises when the generator credential is missing, so a misconfigured
    process fails at startup instead of on its first task.
    """
    if settings is None:
        settings = get_api_settings()
    if generator is None:
        generator = AnthropicContentGenerator(
            settings.ANTHROPIC_API_KEY,
            model=settings.ANTHROPIC_MODEL,
            max_tokens=settings.ANTHROPIC_MAX_TOKENS,
            base_url=settings.ANTHROPIC_BASE_URL,
            timeout_seconds=settings.GENERATOR_TIMEOUT_SEC,
        )
    store = InMemoryTaskStore()
    buses = EventBusManager()
    executor = ContentAgentExecutor(generator, work_delay=settings.WORK_DELAY_SEC)
    service = TaskService(store=store, executor=executor, buses=buses)

    def _config(binder: inject.Binder) -> None:
        binder.bind(ApiSettings, settings)
        binder.bind(AgentCard, build_agent_card(settings))
        binder.bind(ContentGenerator, generator)
        binder.bind(TaskStore, store)
        binder.bind(EventBusManager, buses)
        binder.bind(AgentExecutor, executor)
        binder.bind(TaskService, service)

    inject.clear_and_configure(_config)
