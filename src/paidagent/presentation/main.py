import logging

import uvicorn
from fastapi import FastAPI

from paidagent.presentation.routes import router as a2a_router
from paidagent.presentation.websockets import router as ws_router
from paidagent.setup.api_config import ApiSettings, get_api_settings
from paidagent.setup.app_config import configure_di
from paidagent.setup.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings: ApiSettings | None = None) -> FastAPI:
    if settings is None:
        settings = get_api_settings()
    configure_logging(settings.LOG_LEVEL)
    configure_di(settings)

    app = FastAPI(
        title=settings.AGENT_NAME,
        version=settings.APP_VERSION,
        description="A2A agent answering movie questions",
    )
    app.include_router(a2a_router, prefix="")
    app.include_router(ws_router, prefix="")
    return app


def serve() -> None:
    settings = get_api_settings()
    app = create_app(settings)
    logger.info(
        "Agent server starting",
        extra={
            "url": f"http://localhost:{settings.PORT}",
            "agent_card": f"http://localhost:{settings.PORT}/.well-known/agent-card.json",
            "environment": settings.ENVIRONMENT,
        },
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    serve()
