from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class ApiSettings(BaseSettings):
    """Configuration for the agent server process."""
    HOST: str = "0.0.0.0"
    PORT: int = 41243
    PUBLIC_URL: str | None = None
    AGENT_NAME: str = "Movie Agent"
    AGENT_ORGANIZATION: str = "A2A Agents"
    AGENT_PROVIDER_URL: str = "https://example.com/a2a-agents"
    APP_VERSION: str = "0.0.2"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    ANTHROPIC_API_KEY: str
    ANTHROPIC_MODEL: str = "claude-3-opus-20240229"
    ANTHROPIC_MAX_TOKENS: int = 512
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"
    GENERATOR_TIMEOUT_SEC: float | None = None
    WORK_DELAY_SEC: float = 0.0

    model_config = ConfigDict(env_file=".env", extra="ignore")

    @property
    def agent_url(self) -> str:
        return self.PUBLIC_URL or f"http://localhost:{self.PORT}/"


def get_api_settings() -> ApiSettings:
    return ApiSettings()  # type: ignore[call-arg]
