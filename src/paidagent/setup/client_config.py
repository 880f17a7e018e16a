from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Configuration for the paying agent client."""
    PRIVATE_KEY: str | None = None
    PAYMENT_SIGNER: str | None = None
    FACILITATOR_URL: str = "https://facilitator.x402.io"
    SERVER_URL: str = "http://localhost:41243"
    NETWORK: str = "base-sepolia"
    USER_MESSAGE: str = "who is Sydney Sweeney?"
    REQUEST_TIMEOUT_SEC: float | None = None
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(env_file=".env", extra="ignore")


def get_client_settings() -> ClientSettings:
    """Return a fresh client settings instance."""
    return ClientSettings()
