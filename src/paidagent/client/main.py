"""Send one message to the agent, paying for each call when asked to."""

import asyncio
import importlib
import logging
import sys
from collections.abc import Callable
from uuid import uuid4

from paidagent.domain.exceptions import RequestFailed
from paidagent.domain.models import (
    Message,
    MessageSendConfiguration,
    MessageSendParams,
    Role,
    Task,
    TextPart,
)
from paidagent.domain.repositories import PaymentSigner
from paidagent.infrastructure.a2a.client import A2AClient, parse_send_result, parse_task
from paidagent.infrastructure.payments.client import PaymentChallengeClient
from paidagent.setup.client_config import ClientSettings, get_client_settings
from paidagent.setup.logging_config import configure_logging

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when a required client setting is missing or unusable."""


def load_signer(settings: ClientSettings) -> PaymentSigner:
    """Build the signer named by ``PAYMENT_SIGNER`` (``module:callable``)."""
    if not settings.PRIVATE_KEY:
        raise ConfigurationError("PRIVATE_KEY is required in the .env file")
    if not settings.PAYMENT_SIGNER or ":" not in settings.PAYMENT_SIGNER:
        raise ConfigurationError("PAYMENT_SIGNER must name a signer factory as 'module:callable'")
    module_name, _, attr = settings.PAYMENT_SIGNER.partition(":")
    try:
        factory: Callable[..., PaymentSigner] = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(f"Cannot load signer factory {settings.PAYMENT_SIGNER!r}") from exc
    return factory(
        private_key=settings.PRIVATE_KEY,
        network=settings.NETWORK,
        facilitator_url=settings.FACILITATOR_URL,
    )


def build_send_params(text: str) -> MessageSendParams:
    return MessageSendParams(
        message=Message(
            message_id=str(uuid4()),
            role=Role.USER,
            parts=[TextPart(text=text)],
        ),
        configuration=MessageSendConfiguration(
            blocking=True,
            accepted_output_modes=["text/plain"],
        ),
    )


async def run(client: A2AClient, user_message: str) -> Task | Message | None:
    """Send ``user_message`` and print the agent's answer."""
    print("\n=== Sending message to AI agent ===")
    send_response = await client.send_message(build_send_params(user_message))
    if send_response.error is not None:
        print(f"[Client] Error sending message: {send_response.error.message}")
        return None

    result = parse_send_result(send_response)
    print("\n=== Processing response ===")
    if isinstance(result, Message):
        print("\n=== AI Response (Direct Message) ===")
        print(result.first_text())
        return result

    print(f"[Client] Task created: {result.id}")
    print("\n=== Getting task status ===")
    get_response = await client.get_task(result.id)
    if get_response.error is not None:
        print(f"[Client] Error getting task {result.id}: {get_response.error.message}")
        return None

    task = parse_task(get_response)
    print(f"[Client] Task status: {task.status.state.value}")
    if task.artifacts:
        print("\n=== AI Response ===")
        for part in task.artifacts[0].parts:
            if isinstance(part, TextPart):
                print(part.text)
    return task


async def _main(settings: ClientSettings) -> int:
    try:
        signer = load_signer(settings)
    except ConfigurationError as exc:
        logger.error("Client configuration error: %s", exc)
        return 1

    logger.info(
        "x402 client configuration",
        extra={
            "network": settings.NETWORK,
            "server_url": settings.SERVER_URL,
            "facilitator_url": settings.FACILITATOR_URL,
        },
    )
    http = PaymentChallengeClient(signer, timeout_seconds=settings.REQUEST_TIMEOUT_SEC)
    try:
        await run(A2AClient(settings.SERVER_URL, http), settings.USER_MESSAGE)
    except RequestFailed as exc:
        logger.error(
            "Request failed: %s", exc, extra={"status_code": exc.status_code, "body": exc.body}
        )
        return 1
    finally:
        await http.aclose()
    return 0


def main() -> None:
    settings = get_client_settings()
    configure_logging(settings.LOG_LEVEL)
    sys.exit(asyncio.run(_main(settings)))


if __name__ == "__main__":
    main()
