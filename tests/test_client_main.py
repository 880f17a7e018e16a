import json

import httpx
import pytest

from support import MockServer, RecordingSigner
from paidagent.client.main import ConfigurationError, _main, load_signer, run
from paidagent.infrastructure.a2a.client import A2AClient
from paidagent.infrastructure.payments import PaymentChallengeClient
from paidagent.setup.client_config import ClientSettings

COMPLETED_TASK = {
    "kind": "task",
    "id": "task-1",
    "contextId": "ctx-1",
    "status": {"state": "completed"},
    "artifacts": [
        {"artifactId": "a-1", "parts": [{"kind": "text", "text": "Sydney Sweeney is an actress."}]}
    ],
}


def _reply(result=None, error=None):
    def respond(request: httpx.Request) -> httpx.Response:
        body = {"jsonrpc": "2.0", "id": json.loads(request.content)["id"]}
        if error is not None:
            body["error"] = error
        else:
            body["result"] = result
        return httpx.Response(200, json=body)

    return respond


def _client(server: MockServer) -> A2AClient:
    return A2AClient("http://agent.test", PaymentChallengeClient(RecordingSigner(), client=server.client()))


def test_load_signer_requires_private_key() -> None:
    with pytest.raises(ConfigurationError, match="PRIVATE_KEY"):
        load_signer(ClientSettings(PRIVATE_KEY=None, PAYMENT_SIGNER="support:make_signer"))


@pytest.mark.parametrize("target", [None, "support", "support:missing", "no_such_module:factory"])
def test_load_signer_rejects_unusable_factory(target: str | None) -> None:
    with pytest.raises(ConfigurationError):
        load_signer(ClientSettings(PRIVATE_KEY="0xkey", PAYMENT_SIGNER=target))


def test_load_signer_builds_configured_signer() -> None:
    settings = ClientSettings(
        PRIVATE_KEY="0xkey",
        PAYMENT_SIGNER="support:make_signer",
        NETWORK="base",
        FACILITATOR_URL="https://facilitator.test",
    )

    signer = load_signer(settings)

    assert signer.header == "base:0xkey"
    assert signer.facilitator_url == "https://facilitator.test"


@pytest.mark.asyncio
async def test_run_prints_task_answer(capsys: pytest.CaptureFixture[str]) -> None:
    server = MockServer([_reply(COMPLETED_TASK), _reply(COMPLETED_TASK)])

    task = await run(_client(server), "who is Sydney Sweeney?")

    out = capsys.readouterr().out
    assert task.id == "task-1"
    assert [json.loads(r.content)["method"] for r in server.requests] == ["message/send", "tasks/get"]
    assert "Task created: task-1" in out
    assert "Task status: completed" in out
    assert "Sydney Sweeney is an actress." in out


@pytest.mark.asyncio
async def test_run_prints_direct_message(capsys: pytest.CaptureFixture[str]) -> None:
    message = {"kind": "message", "messageId": "m", "role": "agent", "parts": [{"kind": "text", "text": "Hello!"}]}
    server = MockServer([_reply(message)])

    await run(_client(server), "hi")

    out = capsys.readouterr().out
    assert "AI Response (Direct Message)" in out
    assert "Hello!" in out
    assert len(server.requests) == 1


@pytest.mark.asyncio
async def test_run_reports_json_rpc_error(capsys: pytest.CaptureFixture[str]) -> None:
    server = MockServer([_reply(error={"code": -32603, "message": "Internal error: boom"})])

    assert await run(_client(server), "hi") is None
    assert "Error sending message: Internal error: boom" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_main_exits_nonzero_without_private_key() -> None:
    assert await _main(ClientSettings(PRIVATE_KEY=None)) == 1
