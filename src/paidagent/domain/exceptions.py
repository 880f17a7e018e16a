class ProtocolError(Exception):
    """Out-of-contract request at the agent boundary, reported as a JSON-RPC error."""

    code = -32603

    def __init__(self, message: str, data: object | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data


class ParseError(ProtocolError):
    code = -32700


class InvalidRequestError(ProtocolError):
    code = -32600


class MethodNotFoundError(ProtocolError):
    code = -32601

    def __init__(self, method: str) -> None:
        super().__init__(f"Method '{method}' not found.", data={"method": method})
        self.method = method


class InvalidParamsError(ProtocolError):
    code = -32602


class TaskNotFoundError(ProtocolError):
    """Raised when a task identifier does not exist in the task store."""

    code = -32001

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id '{task_id}' was not found.", data={"taskId": task_id})
        self.task_id = task_id


class EventBusClosedError(ProtocolError):
    """Raised when an event is published after the task's channel was sealed."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Event bus for task '{task_id}' is already finished.")
        self.task_id = task_id


class GeneratorError(Exception):
    """The content generator could not produce text (transport, auth, quota)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RequestFailed(Exception):
    """An outbound HTTP request ended in a transport error or a non-2xx response."""

    def __init__(
        self, message: str, status_code: int | None = None, body: object | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class PaymentRequestError(RequestFailed):
    """The single retried, paid request failed; no further retry is made."""


class PaymentChallengeError(Exception):
    """A 402 challenge could not be decoded."""
