from paidagent.domain.models.agent_card import (
    AgentCapabilities,
    AgentCard,
    AgentProvider,
    AgentSkill,
)
from paidagent.domain.models.artifact import Artifact
from paidagent.domain.models.jsonrpc import (
    CancelTaskResult,
    JSONRPCError,
    JSONRPCRequest,
    JSONRPCResponse,
    MessageSendConfiguration,
    MessageSendParams,
    TaskIdParams,
    TaskQueryParams,
)
from paidagent.domain.models.message import Message, Role
from paidagent.domain.models.parts import DataPart, Part, TextPart
from paidagent.domain.models.payment import PaymentChallenge, PaymentProof, PaymentReceipt
from paidagent.domain.models.task import Task
from paidagent.domain.models.task_state import TERMINAL_STATES, TaskState
from paidagent.domain.models.task_status import TaskStatus

__all__ = [
    "AgentCapabilities",
    "AgentCard",
    "AgentProvider",
    "AgentSkill",
    "Artifact",
    "CancelTaskResult",
    "DataPart",
    "JSONRPCError",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "Message",
    "MessageSendConfiguration",
    "MessageSendParams",
    "Part",
    "PaymentChallenge",
    "PaymentProof",
    "PaymentReceipt",
    "Role",
    "TERMINAL_STATES",
    "Task",
    "TaskIdParams",
    "TaskQueryParams",
    "TaskState",
    "TaskStatus",
    "TextPart",
]
