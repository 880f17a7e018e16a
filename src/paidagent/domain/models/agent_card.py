from pydantic import Field

from paidagent.domain.models.base import WireModel


class AgentProvider(WireModel):
    organization: str
    url: str


class AgentCapabilities(WireModel):
    streaming: bool = False
    push_notifications: bool = False
    state_transition_history: bool = False


class AgentSkill(WireModel):
    id: str
    name: str
    description: str
    tags: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    input_modes: list[str] | None = None
    output_modes: list[str] | None = None


class AgentCard(WireModel):
    """Self-description served at ``/.well-known/agent-card.json``."""

    name: str
    description: str
    url: str
    provider: AgentProvider | None = None
    protocol_version: str = "0.3.0"
    version: str
    capabilities: AgentCapabilities = Field(default_factory=AgentCapabilities)
    default_input_modes: list[str] = Field(default_factory=lambda: ["text/plain"])
    default_output_modes: list[str] = Field(default_factory=lambda: ["text/plain"])
    skills: list[AgentSkill] = Field(default_factory=list)
    supports_authenticated_extended_card: bool = False
