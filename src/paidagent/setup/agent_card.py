from paidagent.domain.models import (
    AgentCapabilities,
    AgentCard,
    AgentProvider,
    AgentSkill,
)
from paidagent.setup.api_config import ApiSettings


def build_agent_card(settings: ApiSettings) -> AgentCard:
    return AgentCard(
        name=settings.AGENT_NAME,
        description="An agent that can answer questions about movies and actors.",
        url=settings.agent_url,
        provider=AgentProvider(
            organization=settings.AGENT_ORGANIZATION,
            url=settings.AGENT_PROVIDER_URL,
        ),
        version=settings.APP_VERSION,
        capabilities=AgentCapabilities(
            streaming=True,
            push_notifications=False,
            state_transition_history=True,
        ),
        default_input_modes=["text/plain"],
        default_output_modes=["text/plain"],
        skills=[
            AgentSkill(
                id="general_movie_chat",
                name="General Movie Chat",
                description="Answer general questions or chat about movies, actors, directors.",
                tags=["movies", "actors", "directors"],
                examples=[
                    "Tell me about the plot of Inception.",
                    "Recommend a good sci-fi movie.",
                    "Who directed The Matrix?",
                    "What other movies has Scarlett Johansson been in?",
                    "Find action movies starring Keanu Reeves",
                    "Which came out first, Jurassic Park or Terminator 2?",
                ],
                input_modes=["text/plain"],
                output_modes=["text/plain"],
            )
        ],
        supports_authenticated_extended_card=False,
    )
