from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from skrbl.schemas.agent import BrandingRequest, SocialBotRequest
from skrbl.services.agents import branding, social_bot


@dataclass(frozen=True)
class AgentDefinition:
    id: str
    name: str
    description: str
    request_model: Type[BaseModel]
    generate: Callable[..., Awaitable[dict]]
    workflow: str


AGENTS: Dict[str, AgentDefinition] = {
    social_bot.AGENT_ID: AgentDefinition(
        id=social_bot.AGENT_ID,
        name="Social Bot",
        description="AI-powered social media content generation and management",
        request_model=SocialBotRequest,
        generate=social_bot.generate_social_content,
        workflow="social-content",
    ),
    branding.AGENT_ID: AgentDefinition(
        id=branding.AGENT_ID,
        name="Branding",
        description="AI-powered brand identity and guidelines generation",
        request_model=BrandingRequest,
        generate=branding.generate_brand_identity,
        workflow="brand-identity",
    ),
}

# URL slugs accepted by the launch route
ALIASES = {
    "social-bot": social_bot.AGENT_ID,
    "socialbot": social_bot.AGENT_ID,
    "branding-agent": branding.AGENT_ID,
}


def get_agent(agent_id: str) -> Optional[AgentDefinition]:
    return AGENTS.get(ALIASES.get(agent_id, agent_id))


def list_agents() -> List[AgentDefinition]:
    return list(AGENTS.values())
