from typing import Any, Dict
import logging

from fastapi import APIRouter, Depends, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from skrbl.api.deps import get_text_service
from skrbl.core.exceptions import NotFoundError, ValidationError
from skrbl.core.rate_limiting import rate_limit_by_ip
from skrbl.db.session import get_db
from skrbl.schemas.agent import (
    AgentInfo, AgentLaunchRequest, AgentLaunchResponse, AgentListResponse,
    AgentRunResponse, BrandingRequest, SocialBotRequest,
)
from skrbl.services.agent_service import AgentService
from skrbl.services.agents.registry import get_agent, list_agents
from skrbl.services.job_service import JobService
from skrbl.tasks.agent_tasks import run_agent_job

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=AgentListResponse)
def get_agents():
    """List the agents that can be run or launched"""
    return AgentListResponse(agents=[
        AgentInfo(
            id=agent.id,
            name=agent.name,
            description=agent.description,
            inputFields=list(agent.request_model.model_fields.keys()),
        )
        for agent in list_agents()
    ])

@router.post("/social-bot", response_model=AgentRunResponse, dependencies=[Depends(rate_limit_by_ip("agents"))])
async def run_social_bot(
    params: SocialBotRequest,
    db: Session = Depends(get_db),
    text_service=Depends(get_text_service),
):
    """
    Generate social posts synchronously. When ``jobId`` is given the job is
    driven through its checkpoints as the run progresses.
    """
    message, data = await AgentService.run(db, get_agent("socialBot"), params, params.jobId, text_service)
    return AgentRunResponse(message=message, data=data)

@router.post("/branding", response_model=AgentRunResponse, dependencies=[Depends(rate_limit_by_ip("agents"))])
async def run_branding(
    params: BrandingRequest,
    db: Session = Depends(get_db),
    text_service=Depends(get_text_service),
):
    """Generate a brand identity synchronously"""
    message, data = await AgentService.run(db, get_agent("branding"), params, params.jobId, text_service)
    return AgentRunResponse(message=message, data=data)

def _validation_message(error: PydanticValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ()))
    if first.get("type") == "missing":
        return f"Missing required field: {field}"
    return f"Invalid field {field}: {first.get('msg')}"

@router.post(
    "/{agent_id}/launch",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=AgentLaunchResponse,
    dependencies=[Depends(rate_limit_by_ip("agents"))],
)
def launch_agent(
    agent_id: str,
    launch: AgentLaunchRequest,
    db: Session = Depends(get_db),
):
    """
    Queue an agent run as a background job
    """
    agent = get_agent(agent_id)
    if agent is None:
        raise NotFoundError(f"Unknown agent: {agent_id}")

    payload: Dict[str, Any] = {**launch.input}
    if launch.userId:
        payload.setdefault("userId", launch.userId)
    try:
        agent.request_model(**payload)
    except PydanticValidationError as e:
        raise ValidationError(_validation_message(e))

    job = JobService.create_job(db, agent.id, user_id=payload.get("userId"), input_data=payload)
    run_agent_job.delay(job.id, agent.id, payload)
    logger.info(f"Queued {agent.id} job {job.id}")

    return AgentLaunchResponse(jobId=job.id, message=f"{agent.name} job has been queued.")
