import asyncio
from typing import Any, Dict
import logging

from pydantic import ValidationError as PydanticValidationError

from skrbl.core.celery_app import celery_app
from skrbl.db.session import SessionLocal
from skrbl.services.agent_service import AgentService
from skrbl.services.agents.registry import get_agent
from skrbl.services.ai.text_generation import get_text_generation_service
from skrbl.services.job_service import JobService

logger = logging.getLogger(__name__)

@celery_app.task(name="run_agent_job")
def run_agent_job(job_id: str, agent_id: str, payload: Dict[str, Any]):
    """
    Background task that runs an agent for a queued job.
    The job ends complete or failed; nothing here is retried.
    """
    db = SessionLocal()
    loop = None
    try:
        agent = get_agent(agent_id)
        if agent is None:
            JobService.mark_job_failed(db, job_id, f"Unknown agent: {agent_id}")
            return {"jobId": job_id, "status": "failed"}

        try:
            params = agent.request_model(**payload)
        except PydanticValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            field = ".".join(str(p) for p in first.get("loc", ()))
            JobService.mark_job_failed(db, job_id, f"Invalid input for {agent.name}: {field} {first.get('msg', '')}".strip())
            return {"jobId": job_id, "status": "failed"}

        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        loop.run_until_complete(
            AgentService.run(db, agent, params, job_id=job_id, text_service=get_text_generation_service())
        )
        return {"jobId": job_id, "status": "complete"}

    except Exception as e:
        # AgentService already marked the job failed
        logger.error(f"Agent job {job_id} failed: {str(e)}")
        raise
    finally:
        if loop is not None:
            loop.close()
        db.close()
