"""
Runs agent generators and drives the owning job through its checkpoints.

Checkpoints: started (5), validated (20), generated (50), persisted (80),
complete (100). Any exception marks the job failed and propagates.
"""

import time
from typing import Any, Dict, Optional, Tuple
import logging

from pydantic import BaseModel
from sqlalchemy.orm import Session

from skrbl.models import AgentLog, BrandingContent, SocialContent
from skrbl.schemas.agent import BrandingRequest, SocialBotRequest
from skrbl.services.agents import branding, social_bot
from skrbl.services.agents.registry import AgentDefinition
from skrbl.services.job_service import JobService
from skrbl.services.system_log import record_workflow

logger = logging.getLogger(__name__)

CHECKPOINT_VALIDATED = 20
CHECKPOINT_GENERATED = 50
CHECKPOINT_PERSISTED = 80


def _persist_social(db: Session, params: SocialBotRequest, content: Dict[str, Any],
                    job_id: Optional[str]) -> Tuple[str, Dict[str, Any]]:
    db.add(AgentLog(
        agent="socialBotAgent",
        user_id=params.userId,
        input=params.model_dump(),
        business_name=params.businessName,
    ))
    row = SocialContent(
        user_id=params.userId,
        job_id=job_id,
        business_name=params.businessName,
        industry=params.industry,
        content=content,
        params=params.model_dump(exclude={"userId", "jobId", "businessName", "industry", "platforms"}),
        status="completed",
    )
    db.add(row)
    db.commit()
    db.refresh(row)

    message = (
        f"Social media content generated successfully for {params.businessName} "
        f"on {', '.join(params.platforms)}"
    )
    return message, {
        "socialContentId": row.id,
        "content": content,
        "metadata": {
            "businessName": params.businessName,
            "platforms": params.platforms,
            "postCount": params.postCount,
            "tone": params.tone,
        },
    }


def _persist_branding(db: Session, params: BrandingRequest, identity: Dict[str, Any],
                      job_id: Optional[str]) -> Tuple[str, Dict[str, Any]]:
    db.add(AgentLog(
        agent="brandingAgent",
        user_id=params.userId,
        input=params.model_dump(),
        business_name=params.businessName,
    ))
    row = BrandingContent(
        user_id=params.userId,
        job_id=job_id,
        business_name=params.businessName,
        industry=params.industry,
        target_audience=params.targetAudience,
        brand_identity=identity,
        params=params.model_dump(exclude={"userId", "jobId", "businessName", "industry", "targetAudience"}),
        status="completed",
    )
    db.add(row)
    db.commit()
    db.refresh(row)

    return f"Brand identity created successfully for {params.businessName}", {
        "brandingId": row.id,
        "brandIdentity": identity,
        "metadata": {
            "businessName": params.businessName,
            "industry": params.industry,
            "targetAudience": params.targetAudience,
            "style": params.stylePreference,
        },
    }


PERSISTERS = {
    social_bot.AGENT_ID: _persist_social,
    branding.AGENT_ID: _persist_branding,
}


class AgentService:
    @staticmethod
    async def run(db: Session, agent: AgentDefinition, params: BaseModel, job_id: Optional[str] = None,
                  text_service=None) -> Tuple[str, Dict[str, Any]]:
        """Generate, persist and return ``(message, data)`` for one agent run."""
        user_id = getattr(params, "userId", None)
        started = time.time()

        try:
            if job_id and JobService.get_job(db, job_id) is None:
                # Unknown job: run without checkpoints and store no job reference
                logger.warning(f"{agent.name} run requested job {job_id} which does not exist")
                job_id = None
            if job_id:
                JobService.mark_job_started(db, job_id)
                JobService.update_job_progress(db, job_id, CHECKPOINT_VALIDATED)

            content = await agent.generate(params, text_service)
            if job_id:
                JobService.update_job_progress(db, job_id, CHECKPOINT_GENERATED)

            message, data = PERSISTERS[agent.id](db, params, content, job_id)
            if job_id:
                JobService.update_job_progress(db, job_id, CHECKPOINT_PERSISTED)
                JobService.mark_job_complete(db, job_id, data)
        except Exception as e:
            logger.error(f"{agent.name} agent failed: {str(e)}")
            db.rollback()
            if job_id:
                JobService.mark_job_failed(db, job_id, str(e))
            record_workflow(
                db, "failed", agent_id=agent.id, workflow=agent.workflow, user_id=user_id,
                job_id=job_id, duration_ms=int((time.time() - started) * 1000),
                details={"error": str(e)},
            )
            raise

        record_workflow(
            db, "completed", agent_id=agent.id, workflow=agent.workflow, user_id=user_id,
            job_id=job_id, duration_ms=int((time.time() - started) * 1000),
        )
        logger.info(f"{agent.name} agent finished for {user_id or 'anonymous'}")
        return message, data
