"""
Email sequence enrollment.

Enrollment is idempotent per (user, sequence): the partial unique index on
active ``email_sequences`` rows rejects a second active row, and that
rejection is treated as "already enrolled".
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skrbl.models import EmailSequenceEnrollment
from skrbl.schemas.email import EmailTriggerRequest
from skrbl.services.drip_service import DripService
from skrbl.services.email_sequences import EmailSequence, applicable_sequences, template_data
from skrbl.services.n8n_client import N8nClient
from skrbl.services.system_log import system_log
from skrbl.utils.time import utc_now_naive

logger = logging.getLogger(__name__)

class EnrollmentService:
    @staticmethod
    def enroll(db: Session, sequence: EmailSequence, request: EmailTriggerRequest) -> Optional[EmailSequenceEnrollment]:
        """Insert an active enrollment; None when the user is already enrolled."""
        enrollment = EmailSequenceEnrollment(
            user_id=request.userId,
            sequence_id=sequence.id,
            trigger_type=request.triggerType,
            user_role=request.userRole,
            user_email=request.userEmail,
            active=True,
            metadata_=request.metadata,
            created_at=utc_now_naive(),
        )
        db.add(enrollment)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(f"User {request.userId} already enrolled in {sequence.id}, skipping")
            return None
        db.refresh(enrollment)
        return enrollment

    @staticmethod
    async def trigger(db: Session, request: EmailTriggerRequest, n8n: N8nClient) -> Dict[str, Any]:
        sequences = applicable_sequences(request.triggerType, request.userRole)
        if not sequences:
            return {
                "success": True,
                "message": "No applicable sequences found",
                "triggeredSequences": [],
                "failedSequences": [],
            }

        data = template_data(request.metadata)
        results: List[Dict[str, Any]] = []

        for sequence in sequences:
            enrollment = EnrollmentService.enroll(db, sequence, request)
            if enrollment is None:
                continue

            DripService.queue_steps(db, enrollment, sequence, request.userEmail, data)

            outcome = await n8n.trigger_sequence(sequence.id, {
                "userId": request.userId,
                "userEmail": request.userEmail,
                "userRole": request.userRole,
                "triggerType": request.triggerType,
                "sequenceId": sequence.id,
                "templateData": data,
                "metadata": {**request.metadata, "analyticsSource": "email_automation"},
            })
            results.append({
                "sequenceId": sequence.id,
                "sequenceName": sequence.name,
                "triggered": outcome.success,
                "workflowId": outcome.workflow_id,
                "error": outcome.error,
            })
            system_log(db, "info", "Email sequence triggered", {
                "userId": request.userId,
                "sequenceId": sequence.id,
                "triggerType": request.triggerType,
                "success": outcome.success,
            })

        return {
            "success": True,
            "triggeredSequences": [r for r in results if r["triggered"]],
            "failedSequences": [r for r in results if not r["triggered"]],
        }

    @staticmethod
    def list_enrollments(db: Session, user_id: str) -> List[EmailSequenceEnrollment]:
        return (
            db.query(EmailSequenceEnrollment)
            .filter(EmailSequenceEnrollment.user_id == user_id)
            .order_by(EmailSequenceEnrollment.created_at.desc(), EmailSequenceEnrollment.id.desc())
            .all()
        )
