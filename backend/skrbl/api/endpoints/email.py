from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skrbl.api.deps import get_n8n
from skrbl.db.session import get_db
from skrbl.schemas.email import (
    EmailTriggerRequest, EmailTriggerResponse, EnrollmentListResponse, EnrollmentOut,
)
from skrbl.services.enrollment_service import EnrollmentService
from skrbl.services.n8n_client import N8nClient
from skrbl.services.system_log import system_log

router = APIRouter()

@router.post("/trigger", response_model=EmailTriggerResponse, response_model_exclude_none=True)
async def trigger_email_sequences(
    request: EmailTriggerRequest,
    db: Session = Depends(get_db),
    n8n: N8nClient = Depends(get_n8n),
):
    """
    Enroll the user in every active sequence matching the trigger and role,
    then fire the n8n workflow for each new enrollment
    """
    try:
        return await EnrollmentService.trigger(db, request, n8n)
    except SQLAlchemyError as e:
        db.rollback()
        system_log(db, "error", "Email trigger API error", {"error": str(e)})
        raise

@router.get("/trigger", response_model=EnrollmentListResponse)
def list_email_sequences(
    userId: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Sequences a user is (or was) enrolled in, newest first"""
    enrollments = EnrollmentService.list_enrollments(db, userId)
    return EnrollmentListResponse(sequences=[EnrollmentOut.model_validate(e) for e in enrollments])
