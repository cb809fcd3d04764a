from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from skrbl.core.rate_limiting import client_ip
from skrbl.db.session import get_db
from skrbl.schemas.lead import LeadSubmit, LeadSubmitResponse
from skrbl.services.lead_service import LeadService

router = APIRouter()

@router.post("/submit", response_model=LeadSubmitResponse)
def submit_lead(
    lead_in: LeadSubmit,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Capture a lead from a site form, scoring it on first submission
    """
    lead, created = LeadService.submit(db, lead_in, client={
        "user_agent": request.headers.get("user-agent"),
        "ip_address": client_ip(request),
    })
    return LeadSubmitResponse(
        leadId=lead.id,
        status="created" if created else "updated",
        score=lead.score,
    )
