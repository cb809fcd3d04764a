from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skrbl.api.deps import get_resend, get_twilio
from skrbl.db.session import get_db
from skrbl.schemas.percy import PercyContactRequest, PercyContactResponse
from skrbl.services.messaging import ResendClient, TwilioClient
from skrbl.services.percy_service import PercyService

router = APIRouter()

@router.post("/contact", response_model=PercyContactResponse)
async def percy_contact(
    request: PercyContactRequest,
    db: Session = Depends(get_db),
    twilio: TwilioClient = Depends(get_twilio),
    resend: ResendClient = Depends(get_resend),
):
    """
    Have Percy reach out over SMS, email, voice or chat
    """
    return await PercyService.contact(db, request, twilio, resend)

@router.get("/contact")
def percy_capabilities(
    test: bool = False,
    twilio: TwilioClient = Depends(get_twilio),
    resend: ResendClient = Depends(get_resend),
):
    """Contact capabilities; ``test=true`` adds provider configuration status"""
    return PercyService.capabilities(include_services=test, twilio=twilio, resend=resend)
