from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skrbl.api.deps import get_resend, verify_cron_secret
from skrbl.db.session import get_db
from skrbl.schemas.email import DripProcessResponse
from skrbl.services.drip_service import DripService
from skrbl.services.messaging import ResendClient
from skrbl.services.system_log import system_log

router = APIRouter()

@router.post("/process-drip", response_model=DripProcessResponse, dependencies=[Depends(verify_cron_secret)])
async def process_drip(
    db: Session = Depends(get_db),
    resend: ResendClient = Depends(get_resend),
):
    """
    Send every drip email that is due. Called by an external scheduler with
    the ``x-cron-secret`` header.
    """
    result = await DripService.process_due(db, resend)
    if result["processed"]:
        system_log(db, "info", "Drip queue processed", result)
    return DripProcessResponse(**result)
