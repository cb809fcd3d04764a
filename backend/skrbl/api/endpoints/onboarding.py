from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skrbl.core.rate_limiting import rate_limit_by_ip
from skrbl.db.session import get_db
from skrbl.schemas.onboarding import OnboardingResponse, OnboardingUpdate
from skrbl.services.onboarding_service import OnboardingService
from skrbl.services.system_log import system_log

router = APIRouter(dependencies=[Depends(rate_limit_by_ip("onboarding"))])

@router.post("", response_model=OnboardingResponse, response_model_exclude_none=True)
def save_onboarding(
    update: OnboardingUpdate,
    db: Session = Depends(get_db)
):
    """Store onboarding state for one agent of one user"""
    try:
        OnboardingService.save(db, update.userId, update.agentId, update.onboarding)
    except SQLAlchemyError as e:
        db.rollback()
        system_log(db, "error", "Onboarding API error", {"error": str(e)})
        raise
    system_log(db, "info", "Onboarding state updated", {"userId": update.userId, "agentId": update.agentId})
    return OnboardingResponse()

@router.get("", response_model=OnboardingResponse)
def get_onboarding(
    userId: str = Query(..., min_length=1),
    agentId: str = Query(..., min_length=1),
    db: Session = Depends(get_db)
):
    return OnboardingResponse(onboarding=OnboardingService.get(db, userId, agentId))
