from fastapi import APIRouter

from skrbl.api.endpoints import agents, analytics, cron, email, jobs, leads, onboarding, percy, sms, system

api_router = APIRouter()

api_router.include_router(agents.router, prefix="/agents", tags=["agents"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(leads.router, prefix="/leads", tags=["leads"])
api_router.include_router(email.router, prefix="/email", tags=["email"])
api_router.include_router(cron.router, prefix="/cron", tags=["cron"])
api_router.include_router(onboarding.router, prefix="/onboarding", tags=["onboarding"])
api_router.include_router(percy.router, prefix="/percy", tags=["percy"])
api_router.include_router(sms.router, prefix="/sms", tags=["sms"])
api_router.include_router(system.router, prefix="/system", tags=["system"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
