import asyncio
import logging

from skrbl.core.celery_app import celery_app
from skrbl.db.session import SessionLocal
from skrbl.services.drip_service import DripService
from skrbl.services.messaging import get_resend_client

logger = logging.getLogger(__name__)

@celery_app.task(name="process_drip_queue")
def process_drip_queue():
    """Send drip emails whose scheduled time has passed."""
    db = SessionLocal()
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        return loop.run_until_complete(DripService.process_due(db, get_resend_client()))
    finally:
        loop.close()
        db.close()
