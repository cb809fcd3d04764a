from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from skrbl.core.config import settings
from skrbl.models import EmailLog, EmailQueueItem, EmailSequenceEnrollment
from skrbl.services.email_sequences import EmailSequence, render_subject, render_template
from skrbl.services.messaging import ResendClient
from skrbl.utils.time import utc_now_naive

logger = logging.getLogger(__name__)

class DripService:
    @staticmethod
    def queue_steps(db: Session, enrollment: EmailSequenceEnrollment, sequence: EmailSequence,
                    recipient_email: str, data: Dict[str, Any]) -> List[EmailQueueItem]:
        """Queue one email_queue row per sequence step, relative to the enrollment time."""
        start = enrollment.created_at or utc_now_naive()
        items = []
        for index, step in enumerate(sequence.steps):
            item = EmailQueueItem(
                user_id=enrollment.user_id,
                enrollment_id=enrollment.id,
                sequence_id=sequence.id,
                step=index,
                recipient_email=recipient_email,
                template=step.template,
                subject=render_subject(step, data),
                html_content=render_template(step.template, data),
                template_data=data,
                scheduled_for=start + timedelta(hours=step.delay_hours),
                status="pending",
            )
            db.add(item)
            items.append(item)
        db.commit()
        logger.info(f"Queued {len(items)} emails for {sequence.id} (user {enrollment.user_id})")
        return items

    @staticmethod
    def due_items(db: Session, now: datetime, limit: int) -> List[EmailQueueItem]:
        return (
            db.query(EmailQueueItem)
            .filter(EmailQueueItem.status == "pending", EmailQueueItem.scheduled_for <= now)
            .order_by(EmailQueueItem.scheduled_for.asc(), EmailQueueItem.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    async def process_due(db: Session, resend: ResendClient, now: Optional[datetime] = None,
                          batch_size: Optional[int] = None) -> Dict[str, int]:
        now = now or utc_now_naive()
        items = DripService.due_items(db, now, batch_size or settings.DRIP_BATCH_SIZE)
        sent = failed = cancelled = 0

        for item in items:
            if item.enrollment_id is not None:
                enrollment = db.query(EmailSequenceEnrollment).filter(
                    EmailSequenceEnrollment.id == item.enrollment_id
                ).first()
                if enrollment is not None and not enrollment.active:
                    item.status = "cancelled"
                    cancelled += 1
                    db.commit()
                    continue

            result = await resend.send_email(item.recipient_email, item.subject, item.html_content)
            item.attempts = (item.attempts or 0) + 1
            if result.success:
                item.status = "sent"
                item.sent_at = utc_now_naive()
                sent += 1
            else:
                item.status = "failed"
                item.last_error = result.error
                failed += 1
            db.add(EmailLog(
                recipient_email=item.recipient_email,
                template=item.template,
                status=item.status,
                provider_message_id=result.message_id,
            ))
            db.commit()

        if items:
            logger.info(f"Drip run: {len(items)} due, {sent} sent, {failed} failed, {cancelled} cancelled")
        return {"processed": len(items), "sent": sent, "failed": failed, "cancelled": cancelled}
