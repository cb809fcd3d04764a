from typing import Any, Dict, Optional, Tuple
import logging

from sqlalchemy.orm import Session

from skrbl.models import Lead, LeadActivity
from skrbl.schemas.lead import LeadSubmit
from skrbl.utils.time import isoformat, utc_now_naive

logger = logging.getLogger(__name__)

BASE_SCORE = 10
MAX_SCORE = 100

SOURCE_SCORES = {
    "exit_intent": 15,
    "pricing_modal": 25,
    "percy_scan": 30,
    "skillsmith_scan": 30,
    "agent_league": 20,
    "free_trial": 35,
    "contact_form": 40,
}
DEFAULT_SOURCE_SCORE = 10

OFFER_SCORES = {
    "free_trial": 20,
    "free_scan": 15,
    "launch40": 25,
    "exit_capture": 10,
}
DEFAULT_OFFER_SCORE = 5

# Substring match on the page path; "/" only counts as an exact match
PAGE_PATH_SCORES = (
    ("/pricing", 20),
    ("/agents", 15),
    ("/contact", 25),
)
HOME_PAGE_SCORE = 5


def calculate_lead_score(lead: LeadSubmit) -> int:
    score = BASE_SCORE + SOURCE_SCORES.get(lead.source, DEFAULT_SOURCE_SCORE)

    if lead.vertical:
        score += 5

    if lead.page_path:
        for fragment, points in PAGE_PATH_SCORES:
            if fragment in lead.page_path:
                score += points
        if lead.page_path == "/":
            score += HOME_PAGE_SCORE

    if lead.offer_type:
        score += OFFER_SCORES.get(lead.offer_type, DEFAULT_OFFER_SCORE)

    if lead.name and lead.name.strip():
        score += 10

    return min(score, MAX_SCORE)


class LeadService:
    @staticmethod
    def submit(db: Session, lead_in: LeadSubmit, client: Optional[Dict[str, Any]] = None) -> Tuple[Lead, bool]:
        """Create a lead, or update the one with the same email and source.

        Returns ``(lead, created)``. Either way a ``form_submit`` activity is
        recorded against the lead.
        """
        client = client or {}
        extra = {**(lead_in.model_extra or {}), **(lead_in.metadata or {})}
        now = utc_now_naive()

        lead = db.query(Lead).filter(Lead.email == lead_in.email, Lead.source == lead_in.source).first()
        created = lead is None

        if created:
            lead = Lead(
                email=lead_in.email,
                name=lead_in.name,
                user_id=lead_in.user_id,
                source=lead_in.source,
                page_path=lead_in.page_path,
                vertical=lead_in.vertical,
                offer_type=lead_in.offer_type,
                campaign=lead_in.campaign,
                referrer=lead_in.referrer,
                status="new",
                score=calculate_lead_score(lead_in),
                metadata_={
                    **extra,
                    "user_agent": client.get("user_agent"),
                    "ip_address": client.get("ip_address"),
                    "created_source": lead_in.source,
                    "interaction_count": 1,
                },
                created_at=now,
                updated_at=now,
            )
            db.add(lead)
            db.flush()
        else:
            previous = dict(lead.metadata_ or {})
            lead.page_path = lead_in.page_path or lead.page_path
            lead.offer_type = lead_in.offer_type or lead.offer_type
            lead.campaign = lead_in.campaign or lead.campaign
            lead.referrer = lead_in.referrer or lead.referrer
            lead.name = lead_in.name or lead.name
            lead.metadata_ = {
                **previous,
                **extra,
                "last_interaction": isoformat(now),
                "interaction_count": previous.get("interaction_count", 0) + 1,
            }
            lead.updated_at = now

        db.add(LeadActivity(
            lead_id=lead.id,
            activity_type="form_submit",
            activity_data={
                "source": lead_in.source,
                "page_path": lead_in.page_path,
                "offer_type": lead_in.offer_type,
            },
            score_change=0,
        ))
        db.commit()
        db.refresh(lead)

        logger.info(f"Lead {lead.id} {'created' if created else 'updated'} from {lead_in.source} (score {lead.score})")
        return lead, created
