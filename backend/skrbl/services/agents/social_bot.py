"""
Social Bot agent

Builds per-platform social posts from tone-keyed templates. When a text
generation service is supplied, the main text of every post is sent once to
the provider and awaited under a timeout before the content is returned;
any failure keeps the template text.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
import logging

from skrbl.core.config import settings
from skrbl.schemas.agent import SocialBotRequest
from skrbl.utils.time import isoformat, utc_now_naive

logger = logging.getLogger(__name__)

AGENT_ID = "socialBot"

# Hours from now for recommendedTime
PLATFORM_HOUR_OFFSETS = {
    "instagram": 18,
    "twitter": 10,
    "facebook": 15,
    "linkedin": 11,
    "tiktok": 19,
    "pinterest": 20,
}
DEFAULT_HOUR_OFFSET = 24

# Hour of day used by the posting schedule
SCHEDULE_HOURS = {
    "instagram": 18,
    "twitter": 10,
    "facebook": 15,
    "linkedin": 11,
    "tiktok": 19,
    "pinterest": 20,
}

INTROS = {
    "professional": "We're excited to share our latest insights on {topic}.",
    "casual": "Hey there! Let's talk about {topic} today.",
    "friendly": "Hi friends! We've been thinking a lot about {topic} lately.",
    "authoritative": "Here's what you need to know about {topic} in today's market.",
    "humorous": "Ever wondered why {topic} makes everyone go crazy? We did too!",
    "technical": "Analyzing the key components of {topic} reveals interesting patterns.",
}
DEFAULT_INTRO = "Let's explore {topic} together."
BRIEF_INTRO = "Check out our latest insights on {topic}!"

CALLS_TO_ACTION = {
    "professional": "Contact us today to learn how we can help your business grow.",
    "casual": "Drop us a message if you want to chat more about this!",
    "friendly": "We'd love to hear your thoughts! Comment below or reach out to us directly.",
    "authoritative": "Schedule a consultation with our experts to implement these strategies in your business.",
    "humorous": "Still reading? You must be interested! Let's connect and talk more.",
    "technical": "For a detailed analysis, download our comprehensive report from our website.",
}
DEFAULT_CTA = "Get in touch to learn more!"
BRIEF_CTA = "Learn more on our website!"

GENERAL_TAGS = ["#TipsAndTricks", "#MustKnow", "#Trending", "#NewPost", "#FollowUs"]
PROFESSIONAL_TAGS = ["#Innovation", "#Leadership", "#Growth", "#Strategy", "#Business"]
TRENDING_TAGS = ["#viral", "#trending", "#fyp", "#foryou", "#foryoupage"]


def post_intro(topic: str, tone: str, brief: bool = False) -> str:
    if brief:
        return BRIEF_INTRO.format(topic=topic)
    return INTROS.get(tone, DEFAULT_INTRO).format(topic=topic)


def post_body(business_name: str, industry: str, topic: str, detailed: bool = False) -> str:
    if detailed:
        return (
            f"At {business_name}, we've been researching {topic} extensively and have identified "
            f"three key trends that are reshaping the {industry} industry:\n\n"
            "1. Increased focus on sustainability\n"
            "2. Digital transformation acceleration\n"
            "3. Customer experience prioritization\n\n"
            "Our team has developed innovative solutions to address these trends."
        )
    return (
        f"{business_name} has been at the forefront of {topic} in the {industry} industry. "
        "We believe that staying informed about the latest developments helps us serve our clients better."
    )


def post_cta(tone: str, brief: bool = False) -> str:
    if brief:
        return BRIEF_CTA
    return CALLS_TO_ACTION.get(tone, DEFAULT_CTA)


def build_hashtags(industry: str, topic: str, count: int, professional: bool = False,
                   trending: bool = False) -> str:
    tags = [f"#{''.join(industry.split())}", f"#{''.join(topic.split())}"]
    extra = TRENDING_TAGS if trending else PROFESSIONAL_TAGS if professional else GENERAL_TAGS
    tags.extend(extra[:max(0, count - 2)])
    return " ".join(tags)


def recommended_time(platform: str, now: datetime) -> str:
    return isoformat(now + timedelta(hours=PLATFORM_HOUR_OFFSETS.get(platform, DEFAULT_HOUR_OFFSET)))


@dataclass
class DraftPost:
    """A post plus the pieces needed to re-assemble its main text after enrichment"""
    post: Dict[str, Any]
    text_field: str
    text: str
    hashtags: str
    separator: str

    def assemble(self, text: str) -> None:
        self.post[self.text_field] = f"{text}{self.separator}{self.hashtags}" if self.hashtags else text


def draft_post(platform: str, business_name: str, industry: str, topic: str, tone: str,
               include_hashtags: bool, now: datetime) -> DraftPost:
    def tags(count: int, **kwargs) -> str:
        return build_hashtags(industry, topic, count, **kwargs) if include_hashtags else ""

    when = recommended_time(platform, now)

    if platform == "instagram":
        text = f"✨ {post_intro(topic, tone)}\n\n{post_body(business_name, industry, topic)}\n\n{post_cta(tone)}"
        draft = DraftPost(
            post={"type": "image", "imageDescription": f"Image related to {topic} in the {industry} industry"},
            text_field="caption", text=text, hashtags=tags(5), separator="\n\n",
        )
    elif platform == "twitter":
        text = f"{post_intro(topic, tone, brief=True)} {post_cta(tone, brief=True)}"
        draft = DraftPost(post={"type": "text"}, text_field="content", text=text, hashtags=tags(2), separator=" ")
    elif platform == "facebook":
        text = f"{post_intro(topic, tone)}\n\n{post_body(business_name, industry, topic)}\n\n{post_cta(tone)}"
        draft = DraftPost(
            post={"type": "text", "imageDescription": f"Image related to {topic} in the {industry} industry"},
            text_field="content", text=text, hashtags=tags(3), separator="\n\n",
        )
    elif platform == "linkedin":
        text = (
            f"{post_intro(topic, 'professional')}\n\n"
            f"{post_body(business_name, industry, topic, detailed=True)}\n\n"
            f"{post_cta('professional')}"
        )
        draft = DraftPost(
            post={"type": "text"}, text_field="content", text=text,
            hashtags=tags(3, professional=True), separator="\n\n",
        )
    elif platform == "tiktok":
        draft = DraftPost(
            post={"type": "video", "videoDescription": f"Short video about {topic} in the {industry} industry"},
            text_field="caption", text=post_intro(topic, "casual", brief=True),
            hashtags=tags(4, trending=True), separator=" ",
        )
    elif platform == "pinterest":
        draft = DraftPost(
            post={
                "type": "image",
                "title": f"{topic[:1].upper()}{topic[1:]} Tips for {industry}",
                "imageDescription": f"Visually appealing image related to {topic} in the {industry} industry",
            },
            text_field="description", text=post_intro(topic, tone, brief=True),
            hashtags=tags(3, professional=True), separator="\n\n",
        )
    else:
        text = f"{post_intro(topic, tone)}\n\n{post_body(business_name, industry, topic)}\n\n{post_cta(tone)}"
        draft = DraftPost(post={"type": "text"}, text_field="content", text=text, hashtags=tags(3), separator="\n\n")

    draft.post["recommendedTime"] = when
    draft.assemble(draft.text)
    return draft


def generate_schedule(platforms: List[str], post_count: int, now: datetime) -> List[Dict[str, Any]]:
    """Post i goes out on day (i // len(platforms)) * 2 at the platform's hour."""
    schedule = []
    for i in range(post_count):
        for platform in platforms:
            day = now + timedelta(days=(i // len(platforms)) * 2)
            hour = SCHEDULE_HOURS.get(platform)
            if hour is not None:
                day = day.replace(hour=hour, minute=0, second=0, microsecond=0)
            schedule.append({"platform": platform, "postIndex": i, "scheduledTime": isoformat(day)})
    return schedule


def enrichment_prompt(draft: DraftPost, platform: str, params: SocialBotRequest) -> str:
    lines = [
        f"Rewrite this {platform} post for {params.businessName}, a business in the {params.industry} industry.",
        f"Tone: {params.tone}.",
    ]
    if params.targetAudience:
        lines.append(f"Target audience: {params.targetAudience}.")
    if params.customInstructions:
        lines.append(f"Additional instructions: {params.customInstructions}")
    lines.append("Keep it concise and do not include hashtags.")
    lines.append(f"Post:\n{draft.text}")
    return "\n".join(lines)


async def generate_social_content(params: SocialBotRequest, text_service=None,
                                  now: Optional[datetime] = None) -> Dict[str, Any]:
    """Build the full social content payload for every requested platform."""
    now = now or utc_now_naive()
    drafts_by_platform = []
    for platform in params.platforms:
        drafts = [
            draft_post(
                platform,
                params.businessName,
                params.industry,
                params.topics[i % len(params.topics)],
                params.tone,
                params.includeHashtags,
                now,
            )
            for i in range(params.postCount)
        ]
        drafts_by_platform.append((platform, drafts))

    if text_service is not None:
        jobs = []
        targets = []
        for platform, drafts in drafts_by_platform:
            for draft in drafts:
                jobs.append(text_service.enrich(
                    enrichment_prompt(draft, platform, params),
                    fallback=draft.text,
                    max_tokens=settings.SOCIAL_POST_MAX_TOKENS,
                ))
                targets.append(draft)
        enriched = await asyncio.gather(*jobs)
        for draft, text in zip(targets, enriched):
            draft.assemble(text)
        logger.info(f"Enriched {len(targets)} social posts for {params.businessName}")

    return {
        "businessName": params.businessName,
        "industry": params.industry,
        "platforms": [
            {"platform": platform, "posts": [d.post for d in drafts]}
            for platform, drafts in drafts_by_platform
        ],
        "schedule": generate_schedule(params.platforms, params.postCount, now) if params.schedulePosts else None,
    }
