"""
Email sequence catalog and the HTML templates its steps render.
"""

import html
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from skrbl.core.config import settings


@dataclass(frozen=True)
class SequenceStep:
    template: str
    subject: str
    delay_hours: int = 0


@dataclass(frozen=True)
class EmailSequence:
    id: str
    name: str
    trigger: str
    user_role: str = "all"
    active: bool = True
    steps: List[SequenceStep] = field(default_factory=list)

    def applies_to(self, trigger_type: str, user_role: Optional[str]) -> bool:
        return (
            self.active
            and self.trigger == trigger_type
            and (self.user_role == "all" or self.user_role == user_role)
        )


EMAIL_SEQUENCES: List[EmailSequence] = [
    EmailSequence(
        id="welcome-sequence",
        name="Welcome Email Sequence",
        trigger="signup",
        steps=[
            SequenceStep("welcome-immediate", "🎉 Welcome to the League of Digital Superheroes!"),
            SequenceStep("agent-next-steps", "🎯 Your agents are ready, here's what to do next", delay_hours=48),
        ],
    ),
    EmailSequence(
        id="upgrade-nurture",
        name="Upgrade Nurture Campaign",
        trigger="upgrade_prompt",
        steps=[
            SequenceStep("upgrade-benefits", "💎 Unlock {agentName} Premium Features - Special Offer!"),
            SequenceStep("upgrade-nurture-day1", "🌟 See how Pro users are crushing it with {agentName}", delay_hours=24),
            SequenceStep("upgrade-nurture-day3", "⏰ Last chance: Your {agentName} premium trial expires soon", delay_hours=72),
        ],
    ),
    EmailSequence(
        id="agent-follow-up",
        name="Agent Follow-up",
        trigger="agent_used",
        steps=[
            SequenceStep("agent-next-steps", "🎯 Great job with {agentName}! Here's what to do next", delay_hours=6),
        ],
    ),
]


def get_sequence(sequence_id: str) -> Optional[EmailSequence]:
    return next((s for s in EMAIL_SEQUENCES if s.id == sequence_id), None)


def applicable_sequences(trigger_type: str, user_role: Optional[str]) -> List[EmailSequence]:
    return [s for s in EMAIL_SEQUENCES if s.applies_to(trigger_type, user_role)]


def _text(value: Any, default: Optional[str] = None) -> Optional[str]:
    if value is None or value == "":
        return default
    return str(value)


def template_data(metadata: Dict[str, Any]) -> Dict[str, Any]:
    """Plain-string values for subjects and templates; HTML escaping happens at render time."""
    return {
        "userName": _text(metadata.get("userName"), "there"),
        "agentName": _text(metadata.get("agentName"), "Agent"),
        "workflowName": _text(metadata.get("workflowName")),
        "upgradeTarget": _text(metadata.get("upgradeTarget"), "Pro"),
    }


def render_subject(step: SequenceStep, data: Dict[str, Any]) -> str:
    return step.subject.format(agentName=_text(data.get("agentName"), "Agent"))


def _layout(title: str, tagline: str, body: str) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: linear-gradient(135deg, #1E90FF, #30D5C8); padding: 20px; text-align: center;">
    <h1 style="color: white; margin: 0;">{title}</h1>
    <p style="color: white; margin: 5px 0;">{tagline}</p>
  </div>
  <div style="padding: 20px;">{body}</div>
  <div style="background: #f5f5f5; padding: 15px; text-align: center; font-size: 12px; color: #666;">
    <p>This email was sent by Percy, your AI Concierge at SKRBL AI</p>
  </div>
</div>
"""


def _button(href: str, label: str) -> str:
    return (
        f'<div style="text-align: center; margin: 30px 0;"><a href="{href}" style="background: #1E90FF; '
        f'color: white; padding: 15px 30px; text-decoration: none; border-radius: 8px; '
        f'display: inline-block; font-weight: bold;">{label}</a></div>'
    )


def render_template(template: str, data: Dict[str, Any]) -> str:
    base = settings.BASE_URL.rstrip("/")
    raw_agent = _text(data.get("agentName"), "Agent")
    user = html.escape(_text(data.get("userName"), "there"))
    agent = html.escape(raw_agent)
    raw_target = _text(data.get("upgradeTarget"), "Pro")
    target = html.escape(raw_target)

    if template == "welcome-immediate":
        return _layout("SKRBL AI", "League of Digital Superheroes", (
            f"<h2>🎉 Welcome {user}!</h2>"
            "<p>You've just joined the most advanced AI automation platform on the planet!</p>"
            "<p>Percy, your AI Concierge, is ready to help you unlock creative superpowers and automate your workflow.</p>"
            + _button(f"{base}/dashboard", "🚀 Start Your Journey")
        ))
    if template == "agent-next-steps":
        return _layout("SKRBL AI", "Agent Success Guide", (
            f"<h2>🎯 Awesome work with {agent}!</h2>"
            "<p>You've just experienced the power of AI automation. Here's how to get even more value:</p>"
            "<ul><li>Try combining it with other agents for powerful workflows</li>"
            "<li>Save your favorite prompts for quick access</li>"
            "<li>Experiment with different input styles for varied results</li></ul>"
            + _button(f"{base}/agents", "🚀 Explore More Agents")
        ))
    if template == "upgrade-benefits":
        return _layout("SKRBL AI Pro", "Unlock Your Full Potential", (
            f"<h2>💎 Ready to unlock {agent}?</h2>"
            f"<p>Hi {user}, we noticed you tried to use {agent} - excellent choice!</p>"
            f"<h3>🚀 {html.escape(raw_target.upper())} Features Include:</h3>"
            f"<ul><li>✅ Unlimited {agent} usage</li><li>✅ Advanced workflow automation</li>"
            "<li>✅ Priority processing (10x faster)</li><li>✅ 24/7 expert support</li></ul>"
            + _button(f"{base}/pricing?agent={html.escape(quote(raw_agent))}", f"🎯 Upgrade to {target} Now")
        ))
    if template == "upgrade-nurture-day1":
        return _layout("SKRBL AI Success Stories", "", (
            f"<h2>🌟 See how Pro users are crushing it with {agent}</h2>"
            f"<p>Hi {user}, here's what Pro users achieved this week:</p>"
            f"<p><strong>Sarah M., Marketing Director:</strong><br>\"I generated 50 social media posts in 10 minutes "
            f"with {agent}. My engagement increased 300%!\"</p>"
            + _button(f"{base}/pricing", "🚀 Join Them - Upgrade to Pro")
        ))
    if template == "upgrade-nurture-day3":
        return _layout("⏰ Final Notice", "", (
            f"<h2>Don't miss out on {agent} premium features!</h2>"
            f"<p>Hi {user}, this is your final reminder about upgrading your {agent} access.</p>"
            + _button(f"{base}/pricing", "🔥 Upgrade Now - Limited Time")
            + '<p style="text-align: center; font-size: 12px; color: #666;">This is the last email about this offer. We respect your inbox!</p>'
        ))
    return "<p>Update from SKRBL AI</p>"
