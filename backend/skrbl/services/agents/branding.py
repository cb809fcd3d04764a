"""
Branding agent

Color palette by industry, typography by style, a logo concept, brand voice
and guidelines, plus an ``aiBrandIdentity`` summary that is enriched through
the text generation service when one is configured.
"""

import random
from typing import Any, Dict, List
import logging

from skrbl.core.config import settings
from skrbl.schemas.agent import BrandingRequest

logger = logging.getLogger(__name__)

AGENT_ID = "branding"

INDUSTRY_COLORS = {
    "technology": {"primary": "#0078D7", "secondary": "#50E6FF", "accent": "#FFD700", "neutral": "#F2F2F2", "dark": "#333333"},
    "healthcare": {"primary": "#00A3E0", "secondary": "#44D62C", "accent": "#FF6B6B", "neutral": "#F5F5F5", "dark": "#2C3E50"},
    "finance": {"primary": "#006D77", "secondary": "#83C5BE", "accent": "#EE6C4D", "neutral": "#F8F8F8", "dark": "#293241"},
    "education": {"primary": "#4A90E2", "secondary": "#7ED321", "accent": "#F5A623", "neutral": "#F0F0F0", "dark": "#4A4A4A"},
    "food": {"primary": "#FF6B6B", "secondary": "#FFE66D", "accent": "#4ECDC4", "neutral": "#F7F7F7", "dark": "#292F36"},
    "retail": {"primary": "#FF5A5F", "secondary": "#00A699", "accent": "#FC642D", "neutral": "#F7F7F7", "dark": "#484848"},
}

STYLE_ADJUSTMENTS = {
    "modern": {"saturation": 1.0, "brightness": 1.0},
    "classic": {"saturation": 0.8, "brightness": 0.9},
    "minimalist": {"saturation": 0.6, "brightness": 1.1},
    "bold": {"saturation": 1.2, "brightness": 1.0},
    "playful": {"saturation": 1.1, "brightness": 1.1},
    "luxury": {"saturation": 0.9, "brightness": 0.8},
}

TYPOGRAPHY = {
    "modern": {"headingFont": "Montserrat", "bodyFont": "Open Sans", "accentFont": "Roboto", "headingWeight": 700, "bodyWeight": 400},
    "classic": {"headingFont": "Playfair Display", "bodyFont": "Merriweather", "accentFont": "Georgia", "headingWeight": 700, "bodyWeight": 400},
    "minimalist": {"headingFont": "Helvetica Neue", "bodyFont": "Helvetica", "accentFont": "Arial", "headingWeight": 500, "bodyWeight": 300},
    "bold": {"headingFont": "Futura", "bodyFont": "Roboto", "accentFont": "Impact", "headingWeight": 800, "bodyWeight": 400},
    "playful": {"headingFont": "Quicksand", "bodyFont": "Nunito", "accentFont": "Pacifico", "headingWeight": 600, "bodyWeight": 400},
    "luxury": {"headingFont": "Didot", "bodyFont": "Garamond", "accentFont": "Baskerville", "headingWeight": 700, "bodyWeight": 400},
}

INDUSTRY_ICONS = {
    "technology": ["circuit", "chip", "code", "connection", "network"],
    "healthcare": ["heart", "pulse", "cross", "shield", "leaf"],
    "finance": ["chart", "graph", "shield", "coin", "building"],
    "education": ["book", "graduation-cap", "pencil", "lightbulb", "brain"],
    "food": ["fork", "spoon", "plate", "chef-hat", "wheat"],
    "retail": ["bag", "tag", "store", "hanger", "gift"],
}

LOGO_STYLES = {
    "modern": {"shape": "geometric", "complexity": "simple", "treatment": "flat"},
    "classic": {"shape": "shield or emblem", "complexity": "detailed", "treatment": "textured"},
    "minimalist": {"shape": "abstract", "complexity": "very simple", "treatment": "monochrome"},
    "bold": {"shape": "strong geometric", "complexity": "medium", "treatment": "bold lines"},
    "playful": {"shape": "rounded", "complexity": "medium", "treatment": "colorful"},
    "luxury": {"shape": "elegant", "complexity": "refined", "treatment": "metallic or gradient"},
}

VALUE_TONES = {
    "professional": {"tone": "authoritative and knowledgeable", "vocabulary": "industry-specific terminology balanced with clarity", "sentenceStructure": "clear, direct, and well-structured"},
    "trustworthy": {"tone": "reliable and consistent", "vocabulary": "straightforward and honest", "sentenceStructure": "balanced and measured"},
    "innovative": {"tone": "forward-thinking and dynamic", "vocabulary": "cutting-edge terminology with explanations", "sentenceStructure": "varied and engaging"},
    "friendly": {"tone": "warm and approachable", "vocabulary": "conversational and relatable", "sentenceStructure": "casual but clear"},
    "luxury": {"tone": "sophisticated and exclusive", "vocabulary": "refined and elegant", "sentenceStructure": "sophisticated with rich descriptions"},
    "playful": {"tone": "energetic and fun", "vocabulary": "casual with wordplay and humor", "sentenceStructure": "varied with occasional surprises"},
}


def color_palette(industry: str, style: str, color_preferences: List[str]) -> Dict[str, Any]:
    # Unknown industries share the technology palette
    colors = dict(INDUSTRY_COLORS.get(industry.lower(), INDUSTRY_COLORS["technology"]))
    if color_preferences:
        colors["accent"] = color_preferences[0]
    return {
        **colors,
        "palette": [colors["primary"], colors["secondary"], colors["accent"], colors["neutral"], colors["dark"]],
        "styleAdjustment": STYLE_ADJUSTMENTS.get(style, STYLE_ADJUSTMENTS["modern"]),
    }


def typography(style: str) -> Dict[str, Any]:
    return dict(TYPOGRAPHY.get(style, TYPOGRAPHY["modern"]))


def logo_description(business_name: str, industry: str, style: str) -> Dict[str, Any]:
    icons = INDUSTRY_ICONS.get(industry.lower(), INDUSTRY_ICONS["technology"])
    # Seeded by name so a business always gets the same icon
    icon = random.Random(business_name).choice(icons)
    traits = LOGO_STYLES.get(style, LOGO_STYLES["modern"])
    return {
        "concept": (
            f"A {traits['complexity']} {traits['shape']} logo for {business_name}, featuring a stylized "
            f"{icon} element with a {traits['treatment']} design treatment."
        ),
        "iconSuggestions": list(icons),
        "styleCharacteristics": dict(traits),
        "variations": [
            f"Wordmark: {business_name} in a custom typeface with a subtle {icon} integration",
            f"Icon + Wordmark: A {traits['shape']} {icon} icon paired with {business_name} in a complementary typeface",
            f"Abstract: A {traits['complexity']} abstract representation of a {icon} that forms the initials of {business_name}",
        ],
    }


def brand_voice(target_audience: str, brand_values: List[str]) -> Dict[str, Any]:
    profiles = [VALUE_TONES.get(v.lower(), VALUE_TONES["professional"]) for v in brand_values]
    lead = profiles[0] if profiles else {
        "tone": "professional and approachable",
        "vocabulary": "clear and accessible",
        "sentenceStructure": "well-structured and engaging",
    }
    return {
        "overview": (
            f"The brand voice for {target_audience} should be {lead['tone']}, using {lead['vocabulary']} "
            f"with {lead['sentenceStructure']} sentences."
        ),
        "toneAttributes": [VALUE_TONES.get(v.lower(), {}).get("tone", v) for v in brand_values],
        "doList": [
            "Speak directly to the audience needs and pain points",
            f"Emphasize {', '.join(brand_values)} in all communications",
            "Maintain consistency across all platforms and touchpoints",
            "Use active voice and present tense when possible",
        ],
        "dontList": [
            "Use jargon without explanation",
            "Adopt a tone that contradicts core brand values",
            "Use overly complex language that alienates the audience",
            "Be inconsistent in messaging across different channels",
        ],
        "examples": {
            "headlines": [
                f"Transform Your {target_audience} Experience",
                f"The Smarter Approach to {target_audience} Challenges",
                f"Discover What Makes Us Different for {target_audience}",
            ],
            "shortCopy": (
                f"We understand the unique challenges that {target_audience} face. That's why we've developed "
                "solutions that are not only effective but also align with your values and goals."
            ),
            "emailSignature": "Looking forward to partnering with you,\nThe Team",
        },
    }


def brand_guidelines(business_name: str, palette: Dict[str, Any], fonts: Dict[str, Any],
                     brand_values: List[str]) -> Dict[str, Any]:
    return {
        "title": f"{business_name} Brand Guidelines",
        "introduction": (
            f"This document outlines the core elements of the {business_name} brand identity. Consistent "
            "application of these guidelines will help maintain brand integrity across all touchpoints."
        ),
        "sections": [
            {
                "title": "Brand Essence",
                "content": (
                    f"{business_name} is defined by its commitment to {', '.join(brand_values)}. "
                    "These values should be reflected in all brand expressions."
                ),
            },
            {
                "title": "Logo Usage",
                "content": "The logo should always be used according to these specifications to maintain brand recognition and integrity.",
                "specifications": [
                    "Maintain clear space around the logo equal to the height of the logo mark",
                    "Never distort, rotate, or alter the logo colors",
                    "Minimum size for digital: 40px height; for print: 0.5 inches height",
                    "Use the reversed (white) version on dark backgrounds",
                ],
            },
            {
                "title": "Color Palette",
                "content": "The brand colors should be used consistently across all materials.",
                "colors": [
                    {"name": "Primary", "hex": palette["primary"], "usage": "Main brand color, use for primary elements and CTAs"},
                    {"name": "Secondary", "hex": palette["secondary"], "usage": "Supporting color, use for secondary elements and accents"},
                    {"name": "Accent", "hex": palette["accent"], "usage": "Highlight color, use sparingly for emphasis"},
                    {"name": "Neutral", "hex": palette["neutral"], "usage": "Background color and text areas"},
                    {"name": "Dark", "hex": palette["dark"], "usage": "Text color and dark elements"},
                ],
            },
            {
                "title": "Typography",
                "content": "Consistent typography helps maintain brand recognition.",
                "fonts": [
                    {"name": fonts["headingFont"], "usage": "Headings and titles", "weights": [fonts["headingWeight"]]},
                    {"name": fonts["bodyFont"], "usage": "Body text and general content", "weights": [fonts["bodyWeight"], 700]},
                    {"name": fonts["accentFont"], "usage": "Accent text, callouts, and special elements", "weights": [400, 600]},
                ],
            },
            {
                "title": "Imagery Style",
                "content": "Images should reflect the brand personality and appeal to the target audience.",
                "guidelines": [
                    "Use high-quality, authentic imagery",
                    "Maintain consistent color treatment across all images",
                    "Prefer images that convey the brand values",
                    "Avoid clichéd stock photography",
                ],
            },
        ],
        "conclusion": (
            f"Consistent application of these guidelines will help build and maintain a strong brand identity "
            f"for {business_name}. For questions or additional guidance, please contact the brand team."
        ),
    }


def static_summary(params: BrandingRequest) -> str:
    colors = ", ".join(params.colorPreferences) or "the industry palette"
    return (
        f"{params.businessName} is a {params.stylePreference} brand in the {params.industry} industry targeting "
        f"{params.targetAudience}. The brand embodies the values of {', '.join(params.brandValues)} with a color "
        f"palette based on {colors}. The typography is clean and {params.stylePreference}, and the logo represents "
        f"the essence of {params.industry} business."
    )


def identity_prompt(params: BrandingRequest) -> str:
    return (
        "Generate a brand identity for a business.\n"
        f"Business Name: {params.businessName}\n"
        f"Industry: {params.industry}\n"
        f"Target Audience: {params.targetAudience}\n"
        f"Brand Values: {', '.join(params.brandValues)}\n"
        f"Color Preferences: {', '.join(params.colorPreferences)}\n"
        f"Style: {params.stylePreference}\n"
        f"Mood: {', '.join(params.moodKeywords)}\n"
        f"Instructions: {params.customInstructions or ''}"
    )


async def generate_brand_identity(params: BrandingRequest, text_service=None) -> Dict[str, Any]:
    palette = color_palette(params.industry, params.stylePreference, params.colorPreferences)
    fonts = typography(params.stylePreference)

    summary = static_summary(params)
    if text_service is not None:
        summary = await text_service.enrich(
            identity_prompt(params),
            fallback=summary,
            max_tokens=settings.BRANDING_MAX_TOKENS,
        )

    return {
        "businessName": params.businessName,
        "industry": params.industry,
        "targetAudience": params.targetAudience,
        "aiBrandIdentity": summary,
        "colorPalette": palette,
        "typography": fonts,
        "logoDescription": logo_description(params.businessName, params.industry, params.stylePreference),
        "brandVoice": brand_voice(params.targetAudience, params.brandValues),
        "brandGuidelines": brand_guidelines(params.businessName, palette, fonts, params.brandValues),
        "stylePreferences": params.stylePreference,
        "brandValues": list(params.brandValues),
    }
