from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any

SOCIAL_TONES = ("professional", "casual", "friendly", "authoritative", "humorous", "technical")
BRAND_STYLES = ("modern", "classic", "minimalist", "bold", "playful", "luxury")
DEFAULT_TOPICS = ["industry news", "tips", "company updates", "product features"]
DEFAULT_BRAND_VALUES = ["professional", "trustworthy", "innovative"]

class SocialBotRequest(BaseModel):
    businessName: str = Field(..., min_length=1)
    industry: str = Field(..., min_length=1)
    platforms: List[str] = Field(..., min_length=1)
    userId: Optional[str] = None
    jobId: Optional[str] = None
    postCount: int = Field(5, ge=1, le=50)
    tone: str = "professional"
    topics: List[str] = Field(default_factory=lambda: list(DEFAULT_TOPICS))
    includeHashtags: bool = True
    schedulePosts: bool = False
    contentType: Optional[str] = None
    targetAudience: Optional[str] = None
    customInstructions: Optional[str] = None

    @field_validator("platforms")
    @classmethod
    def normalize_platforms(cls, v: List[str]) -> List[str]:
        return [p.strip().lower() for p in v if p and p.strip()]

    @field_validator("tone")
    @classmethod
    def validate_tone(cls, v: str) -> str:
        v = (v or "professional").lower()
        if v not in SOCIAL_TONES:
            raise ValueError(f"tone must be one of {', '.join(SOCIAL_TONES)}")
        return v

    @field_validator("topics")
    @classmethod
    def default_topics(cls, v: List[str]) -> List[str]:
        topics = [t for t in v if t and t.strip()]
        return topics or list(DEFAULT_TOPICS)

class BrandingRequest(BaseModel):
    businessName: str = Field(..., min_length=1)
    industry: str = Field(..., min_length=1)
    targetAudience: str = Field(..., min_length=1)
    userId: Optional[str] = None
    jobId: Optional[str] = None
    brandValues: List[str] = Field(default_factory=lambda: list(DEFAULT_BRAND_VALUES))
    colorPreferences: List[str] = []
    stylePreference: str = "modern"
    moodKeywords: List[str] = []
    customInstructions: Optional[str] = None

    @field_validator("stylePreference")
    @classmethod
    def validate_style(cls, v: str) -> str:
        v = (v or "modern").lower()
        if v not in BRAND_STYLES:
            raise ValueError(f"stylePreference must be one of {', '.join(BRAND_STYLES)}")
        return v

class AgentLaunchRequest(BaseModel):
    userId: Optional[str] = None
    input: Dict[str, Any] = {}

class AgentLaunchResponse(BaseModel):
    success: bool = True
    jobId: str
    status: str = "queued"
    message: str

class AgentRunResponse(BaseModel):
    success: bool = True
    message: str
    data: Dict[str, Any]

class AgentInfo(BaseModel):
    id: str
    name: str
    description: str
    inputFields: List[str]

class AgentListResponse(BaseModel):
    success: bool = True
    agents: List[AgentInfo]
