"""Pydantic models and enums for the GlowUp artifact API."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ArtifactKind(str, Enum):
    """Enumerate the model-generated artifacts."""

    INVESTORS = "investors"
    PITCH_DECK = "pitch_deck"
    MARKET_RESEARCH = "market_research"

    @property
    def label(self) -> str:
        """Return the human-friendly label, also used in export filenames."""
        labels = {
            ArtifactKind.INVESTORS: "Investors",
            ArtifactKind.PITCH_DECK: "Pitch Deck",
            ArtifactKind.MARKET_RESEARCH: "Market Research",
        }
        return labels[self]

    @property
    def expects_list(self) -> bool:
        """True when the model must answer with a JSON array."""
        return self is not ArtifactKind.MARKET_RESEARCH


class GenerationStatus(str, Enum):
    """Lifecycle of a single artifact kind."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class Profile(BaseModel):
    """Startup attributes captured during onboarding.

    Accepts the camelCase names used by the onboarding form as aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    startup_name: str = Field(default="", alias="startupName")
    brand_tone: str = Field(default="", alias="brandTone")
    linkedin: str = ""
    website: str = ""
    problem: str = ""
    solution: str = ""
    notes: str = ""
    launch_weeks: str = Field(default="", alias="launchWeeks")
    milestones: str = ""


# ---------------------------------------------------------------------------
# Artifact payloads
# ---------------------------------------------------------------------------


class _ArtifactModel(BaseModel):
    """Treat explicit JSON nulls as missing so field defaults apply."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class InvestorLinks(_ArtifactModel):
    linkedin: str = ""
    twitter: str = ""
    email: str = ""
    website: str = ""


class Investor(_ArtifactModel):
    """A single investor recommendation."""

    name: str = ""
    firm: str = ""
    role: str = ""
    why_match: str = ""
    fit_score: Optional[float] = None
    stages: List[str] = Field(default_factory=list)
    sectors: List[str] = Field(default_factory=list)
    geo: str = ""
    links: InvestorLinks = Field(default_factory=InvestorLinks)


class Slide(_ArtifactModel):
    """One slide of the pitch deck outline."""

    number: Optional[int] = None
    title: str = ""
    subtitle: str = ""
    bullets: List[str] = Field(default_factory=list)
    metrics: Optional[Dict[str, str]] = None

    @field_validator("metrics", mode="before")
    @classmethod
    def _stringify_metrics(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"note": value} if value else None
        if isinstance(value, dict):
            return {str(key): "" if item is None else str(item) for key, item in value.items()}
        return value


class InvestorList(BaseModel):
    kind: Literal["investors"] = "investors"
    investors: List[Investor] = Field(default_factory=list)


class PitchDeck(BaseModel):
    kind: Literal["pitch_deck"] = "pitch_deck"
    slides: List[Slide] = Field(default_factory=list)


class MarketAnalysis(_ArtifactModel):
    market_size: str = ""
    industry_trends: str = ""
    market_segmentation: str = ""


class CompetitiveLandscape(_ArtifactModel):
    key_competitors: str = ""
    competitive_advantages: str = ""
    market_share: str = ""


class CustomerInsights(_ArtifactModel):
    target_customers: str = ""
    pain_points: str = ""
    behavior: str = ""


class MarketOpportunity(_ArtifactModel):
    market_gaps: str = ""
    revenue_potential: str = ""
    entry_barriers: str = ""


class Recommendations(_ArtifactModel):
    strategic: str = ""
    implementation: str = ""
    risk_mitigation: str = ""


class MarketResearchReport(_ArtifactModel):
    """Fixed-section market research report."""

    kind: Literal["market_research"] = "market_research"
    executive_summary: str = ""
    market_analysis: MarketAnalysis = Field(default_factory=MarketAnalysis)
    competitive_landscape: CompetitiveLandscape = Field(default_factory=CompetitiveLandscape)
    customer_insights: CustomerInsights = Field(default_factory=CustomerInsights)
    market_opportunity: MarketOpportunity = Field(default_factory=MarketOpportunity)
    recommendations: Recommendations = Field(default_factory=Recommendations)
    conclusion: str = ""


ArtifactPayload = Annotated[
    Union[InvestorList, PitchDeck, MarketResearchReport],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Generation state
# ---------------------------------------------------------------------------


class GenerationErrorDetail(BaseModel):
    """Serializable view of a generation failure."""

    code: str
    message: str
    status_code: Optional[int] = None
    detail: Optional[str] = None


class GenerationResult(BaseModel):
    """Current state of one artifact kind."""

    kind: ArtifactKind
    status: GenerationStatus = GenerationStatus.IDLE
    payload: Optional[ArtifactPayload] = None
    error: Optional[GenerationErrorDetail] = None
    request_id: int = 0


# ---------------------------------------------------------------------------
# HTTP payloads
# ---------------------------------------------------------------------------


class SessionCreateRequest(BaseModel):
    """Onboarding submission."""

    profile: Profile
    credential: Optional[str] = Field(
        default=None,
        description="Optional Anthropic API key stored for this session only.",
    )


class SessionResponse(BaseModel):
    """Aggregate the profile and artifact results of a session."""

    session_id: str
    profile: Profile
    has_credential: bool
    needs_credential_reentry: bool
    results: Dict[str, GenerationResult]


class CredentialRequest(BaseModel):
    credential: str = Field(..., min_length=1)


class CredentialStatus(BaseModel):
    has_credential: bool
    needs_credential_reentry: bool


class GenerateRequest(BaseModel):
    """Optional inputs for a generation run."""

    problem_statement: Optional[str] = Field(
        default=None,
        description="Free-text problem statement for market research; defaults to the profile problem.",
    )


class ArtifactResponse(BaseModel):
    """Result of one artifact kind with a markdown rendering."""

    result: GenerationResult
    markdown: str = ""
    advisories: List[str] = Field(default_factory=list)


class ArtifactDefinition(BaseModel):
    """Expose metadata that describes an artifact kind to the UI."""

    id: ArtifactKind
    label: str
    description: str


class SlideCursor(BaseModel):
    """Current carousel position over the generated slides."""

    index: int
    total: int
    slide: Optional[Slide] = None


class CalendarPost(BaseModel):
    id: str
    week: int
    post_number: int
    platform: str
    title: str
    content: str
    hashtags: List[str]
    engagement: str
    timing: str
    day: str


class CalendarWeek(BaseModel):
    week_number: int
    theme: str
    posts: List[CalendarPost]


class ContentCalendar(BaseModel):
    month: str
    year: int
    startup_name: str
    brand_tone: str
    problem: str
    solution: str
    weeks: List[CalendarWeek]


class CalendarRequest(BaseModel):
    seed: int = Field(default=0, description="Seed that selects post templates.")
    today: Optional[date] = Field(default=None, description="Reference date; the calendar covers the next month.")
