"""Artifact registry and markdown renderers for generated payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List

from .resolver import Payload
from .schemas import (
    ArtifactDefinition,
    ArtifactKind,
    InvestorList,
    MarketResearchReport,
    PitchDeck,
)

PLACEHOLDER = "N/A"


# ---------------------------------------------------------------------------
# Markdown formatters
# ---------------------------------------------------------------------------


def _bullet_list(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items if item)


def _or_placeholder(value: str) -> str:
    return value.strip() or PLACEHOLDER


def _format_investors_markdown(payload: InvestorList) -> str:
    sections = []
    for investor in payload.investors:
        heading = investor.name or "Unnamed investor"
        if investor.firm:
            heading = f"{heading} ({investor.firm})"
        lines = [
            f"**Role:** {investor.role}" if investor.role else "",
            f"**Fit score:** {investor.fit_score:g}/5" if investor.fit_score is not None else "",
            f"**Why:** {investor.why_match}" if investor.why_match else "",
            f"**Stages:** {', '.join(investor.stages)}" if investor.stages else "",
            f"**Sectors:** {', '.join(investor.sectors)}" if investor.sectors else "",
            f"**Geo:** {investor.geo}" if investor.geo else "",
        ]
        links = [
            f"[{label}]({url})"
            for label, url in investor.links.model_dump().items()
            if url
        ]
        if links:
            lines.append(f"**Links:** {' · '.join(links)}")
        sections.append(f"## {heading}\n\n" + "\n\n".join(line for line in lines if line))
    return "\n\n".join(sections)


def _format_pitch_deck_markdown(payload: PitchDeck) -> str:
    sections = []
    for slide in payload.slides:
        number = f"{slide.number}. " if slide.number is not None else ""
        parts = [f"## {number}{slide.title or 'Untitled slide'}"]
        if slide.subtitle:
            parts.append(f"_{slide.subtitle}_")
        if slide.bullets:
            parts.append(_bullet_list(slide.bullets))
        if slide.metrics:
            parts.append(_bullet_list(f"**{key}:** {value}" for key, value in slide.metrics.items()))
        sections.append("\n\n".join(parts))
    return "\n\n".join(sections)


def _format_market_research_markdown(report: MarketResearchReport) -> str:
    groups = [
        (
            "Market Analysis",
            [
                ("Market Size & Growth", report.market_analysis.market_size),
                ("Industry Trends", report.market_analysis.industry_trends),
                ("Market Segmentation", report.market_analysis.market_segmentation),
            ],
        ),
        (
            "Competitive Landscape",
            [
                ("Key Competitors", report.competitive_landscape.key_competitors),
                ("Competitive Advantages", report.competitive_landscape.competitive_advantages),
                ("Market Share Dynamics", report.competitive_landscape.market_share),
            ],
        ),
        (
            "Customer Intelligence",
            [
                ("Target Customers", report.customer_insights.target_customers),
                ("Pain Points", report.customer_insights.pain_points),
                ("Customer Behavior", report.customer_insights.behavior),
            ],
        ),
        (
            "Market Opportunity",
            [
                ("Market Gaps", report.market_opportunity.market_gaps),
                ("Revenue Potential", report.market_opportunity.revenue_potential),
                ("Entry Barriers", report.market_opportunity.entry_barriers),
            ],
        ),
        (
            "Strategic Recommendations",
            [
                ("Strategic Direction", report.recommendations.strategic),
                ("Implementation Plan", report.recommendations.implementation),
                ("Risk Mitigation", report.recommendations.risk_mitigation),
            ],
        ),
    ]
    sections = [f"## Executive Summary\n\n{_or_placeholder(report.executive_summary)}"]
    for title, entries in groups:
        body = "\n\n".join(f"### {label}\n\n{_or_placeholder(text)}" for label, text in entries)
        sections.append(f"## {title}\n\n{body}")
    sections.append(f"## Strategic Conclusion\n\n{_or_placeholder(report.conclusion)}")
    return "\n\n".join(sections)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArtifactInfo:
    """Runtime definition used by the registry below."""

    kind: ArtifactKind
    description: str
    formatter: Callable[..., str]


ARTIFACT_REGISTRY: Dict[ArtifactKind, ArtifactInfo] = {
    ArtifactKind.INVESTORS: ArtifactInfo(
        kind=ArtifactKind.INVESTORS,
        description="Shortlist investors whose stage and sector focus match the startup.",
        formatter=_format_investors_markdown,
    ),
    ArtifactKind.PITCH_DECK: ArtifactInfo(
        kind=ArtifactKind.PITCH_DECK,
        description="Draft a 12-slide, investor-ready pitch deck outline.",
        formatter=_format_pitch_deck_markdown,
    ),
    ArtifactKind.MARKET_RESEARCH: ArtifactInfo(
        kind=ArtifactKind.MARKET_RESEARCH,
        description="Produce a market intelligence report with sizing, competition and recommendations.",
        formatter=_format_market_research_markdown,
    ),
}


def list_artifact_definitions() -> List[ArtifactDefinition]:
    """Return UI-friendly descriptors for all artifact kinds."""

    return [
        ArtifactDefinition(id=info.kind, label=info.kind.label, description=info.description)
        for info in ARTIFACT_REGISTRY.values()
    ]


def render_markdown(payload: Payload | None) -> str:
    """Render a payload as markdown; an empty string when there is none."""

    if payload is None:
        return ""
    info = ARTIFACT_REGISTRY[ArtifactKind(payload.kind)]
    return info.formatter(payload).strip()
