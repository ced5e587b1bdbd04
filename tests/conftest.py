from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from glowup.config import get_settings
from glowup.schemas import Profile


class StubInvoker:
    """Stand-in for the model client that records calls."""

    def __init__(self, response: Any = "", gate: asyncio.Event | None = None) -> None:
        self.response = response
        self.gate = gate
        self.calls: list[dict[str, Any]] = []

    async def __call__(self, system_prompt: str, user_prompt: str, credential: str | None, max_tokens: int) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "credential": credential,
                "max_tokens": max_tokens,
            }
        )
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    """Ensure cached settings do not leak between tests."""

    get_settings.cache_clear()


@pytest.fixture
def profile() -> Profile:
    return Profile(
        startup_name="Orbit",
        brand_tone="Professional",
        linkedin="https://www.linkedin.com/in/founder",
        problem="Remote teams lose hours every week to status meetings",
        solution="An AI coach that turns async updates into weekly outcomes",
        notes="Two pilots running with agencies",
        launch_weeks="3-4",
        milestones="MVP in 4 weeks, 10 paying teams by Q2",
    )


@pytest.fixture
def investors_data() -> list[dict[str, Any]]:
    return [
        {
            "name": "Ada Park",
            "firm": "Northwind Ventures",
            "role": "Partner",
            "why_match": "Backs async collaboration tools for remote teams",
            "fit_score": 5,
            "stages": ["pre-seed", "seed"],
            "sectors": ["SaaS", "AI"],
            "geo": "US",
            "links": {"linkedin": "https://linkedin.com/in/ada", "twitter": "", "email": "", "website": ""},
        },
        {
            "name": "Ben Ortiz",
            "firm": "Fieldstone",
            "role": "Principal",
            "why_match": "Led seed rounds in productivity software",
            "fit_score": 4,
            "stages": ["seed"],
            "sectors": ["Productivity"],
            "geo": "EU",
            "links": {"linkedin": "", "twitter": "", "email": "ben@fieldstone.vc", "website": ""},
        },
    ]


@pytest.fixture
def slides_data() -> list[dict[str, Any]]:
    return [
        {
            "number": number,
            "title": f"Slide {number}",
            "subtitle": f"Subtitle {number}",
            "bullets": ["First point", "Second point", "Third point"],
            "metrics": {"note": "CAC $120, LTV $1,800"} if number == 5 else None,
        }
        for number in range(1, 13)
    ]


@pytest.fixture
def report_data() -> dict[str, Any]:
    return {
        "executive_summary": "Async coaching is an emerging category.",
        "market_analysis": {
            "market_size": "$4.2B in 2024 (analyst estimate)",
            "industry_trends": "Remote work is stabilising at hybrid levels.",
            "market_segmentation": "Agencies, startups, mid-market.",
        },
        "competitive_landscape": {
            "key_competitors": "Range, Status Hero, Geekbot",
            "competitive_advantages": "Outcome-focused coaching.",
            "market_share": "Fragmented.",
        },
        "customer_insights": {
            "target_customers": "Team leads at 20-200 person companies.",
            "pain_points": "Meeting overload.",
            "behavior": "Adopt tools bottom-up.",
        },
        "market_opportunity": {
            "market_gaps": "No tool ties updates to outcomes.",
            "revenue_potential": "$10M ARR within five years (estimate).",
            "entry_barriers": "Slack and Teams integrations.",
        },
        "recommendations": {
            "strategic": "Focus on agencies first.",
            "implementation": "Launch a Slack app.",
            "risk_mitigation": "Avoid platform lock-in.",
        },
        "conclusion": "Attractive wedge into team productivity.",
    }


@pytest.fixture
def deck_json(slides_data: list[dict[str, Any]]) -> str:
    return json.dumps(slides_data)
