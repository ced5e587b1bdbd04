"""Prompt builders for the model-generated artifacts.

Each builder is a pure function of the profile: the same inputs always give
the same prompts, and the API key never reaches this module.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from textwrap import dedent
from typing import Callable, Dict

from .schemas import ArtifactKind, Profile

DEFAULT_STARTUP_NAME = "The Startup"
DEFAULT_BRAND_TONE = "clear, confident, concise"
NOT_PROVIDED = "Not provided"


@dataclass(frozen=True)
class PromptSpec:
    """Container describing how to call the model for an artifact."""

    system_prompt: str
    user_prompt: str
    max_tokens: int = 1200


PITCH_DECK_STRUCTURE = (
    "Motivation",
    "Market pain / size / growth + target customers",
    "Product solving the pain",
    "Competition and moat",
    "Business model / unit metrics",
    "Cash-flow projections (5 years)",
    "Risk analysis and mitigation",
    "Team + who's missing",
    "Go to market",
    "Technology (scaling) and Processes",
    "What has been done so far (contracts, POCs, MVP, incorporation)",
    "Deal offered + use of proceeds + milestones for this round",
)


def _or_default(value: str, default: str) -> str:
    stripped = value.strip()
    return stripped if stripped else default


def _pretty_json(data: Dict[str, str]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def stage_hint(launch_weeks: str) -> str:
    """Map the launch timeframe picked at onboarding to a funding stage."""

    if launch_weeks.strip() in {"1-2", "5-8"}:
        return "pre-seed"
    return "seed-or-series-a"


def _profile_context(profile: Profile) -> Dict[str, str]:
    return {
        "name": _or_default(profile.startup_name, DEFAULT_STARTUP_NAME),
        "brandTone": _or_default(profile.brand_tone, DEFAULT_BRAND_TONE),
        "linkedin": _or_default(profile.linkedin, NOT_PROVIDED),
        "website": _or_default(profile.website, NOT_PROVIDED),
        "problem": _or_default(profile.problem, NOT_PROVIDED),
        "solution": _or_default(profile.solution, NOT_PROVIDED),
        "milestones": _or_default(profile.milestones, NOT_PROVIDED),
        "notes": _or_default(profile.notes, NOT_PROVIDED),
        "launchWeeks": _or_default(profile.launch_weeks, NOT_PROVIDED),
    }


def build_investors_prompt(profile: Profile) -> PromptSpec:
    system_prompt = dedent(
        """
        You are a startup investor matchmaker. Given a startup profile, pick investors who are a strong fit for the profile's stage and topic. Return a concise JSON array tailored to the inputs.

        Rules:
        - Output ONLY valid JSON, no backticks, no commentary
        - Each item:
          {
            "name": "",
            "firm": "",
            "role": "",
            "why_match": "reference the startup's problem/solution in <= 22 words",
            "fit_score": 1-5,
            "stages": ["pre-seed"|"seed"|"series a"|...],
            "sectors": ["AI", "SaaS", "DevTools", ...],
            "geo": "",
            "links": {"linkedin":"","twitter":"","email":"","website":""}
          }
        - fit_score is an integer from 1 to 5.
        - Use public info only; if a contact is unknown, set it to "".
        - Prefer partners who led or frequently participate at the requested stage.
        - Prefer investors with visible interest in the inferred sectors from the text.
        - Avoid generic choices; rank by fit_score descending.
        """
    ).strip()

    context = _profile_context(profile)
    context["stage_hint"] = stage_hint(profile.launch_weeks)
    user_prompt = (
        "Startup profile (use this aggressively):\n"
        f"{_pretty_json(context)}\n\n"
        "Infer sectors from problem/solution text. Map launch timeframe or stage_hint to stages. "
        "Return ONLY a JSON array."
    )
    return PromptSpec(system_prompt=system_prompt, user_prompt=user_prompt, max_tokens=1200)


def build_pitch_deck_prompt(profile: Profile) -> PromptSpec:
    voice_tone = _or_default(profile.brand_tone, DEFAULT_BRAND_TONE)
    structure = "\n".join(f"{index}. {title}" for index, title in enumerate(PITCH_DECK_STRUCTURE, start=1))
    system_prompt = "\n".join(
        [
            "You are a world-class startup storyteller crafting a crisp, investor-ready pitch deck outline.",
            "",
            "Rules:",
            f"- Output ONLY valid JSON (no backticks, no prose), an array of EXACTLY {len(PITCH_DECK_STRUCTURE)} slides, "
            f"numbered 1..{len(PITCH_DECK_STRUCTURE)}.",
            "- Each slide has the shape:",
            "  {",
            f'    "number": 1-{len(PITCH_DECK_STRUCTURE)},',
            '    "title": "",',
            '    "subtitle": "",',
            '    "bullets": ["3-6 short bullets, <= 16 words each"],',
            '    "metrics": {"note": "optional: for unit economics (slide 5) and projections (slide 6)"}',
            "  }",
            f"- Style and phrasing must follow the brand tone: {voice_tone}.",
            "- Keep it factual, specific, no fluff. Prioritize clarity over hype.",
            "",
            "Slide structure (exact order, titles can be improved but keep meaning):",
            structure,
        ]
    )

    context = _profile_context(profile)
    user_prompt = (
        "Startup profile context:\n"
        f"{_pretty_json(context)}\n\n"
        f"Return ONLY a JSON array with {len(PITCH_DECK_STRUCTURE)} items in the specified order. "
        "Avoid duplicates. If information is missing, infer carefully and keep conservative."
    )
    return PromptSpec(system_prompt=system_prompt, user_prompt=user_prompt, max_tokens=2200)


def build_market_research_prompt(profile: Profile, problem_statement: str | None = None) -> PromptSpec:
    system_prompt = dedent(
        """
        You are a senior market research analyst preparing an executive-grade market intelligence report for a startup.

        Rules:
        - Output ONLY a single valid JSON object (no backticks, no prose) with EXACTLY this structure:
          {
            "executive_summary": "",
            "market_analysis": {
              "market_size": "",
              "industry_trends": "",
              "market_segmentation": ""
            },
            "competitive_landscape": {
              "key_competitors": "",
              "competitive_advantages": "",
              "market_share": ""
            },
            "customer_insights": {
              "target_customers": "",
              "pain_points": "",
              "behavior": ""
            },
            "market_opportunity": {
              "market_gaps": "",
              "revenue_potential": "",
              "entry_barriers": ""
            },
            "recommendations": {
              "strategic": "",
              "implementation": "",
              "risk_mitigation": ""
            },
            "conclusion": ""
          }
        - Every value is a string of 2-4 sentences of plain text.
        - Quote market sizes and growth rates with the year and a source type; mark estimates as estimates.
        - Name real competitors where possible and be specific about the target segment.
        """
    ).strip()

    statement = (problem_statement or "").strip() or _or_default(profile.problem, NOT_PROVIDED)
    context = _profile_context(profile)
    user_prompt = (
        "Problem statement to research:\n"
        f"{statement}\n\n"
        "Startup profile context:\n"
        f"{_pretty_json(context)}\n\n"
        "Return ONLY the JSON object."
    )
    return PromptSpec(system_prompt=system_prompt, user_prompt=user_prompt, max_tokens=3000)


_BUILDERS: Dict[ArtifactKind, Callable[[Profile], PromptSpec]] = {
    ArtifactKind.INVESTORS: build_investors_prompt,
    ArtifactKind.PITCH_DECK: build_pitch_deck_prompt,
}


def build_prompt(kind: ArtifactKind, profile: Profile, problem_statement: str | None = None) -> PromptSpec:
    """Return the prompts for the requested artifact kind."""

    if kind is ArtifactKind.MARKET_RESEARCH:
        return build_market_research_prompt(profile, problem_statement)
    return _BUILDERS[kind](profile)
