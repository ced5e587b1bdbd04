"""Turn raw model output into typed artifact payloads.

The model is asked for bare JSON but may wrap it in prose or markdown
fences. Resolution is two-staged: parse the whole text, then fall back to
the outermost bracketed value of the expected shape. Anything else is an
``UnparsableResponse``.
"""

from __future__ import annotations

import json
import re
from typing import Any, List, Union

from pydantic import TypeAdapter, ValidationError

from .errors import UnparsableResponse
from .prompts import PITCH_DECK_STRUCTURE
from .schemas import (
    ArtifactKind,
    Investor,
    InvestorList,
    MarketResearchReport,
    PitchDeck,
    Slide,
)

Payload = Union[InvestorList, PitchDeck, MarketResearchReport]

_ARRAY_PATTERN = re.compile(r"\[.*\]", re.DOTALL)
_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)

_INVESTORS_ADAPTER = TypeAdapter(List[Investor])
_SLIDES_ADAPTER = TypeAdapter(List[Slide])

MIN_BULLETS = 3
MAX_BULLETS = 6


def _matches_shape(value: Any, expects_list: bool) -> bool:
    if expects_list:
        return isinstance(value, list)
    return isinstance(value, dict)


def extract_json(raw_text: str, expects_list: bool) -> Any:
    """Return the JSON value of the expected shape found in *raw_text*."""

    try:
        candidate = json.loads(raw_text)
    except (json.JSONDecodeError, TypeError):
        candidate = None
    else:
        if _matches_shape(candidate, expects_list):
            return candidate

    pattern = _ARRAY_PATTERN if expects_list else _OBJECT_PATTERN
    match = pattern.search(raw_text or "")
    if match:
        try:
            candidate = json.loads(match.group(0))
        except json.JSONDecodeError:
            candidate = None
        else:
            if _matches_shape(candidate, expects_list):
                return candidate

    raise UnparsableResponse()


def _slide_order(slide: Slide) -> tuple[bool, int]:
    return (slide.number is None, slide.number or 0)


def resolve(raw_text: str, kind: ArtifactKind) -> Payload:
    """Parse *raw_text* into the payload type of *kind*.

    The whole value is typed at once: a single item that cannot be typed
    rejects the result. Missing fields fall back to empty defaults.
    """

    data = extract_json(raw_text, kind.expects_list)
    try:
        if kind is ArtifactKind.INVESTORS:
            return InvestorList(investors=_INVESTORS_ADAPTER.validate_python(data))
        if kind is ArtifactKind.PITCH_DECK:
            slides = sorted(_SLIDES_ADAPTER.validate_python(data), key=_slide_order)
            return PitchDeck(slides=slides)
        return MarketResearchReport.model_validate({**data, "kind": ArtifactKind.MARKET_RESEARCH.value})
    except ValidationError as exc:
        raise UnparsableResponse(f"Model output does not match the {kind.label.lower()} shape") from exc


def advisory_issues(payload: Payload) -> List[str]:
    """List field-level deviations that do not reject the payload."""

    issues: List[str] = []
    if isinstance(payload, InvestorList):
        if not payload.investors:
            issues.append("investor list is empty")
        for index, investor in enumerate(payload.investors, start=1):
            if investor.fit_score is None:
                issues.append(f"investor {index} has no fit_score")
            elif not 1 <= investor.fit_score <= 5:
                issues.append(f"investor {index} fit_score {investor.fit_score:g} is outside 1-5")
    elif isinstance(payload, PitchDeck):
        expected = len(PITCH_DECK_STRUCTURE)
        if len(payload.slides) != expected:
            issues.append(f"pitch deck has {len(payload.slides)} slides, expected {expected}")
        numbers = [slide.number for slide in payload.slides]
        if numbers != list(range(1, len(numbers) + 1)):
            issues.append("slide numbers are not 1..N")
        for slide in payload.slides:
            if not MIN_BULLETS <= len(slide.bullets) <= MAX_BULLETS:
                issues.append(
                    f"slide {slide.number} has {len(slide.bullets)} bullets, expected {MIN_BULLETS}-{MAX_BULLETS}"
                )
    else:
        if not payload.executive_summary:
            issues.append("executive_summary is empty")
        if not payload.conclusion:
            issues.append("conclusion is empty")
    return issues
