from __future__ import annotations

import json
from typing import Any

import pytest

from glowup.errors import UnparsableResponse
from glowup.resolver import advisory_issues, extract_json, resolve
from glowup.schemas import (
    ArtifactKind,
    Investor,
    InvestorList,
    MarketResearchReport,
    PitchDeck,
    Slide,
)


def _fenced(value: Any) -> str:
    return "Here is the result:\n```json\n" + json.dumps(value) + "\n```"


def test_investor_list_round_trip(investors_data: list[dict[str, Any]]) -> None:
    expected = InvestorList(investors=[Investor.model_validate(item) for item in investors_data])

    resolved = resolve(json.dumps([item.model_dump() for item in expected.investors]), ArtifactKind.INVESTORS)

    assert resolved == expected


def test_pitch_deck_round_trip(slides_data: list[dict[str, Any]]) -> None:
    expected = PitchDeck(slides=[Slide.model_validate(item) for item in slides_data])

    resolved = resolve(json.dumps([slide.model_dump() for slide in expected.slides]), ArtifactKind.PITCH_DECK)

    assert resolved == expected
    assert [slide.number for slide in resolved.slides] == list(range(1, 13))


def test_market_research_round_trip(report_data: dict[str, Any]) -> None:
    expected = MarketResearchReport.model_validate(report_data)

    resolved = resolve(json.dumps(expected.model_dump(exclude={"kind"})), ArtifactKind.MARKET_RESEARCH)

    assert resolved == expected


@pytest.mark.parametrize(
    ("kind", "fixture_name"),
    [
        (ArtifactKind.INVESTORS, "investors_data"),
        (ArtifactKind.PITCH_DECK, "slides_data"),
        (ArtifactKind.MARKET_RESEARCH, "report_data"),
    ],
)
def test_fenced_output_is_recovered(kind: ArtifactKind, fixture_name: str, request: pytest.FixtureRequest) -> None:
    data = request.getfixturevalue(fixture_name)

    assert resolve(_fenced(data), kind) == resolve(json.dumps(data), kind)


@pytest.mark.parametrize("kind", list(ArtifactKind))
def test_refusal_is_unparsable(kind: ArtifactKind) -> None:
    with pytest.raises(UnparsableResponse):
        resolve("I cannot comply.", kind)


def test_object_is_not_accepted_for_list_shapes(report_data: dict[str, Any]) -> None:
    with pytest.raises(UnparsableResponse):
        resolve(json.dumps(report_data), ArtifactKind.PITCH_DECK)


def test_array_is_not_accepted_for_record_shapes(slides_data: list[dict[str, Any]]) -> None:
    with pytest.raises(UnparsableResponse):
        resolve(json.dumps(slides_data), ArtifactKind.MARKET_RESEARCH)


def test_object_wrapping_an_array_falls_back_to_the_array() -> None:
    raw = '{"slides": [{"number": 1, "title": "Motivation"}]}'

    deck = resolve(raw, ArtifactKind.PITCH_DECK)

    assert [slide.title for slide in deck.slides] == ["Motivation"]


def test_truncated_output_is_unparsable() -> None:
    with pytest.raises(UnparsableResponse):
        resolve('[{"name": "Ada", "firm": "North', ArtifactKind.INVESTORS)


def test_one_malformed_investor_rejects_the_whole_list(investors_data: list[dict[str, Any]]) -> None:
    broken = investors_data + ["not an investor"]

    with pytest.raises(UnparsableResponse):
        resolve(json.dumps(broken), ArtifactKind.INVESTORS)


def test_missing_optional_fields_default_to_empty() -> None:
    investors = resolve('[{"name": "Ada", "links": null, "geo": null}]', ArtifactKind.INVESTORS)

    investor = investors.investors[0]
    assert investor.name == "Ada"
    assert investor.geo == ""
    assert investor.fit_score is None
    assert investor.links.email == ""

    report = resolve('{"executive_summary": "Short."}', ArtifactKind.MARKET_RESEARCH)
    assert report.market_analysis.market_size == ""
    assert report.conclusion == ""


def test_slides_are_sorted_and_metrics_stringified() -> None:
    raw = json.dumps(
        [
            {"number": 2, "title": "Pain", "metrics": {"tam": 4200000000, "growth": None}},
            {"number": 1, "title": "Motivation", "metrics": "bootstrapped"},
        ]
    )

    deck = resolve(raw, ArtifactKind.PITCH_DECK)

    assert [slide.number for slide in deck.slides] == [1, 2]
    assert deck.slides[0].metrics == {"note": "bootstrapped"}
    assert deck.slides[1].metrics == {"tam": "4200000000", "growth": ""}


def test_extract_json_prefers_whole_text_when_shape_matches() -> None:
    assert extract_json('  [1, [2, 3]]  ', expects_list=True) == [1, [2, 3]]
    assert extract_json('prefix {"a": {"b": 1}} suffix', expects_list=False) == {"a": {"b": 1}}


def test_advisory_issues_flag_cardinality_without_rejecting(slides_data: list[dict[str, Any]]) -> None:
    short = slides_data[:11]
    short[0]["bullets"] = ["only one"]

    deck = resolve(json.dumps(short), ArtifactKind.PITCH_DECK)
    issues = advisory_issues(deck)

    assert len(deck.slides) == 11
    assert "pitch deck has 11 slides, expected 12" in issues
    assert "slide 1 has 1 bullets, expected 3-6" in issues


def test_advisory_issues_flag_fit_score_range(investors_data: list[dict[str, Any]]) -> None:
    investors_data[1]["fit_score"] = 9

    issues = advisory_issues(resolve(json.dumps(investors_data), ArtifactKind.INVESTORS))

    assert issues == ["investor 2 fit_score 9 is outside 1-5"]


def test_conforming_payloads_have_no_advisories(
    investors_data: list[dict[str, Any]],
    slides_data: list[dict[str, Any]],
    report_data: dict[str, Any],
) -> None:
    assert advisory_issues(resolve(json.dumps(investors_data), ArtifactKind.INVESTORS)) == []
    assert advisory_issues(resolve(json.dumps(slides_data), ArtifactKind.PITCH_DECK)) == []
    assert advisory_issues(resolve(json.dumps(report_data), ArtifactKind.MARKET_RESEARCH)) == []
