"""Tests for verdict parsing."""

import pytest

from fakes import make_result
from verifai.domain.models.verification import ConfidenceLevel, Verdict
from verifai.domain.services.credibility import rank_result
from verifai.domain.services.verdict_parser import (
    VerdictParser,
    classify_verdict,
    extract_text_sources,
    parse_confidence,
    strip_declarations,
)


@pytest.fixture
def parser() -> VerdictParser:
    return VerdictParser()


@pytest.mark.parametrize(
    "value, verdict",
    [
        ("TRUE", Verdict.TRUE),
        ("false", Verdict.FALSE),
        ("PARTIALLY TRUE", Verdict.PARTIALLY_TRUE),
        ("Partially true, with caveats", Verdict.PARTIALLY_TRUE),
        ("UNVERIFIABLE", Verdict.UNVERIFIABLE),
        ("Mostly false", Verdict.FALSE),
        ("unclear", Verdict.UNVERIFIABLE),
        ("", Verdict.UNVERIFIABLE),
        (None, Verdict.UNVERIFIABLE),
    ],
)
def test_classify_verdict(value, verdict):
    assert classify_verdict(value) == verdict


@pytest.mark.parametrize(
    "text, verdict",
    [
        ("**VERDICT:** FALSE", Verdict.FALSE),
        ("VERDICT: true", Verdict.TRUE),
        ("**Verdict**: [PARTIALLY TRUE]", Verdict.PARTIALLY_TRUE),
        ("Some preamble\n\n**VERDICT:** UNVERIFIABLE\nmore", Verdict.UNVERIFIABLE),
        ("No declaration at all. This is true.", Verdict.UNVERIFIABLE),
    ],
)
def test_parse_verdict_forms(parser, text, verdict):
    assert parser.parse(text).verdict == verdict


def test_parse_confidence():
    assert parse_confidence("**CONFIDENCE:** HIGH") == ConfidenceLevel.HIGH
    assert parse_confidence("Confidence: medium\nbecause") == ConfidenceLevel.MEDIUM
    assert parse_confidence("**CONFIDENCE:** [LOW]") == ConfidenceLevel.LOW
    assert parse_confidence("I am highly confident") is None


def test_parse_full_answer(parser):
    text = (
        "**VERDICT:** FALSE\n\n"
        "**CLAIM ANALYZED:** The Earth is flat\n\n"
        "**ANALYSIS:**\nSatellite imagery shows a sphere.\n\n\n\n"
        "**CONFIDENCE:** HIGH\n"
    )

    result = parser.parse(text, searches_performed=2)

    assert result.verdict == Verdict.FALSE
    assert result.confidence == ConfidenceLevel.HIGH
    assert result.searches_performed == 2
    assert result.raw_text == text
    assert "VERDICT" not in result.narrative
    assert "CONFIDENCE" not in result.narrative
    assert "Satellite imagery shows a sphere." in result.narrative
    assert "\n\n\n" not in result.narrative


def test_strip_declarations_keeps_other_lines():
    assert strip_declarations("VERDICT: TRUE\nBody line\nCONFIDENCE: LOW") == "Body line"


def test_text_sources_are_cleaned_and_deduplicated():
    text = (
        "See https://www.reuters.com/article/1. Also (https://infowars.com/x), "
        "https://www.reuters.com/article/1 again, and http://localhost:8080/debug."
    )

    sources = extract_text_sources(text)

    assert [s.url for s in sources] == ["https://www.reuters.com/article/1", "https://infowars.com/x"]
    assert [s.tier for s in sources] == [1, 5]
    assert sources[0].title == "reuters.com"


def test_text_sources_limited_to_five():
    text = " ".join(f"https://site{i}.example.com/page" for i in range(8))

    assert len(extract_text_sources(text)) == 5


def test_collected_sources_take_precedence(parser):
    collected = [
        rank_result(make_result("https://blog.example.net/post")),
        rank_result(make_result("https://www.cdc.gov/data")),
    ]
    text = "**VERDICT:** TRUE\nSee https://www.reuters.com/article/1"

    result = parser.parse(text, collected_sources=collected)

    assert [s.source_domain for s in result.sources] == ["cdc.gov", "blog.example.net"]


def test_text_sources_used_when_nothing_collected(parser):
    result = parser.parse("**VERDICT:** TRUE\nSee https://blog.example.net/a and https://www.cdc.gov/b")

    assert [s.source_domain for s in result.sources] == ["cdc.gov", "blog.example.net"]


def test_empty_text(parser):
    result = parser.parse("")

    assert result.verdict == Verdict.UNVERIFIABLE
    assert result.confidence is None
    assert result.sources == []


def test_bold_declaration_wins_over_prose_mention(parser):
    text = "I weighed the evidence before reaching a verdict: see below.\n**VERDICT:** FALSE\n**CONFIDENCE:** HIGH"

    result = parser.parse(text)

    assert result.verdict == Verdict.FALSE
    assert result.confidence == ConfidenceLevel.HIGH
    assert result.narrative == "I weighed the evidence before reaching a verdict: see below."


def test_mid_sentence_verdict_is_not_a_declaration(parser):
    result = parser.parse("Experts disagree on the verdict: true in part, false in part.")

    assert result.verdict == Verdict.UNVERIFIABLE
    assert result.narrative == "Experts disagree on the verdict: true in part, false in part."


def test_only_parsed_declaration_lines_are_stripped():
    text = "**VERDICT:** TRUE\nA second VERDICT: line quoted from the source\n**CONFIDENCE:** LOW"

    assert strip_declarations(text) == "A second VERDICT: line quoted from the source"
