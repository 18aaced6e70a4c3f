"""Extracts a structured verdict from the model's free-text answer."""

import re
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

from ..models.fact_check_result import FactCheckResult
from ..models.search import RankedResult, SearchResult
from ..models.verification import ConfidenceLevel, Verdict
from .credibility import extract_domain, rank_result, sort_by_tier

MAX_TEXT_SOURCES = 5

# "**VERDICT:** FALSE", "**Verdict**: [TRUE]"
BOLD_VERDICT_PATTERN = re.compile(r"\*\*\s*VERDICT\s*:?\s*\*\*[ \t]*:?[ \t\[]*(?P<value>[^\n]*)", re.IGNORECASE)
# "VERDICT: false" at the start of a line, never mid-sentence
VERDICT_LINE_PATTERN = re.compile(
    r"^[ \t>#*_-]*VERDICT[ \t*_]*:[ \t*_\[]*(?P<value>[^\n]*)", re.IGNORECASE | re.MULTILINE
)
BOLD_CONFIDENCE_PATTERN = re.compile(
    r"\*\*\s*CONFIDENCE(?:\s+LEVEL)?\s*:?\s*\*\*[ \t]*:?[ \t\[]*(?P<value>HIGH|MEDIUM|LOW)\b", re.IGNORECASE
)
CONFIDENCE_LINE_PATTERN = re.compile(
    r"^[ \t>#*_-]*CONFIDENCE(?:\s+LEVEL)?[ \t*_]*:[ \t*_\[]*(?P<value>HIGH|MEDIUM|LOW)\b",
    re.IGNORECASE | re.MULTILINE,
)
VERDICT_PATTERNS = (BOLD_VERDICT_PATTERN, VERDICT_LINE_PATTERN)
CONFIDENCE_PATTERNS = (BOLD_CONFIDENCE_PATTERN, CONFIDENCE_LINE_PATTERN)
URL_PATTERN = re.compile(r"https?://[^\s<\]]+")
TRAILING_PUNCTUATION = ".,;:!?)"
LOCAL_HOSTS = ("localhost", "127.0.0.1", "0.0.0.0", "::1")


def find_declaration(text: str, patterns: Sequence[Pattern[str]]) -> Optional["re.Match[str]"]:
    """First match of the most specific pattern that matches at all."""
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match
    return None


def classify_verdict(value: Optional[str]) -> Verdict:
    """Classify a declared verdict value; anything unrecognized is UNVERIFIABLE."""
    if not value:
        return Verdict.UNVERIFIABLE
    upper = value.upper()
    if "PARTIAL" in upper:
        return Verdict.PARTIALLY_TRUE
    if "FALSE" in upper:
        return Verdict.FALSE
    if "TRUE" in upper:
        return Verdict.TRUE
    return Verdict.UNVERIFIABLE


def parse_confidence(text: str) -> Optional[ConfidenceLevel]:
    match = find_declaration(text, CONFIDENCE_PATTERNS)
    if not match:
        return None
    return ConfidenceLevel(match.group("value").upper())


def extract_text_sources(text: str, limit: int = MAX_TEXT_SOURCES) -> List[RankedResult]:
    """Find cited URLs in the answer text and rank them."""
    sources: List[RankedResult] = []
    seen = set()

    for raw_url in URL_PATTERN.findall(text):
        url = raw_url.rstrip(TRAILING_PUNCTUATION)
        domain = extract_domain(url)
        if url in seen or domain.lower() in LOCAL_HOSTS or "localhost" in url:
            continue
        seen.add(url)
        sources.append(rank_result(SearchResult(title=domain or url, url=url, source_domain=domain)))
        if len(sources) >= limit:
            break

    return sources


def _line_span(text: str, index: int) -> Tuple[int, int]:
    start = text.rfind("\n", 0, index) + 1
    end = text.find("\n", index)
    return start, len(text) if end == -1 else end


def strip_declarations(text: str) -> str:
    """Remove the verdict and confidence declaration lines from the answer.

    Only the lines holding the declarations that were parsed are removed;
    prose that merely mentions a verdict is kept.
    """
    matches = [find_declaration(text, VERDICT_PATTERNS), find_declaration(text, CONFIDENCE_PATTERNS)]
    spans = sorted({_line_span(text, match.start()) for match in matches if match})

    pieces = []
    position = 0
    for start, end in spans:
        pieces.append(text[position:start])
        position = end + 1
    pieces.append(text[position:])

    narrative = "".join(pieces).strip()
    return re.sub(r"\n{3,}", "\n\n", narrative)


class VerdictParser:
    """Parses model answers into ``FactCheckResult`` objects. No I/O."""

    def parse(
        self,
        text: str,
        collected_sources: Sequence[RankedResult] = (),
        searches_performed: int = 0,
    ) -> FactCheckResult:
        """Parse a model answer.

        Args:
            text: Final model answer
            collected_sources: Sources gathered by the session's searches
            searches_performed: Number of search iterations in the session

        Returns:
            Structured result; missing declarations fall back to defaults
        """
        text = text or ""
        match = find_declaration(text, VERDICT_PATTERNS)
        verdict = classify_verdict(match.group("value") if match else None)

        sources: Iterable[RankedResult] = collected_sources or extract_text_sources(text)

        return FactCheckResult(
            verdict=verdict,
            confidence=parse_confidence(text),
            raw_text=text,
            narrative=strip_declarations(text),
            searches_performed=searches_performed,
            sources=sort_by_tier(sources),
        )
