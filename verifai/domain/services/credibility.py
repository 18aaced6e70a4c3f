"""Source credibility tiers (1 = most reliable, 5 = known unreliable)."""

from typing import Iterable, List, TypeVar
from urllib.parse import urlparse

from ..models.search import RankedResult, SearchResult

UNRELIABLE_TIER = 5
UNKNOWN_TIER = 4

# Known unreliable/misinformation sources
UNRELIABLE_DOMAINS = (
    "naturalnews.com", "infowars.com", "beforeitsnews.com",
    "worldtruth.tv", "yournewswire.com", "newspunch.com",
    "thegatewaypundit.com", "zerohedge.com", "globalresearch.ca",
    "collective-evolution.com", "davidwolfe.com", "realfarmacy.com",
)

# Government, military and education suffixes, including country variants
OFFICIAL_SUFFIXES = (
    ".gov", ".gov.uk", ".gov.au", ".gov.ca", ".gc.ca",
    ".edu", ".ac.uk", ".edu.au",
    ".mil",
)

TIER_DOMAINS = {
    1: (
        # Wire services
        "reuters.com", "apnews.com", "afp.com", "dpa.com", "efe.com",
        # Public broadcasters
        "bbc.com", "bbc.co.uk", "npr.org", "pbs.org", "c-span.org",
        # Scientific journals
        "nature.com", "science.org", "scientificamerican.com",
        "nejm.org", "thelancet.com", "jamanetwork.com", "cell.com",
        "pubmed.ncbi.nlm.nih.gov", "nih.gov",
        # Intergovernmental bodies
        "who.int", "un.org", "europa.eu", "worldbank.org", "imf.org",
        # IFCN certified fact-checkers
        "fullfact.org", "aap.com.au",
    ),
    2: (
        "nytimes.com", "washingtonpost.com", "wsj.com", "theatlantic.com",
        "theguardian.com", "economist.com", "ft.com", "bloomberg.com",
        "lemonde.fr", "spiegel.de", "elpais.com", "smh.com.au", "globalnews.ca",
        "snopes.com", "politifact.com", "factcheck.org",
        "wikipedia.org", "britannica.com",
        "propublica.org", "theintercept.com", "icij.org",
        "statnews.com", "arstechnica.com", "theverge.com",
        "scholar.google.com", "jstor.org", "arxiv.org",
    ),
    3: (
        "cnn.com", "cbsnews.com", "abcnews.go.com", "nbcnews.com",
        "usatoday.com", "time.com", "newsweek.com", "forbes.com",
        "businessinsider.com", "axios.com", "politico.com", "thehill.com",
        "vox.com", "slate.com", "salon.com",
        "aljazeera.com", "dw.com", "france24.com", "rt.com", "scmp.com",
    ),
    4: (
        # Partisan outlets
        "foxnews.com", "msnbc.com", "breitbart.com", "dailykos.com",
        "theblaze.com", "motherjones.com", "dailywire.com",
        # Tabloids
        "dailymail.co.uk", "nypost.com", "thesun.co.uk", "mirror.co.uk",
        "huffpost.com", "buzzfeed.com", "buzzfeednews.com",
    ),
}

TIER_LABELS = {
    1: "⭐ HIGHLY RELIABLE",
    2: "✓ RELIABLE",
    3: "○ MODERATE",
    4: "⚠ USE CAUTION",
    5: "🚫 UNRELIABLE",
}

RELIABILITY_GUIDE = """---
SOURCE RELIABILITY GUIDE:
⭐ HIGHLY RELIABLE = .gov, .edu, wire services (AP, Reuters, BBC), scientific journals
✓ RELIABLE = Major newspapers, fact-checkers, encyclopedias, investigative journalism
○ MODERATE = Cable news, magazines, established digital media
⚠ USE CAUTION = Partisan outlets, tabloids, opinion-heavy sites
🚫 UNRELIABLE = Known misinformation sources - DO NOT cite as evidence

IMPORTANT: Prioritize information from tier 1-2 sources. Be skeptical of tier 4-5 sources.
If a claim is only supported by unreliable sources, note this in your analysis."""


def get_source_tier(domain: str) -> int:
    """Get the credibility tier for a domain.

    Unknown domains get tier 4 ("use with caution"), never a reliable tier.
    """
    domain_lower = (domain or "").lower()

    if any(d in domain_lower for d in UNRELIABLE_DOMAINS):
        return UNRELIABLE_TIER

    if domain_lower.endswith(OFFICIAL_SUFFIXES):
        return 1

    for tier in (1, 2, 3, 4):
        if any(d in domain_lower for d in TIER_DOMAINS[tier]):
            return tier

    return UNKNOWN_TIER


def get_tier_label(tier: int) -> str:
    return TIER_LABELS.get(tier, "? UNKNOWN")


def extract_domain(url: str) -> str:
    """Return the host name of ``url`` with a leading ``www.`` stripped.

    Strings that are not absolute URLs are returned unchanged.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return url
    if not hostname:
        return url
    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    return hostname


T = TypeVar("T")


def sort_by_tier(items: Iterable[T]) -> List[T]:
    """Stable sort of ranked items, most credible first."""
    return sorted(items, key=lambda item: item.tier)


def rank_result(result: SearchResult) -> RankedResult:
    """Label a search result with its credibility tier."""
    tier = get_source_tier(result.source_domain)
    return RankedResult(**result.model_dump(), tier=tier, tier_label=get_tier_label(tier))
