"""Two-stage parsing of search provider result pages.

The structured pass reads the provider's result markup. When the markup has
changed and nothing matches, the link-scan pass keeps any reasonably long
outbound link so searches still return something.
"""

import logging
from typing import Callable, List, Optional, Sequence
from urllib.parse import parse_qs, urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from ...domain.models.search import SearchResult
from ...domain.services.credibility import extract_domain

logger = logging.getLogger(__name__)

MAX_STRUCTURED_CANDIDATES = 10
MAX_FALLBACK_RESULTS = 5
MIN_FALLBACK_TEXT_LENGTH = 20
MAX_FALLBACK_TITLE_LENGTH = 100
NAVIGATION_WORDS = ("next", "previous")

ResultParser = Callable[[BeautifulSoup, str], List[SearchResult]]


def _text(element: Optional[Tag]) -> str:
    if element is None:
        return ""
    return " ".join(element.get_text(" ", strip=True).split())


def resolve_result_url(href: str, base_url: str) -> str:
    """Turn a result link into the target URL.

    Provider redirect links (``/l/?uddg=<target>``) are unwrapped and
    protocol-relative or relative links are made absolute.
    """
    href = (href or "").strip()
    if not href:
        return ""
    absolute = urljoin(base_url, href)
    parsed = urlparse(absolute)
    target = parse_qs(parsed.query).get("uddg")
    if target and target[0]:
        return target[0]
    return absolute


def _is_provider_link(url: str, base_url: str) -> bool:
    provider_host = extract_domain(base_url)
    host = extract_domain(url)
    return bool(provider_host) and (host == provider_host or host.endswith("." + provider_host)
                                    or provider_host.endswith("." + host))


def parse_structured_results(soup: BeautifulSoup, base_url: str) -> List[SearchResult]:
    """Extract results from the provider's known result markup."""
    results: List[SearchResult] = []
    seen_urls = set()

    for element in soup.select(".result, .results_links_deep")[:MAX_STRUCTURED_CANDIDATES]:
        title_element = element.select_one(".result__a")
        if title_element is None:
            continue

        title = _text(title_element)
        if not title:
            continue

        snippet = _text(element.select_one(".result__snippet, .snippet"))
        url = resolve_result_url(title_element.get("href") or "", base_url)
        if not url:
            url = _text(element.select_one(".result__url, .url"))
        if not url or url in seen_urls:
            continue

        seen_urls.add(url)
        results.append(
            SearchResult(title=title, snippet=snippet, url=url, source_domain=extract_domain(url))
        )

    return results


def parse_link_scan_results(soup: BeautifulSoup, base_url: str) -> List[SearchResult]:
    """Fallback: keep long outbound links that are not navigation."""
    results: List[SearchResult] = []
    seen_urls = set()

    for link in soup.find_all("a", href=True):
        if len(results) >= MAX_FALLBACK_RESULTS:
            break

        text = _text(link)
        lowered = text.lower()
        if len(text) <= MIN_FALLBACK_TEXT_LENGTH or any(word in lowered for word in NAVIGATION_WORDS):
            continue

        url = resolve_result_url(link["href"], base_url)
        if not url.startswith(("http://", "https://")) or url in seen_urls:
            continue
        if _is_provider_link(url, base_url):
            continue

        seen_urls.add(url)
        results.append(
            SearchResult(
                title=text[:MAX_FALLBACK_TITLE_LENGTH],
                snippet="",
                url=url,
                source_domain=extract_domain(url),
            )
        )

    return results


DEFAULT_PARSERS: Sequence[ResultParser] = (parse_structured_results, parse_link_scan_results)


def parse_search_results(
    html: str,
    base_url: str,
    parsers: Sequence[ResultParser] = DEFAULT_PARSERS,
) -> List[SearchResult]:
    """Parse a result page, trying each parser until one yields results.

    Args:
        html: Result page markup
        base_url: URL the page was fetched from, used to resolve links
        parsers: Parsing strategies in order of preference

    Returns:
        Results in provider order; empty when nothing could be parsed
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for parser in parsers:
        results = parser(soup, base_url)
        if results:
            logger.debug(f"🔎 {parser.__name__} parsed {len(results)} result(s)")
            return results
    logger.info("🔎 No results could be parsed from the search page")
    return []
