"""Link graph analysis for a single page."""

import logging

from pageaudit.constants import GENERIC_ANCHOR_PHRASES, MIN_DESCRIPTIVE_ANCHOR_LENGTH
from pageaudit.models import LinkAnalysis, LinkRecord
from pageaudit.soup import HtmlSource, attr_text, make_soup, normalize_whitespace

logger = logging.getLogger(__name__)


def is_internal_link(href: str, page_url: str) -> bool:
    """Classify a link as internal.

    Internal means root-relative (``/...``) or prefixed by the exact page URL
    string. Scheme and host are not normalized.
    """
    return href.startswith("/") or (bool(page_url) and href.startswith(page_url))


def is_descriptive_anchor_text(anchor_text: str) -> bool:
    """Check that anchor text is not a generic phrase and is long enough."""
    text = anchor_text.strip()
    return (
        text.lower() not in GENERIC_ANCHOR_PHRASES
        and len(text) > MIN_DESCRIPTIVE_ANCHOR_LENGTH
    )


class LinkAnalyzer:
    """Classifies the links of a page and flags link best-practice problems."""

    def extract_links(self, html: HtmlSource, page_url: str) -> list[LinkRecord]:
        """Extract every <a> with a non-empty href in document order."""
        links = []
        for anchor in make_soup(html).find_all("a"):
            href = attr_text(anchor, "href").strip()
            if not href:
                continue
            rel_values = [r.lower() for r in attr_text(anchor, "rel").split()]
            links.append(
                LinkRecord(
                    href=href,
                    anchor_text=normalize_whitespace(anchor.get_text(" ")),
                    is_internal=is_internal_link(href, page_url),
                    nofollow="nofollow" in rel_values,
                )
            )
        return links

    def analyze(self, html: HtmlSource, page_url: str) -> LinkAnalysis:
        """Analyze the links of a page.

        Args:
            html: Raw HTML or a parsed tree
            page_url: URL the HTML was fetched from

        Returns:
            LinkAnalysis with counts and best-practice violation messages
        """
        links = self.extract_links(html, page_url)

        violations = []
        descriptive_count = 0
        for link in links:
            if is_descriptive_anchor_text(link.anchor_text):
                descriptive_count += 1
            else:
                violations.append(
                    f"Non-descriptive anchor text found: '{link.anchor_text}' for link: {link.href}"
                )
            if not link.is_internal and not link.nofollow:
                violations.append(
                    f"External link missing 'nofollow' attribute: {link.href}"
                )

        internal = sum(1 for link in links if link.is_internal)
        analysis = LinkAnalysis(
            url=page_url,
            links=links,
            total_links=len(links),
            internal_links=internal,
            external_links=len(links) - internal,
            nofollow_links=sum(1 for link in links if link.nofollow),
            descriptive_anchor_text_count=descriptive_count,
            best_practices_violations=violations,
        )
        logger.debug(
            f"Analyzed {analysis.total_links} links on {page_url} "
            f"({analysis.internal_links} internal, {analysis.external_links} external)"
        )
        return analysis
