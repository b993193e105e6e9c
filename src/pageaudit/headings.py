"""Heading extraction, hierarchy building and heading roll-up analysis."""

import logging
from collections import Counter
from typing import Iterable, Optional

from pageaudit.config import default_thresholds
from pageaudit.constants import HEADING_TAGS
from pageaudit.models import (
    DetailedHeading,
    HeadingAnalysis,
    HeadingIssues,
    HeadingRecord,
    HeadingSequence,
    HeadingStructure,
    HeadingSummary,
    HeadingTextLength,
    HierarchyEntry,
)
from pageaudit.soup import HtmlSource, attr_text, extractor, make_soup, normalize_whitespace

logger = logging.getLogger(__name__)


@extractor(default=[])
def extract_headings(html: HtmlSource) -> list[HeadingRecord]:
    """Extract h1-h6 elements in document order.

    Args:
        html: Raw HTML or a parsed tree

    Returns:
        List of HeadingRecord with trimmed text, id and class attributes
    """
    headings = []
    for element in make_soup(html).find_all(list(HEADING_TAGS)):
        headings.append(
            HeadingRecord(
                tag=element.name.lower(),
                text=normalize_whitespace(element.get_text(" ")),
                id=attr_text(element, "id") or None,
                class_name=attr_text(element, "class") or None,
            )
        )
    return headings


def build_hierarchy(headings: Iterable[HeadingRecord]) -> list[HierarchyEntry]:
    """Link each heading to the previous one when it goes one step deeper.

    Only the immediately preceding heading can be a parent; this is a
    single back-link, not a full ancestor chain.
    """
    hierarchy: list[HierarchyEntry] = []
    last_level = 0
    for heading in headings:
        level = heading.level
        parent = hierarchy[-1].text if hierarchy and level > last_level else None
        hierarchy.append(
            HierarchyEntry(tag=heading.tag, text=heading.text, level=level, parent=parent)
        )
        last_level = level
    return hierarchy


def extract_heading_structure(html: HtmlSource, url: str) -> HeadingStructure:
    """Extract headings, per-level counts and hierarchy for a page."""
    headings = extract_headings(html)
    counts = {tag: 0 for tag in HEADING_TAGS}
    for heading in headings:
        counts[heading.tag] += 1

    logger.debug(f"Extracted {len(headings)} headings from {url}")
    return HeadingStructure(
        url=url,
        headings=headings,
        counts=counts,
        hierarchy=build_hierarchy(headings),
    )


def find_skipped_levels(headings: Iterable[HeadingRecord]) -> list[str]:
    """Return levels skipped when a heading jumps more than one step deeper.

    ``[h1, h2, h4]`` skips ``h3``. The first heading is never flagged, and
    each skipped level is reported once in order of discovery.
    """
    skipped: list[str] = []
    previous: Optional[int] = None
    for heading in headings:
        level = heading.level
        if previous is not None and level > previous + 1:
            for missing in range(previous + 1, level):
                tag = f"h{missing}"
                if tag not in skipped:
                    skipped.append(tag)
        previous = level
    return skipped


def find_duplicate_headings(headings: Iterable[HeadingRecord]) -> list[str]:
    """Return non-empty heading texts that occur more than once."""
    counts = Counter(h.text for h in headings if h.text)
    return [text for text, count in counts.items() if count > 1]


def analyze_headings(
    headings: list[HeadingRecord],
    title: Optional[str] = None,
    thresholds=None,
) -> HeadingAnalysis:
    """Roll up heading statistics and structural issues.

    Args:
        headings: Headings in document order
        title: Page title used for the H1 comparison
        thresholds: Optional AnalysisThresholds overriding the defaults

    Returns:
        HeadingAnalysis with summary, issues and the ordered heading list
    """
    thresholds = thresholds or default_thresholds

    tag_counts = {tag: 0 for tag in HEADING_TAGS}
    for heading in headings:
        tag_counts[heading.tag] += 1
    total = len(headings)

    h1_texts = [h.text for h in headings if h.tag == "h1"]
    first_h1 = h1_texts[0].strip() if h1_texts else ""
    normalized_title = (title or "").strip()

    skipped = find_skipped_levels(headings)

    too_short = [h.text for h in headings if len(h.text) < thresholds.heading_text_min]
    too_long = [h.text for h in headings if len(h.text) > thresholds.heading_text_max]

    issues = HeadingIssues(
        multiple_h1_tags=len(h1_texts) > 1,
        missing_h1_tag=not h1_texts,
        h1_matches_title=bool(first_h1) and first_h1 == normalized_title,
        sequence=HeadingSequence(has_issues=bool(skipped), skipped_levels=skipped),
        invalid_text_length=HeadingTextLength(too_short=too_short, too_long=too_long),
        duplicate_headings=find_duplicate_headings(headings),
        excessive_headings=total > thresholds.excessive_headings,
        insufficient_headings=total < thresholds.insufficient_headings,
    )

    return HeadingAnalysis(
        summary=HeadingSummary(total_headings=total, heading_tag_counts=tag_counts),
        issues=issues,
        detailed_headings=[
            DetailedHeading(level=h.tag, content=h.text, order=index)
            for index, h in enumerate(headings, start=1)
        ],
    )
