"""Extraction of structured content zones from a page."""

import logging

from pageaudit.constants import FOOTER_BLOCKS, HEADING_TAGS, INTRODUCTION_PARAGRAPHS
from pageaudit.link_analyzer import is_internal_link
from pageaudit.models import ContentFacts, TagText
from pageaudit.soup import HtmlSource, attr_text, make_soup, normalize_whitespace

logger = logging.getLogger(__name__)

# Tags whose text makes up the page copy
TEXT_TAGS = ("p", "li", "div")


def _text(element) -> str:
    return normalize_whitespace(element.get_text(" "))


def extract_content_facts(html: HtmlSource, url: str) -> ContentFacts:
    """Split a page into content zones.

    Args:
        html: Raw HTML or a parsed tree
        url: Page URL, used to classify links as internal

    Returns:
        Immutable ContentFacts. The introduction is the first three
        paragraphs, main content the remaining ones, and the footer the
        last three footer/div blocks.
    """
    soup = make_soup(html)

    tags = []
    counts = {tag: 0 for tag in TEXT_TAGS}
    for tag in TEXT_TAGS:
        for element in soup.find_all(tag):
            text = _text(element)
            if text:
                tags.append(TagText(tag=tag, text=text))
                counts[tag] += 1

    images = soup.find_all("img")
    counts["img"] = len(images)
    alt_texts = tuple(
        attr_text(img, "alt").strip() for img in images if attr_text(img, "alt").strip()
    )

    internal, external = [], []
    for anchor in soup.find_all("a"):
        href = attr_text(anchor, "href").strip()
        if href:
            (internal if is_internal_link(href, url) else external).append(href)

    paragraphs = [_text(p) for p in soup.find_all("p")]
    footer_blocks = [_text(el) for el in soup.find_all(["footer", "div"])]

    facts = ContentFacts(
        url=url,
        tags=tuple(tags),
        counts=counts,
        introduction=tuple(paragraphs[:INTRODUCTION_PARAGRAPHS]),
        main_content=tuple(paragraphs[INTRODUCTION_PARAGRAPHS:]),
        list_items=tuple(_text(li) for li in soup.find_all("li")),
        footer_content=tuple(footer_blocks[-FOOTER_BLOCKS:]),
        image_alt_texts=alt_texts,
        headings={
            level: tuple(_text(h) for h in soup.find_all(level))
            for level in HEADING_TAGS
        },
        internal_links=tuple(internal),
        external_links=tuple(external),
        combined_text=" ".join(t.text for t in tags),
    )
    logger.debug(f"Extracted {len(tags)} text blocks from {url}")
    return facts
