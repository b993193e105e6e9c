"""SEO fact extractors for raw HTML and response headers."""

import logging
import re
from typing import Mapping, Optional
from urllib.parse import urlparse

from requests.structures import CaseInsensitiveDict

from pageaudit.config import default_thresholds
from pageaudit.models import CanonicalTag, LengthBand, PageMetadataInfo
from pageaudit.soup import (
    HtmlSource,
    attr_text,
    extractor,
    make_soup,
    normalize_whitespace,
)

logger = logging.getLogger(__name__)

_NOINDEX_RE = re.compile(r"\bnoindex\b", re.IGNORECASE)
_HEADER_TOKEN_SPLIT_RE = re.compile(r"[\s,]+")
_URL_SEGMENT_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def _find_meta(soup, name: str):
    """Yield <meta> tags whose name attribute equals ``name`` (any case)."""
    for meta in soup.find_all("meta"):
        if attr_text(meta, "name").strip().lower() == name:
            yield meta


@extractor(default=None)
def extract_title(html: HtmlSource) -> Optional[str]:
    """Extract the page title.

    Args:
        html: Raw HTML or a parsed tree

    Returns:
        Whitespace-normalized title text, or None when absent or blank
    """
    title_tag = make_soup(html).find("title")
    if title_tag is None:
        return None
    return normalize_whitespace(title_tag.get_text()) or None


@extractor(default=None)
def extract_meta_description(html: HtmlSource) -> Optional[str]:
    """Extract the content of <meta name="description">.

    Returns:
        Whitespace-normalized description, or None when absent or blank
    """
    for meta in _find_meta(make_soup(html), "description"):
        content = normalize_whitespace(attr_text(meta, "content"))
        if content:
            return content
    return None


@extractor(default=PageMetadataInfo())
def extract_page_metadata(html: HtmlSource) -> PageMetadataInfo:
    """Extract head metadata, including Open Graph, Twitter card and custom tags.

    The description falls back to og:description. ``og`` and ``twitter`` map
    the property suffix (``og:image`` -> ``image``) to the first value seen,
    while ``custom`` maps every meta name or property to its last value.

    Args:
        html: Raw HTML or a parsed tree

    Returns:
        PageMetadataInfo with empty values left as None or omitted
    """
    soup = make_soup(html)
    og, twitter, custom = {}, {}, {}

    for meta in soup.find_all("meta"):
        key = (attr_text(meta, "name") or attr_text(meta, "property")).strip()
        content = normalize_whitespace(attr_text(meta, "content"))
        if not key or not content:
            continue
        custom[key] = content

        prefix, _, suffix = key.lower().partition(":")
        if suffix and prefix == "og":
            og.setdefault(suffix, content)
        elif suffix and prefix == "twitter":
            twitter.setdefault(suffix, content)

    def named(name: str) -> Optional[str]:
        for meta in _find_meta(soup, name):
            content = normalize_whitespace(attr_text(meta, "content"))
            if content:
                return content
        return None

    return PageMetadataInfo(
        title=extract_title(soup),
        description=named("description") or og.get("description"),
        author=named("author"),
        viewport=named("viewport"),
        og=og,
        twitter=twitter,
        custom=custom,
    )


@extractor(default=[])
def extract_keywords(html: HtmlSource) -> list[str]:
    """Extract comma-separated meta keywords."""
    keywords = []
    for meta in _find_meta(make_soup(html), "keywords"):
        keywords.extend(
            k.strip() for k in attr_text(meta, "content").split(",") if k.strip()
        )
    return keywords


@extractor(default=None)
def extract_lang_tag(html: HtmlSource) -> Optional[str]:
    """Extract the lang attribute of the <html> element."""
    html_tag = make_soup(html).find("html")
    if html_tag is None:
        return None
    return attr_text(html_tag, "lang").strip() or None


@extractor(default=0)
def count_in_page_links(html: HtmlSource) -> int:
    """Count <a> elements in the document."""
    return len(make_soup(html).find_all("a"))


@extractor(default=CanonicalTag())
def has_canonical_tag(html: HtmlSource) -> CanonicalTag:
    """Find <link rel="canonical"> and its target.

    Returns:
        CanonicalTag with present=True only when the tag has an href
    """
    for link in make_soup(html).find_all("link"):
        rel_values = [r.lower() for r in attr_text(link, "rel").split()]
        if "canonical" in rel_values:
            href = attr_text(link, "href").strip()
            if href:
                return CanonicalTag(present=True, url=href)
    return CanonicalTag()


@extractor(default=False)
def has_noindex_tag(html: HtmlSource) -> bool:
    """Check for a robots meta tag containing the noindex directive."""
    return any(
        _NOINDEX_RE.search(attr_text(meta, "content"))
        for meta in _find_meta(make_soup(html), "robots")
    )


@extractor(default=False)
def has_noindex_header(headers: Optional[Mapping[str, str]]) -> bool:
    """Check whether the X-Robots-Tag header carries a noindex token."""
    if not headers:
        return False
    value = CaseInsensitiveDict(headers).get("X-Robots-Tag")
    if not value:
        return False
    tokens = _HEADER_TOKEN_SPLIT_RE.split(str(value).lower())
    return "noindex" in tokens


@extractor(default=[])
def extract_hreflang_tags(html: HtmlSource) -> list[str]:
    """Extract hreflang values of <link> tags in document order."""
    hreflangs = []
    for link in make_soup(html).find_all("link"):
        value = attr_text(link, "hreflang").strip()
        if value:
            hreflangs.append(value)
    return hreflangs


def is_seo_friendly_url(url: str, thresholds=None) -> bool:
    """Check whether a URL path is lowercase, hyphen-delimited and sanely sized.

    A full URL is reduced to its path. Input without a scheme is treated as
    a path already, so "//double-slash" is a path and not a host.

    Args:
        url: Absolute URL or bare path
        thresholds: Optional AnalysisThresholds for the path length limits

    Returns:
        True if every non-empty segment matches ``[a-z0-9]+(-[a-z0-9]+)*``,
        there is no empty interior segment, and the path length is in range
    """
    thresholds = thresholds or default_thresholds
    if not isinstance(url, str):
        logger.warning(f"Cannot check URL of type {type(url).__name__}")
        return False

    try:
        parsed = urlparse(url.strip())
    except ValueError as e:
        logger.warning(f"Malformed URL {url!r}: {e}")
        return False

    if parsed.scheme:
        if not parsed.netloc:
            return False
        path = parsed.path
    else:
        path = url.strip().split("?", 1)[0].split("#", 1)[0]

    if not thresholds.url_path_min <= len(path) <= thresholds.url_path_max:
        return False
    if "//" in path:
        return False

    return all(
        _URL_SEGMENT_RE.match(segment)
        for segment in path.split("/")
        if segment
    )


def classify_length(text: Optional[str], minimum: int, maximum: int) -> LengthBand:
    """Classify trimmed text length against an inclusive [minimum, maximum] band."""
    if not text or not text.strip():
        return LengthBand.MISSING
    length = len(text.strip())
    if length < minimum:
        return LengthBand.SHORT
    if length > maximum:
        return LengthBand.LONG
    return LengthBand.OPTIMAL


def classify_title(title: Optional[str], thresholds=None) -> LengthBand:
    thresholds = thresholds or default_thresholds
    return classify_length(title, thresholds.title_min, thresholds.title_max)


def classify_meta_description(description: Optional[str], thresholds=None) -> LengthBand:
    thresholds = thresholds or default_thresholds
    return classify_length(
        description,
        thresholds.meta_description_min,
        thresholds.meta_description_max,
    )
