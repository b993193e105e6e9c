"""Aggregation of per-page facts into a versioned metrics bundle."""

import logging
from typing import Optional, Union

from pageaudit import helpers
from pageaudit.config import default_thresholds
from pageaudit.constants import (
    META_DESCRIPTION_MESSAGES,
    METRICS_BUNDLE_VERSION,
    TITLE_MESSAGES,
)
from pageaudit.headings import analyze_headings, extract_headings
from pageaudit.helpers import ReachabilityProbe
from pageaudit.models import (
    ContentRecord,
    MetricsBundle,
    MiscellaneousMetrics,
    PerformanceMetrics,
    SecurityMetrics,
    SEOMetrics,
)
from pageaudit.soup import make_soup, normalize_whitespace

logger = logging.getLogger(__name__)


class InvalidContentRecordError(ValueError):
    """Raised when a content record cannot be audited (no URL)."""


def _clean(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return normalize_whitespace(value) or None


class MetricsCalculator:
    """Computes a MetricsBundle from a scraped content record."""

    def __init__(
        self,
        thresholds=None,
        probe: Optional[ReachabilityProbe] = None,
        check_reachability: bool = True,
    ):
        """Initialize the calculator.

        Args:
            thresholds: AnalysisThresholds (defaults to the global instance)
            probe: Reachability probe for sitemap/robots.txt checks
            check_reachability: If False, skip network probes and report False
        """
        self.thresholds = thresholds or default_thresholds
        self.check_reachability = check_reachability
        self._probe = probe

    @property
    def probe(self) -> ReachabilityProbe:
        if self._probe is None:
            self._probe = ReachabilityProbe(timeout=self.thresholds.probe_timeout_seconds)
        return self._probe

    @staticmethod
    def _coerce_record(record: Union[ContentRecord, dict]) -> ContentRecord:
        if isinstance(record, ContentRecord):
            return record
        if isinstance(record, dict):
            return ContentRecord.from_dict(record)
        raise InvalidContentRecordError(
            f"Expected ContentRecord or dict, got {type(record).__name__}"
        )

    def calculate(self, record: Union[ContentRecord, dict]) -> MetricsBundle:
        """Compute the full metrics bundle for a content record.

        Args:
            record: ContentRecord or equivalent dict

        Returns:
            A new MetricsBundle replacing any previous one for the same key

        Raises:
            InvalidContentRecordError: If the record has no URL
        """
        record = self._coerce_record(record)
        if not isinstance(record.url, str) or not record.url.strip():
            raise InvalidContentRecordError("Content record is missing a URL")

        url = record.url.strip()
        html = record.html_content or ""
        headers = record.headers or {}
        soup = make_soup(html)

        logger.info(f"Calculating metrics for {url}")
        return MetricsBundle(
            url=url,
            version=METRICS_BUNDLE_VERSION,
            user_id=record.user_id,
            seo=self._seo_metrics(record, url, soup, headers),
            security=SecurityMetrics(
                https_enabled=helpers.is_https_enabled(url),
                mixed_content=helpers.has_mixed_content(html),
                server_signature_hidden=helpers.is_server_signature_hidden(headers),
                hsts_enabled=helpers.is_hsts_enabled(headers),
            ),
            performance=PerformanceMetrics(
                page_size_kb=helpers.calculate_page_size(html),
                http_requests=helpers.count_http_requests(soup),
                text_compression_enabled=helpers.is_text_compression_enabled(headers),
            ),
            miscellaneous=MiscellaneousMetrics(
                meta_viewport_present=helpers.is_meta_viewport_present(soup),
                character_set=helpers.extract_character_set(soup),
                sitemap_accessible=(
                    self.probe.is_sitemap_accessible(url) if self.check_reachability else False
                ),
                text_to_html_ratio=helpers.calculate_text_to_html_ratio(
                    html, record.text_content
                ),
            ),
        )

    def _seo_metrics(self, record: ContentRecord, url: str, soup, headers) -> SEOMetrics:
        title = _clean(record.metadata.title) or helpers.extract_title(soup)
        description = (
            _clean(record.metadata.description) or helpers.extract_meta_description(soup)
        )
        title_band = helpers.classify_title(title, self.thresholds)
        description_band = helpers.classify_meta_description(description, self.thresholds)
        canonical = helpers.has_canonical_tag(soup)
        favicon = _clean(record.favicon)

        return SEOMetrics(
            title=title,
            title_present=title is not None,
            title_length=len(title) if title else 0,
            title_band=title_band,
            title_message=TITLE_MESSAGES[title_band.value],
            meta_description=description,
            meta_description_present=description is not None,
            meta_description_length=len(description) if description else 0,
            meta_description_band=description_band,
            meta_description_message=META_DESCRIPTION_MESSAGES[description_band.value],
            seo_friendly_url=helpers.is_seo_friendly_url(url, self.thresholds),
            favicon_present=favicon is not None,
            favicon_url=favicon,
            robots_txt_accessible=(
                self.probe.is_robots_txt_accessible(url) if self.check_reachability else False
            ),
            in_page_links=helpers.count_in_page_links(soup),
            language_declared=helpers.extract_lang_tag(soup),
            hreflang_tags=helpers.extract_hreflang_tags(soup),
            canonical_tag_present=canonical.present,
            canonical_tag_url=canonical.url,
            noindex_tag_present=helpers.has_noindex_tag(soup),
            noindex_header_present=helpers.has_noindex_header(headers),
            keywords=helpers.extract_keywords(soup),
            heading_analysis=analyze_headings(
                extract_headings(soup), title, self.thresholds
            ),
        )


def calculate_metrics(
    record: Union[ContentRecord, dict],
    check_reachability: bool = True,
) -> MetricsBundle:
    """Compute a metrics bundle with default thresholds."""
    return MetricsCalculator(check_reachability=check_reachability).calculate(record)
