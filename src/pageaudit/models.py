"""Data models for page auditing."""

from dataclasses import dataclass, field, fields, is_dataclass
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional
import math
import uuid


def to_plain(value: Any) -> Any:
    """Convert dataclasses, enums and datetimes into JSON-serializable values."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


class LengthBand(str, Enum):
    """Length classification for titles and meta descriptions."""

    MISSING = "MISSING"
    SHORT = "SHORT"
    OPTIMAL = "OPTIMAL"
    LONG = "LONG"


class MetricStatus(str, Enum):
    """Bucket a categorized audit metric falls into."""

    PASSED = "passed"
    FAILED = "failed"
    MANUAL = "manual"


# =============================================================================
# Audit catalogs and results
# =============================================================================


@dataclass(frozen=True)
class CheckDefinition:
    """Human-readable description of a single audit check."""

    id: str
    name: str
    positive_text: str
    negative_text: str
    tooltip: str
    priority: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "CheckDefinition":
        return cls(
            id=data["id"],
            name=data["name"],
            positive_text=data["positive_text"],
            negative_text=data["negative_text"],
            tooltip=data.get("tooltip", ""),
            priority=data.get("priority"),
        )


@dataclass
class AuditResult:
    """A single audit entry from a Lighthouse-compatible report."""

    id: str
    score: Optional[float] = None
    title: Optional[str] = None
    description: Optional[str] = None
    details: Optional[dict] = None
    score_display_mode: Optional[str] = None
    display_value: Optional[str] = None
    numeric_value: Optional[float] = None

    @classmethod
    def from_dict(cls, audit_id: str, raw: Any) -> "AuditResult":
        """Build an AuditResult from an untrusted raw audit mapping.

        Scores outside [0, 1] are clamped; anything that is not a finite
        number (booleans and strings included) becomes None.
        """
        if not isinstance(raw, dict):
            return cls(id=audit_id)

        details = raw.get("details")
        numeric_value = raw.get("numericValue")
        return cls(
            id=audit_id,
            score=normalize_score(raw.get("score")),
            title=raw.get("title"),
            description=raw.get("description"),
            details=details if isinstance(details, dict) else None,
            score_display_mode=raw.get("scoreDisplayMode"),
            display_value=raw.get("displayValue"),
            numeric_value=numeric_value if _is_number(numeric_value) else None,
        )


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def normalize_score(value: Any) -> Optional[float]:
    """Clamp a raw audit score to [0, 1], or None if it is not a number."""
    if not _is_number(value):
        return None
    return float(min(1.0, max(0.0, value)))


@dataclass
class CategorizedMetric:
    """An audit check joined with its catalog description."""

    id: str
    name: str
    tooltip: str
    feedback: str
    score: Optional[float]
    status: MetricStatus
    priority: Optional[str] = None
    details: Optional[dict] = None
    score_display_mode: Optional[str] = None

    def to_dict(self) -> dict:
        data = to_plain(self)
        # Only SEO metrics carry the optional report fields
        for key in ("priority", "details", "score_display_mode"):
            if data[key] is None:
                del data[key]
        return data


@dataclass
class CategorizedAudit:
    """Categorized view of one audit family for one report."""

    family: str
    metrics: list[CategorizedMetric] = field(default_factory=list)
    score: Optional[int] = None
    reported_score: Optional[int] = None

    @property
    def passed(self) -> list[CategorizedMetric]:
        return [m for m in self.metrics if m.status is MetricStatus.PASSED]

    @property
    def failed(self) -> list[CategorizedMetric]:
        return [m for m in self.metrics if m.status is MetricStatus.FAILED]

    @property
    def manual(self) -> list[CategorizedMetric]:
        return [m for m in self.metrics if m.status is MetricStatus.MANUAL]

    def to_dict(self) -> dict:
        return {
            "family": self.family,
            "score": self.score,
            "reported_score": self.reported_score,
            "metrics": {
                "passed": [m.to_dict() for m in self.passed],
                "failed": [m.to_dict() for m in self.failed],
                "manual": [m.to_dict() for m in self.manual],
            },
        }


# =============================================================================
# Scraped content
# =============================================================================


@dataclass
class PageMetadataInfo:
    """Head metadata supplied by the scraper.

    Only title and description feed the metrics bundle; the social and
    custom meta tags are kept for display.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    viewport: Optional[str] = None
    og: dict[str, str] = field(default_factory=dict)
    twitter: dict[str, str] = field(default_factory=dict)
    custom: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "PageMetadataInfo":
        if not isinstance(data, dict):
            return cls()

        def text_map(value) -> dict[str, str]:
            if not isinstance(value, dict):
                return {}
            return {str(k): str(v) for k, v in value.items() if v}

        return cls(
            title=data.get("title"),
            description=data.get("description"),
            author=data.get("author"),
            viewport=data.get("viewport"),
            og=text_map(data.get("og")),
            twitter=text_map(data.get("twitter")),
            custom=text_map(data.get("custom")),
        )

    def to_dict(self) -> dict:
        return to_plain(self)


@dataclass
class ContentRecord:
    """Raw scraped material feeding the metrics aggregator."""

    url: str
    user_id: Optional[str] = None
    html_content: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    metadata: PageMetadataInfo = field(default_factory=PageMetadataInfo)
    favicon: Optional[str] = None
    text_content: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ContentRecord":
        """Build a record from a loosely-shaped dict.

        Accepts both snake_case and the camelCase keys used by scrapers.
        Only ``url`` is required; it is validated by the metrics calculator.
        """
        headers = data.get("headers") or {}
        if not isinstance(headers, dict):
            headers = {}
        html = data.get("html_content", data.get("htmlContent"))
        text = data.get("text_content", data.get("textContent"))
        return cls(
            url=data.get("url") or "",
            user_id=data.get("user_id", data.get("userId")),
            html_content=html if isinstance(html, str) else "",
            headers={str(k): str(v) for k, v in headers.items() if v is not None},
            metadata=PageMetadataInfo.from_dict(data.get("metadata")),
            favicon=data.get("favicon"),
            text_content=text if isinstance(text, str) else None,
        )

    def to_dict(self) -> dict:
        return to_plain(self)


@dataclass(frozen=True)
class TagText:
    tag: str
    text: str


@dataclass(frozen=True)
class ContentFacts:
    """Structured content zones scraped once per (user, URL)."""

    url: str
    tags: tuple[TagText, ...] = ()
    counts: Mapping[str, int] = field(default_factory=dict, hash=False)
    introduction: tuple[str, ...] = ()
    main_content: tuple[str, ...] = ()
    list_items: tuple[str, ...] = ()
    footer_content: tuple[str, ...] = ()
    image_alt_texts: tuple[str, ...] = ()
    headings: Mapping[str, tuple[str, ...]] = field(default_factory=dict, hash=False)
    internal_links: tuple[str, ...] = ()
    external_links: tuple[str, ...] = ()
    combined_text: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        # Read-only views; left out of the hash
        object.__setattr__(self, "counts", MappingProxyType(dict(self.counts)))
        object.__setattr__(self, "headings", MappingProxyType(
            {level: tuple(texts) for level, texts in self.headings.items()}
        ))

    def to_dict(self) -> dict:
        data = to_plain(self)
        data["links"] = {
            "internal": data.pop("internal_links"),
            "external": data.pop("external_links"),
        }
        return data


# =============================================================================
# Content analysis
# =============================================================================


@dataclass
class SentimentResult:
    score: float = 0.0
    comparative: float = 0.0
    subjectivity: float = 0.0


@dataclass
class ContentAnalysis:
    """Word statistics for a block of text."""

    word_count: int = 0
    word_frequencies: dict[str, int] = field(default_factory=dict)
    ngram_counts: dict[str, dict[str, int]] = field(default_factory=dict)
    keyword_density: dict[str, str] = field(default_factory=dict)
    sentiment: SentimentResult = field(default_factory=SentimentResult)
    reading_time: str = ""

    def to_dict(self) -> dict:
        return to_plain(self)


# =============================================================================
# Links and headings
# =============================================================================


@dataclass
class LinkRecord:
    href: str
    anchor_text: str
    is_internal: bool
    nofollow: bool = False


@dataclass
class LinkAnalysis:
    """Link graph summary for a single page."""

    url: str
    links: list[LinkRecord] = field(default_factory=list)
    total_links: int = 0
    internal_links: int = 0
    external_links: int = 0
    nofollow_links: int = 0
    descriptive_anchor_text_count: int = 0
    best_practices_violations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return to_plain(self)


@dataclass
class HeadingRecord:
    tag: str
    text: str
    id: Optional[str] = None
    class_name: Optional[str] = None

    @property
    def level(self) -> int:
        return int(self.tag[1])


@dataclass
class HierarchyEntry:
    tag: str
    text: str
    level: int
    parent: Optional[str] = None


@dataclass
class HeadingStructure:
    """Headings of a page in document order with their hierarchy."""

    url: str
    headings: list[HeadingRecord] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)
    hierarchy: list[HierarchyEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return to_plain(self)


@dataclass
class HeadingSequence:
    has_issues: bool = False
    skipped_levels: list[str] = field(default_factory=list)


@dataclass
class HeadingTextLength:
    too_short: list[str] = field(default_factory=list)
    too_long: list[str] = field(default_factory=list)


@dataclass
class HeadingIssues:
    multiple_h1_tags: bool = False
    missing_h1_tag: bool = True
    h1_matches_title: bool = False
    sequence: HeadingSequence = field(default_factory=HeadingSequence)
    invalid_text_length: HeadingTextLength = field(default_factory=HeadingTextLength)
    duplicate_headings: list[str] = field(default_factory=list)
    excessive_headings: bool = False
    insufficient_headings: bool = True


@dataclass
class HeadingSummary:
    total_headings: int = 0
    heading_tag_counts: dict[str, int] = field(
        default_factory=lambda: {f"h{i}": 0 for i in range(1, 7)}
    )


@dataclass
class DetailedHeading:
    level: str
    content: str
    order: int


@dataclass
class HeadingAnalysis:
    summary: HeadingSummary = field(default_factory=HeadingSummary)
    issues: HeadingIssues = field(default_factory=HeadingIssues)
    detailed_headings: list[DetailedHeading] = field(default_factory=list)


# =============================================================================
# Metrics bundle
# =============================================================================


@dataclass
class CanonicalTag:
    present: bool = False
    url: Optional[str] = None


@dataclass
class HttpRequestCounts:
    total: int = 0
    links: int = 0
    scripts: int = 0
    images: int = 0


@dataclass
class SEOMetrics:
    title: Optional[str] = None
    title_present: bool = False
    title_length: int = 0
    title_band: LengthBand = LengthBand.MISSING
    title_message: str = ""
    meta_description: Optional[str] = None
    meta_description_present: bool = False
    meta_description_length: int = 0
    meta_description_band: LengthBand = LengthBand.MISSING
    meta_description_message: str = ""
    seo_friendly_url: bool = False
    favicon_present: bool = False
    favicon_url: Optional[str] = None
    robots_txt_accessible: bool = False
    in_page_links: int = 0
    language_declared: Optional[str] = None
    hreflang_tags: list[str] = field(default_factory=list)
    canonical_tag_present: bool = False
    canonical_tag_url: Optional[str] = None
    noindex_tag_present: bool = False
    noindex_header_present: bool = False
    keywords: list[str] = field(default_factory=list)
    heading_analysis: HeadingAnalysis = field(default_factory=HeadingAnalysis)


@dataclass
class SecurityMetrics:
    https_enabled: bool = False
    mixed_content: bool = False
    server_signature_hidden: bool = True
    hsts_enabled: bool = False


@dataclass
class PerformanceMetrics:
    page_size_kb: float = 0.0
    http_requests: HttpRequestCounts = field(default_factory=HttpRequestCounts)
    text_compression_enabled: bool = False


@dataclass
class MiscellaneousMetrics:
    meta_viewport_present: bool = False
    character_set: Optional[str] = None
    sitemap_accessible: bool = False
    text_to_html_ratio: float = 0.0


@dataclass
class MetricsBundle:
    """Aggregated metrics for one (user, URL) pair."""

    url: str
    version: int
    user_id: Optional[str] = None
    seo: SEOMetrics = field(default_factory=SEOMetrics)
    security: SecurityMetrics = field(default_factory=SecurityMetrics)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    miscellaneous: MiscellaneousMetrics = field(default_factory=MiscellaneousMetrics)
    generated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return to_plain(self)
