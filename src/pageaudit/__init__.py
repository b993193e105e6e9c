"""Web page auditing: HTML fact extraction, content analysis and audit categorization."""

__version__ = "0.1.0"

from pageaudit.audit_categorizer import AuditCategorizer, extract_audits
from pageaudit.catalog import CatalogError, CheckCatalog, load_catalog
from pageaudit.content_analyzer import ContentAnalyzer, analyze_content, generate_ngrams
from pageaudit.content_extractor import extract_content_facts
from pageaudit.crawler import FetchError, WebCrawler
from pageaudit.headings import analyze_headings, extract_heading_structure
from pageaudit.link_analyzer import LinkAnalyzer
from pageaudit.metrics import InvalidContentRecordError, MetricsCalculator, calculate_metrics
from pageaudit.models import (
    AuditResult,
    CategorizedAudit,
    CategorizedMetric,
    CheckDefinition,
    ContentAnalysis,
    ContentFacts,
    ContentRecord,
    HeadingAnalysis,
    HeadingStructure,
    LengthBand,
    LinkAnalysis,
    MetricsBundle,
)
from pageaudit.config import settings

__all__ = [
    "AuditCategorizer",
    "AuditResult",
    "CatalogError",
    "CategorizedAudit",
    "CategorizedMetric",
    "CheckCatalog",
    "CheckDefinition",
    "ContentAnalysis",
    "ContentAnalyzer",
    "ContentFacts",
    "ContentRecord",
    "FetchError",
    "HeadingAnalysis",
    "HeadingStructure",
    "InvalidContentRecordError",
    "LengthBand",
    "LinkAnalysis",
    "LinkAnalyzer",
    "MetricsBundle",
    "MetricsCalculator",
    "WebCrawler",
    "analyze_content",
    "analyze_headings",
    "calculate_metrics",
    "extract_audits",
    "extract_content_facts",
    "extract_heading_structure",
    "generate_ngrams",
    "load_catalog",
    "settings",
]
