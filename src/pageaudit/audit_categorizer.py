"""Mapping of Lighthouse-style audit reports onto curated check catalogs."""

import logging
import math
from typing import Any, Mapping, Optional, Union

from pageaudit.catalog import CheckCatalog, load_catalog
from pageaudit.constants import MANUAL_CHECK_FEEDBACK, REPORT_CATEGORY_KEYS
from pageaudit.models import (
    AuditResult,
    CategorizedAudit,
    CategorizedMetric,
    CheckDefinition,
    MetricStatus,
    normalize_score,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def aggregate_score(scores) -> Optional[int]:
    """Return round_half_up(100 * mean) of the defined scores, or None."""
    defined = [s for s in scores if s is not None]
    if not defined:
        return None
    return round_half_up(100 * sum(defined) / len(defined))


def _unwrap_report(report: Any) -> Mapping:
    """Return the Lighthouse result inside a PageSpeed response, if any."""
    if isinstance(report, Mapping) and isinstance(report.get("lighthouseResult"), Mapping):
        return report["lighthouseResult"]
    return report


def extract_audits(report: Any) -> dict[str, dict]:
    """Extract the raw audits map from a report.

    Accepts a Lighthouse result, a PageSpeed response wrapping one in
    ``lighthouseResult``, or a bare ``{audit_id: audit}`` map.

    Returns:
        Mapping of audit id to raw audit dict; empty for malformed input
    """
    report = _unwrap_report(report)
    if not isinstance(report, Mapping):
        logger.warning(f"Cannot extract audits from {type(report).__name__}")
        return {}

    audits = report.get("audits", report)
    if not isinstance(audits, Mapping):
        logger.warning("Report 'audits' field is not a mapping")
        return {}

    return {
        str(audit_id): raw
        for audit_id, raw in audits.items()
        if isinstance(raw, Mapping)
    }


def extract_categories(report: Any) -> dict:
    """Extract the categories map of a report, or an empty dict."""
    report = _unwrap_report(report)
    if not isinstance(report, Mapping):
        return {}
    categories = report.get("categories")
    return dict(categories) if isinstance(categories, Mapping) else {}


def classify_score(score: Optional[float]) -> MetricStatus:
    if score is None:
        return MetricStatus.MANUAL
    if score == 1:
        return MetricStatus.PASSED
    return MetricStatus.FAILED


class AuditCategorizer:
    """Joins report audits with a catalog into passed, failed and manual metrics.

    The catalog drives the result: every catalog check yields one metric in
    catalog order. Checks missing from the report become manual-review
    placeholders, and report audits missing from the catalog are ignored.
    """

    def __init__(self, catalog: Union[CheckCatalog, str]):
        """Initialize the categorizer.

        Args:
            catalog: A CheckCatalog or the name of a bundled family
        """
        self.catalog = load_catalog(catalog) if isinstance(catalog, str) else catalog

    @property
    def family(self) -> str:
        return self.catalog.family

    def _placeholder(self, check: CheckDefinition) -> CategorizedMetric:
        return CategorizedMetric(
            id=check.id,
            name=check.name,
            tooltip=check.tooltip,
            feedback=MANUAL_CHECK_FEEDBACK,
            score=None,
            status=MetricStatus.MANUAL,
            priority=check.priority,
        )

    def _metric(self, check: CheckDefinition, audit: AuditResult) -> CategorizedMetric:
        metric = CategorizedMetric(
            id=check.id,
            name=check.name,
            tooltip=check.tooltip,
            feedback=check.positive_text if audit.score == 1 else check.negative_text,
            score=audit.score,
            status=classify_score(audit.score),
        )
        # Prioritized checks also carry the audit's own report fields
        if check.priority is not None:
            metric.priority = check.priority
            metric.details = audit.details
            metric.score_display_mode = audit.score_display_mode
        return metric

    def reported_score(self, report_categories: Optional[Mapping]) -> Optional[int]:
        """The report's own 0-100 score for this family, if present."""
        if not isinstance(report_categories, Mapping):
            return None
        category = report_categories.get(REPORT_CATEGORY_KEYS.get(self.family, self.family))
        if not isinstance(category, Mapping):
            return None
        score = normalize_score(category.get("score"))
        return round_half_up(score * 100) if score is not None else None

    def categorize(
        self,
        audits: Mapping[str, Any],
        report_categories: Optional[Mapping] = None,
    ) -> CategorizedAudit:
        """Categorize a map of audits against the catalog.

        Args:
            audits: Mapping of audit id to raw audit dict or AuditResult
            report_categories: Optional report categories for the reported score

        Returns:
            CategorizedAudit with metrics in catalog order and the aggregate score
        """
        audits = audits if isinstance(audits, Mapping) else {}
        metrics = []
        for check in self.catalog:
            raw = audits.get(check.id)
            if raw is None:
                logger.warning(f"Audit '{check.id}' missing from {self.family} report, needs manual review")
                metrics.append(self._placeholder(check))
                continue
            audit = raw if isinstance(raw, AuditResult) else AuditResult.from_dict(check.id, raw)
            metrics.append(self._metric(check, audit))

        unknown = [audit_id for audit_id in audits if audit_id not in self.catalog]
        if unknown:
            logger.debug(f"Ignoring {len(unknown)} {self.family} audits not in catalog: {', '.join(map(str, unknown))}")

        result = CategorizedAudit(
            family=self.family,
            metrics=metrics,
            score=aggregate_score(m.score for m in metrics),
            reported_score=self.reported_score(report_categories),
        )
        logger.info(
            f"Categorized {self.family}: {len(result.passed)} passed, "
            f"{len(result.failed)} failed, {len(result.manual)} manual, score={result.score}"
        )
        return result

    def categorize_report(self, report: Any) -> CategorizedAudit:
        """Categorize a full Lighthouse or PageSpeed report."""
        return self.categorize(extract_audits(report), extract_categories(report))
