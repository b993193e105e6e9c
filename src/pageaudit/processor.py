"""Reprocessing entry points over stored content and audit reports."""

import logging
from typing import Optional

from pageaudit.audit_categorizer import AuditCategorizer
from pageaudit.database import AuditDatabase
from pageaudit.lighthouse_runner import FORM_FACTORS
from pageaudit.metrics import MetricsCalculator
from pageaudit.models import CategorizedAudit, MetricsBundle

logger = logging.getLogger(__name__)


class ContentNotFoundError(LookupError):
    """Raised when no content record exists for a (user, URL) pair."""


class ReportNotFoundError(LookupError):
    """Raised when an audit report (or its form factor) is not stored."""


class MetricsProcessor:
    """Recomputes derived records from stored raw material.

    Every call recomputes from scratch and fully replaces the stored result,
    so repeated or concurrent runs for the same key converge on the last write.
    """

    def __init__(self, db: AuditDatabase, calculator: Optional[MetricsCalculator] = None):
        self.db = db
        self.calculator = calculator or MetricsCalculator()

    def process(self, user_id: Optional[str], url: str) -> MetricsBundle:
        """Compute and store the metrics bundle for a stored content record.

        Raises:
            ContentNotFoundError: If no content record is stored for the key
        """
        record = self.db.get_content_record(user_id, url)
        if record is None:
            raise ContentNotFoundError(f"No content found for user {user_id!r} and URL {url}")

        bundle = self.calculator.calculate(record)
        self.db.save_metrics_bundle(bundle)
        logger.info(f"Processed metrics for {url}")
        return bundle

    def categorize_report(
        self, report_id: str, family: str, form_factor: str = "mobile"
    ) -> CategorizedAudit:
        """Categorize one family of a stored audit report.

        Args:
            report_id: Stored report id
            family: Catalog family (accessibility, performance or seo)
            form_factor: "mobile" or "desktop"

        Raises:
            ReportNotFoundError: If the report or its form factor is missing
        """
        if form_factor not in FORM_FACTORS:
            raise ValueError(
                f"Unknown form factor: '{form_factor}'. Supported: {', '.join(FORM_FACTORS)}"
            )

        stored = self.db.get_audit_report(report_id)
        if stored is None:
            raise ReportNotFoundError(f"Report not found: {report_id}")

        report = stored.get(f"{form_factor}_report")
        if report is None:
            raise ReportNotFoundError(f"Report {report_id} has no {form_factor} audit data")

        return AuditCategorizer(family).categorize_report(report)
