"""Tests for the reprocessing entry points."""

import pytest

from pageaudit.database import AuditDatabase
from pageaudit.metrics import MetricsCalculator
from pageaudit.models import ContentRecord
from pageaudit.processor import ContentNotFoundError, MetricsProcessor, ReportNotFoundError


URL = "https://example.com/garden-box"


@pytest.fixture
def db(tmp_path):
    database = AuditDatabase(db_url=f"sqlite:///{tmp_path / 'processor.db'}")
    yield database
    database.close()


@pytest.fixture
def processor(db):
    return MetricsProcessor(db, MetricsCalculator(check_reachability=False))


class TestProcess:
    """Test metrics reprocessing from stored content."""

    def test_process_stores_bundle(self, db, processor, sample_record):
        db.save_content_record(ContentRecord.from_dict(sample_record))

        bundle = processor.process("user-1", URL)

        assert bundle.seo.title_present is True
        stored = db.get_metrics_bundle("user-1", URL)
        assert stored["seo"]["title"] == bundle.seo.title

    def test_process_is_idempotent(self, db, processor, sample_record):
        db.save_content_record(ContentRecord.from_dict(sample_record))

        processor.process("user-1", URL)
        processor.process("user-1", URL)

        assert db.count_metrics_bundles() == 1

    def test_reprocess_reflects_new_content(self, db, processor, sample_record):
        db.save_content_record(ContentRecord.from_dict(sample_record))
        processor.process("user-1", URL)

        sample_record["html_content"] = "<title>Replaced</title>"
        db.save_content_record(ContentRecord.from_dict(sample_record))
        processor.process("user-1", URL)

        stored = db.get_metrics_bundle("user-1", URL)
        assert stored["seo"]["title"] == "Replaced"
        assert stored["seo"]["keywords"] == []

    def test_missing_content(self, processor):
        with pytest.raises(ContentNotFoundError):
            processor.process("user-1", URL)


class TestCategorizeReport:
    """Test categorization of stored audit reports."""

    @pytest.fixture
    def stored_report(self, db):
        db.save_audit_report(
            "r-1",
            URL,
            user_id="user-1",
            mobile_report={
                "audits": {"color-contrast": {"score": 0}, "image-alt": {"score": 1}},
                "categories": {"accessibility": {"score": 0.5}},
            },
        )
        return "r-1"

    def test_categorize(self, processor, stored_report):
        result = processor.categorize_report(stored_report, "accessibility", "mobile")

        assert [m.id for m in result.failed] == ["color-contrast"]
        assert [m.id for m in result.passed] == ["image-alt"]
        assert result.score == 50
        assert result.reported_score == 50

    def test_recomputed_each_call(self, processor, stored_report):
        first = processor.categorize_report(stored_report, "accessibility")
        second = processor.categorize_report(stored_report, "accessibility")
        assert first.to_dict() == second.to_dict()

    def test_missing_form_factor(self, processor, stored_report):
        with pytest.raises(ReportNotFoundError):
            processor.categorize_report(stored_report, "accessibility", "desktop")

    def test_missing_report(self, processor):
        with pytest.raises(ReportNotFoundError):
            processor.categorize_report("absent", "seo")

    def test_bad_form_factor(self, processor, stored_report):
        with pytest.raises(ValueError):
            processor.categorize_report(stored_report, "seo", "tablet")
