"""Tests for configuration and logging setup."""

import importlib
import json
import logging

import pytest

import pageaudit.config
from pageaudit.config import AnalysisThresholds
from pageaudit.helpers.seo import classify_title
from pageaudit.logging_config import NOISY_LOGGERS, setup_logging
from pageaudit.metrics import MetricsCalculator
from pageaudit.models import LengthBand


class TestAnalysisThresholds:
    """Test threshold loading and saving."""

    def test_defaults(self):
        thresholds = AnalysisThresholds()
        assert (thresholds.title_min, thresholds.title_max) == (50, 60)
        assert (thresholds.meta_description_min, thresholds.meta_description_max) == (150, 160)
        assert thresholds.words_per_minute == 200

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PAGEAUDIT_THRESHOLD_TITLE_MIN", "45")
        monkeypatch.setenv("PAGEAUDIT_THRESHOLD_PROBE_TIMEOUT_SECONDS", "2.5")

        thresholds = AnalysisThresholds.from_env()

        assert thresholds.title_min == 45
        assert thresholds.probe_timeout_seconds == 2.5
        assert thresholds.title_max == 60

    def test_from_env_ignores_invalid(self, monkeypatch):
        monkeypatch.setenv("PAGEAUDIT_THRESHOLD_TITLE_MAX", "sixty")
        assert AnalysisThresholds.from_env().title_max == 60

    def test_file_round_trip(self, tmp_path):
        path = tmp_path / "thresholds.json"
        AnalysisThresholds(title_min=40, excessive_headings=30).save_to_file(str(path))

        with open(path) as f:
            assert json.load(f)["thresholds"]["title_min"] == 40

        loaded = AnalysisThresholds.from_file(str(path))
        assert loaded.title_min == 40
        assert loaded.excessive_headings == 30

    def test_from_missing_file(self, tmp_path):
        loaded = AnalysisThresholds.from_file(str(tmp_path / "absent.json"))
        assert loaded == AnalysisThresholds()

    def test_flat_file(self, tmp_path):
        path = tmp_path / "flat.json"
        path.write_text(json.dumps({"heading_text_max": 80, "unknown": 1}))
        assert AnalysisThresholds.from_file(str(path)).heading_text_max == 80


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


class TestLogging:
    """Test logging configuration."""

    def test_setup_with_file(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "audit.log"

        logger = setup_logging(level="debug", log_file=str(log_file))
        logger.getChild("test").debug("hello from test")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert logger.name == "pageaudit"
        assert restore_root_logger.level == logging.DEBUG
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
        assert "pageaudit.test - DEBUG - hello from test" in log_file.read_text(encoding="utf-8")

    def test_unknown_level_falls_back_to_info(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "audit.log"

        setup_logging(level="chatty", log_file=str(log_file))
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert restore_root_logger.level == logging.INFO
        assert "Unknown log level 'chatty', using INFO" in log_file.read_text(encoding="utf-8")

    def test_custom_format(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "plain.log"

        setup_logging(level="INFO", log_file=str(log_file), format_string="%(levelname)s|%(message)s")
        logging.getLogger("pageaudit.cli").info("done")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert log_file.read_text(encoding="utf-8").strip() == "INFO|done"


class TestProbeTimeoutSetting:
    """SITEMAP_PROBE_TIMEOUT reaches the reachability checks."""

    def test_threshold_default_follows_setting(self, monkeypatch):
        monkeypatch.setattr(pageaudit.config.settings, "SITEMAP_PROBE_TIMEOUT", 1.5)

        thresholds = AnalysisThresholds()

        assert thresholds.probe_timeout_seconds == 1.5
        assert MetricsCalculator(thresholds=thresholds).probe.timeout == 1.5

    def test_threshold_override_wins(self, monkeypatch):
        monkeypatch.setattr(pageaudit.config.settings, "SITEMAP_PROBE_TIMEOUT", 1.5)
        monkeypatch.setenv("PAGEAUDIT_THRESHOLD_PROBE_TIMEOUT_SECONDS", "0.5")

        assert AnalysisThresholds.from_env().probe_timeout_seconds == 0.5


class TestDefaultThresholdsFromEnvironment:
    """The module-level defaults read the environment at import."""

    def test_environment_applied_at_import(self, monkeypatch):
        monkeypatch.setenv("SITEMAP_PROBE_TIMEOUT", "1.5")
        monkeypatch.setenv("PAGEAUDIT_THRESHOLD_TITLE_MIN", "10")
        try:
            config = importlib.reload(pageaudit.config)

            assert config.settings.SITEMAP_PROBE_TIMEOUT == 1.5
            assert config.default_thresholds.probe_timeout_seconds == 1.5
            assert config.default_thresholds.title_min == 10
            assert classify_title("x" * 20, config.default_thresholds) is LengthBand.OPTIMAL
        finally:
            monkeypatch.undo()
            importlib.reload(pageaudit.config)
