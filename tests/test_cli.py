"""Tests for the command-line interface."""

import json
from unittest.mock import patch

import pytest

from pageaudit.cli import build_parser, main
from pageaudit.crawler import FetchError
from pageaudit.models import ContentRecord


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("pageaudit.cli.setup_logging") as mock_setup:
        yield mock_setup


class TestParser:
    """Test argument parsing."""

    def test_metrics_args(self):
        args = build_parser().parse_args(["metrics", "https://example.com", "--no-reachability"])
        assert args.command == "metrics"
        assert args.no_reachability is True
        assert args.output == "json"

    def test_categorize_requires_known_family(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["categorize", "r.json", "--family", "speed"])

    def test_lighthouse_defaults(self):
        args = build_parser().parse_args(["lighthouse", "https://example.com"])
        assert args.form_factor == "mobile"
        assert args.save_to is None


class TestCommands:
    """Test subcommands with network access mocked."""

    def test_no_command_prints_help(self, capsys):
        main([])
        assert "usage" in capsys.readouterr().out

    def test_categorize(self, tmp_path, capsys):
        report = tmp_path / "report.json"
        report.write_text(json.dumps({
            "audits": {"document-title": {"score": 1}},
            "categories": {"seo": {"score": 1}},
        }))

        main(["categorize", str(report), "--family", "seo"])

        data = json.loads(capsys.readouterr().out)
        assert data["family"] == "seo"
        assert [m["id"] for m in data["metrics"]["passed"]] == ["document-title"]
        assert data["score"] == 100

    def test_categorize_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["categorize", str(tmp_path / "missing.json"), "--family", "seo"])
        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().err

    @patch("pageaudit.cli.WebCrawler")
    def test_metrics_to_file(self, mock_crawler, sample_record, tmp_path):
        mock_crawler.return_value.fetch.return_value = ContentRecord.from_dict(sample_record)
        out = tmp_path / "bundle.json"

        main(["metrics", "https://example.com/garden-box", "--no-reachability", "-f", str(out)])

        data = json.loads(out.read_text())
        assert data["url"] == "https://example.com/garden-box"
        assert data["security"]["hsts_enabled"] is True
        assert data["miscellaneous"]["sitemap_accessible"] is False

    @patch("pageaudit.cli.WebCrawler")
    def test_metrics_text_output(self, mock_crawler, sample_record, capsys):
        mock_crawler.return_value.fetch.return_value = ContentRecord.from_dict(sample_record)

        main(["metrics", "https://example.com/garden-box", "--no-reachability", "-o", "text"])

        assert "Page Metrics for: https://example.com/garden-box" in capsys.readouterr().out

    @patch("pageaudit.cli.WebCrawler")
    def test_links(self, mock_crawler, sample_html, capsys):
        mock_crawler.return_value.fetch_html.return_value = (
            "https://example.com/garden-box", sample_html, {}
        )

        main(["links", "https://example.com/garden-box"])

        data = json.loads(capsys.readouterr().out)
        assert data["total_links"] == 3

    @patch("pageaudit.cli.WebCrawler")
    def test_fetch_error_exits(self, mock_crawler, capsys):
        mock_crawler.return_value.fetch_html.side_effect = FetchError("Connection error: refused")

        with pytest.raises(SystemExit) as exc:
            main(["headings", "https://example.com"])
        assert exc.value.code == 1
        assert "Connection error" in capsys.readouterr().err

    @patch("pageaudit.cli.LighthouseRunner")
    def test_lighthouse_failure_exits(self, mock_runner, capsys):
        mock_runner.return_value.run.return_value = None

        with pytest.raises(SystemExit) as exc:
            main(["lighthouse", "https://example.com"])
        assert exc.value.code == 1

    @patch("pageaudit.cli.LighthouseRunner")
    def test_lighthouse_save(self, mock_runner, tmp_path):
        mock_runner.return_value.run.return_value = {"categories": {"performance": {"score": 0.5}}}
        out = tmp_path / "lh.json"

        main(["lighthouse", "https://example.com", "--form-factor", "desktop", "--save-to", str(out)])

        mock_runner.return_value.run.assert_called_once_with("https://example.com", "desktop")
        assert json.loads(out.read_text())["categories"]["performance"]["score"] == 0.5

    @patch("pageaudit.cli.WebCrawler")
    def test_meta(self, mock_crawler, capsys):
        mock_crawler.return_value.fetch_html.return_value = (
            "https://example.com",
            '<title>Box</title><meta property="og:title" content="Box | Weekly">',
            {},
        )

        main(["meta", "https://example.com"])

        data = json.loads(capsys.readouterr().out)
        assert data["title"] == "Box"
        assert data["og"] == {"title": "Box | Weekly"}
        assert data["custom"] == {"og:title": "Box | Weekly"}

    @patch("pageaudit.cli.WebCrawler")
    def test_failures_logged_with_traceback(self, mock_crawler, no_logging_setup, capsys):
        mock_crawler.return_value.fetch_html.side_effect = FetchError("HTTP 500")
        logger = no_logging_setup.return_value

        with pytest.raises(SystemExit):
            main(["--log-level", "DEBUG", "meta", "https://example.com"])

        no_logging_setup.assert_called_once_with(level="DEBUG", log_file=None)
        logger.debug.assert_any_call("Running meta command")
        logger.debug.assert_called_with("meta command failed", exc_info=True)
