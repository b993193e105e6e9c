"""Command-line interface for pageaudit."""

import json
import sys
from typing import Optional

from pageaudit.audit_categorizer import AuditCategorizer
from pageaudit.catalog import CatalogError
from pageaudit.config import settings
from pageaudit.constants import CATALOG_FAMILIES
from pageaudit.content_analyzer import ContentAnalyzer
from pageaudit.content_extractor import extract_content_facts
from pageaudit.crawler import FetchError, WebCrawler
from pageaudit.headings import extract_heading_structure
from pageaudit.helpers.seo import extract_page_metadata
from pageaudit.lighthouse_runner import FORM_FACTORS, LighthouseRunner, category_scores
from pageaudit.link_analyzer import LinkAnalyzer
from pageaudit.logging_config import setup_logging
from pageaudit.metrics import InvalidContentRecordError, MetricsCalculator


def write_output(data, output_file: Optional[str] = None) -> None:
    """Print data as JSON or write it to a file."""
    output = json.dumps(data, indent=2, default=str)
    if output_file:
        with open(output_file, "w") as f:
            f.write(output)
        print(f"Results written to {output_file}")
    else:
        print(output)


def print_metrics(bundle) -> None:
    """Print a metrics bundle in a readable form."""
    seo = bundle.seo
    headings = seo.heading_analysis
    print(f"\n{'=' * 60}")
    print(f"Page Metrics for: {bundle.url}")
    print(f"{'=' * 60}")
    print(f"\nSEO:")
    print(f"  • Title: {seo.title or 'missing'} ({seo.title_band.value})")
    print(f"    {seo.title_message}")
    print(f"  • Meta description: {seo.meta_description_band.value}")
    print(f"    {seo.meta_description_message}")
    print(f"  • SEO-friendly URL: {seo.seo_friendly_url}")
    print(f"  • Canonical: {seo.canonical_tag_url or 'none'}")
    print(f"  • Noindex: tag={seo.noindex_tag_present} header={seo.noindex_header_present}")
    print(f"  • Headings: {headings.summary.total_headings} "
          f"(missing H1: {headings.issues.missing_h1_tag}, "
          f"skipped: {', '.join(headings.issues.sequence.skipped_levels) or 'none'})")
    print(f"\nSecurity:")
    print(f"  • HTTPS: {bundle.security.https_enabled}")
    print(f"  • HSTS: {bundle.security.hsts_enabled}")
    print(f"  • Mixed content: {bundle.security.mixed_content}")
    print(f"\nPerformance:")
    print(f"  • Page size: {bundle.performance.page_size_kb} KB")
    print(f"  • Resource requests: {bundle.performance.http_requests.total}")
    print(f"  • Compression: {bundle.performance.text_compression_enabled}")
    print(f"\nMiscellaneous:")
    print(f"  • Viewport: {bundle.miscellaneous.meta_viewport_present}")
    print(f"  • Charset: {bundle.miscellaneous.character_set or 'none'}")
    print(f"  • Sitemap: {bundle.miscellaneous.sitemap_accessible}")
    print(f"  • Text/HTML ratio: {bundle.miscellaneous.text_to_html_ratio}")
    print(f"\n{'=' * 60}\n")


def metrics_command(args):
    """Fetch a page and compute its metrics bundle."""
    record = WebCrawler().fetch(args.url, user_id=args.user_id)
    calculator = MetricsCalculator(check_reachability=not args.no_reachability)
    bundle = calculator.calculate(record)

    if args.output == "text":
        print_metrics(bundle)
    else:
        write_output(bundle.to_dict(), args.output_file)


def links_command(args):
    """Fetch a page and analyze its links."""
    url, html, _ = WebCrawler().fetch_html(args.url)
    write_output(LinkAnalyzer().analyze(html, url).to_dict(), args.output_file)


def headings_command(args):
    """Fetch a page and extract its heading structure."""
    url, html, _ = WebCrawler().fetch_html(args.url)
    write_output(extract_heading_structure(html, url).to_dict(), args.output_file)


def meta_command(args):
    """Fetch a page and extract its head metadata."""
    _, html, _ = WebCrawler().fetch_html(args.url)
    write_output(extract_page_metadata(html).to_dict(), args.output_file)


def content_command(args):
    """Fetch a page, split it into content zones and analyze its text."""
    url, html, _ = WebCrawler().fetch_html(args.url)
    facts = extract_content_facts(html, url)
    analysis = ContentAnalyzer().analyze(facts.combined_text)
    write_output(
        {"content": facts.to_dict(), "analysis": analysis.to_dict()},
        args.output_file,
    )


def categorize_command(args):
    """Categorize a saved Lighthouse report against a catalog."""
    with open(args.report, "r") as f:
        report = json.load(f)
    result = AuditCategorizer(args.family).categorize_report(report)
    write_output(result.to_dict(), args.output_file)


def lighthouse_command(args):
    """Run Lighthouse and save or summarize the report."""
    report = LighthouseRunner().run(args.url, args.form_factor)
    if report is None:
        print(f"Error: Lighthouse did not produce a report for {args.url}", file=sys.stderr)
        sys.exit(1)

    if args.save_to:
        with open(args.save_to, "w") as f:
            json.dump(report, f)
        print(f"Report written to {args.save_to}")
    else:
        write_output(category_scores(report))


def _add_output_file(parser) -> None:
    parser.add_argument(
        "--output-file",
        "-f",
        help="Write JSON output to file instead of stdout",
    )


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        description="pageaudit - Extract page metrics and categorize Lighthouse audits"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.upper(),
        help="Set logging verbosity (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    metrics_parser = subparsers.add_parser(
        "metrics", help="Compute SEO, security, performance and misc metrics for a URL."
    )
    metrics_parser.add_argument("url", help="URL to audit")
    metrics_parser.add_argument("--user-id", help="Owner recorded in the bundle")
    metrics_parser.add_argument(
        "--no-reachability",
        action="store_true",
        help="Skip live sitemap and robots.txt probes",
    )
    metrics_parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="json",
        help="Output format (default: json)",
    )
    _add_output_file(metrics_parser)
    metrics_parser.set_defaults(func=metrics_command)

    for name, func, help_text in (
        ("links", links_command, "Analyze the links of a URL."),
        ("headings", headings_command, "Extract the heading structure of a URL."),
        ("content", content_command, "Extract content zones and analyze page text."),
        ("meta", meta_command, "Extract title, description and social meta tags."),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("url", help="URL to analyze")
        _add_output_file(sub)
        sub.set_defaults(func=func)

    categorize_parser = subparsers.add_parser(
        "categorize", help="Categorize a Lighthouse JSON report into passed/failed/manual."
    )
    categorize_parser.add_argument("report", help="Path to a Lighthouse or PageSpeed JSON report")
    categorize_parser.add_argument(
        "--family",
        choices=list(CATALOG_FAMILIES),
        required=True,
        help="Audit family to categorize",
    )
    _add_output_file(categorize_parser)
    categorize_parser.set_defaults(func=categorize_command)

    lighthouse_parser = subparsers.add_parser(
        "lighthouse", help="Run the Lighthouse CLI against a URL."
    )
    lighthouse_parser.add_argument("url", help="URL to audit")
    lighthouse_parser.add_argument(
        "--form-factor",
        choices=list(FORM_FACTORS),
        default="mobile",
        help="Device emulation (default: mobile)",
    )
    lighthouse_parser.add_argument(
        "--save-to",
        help="Write the full JSON report to this file",
    )
    lighthouse_parser.set_defaults(func=lighthouse_command)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging based on flags
    logger = setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return

    logger.debug(f"Running {args.command} command")
    try:
        args.func(args)
    except (FetchError, CatalogError, InvalidContentRecordError, OSError, json.JSONDecodeError) as e:
        logger.debug(f"{args.command} command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
