"""Tests for heading extraction and heading analysis."""

from pageaudit.config import AnalysisThresholds
from pageaudit.headings import (
    analyze_headings,
    build_hierarchy,
    extract_heading_structure,
    extract_headings,
    find_skipped_levels,
)
from pageaudit.models import HeadingRecord


def make_headings(*specs):
    """Build HeadingRecords from (tag, text) pairs."""
    return [HeadingRecord(tag=tag, text=text) for tag, text in specs]


class TestHeadingExtraction:
    """Test heading extraction and hierarchy."""

    def test_document_order_and_attributes(self):
        html = """
        <h2 id="intro" class="lead big">  Intro
            section </h2>
        <h1>Main</h1>
        <h3>Detail</h3>
        """
        headings = extract_headings(html)

        assert [h.tag for h in headings] == ["h2", "h1", "h3"]
        assert headings[0].text == "Intro section"
        assert headings[0].id == "intro"
        assert headings[0].class_name == "lead big"
        assert headings[1].id is None
        assert headings[1].class_name is None

    def test_structure_counts(self, sample_html):
        structure = extract_heading_structure(sample_html, "https://example.com")

        assert structure.url == "https://example.com"
        assert structure.counts == {"h1": 1, "h2": 1, "h3": 0, "h4": 1, "h5": 0, "h6": 0}
        assert len(structure.headings) == 3

    def test_hierarchy_single_level_backlink(self):
        hierarchy = build_hierarchy(make_headings(
            ("h1", "A"), ("h2", "B"), ("h4", "C"), ("h2", "D"), ("h3", "E"),
        ))

        assert [entry.parent for entry in hierarchy] == [None, "A", "B", None, "D"]
        assert [entry.level for entry in hierarchy] == [1, 2, 4, 2, 3]

    def test_empty_document(self):
        structure = extract_heading_structure("", "https://example.com")
        assert structure.headings == []
        assert structure.hierarchy == []
        assert sum(structure.counts.values()) == 0


class TestSkippedLevels:
    """Test heading sequence checks."""

    def test_skip_detected(self):
        headings = make_headings(("h1", "Title"), ("h2", "Part"), ("h4", "Deep"))
        assert find_skipped_levels(headings) == ["h3"]

    def test_no_skip(self):
        headings = make_headings(("h1", "Title"), ("h2", "Part"), ("h3", "Sub"))
        assert find_skipped_levels(headings) == []

    def test_multiple_levels_deduplicated(self):
        headings = make_headings(
            ("h1", "a"), ("h4", "b"), ("h2", "c"), ("h4", "d"), ("h1", "e"), ("h3", "f"),
        )
        assert find_skipped_levels(headings) == ["h2", "h3"]

    def test_first_heading_never_flagged(self):
        headings = make_headings(("h3", "Starts deep"), ("h4", "Then one step"))
        assert find_skipped_levels(headings) == []

    def test_going_shallower_is_fine(self):
        headings = make_headings(("h1", "a"), ("h2", "b"), ("h3", "c"), ("h1", "d"))
        assert find_skipped_levels(headings) == []


class TestAnalyzeHeadings:
    """Test the heading roll-up."""

    def test_sample_page(self, sample_html):
        analysis = analyze_headings(extract_headings(sample_html), "Fresh Garden Vegetables")

        assert analysis.summary.total_headings == 3
        assert analysis.issues.missing_h1_tag is False
        assert analysis.issues.multiple_h1_tags is False
        assert analysis.issues.h1_matches_title is True
        assert analysis.issues.sequence.has_issues is True
        assert analysis.issues.sequence.skipped_levels == ["h3"]
        assert analysis.detailed_headings[2].level == "h4"
        assert analysis.detailed_headings[2].order == 3

    def test_h1_title_comparison_trims(self):
        headings = make_headings(("h1", "Welcome home"), ("h2", "More here"))
        assert analyze_headings(headings, "  Welcome home ").issues.h1_matches_title is True
        assert analyze_headings(headings, "Welcome Home").issues.h1_matches_title is False
        assert analyze_headings(headings, None).issues.h1_matches_title is False

    def test_multiple_and_missing_h1(self):
        multiple = analyze_headings(make_headings(("h1", "First one"), ("h1", "Second one")))
        assert multiple.issues.multiple_h1_tags is True
        assert multiple.issues.missing_h1_tag is False

        missing = analyze_headings(make_headings(("h2", "Only sub"), ("h3", "Deeper")))
        assert missing.issues.missing_h1_tag is True

    def test_duplicates_and_lengths(self):
        headings = make_headings(
            ("h1", "Same heading"),
            ("h2", "Same heading"),
            ("h2", "Tiny"),
            ("h3", "x" * 71),
            ("h3", "x" * 70),
        )
        issues = analyze_headings(headings).issues

        assert issues.duplicate_headings == ["Same heading"]
        assert issues.invalid_text_length.too_short == ["Tiny"]
        assert issues.invalid_text_length.too_long == ["x" * 71]

    def test_heading_totals(self):
        single = analyze_headings(make_headings(("h1", "Lonely heading")))
        assert single.issues.insufficient_headings is True
        assert single.issues.excessive_headings is False

        many = analyze_headings(make_headings(*[("h2", f"Section {i}") for i in range(51)]))
        assert many.issues.excessive_headings is True
        assert many.issues.insufficient_headings is False

        fifty = analyze_headings(make_headings(*[("h2", f"Section {i}") for i in range(50)]))
        assert fifty.issues.excessive_headings is False

    def test_custom_thresholds(self):
        thresholds = AnalysisThresholds(heading_text_min=2, heading_text_max=10)
        issues = analyze_headings(make_headings(("h1", "Tiny"), ("h2", "A longer text")), thresholds=thresholds).issues
        assert issues.invalid_text_length.too_short == []
        assert issues.invalid_text_length.too_long == ["A longer text"]

    def test_empty(self):
        analysis = analyze_headings([])
        assert analysis.summary.total_headings == 0
        assert analysis.summary.heading_tag_counts["h1"] == 0
        assert analysis.issues.missing_h1_tag is True
        assert analysis.issues.insufficient_headings is True
        assert analysis.detailed_headings == []
