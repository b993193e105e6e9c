# src/pageaudit/constants.py
"""Centralized constants for pageaudit.

This module contains fixed word lists, message catalogs and magic numbers
shared across modules. For user-configurable thresholds, see config.py
and AnalysisThresholds.
"""

# =============================================================================
# Metrics Bundle
# =============================================================================

# Schema version written into every MetricsBundle
METRICS_BUNDLE_VERSION = 1

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")


# =============================================================================
# Title / Meta Description Messages
# =============================================================================

TITLE_MESSAGES = {
    "MISSING": "The title is missing for your URL.",
    "OPTIMAL": "The title length is optimal (50-60 characters).",
    "SHORT": "The title is too short (less than 50 characters). Ideal length is 50-60 characters.",
    "LONG": "The title is too long (more than 60 characters). Ideal length is 50-60 characters.",
}

META_DESCRIPTION_MESSAGES = {
    "MISSING": "The meta description is missing for your URL.",
    "OPTIMAL": "The meta description length is optimal (150-160 characters).",
    "SHORT": "The meta description is too short (less than 150 characters). Ideal length is 150-160 characters.",
    "LONG": "The meta description is too long (more than 160 characters). Ideal length is 150-160 characters.",
}


# =============================================================================
# Audit Categorization
# =============================================================================

MANUAL_CHECK_FEEDBACK = "Metric data is not available."

# Catalog families shipped in pageaudit/catalogs/
CATALOG_FAMILIES = ("accessibility", "performance", "seo")

# Report category keys per family (Lighthouse naming)
REPORT_CATEGORY_KEYS = {
    "accessibility": "accessibility",
    "performance": "performance",
    "seo": "seo",
}


# =============================================================================
# Link Analysis
# =============================================================================

GENERIC_ANCHOR_PHRASES = ("click here", "read more", "learn more", "details")

# Anchor text must be longer than this to count as descriptive
MIN_DESCRIPTIVE_ANCHOR_LENGTH = 3


# =============================================================================
# Content Analysis
# =============================================================================

NGRAM_SIZES = (2, 3, 4)

STOP_WORDS = frozenset({
    'a', 'about', 'above', 'after', 'again', 'against', 'all', 'am', 'an',
    'and', 'any', 'are', 'as', 'at', 'be', 'because', 'been', 'before',
    'being', 'below', 'between', 'both', 'but', 'by', 'can', 'could', 'did',
    'do', 'does', 'doing', 'down', 'during', 'each', 'few', 'for', 'from',
    'further', 'had', 'has', 'have', 'having', 'he', 'her', 'here', 'hers',
    'herself', 'him', 'himself', 'his', 'how', 'i', 'if', 'in', 'into', 'is',
    'it', 'its', 'itself', 'just', 'me', 'more', 'most', 'my', 'myself', 'no',
    'nor', 'not', 'now', 'of', 'off', 'on', 'once', 'only', 'or', 'other',
    'our', 'ours', 'ourselves', 'out', 'over', 'own', 's', 'same', 'she',
    'should', 'so', 'some', 'such', 't', 'than', 'that', 'the', 'their',
    'theirs', 'them', 'themselves', 'then', 'there', 'these', 'they', 'this',
    'those', 'through', 'to', 'too', 'under', 'until', 'up', 'very', 'was',
    'we', 'were', 'what', 'when', 'where', 'which', 'while', 'who', 'whom',
    'why', 'will', 'with', 'would', 'you', 'your', 'yours', 'yourself',
    'yourselves',
})


# =============================================================================
# Content Facts
# =============================================================================

# Number of leading paragraphs treated as the introduction
INTRODUCTION_PARAGRAPHS = 3

# Number of trailing footer/div blocks treated as footer content
FOOTER_BLOCKS = 3


# =============================================================================
# Lighthouse
# =============================================================================

LIGHTHOUSE_CHROME_FLAGS = [
    "--headless",
    "--no-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
]

# Lighthouse stderr marker that triggers a reduced retry
LIGHTHOUSE_CYCLE_ERROR = "cycle detected"
