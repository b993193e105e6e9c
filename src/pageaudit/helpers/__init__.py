"""Pure fact extractors over raw HTML and HTTP response headers."""

from pageaudit.helpers.miscellaneous import (
    ReachabilityProbe,
    calculate_text_to_html_ratio,
    extract_character_set,
    is_meta_viewport_present,
)
from pageaudit.helpers.performance import (
    calculate_page_size,
    count_http_requests,
    is_text_compression_enabled,
)
from pageaudit.helpers.security import (
    has_mixed_content,
    is_hsts_enabled,
    is_https_enabled,
    is_server_signature_hidden,
)
from pageaudit.helpers.seo import (
    classify_length,
    classify_meta_description,
    classify_title,
    count_in_page_links,
    extract_hreflang_tags,
    extract_keywords,
    extract_lang_tag,
    extract_meta_description,
    extract_page_metadata,
    extract_title,
    has_canonical_tag,
    has_noindex_header,
    has_noindex_tag,
    is_seo_friendly_url,
)

__all__ = [
    "ReachabilityProbe",
    "calculate_page_size",
    "calculate_text_to_html_ratio",
    "classify_length",
    "classify_meta_description",
    "classify_title",
    "count_http_requests",
    "count_in_page_links",
    "extract_character_set",
    "extract_hreflang_tags",
    "extract_keywords",
    "extract_lang_tag",
    "extract_meta_description",
    "extract_page_metadata",
    "extract_title",
    "has_canonical_tag",
    "has_mixed_content",
    "has_noindex_header",
    "has_noindex_tag",
    "is_hsts_enabled",
    "is_https_enabled",
    "is_meta_viewport_present",
    "is_seo_friendly_url",
    "is_server_signature_hidden",
    "is_text_compression_enabled",
]
