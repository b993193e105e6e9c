"""Performance fact extractors."""

import re
from typing import Mapping, Optional

from requests.structures import CaseInsensitiveDict

from pageaudit.models import HttpRequestCounts
from pageaudit.soup import HtmlSource, extractor, make_soup, raw_html

_COMPRESSION_RE = re.compile(r"gzip|br|deflate", re.IGNORECASE)

# Tag name -> HttpRequestCounts field
_RESOURCE_TAGS = {"link": "links", "script": "scripts", "img": "images"}


@extractor(default=0.0)
def calculate_page_size(html: HtmlSource) -> float:
    """Size of the HTML in kilobytes (UTF-8 bytes / 1024), 2 decimals."""
    markup = raw_html(html)
    if not markup:
        return 0.0
    return round(len(markup.encode("utf-8")) / 1024, 2)


@extractor(default=HttpRequestCounts())
def count_http_requests(html: HtmlSource) -> HttpRequestCounts:
    """Estimate resource requests from <link>, <script> and <img> tags.

    A single traversal counts every tag type at once.
    """
    counts = HttpRequestCounts()
    for tag in make_soup(html).find_all(list(_RESOURCE_TAGS)):
        field_name = _RESOURCE_TAGS[tag.name]
        setattr(counts, field_name, getattr(counts, field_name) + 1)
    counts.total = counts.links + counts.scripts + counts.images
    return counts


@extractor(default=False)
def is_text_compression_enabled(headers: Optional[Mapping[str, str]]) -> bool:
    """Check whether Content-Encoding names gzip, br or deflate."""
    if not headers:
        return False
    encoding = CaseInsensitiveDict(headers).get("Content-Encoding") or ""
    return bool(_COMPRESSION_RE.search(str(encoding)))
