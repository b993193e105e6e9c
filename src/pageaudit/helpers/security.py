"""Security fact extractors."""

import logging
import re
from typing import Mapping, Optional
from urllib.parse import urlparse

from requests.structures import CaseInsensitiveDict

from pageaudit.soup import HtmlSource, extractor, raw_html

logger = logging.getLogger(__name__)

_HTTP_RE = re.compile(r"http://", re.IGNORECASE)
_HTTPS_RE = re.compile(r"https://", re.IGNORECASE)

# Headers that reveal server software
SIGNATURE_HEADERS = ("Server", "X-Powered-By")


@extractor(default=False)
def is_https_enabled(url: str) -> bool:
    """Check whether the URL scheme is exactly https."""
    if not url or not isinstance(url, str):
        logger.warning(f"Invalid URL for HTTPS check: {url!r}")
        return False
    is_https = urlparse(url.strip()).scheme == "https"
    if not is_https:
        logger.debug(f"URL is not using HTTPS: {url}")
    return is_https


@extractor(default=False)
def has_mixed_content(html: HtmlSource) -> bool:
    """Detect documents referencing both http:// and https:// URLs.

    This is a substring heuristic, not a real active/passive mixed-content
    audit: any http:// text (including plain text or comments) counts.
    """
    markup = raw_html(html)
    if not markup:
        return False
    return bool(_HTTP_RE.search(markup)) and bool(_HTTPS_RE.search(markup))


@extractor(default=True)
def is_server_signature_hidden(headers: Optional[Mapping[str, str]]) -> bool:
    """Check that neither Server nor X-Powered-By is sent."""
    if not headers:
        return True
    headers = CaseInsensitiveDict(headers)
    exposed = [name for name in SIGNATURE_HEADERS if headers.get(name)]
    if exposed:
        logger.debug(f"Server signature exposed in headers: {', '.join(exposed)}")
        return False
    return True


@extractor(default=False)
def is_hsts_enabled(headers: Optional[Mapping[str, str]]) -> bool:
    """Check for a Strict-Transport-Security header."""
    if not headers:
        return False
    return "Strict-Transport-Security" in CaseInsensitiveDict(headers)
