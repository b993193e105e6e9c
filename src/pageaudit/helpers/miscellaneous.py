"""Miscellaneous fact extractors and live reachability probes."""

import logging
import re
from typing import Optional
from urllib.parse import urlparse

import requests

from pageaudit.config import settings
from pageaudit.soup import HtmlSource, attr_text, extractor, make_soup, raw_html

logger = logging.getLogger(__name__)

_CHARSET_PARAM_RE = re.compile(r"charset\s*=\s*[\"']?([^\"';\s]+)", re.IGNORECASE)
_SITEMAP_DIRECTIVE_RE = re.compile(r"^sitemap:\s*(.+)$", re.IGNORECASE | re.MULTILINE)

STANDARD_SITEMAP_PATHS = ("/sitemap.xml", "/sitemap-index.xml")


@extractor(default=False)
def is_meta_viewport_present(html: HtmlSource) -> bool:
    """Check for <meta name="viewport">."""
    return any(
        attr_text(meta, "name").strip().lower() == "viewport"
        for meta in make_soup(html).find_all("meta")
    )


@extractor(default=None)
def extract_character_set(html: HtmlSource) -> Optional[str]:
    """Extract the declared document character set.

    Supports ``<meta charset="...">`` and the charset parameter of
    ``<meta http-equiv="Content-Type" content="...">``.
    """
    for meta in make_soup(html).find_all("meta"):
        charset = attr_text(meta, "charset").strip()
        if charset:
            return charset
        if attr_text(meta, "http-equiv").strip().lower() == "content-type":
            match = _CHARSET_PARAM_RE.search(attr_text(meta, "content"))
            if match:
                return match.group(1)
    return None


@extractor(default=0.0)
def calculate_text_to_html_ratio(html: HtmlSource, text: Optional[str]) -> float:
    """Ratio of visible text length to HTML length, in [0, 1], 2 decimals.

    Returns 0 when the HTML is empty or no text is available.
    """
    markup = raw_html(html).strip()
    if not markup:
        return 0.0
    text_length = len(text.strip()) if isinstance(text, str) else 0
    ratio = min(1.0, max(0.0, text_length / len(markup)))
    return round(ratio, 2)


def _origin(url: str) -> Optional[str]:
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


class ReachabilityProbe:
    """Probes well-known crawl files of a site with bounded HTTP requests.

    Every request is a single attempt with no redirect following; a 2xx or
    3xx status counts as reachable.

    The timeout is handed to requests as is, so it bounds the connect and
    each socket read separately. It is not a wall-clock limit on a request:
    a server that keeps trickling bytes can hold a GET open for longer. A
    sitemap check makes several requests in turn, each with its own timeout.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the probe.

        Args:
            session: HTTP session to use (a new one is created if None)
            timeout: Connect and read timeout in seconds, per request.
                Defaults to SITEMAP_PROBE_TIMEOUT.
        """
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.SITEMAP_PROBE_TIMEOUT

    def is_url_accessible(self, url: str) -> bool:
        """Send a HEAD request and report whether it answered 2xx/3xx."""
        try:
            response = self.session.head(
                url, timeout=self.timeout, allow_redirects=False
            )
        except requests.RequestException as e:
            logger.warning(f"HEAD {url} failed: {e}")
            return False
        return 200 <= response.status_code < 400

    def sitemaps_from_robots(self, origin: str) -> list[str]:
        """Collect Sitemap: directive URLs from {origin}/robots.txt."""
        robots_url = f"{origin}/robots.txt"
        try:
            response = self.session.get(
                robots_url, timeout=self.timeout, allow_redirects=False
            )
        except requests.RequestException as e:
            logger.warning(f"GET {robots_url} failed: {e}")
            return []

        if not 200 <= response.status_code < 300:
            logger.debug(f"robots.txt not accessible at {robots_url}: {response.status_code}")
            return []

        sitemaps = [m.strip() for m in _SITEMAP_DIRECTIVE_RE.findall(response.text or "")]
        logger.debug(f"Found {len(sitemaps)} sitemap directive(s) in {robots_url}")
        return [s for s in sitemaps if s]

    def is_sitemap_accessible(self, url: str) -> bool:
        """Check the standard sitemap locations, then robots.txt directives.

        Args:
            url: Any URL on the site

        Returns:
            True on the first reachable sitemap, False otherwise
        """
        origin = _origin(url) if isinstance(url, str) else None
        if origin is None:
            logger.warning(f"Cannot probe sitemap for invalid URL: {url!r}")
            return False

        for path in STANDARD_SITEMAP_PATHS:
            sitemap_url = f"{origin}{path}"
            if self.is_url_accessible(sitemap_url):
                logger.info(f"Sitemap is accessible at: {sitemap_url}")
                return True

        for sitemap_url in self.sitemaps_from_robots(origin):
            if self.is_url_accessible(sitemap_url):
                logger.info(f"Sitemap from robots.txt is accessible: {sitemap_url}")
                return True

        logger.info(f"No accessible sitemap found for {origin}")
        return False

    def is_robots_txt_accessible(self, url: str) -> bool:
        """Check that {origin}/robots.txt answers a HEAD request."""
        origin = _origin(url) if isinstance(url, str) else None
        if origin is None:
            logger.warning(f"Cannot probe robots.txt for invalid URL: {url!r}")
            return False
        return self.is_url_accessible(f"{origin}/robots.txt")
