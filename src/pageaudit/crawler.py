"""Web crawler for fetching pages into content records."""

import logging
import random
import time
from typing import Optional
from urllib.parse import urljoin, urlparse

import requests

from pageaudit.config import settings
from pageaudit.models import ContentRecord, PageMetadataInfo
from pageaudit.helpers.seo import extract_page_metadata
from pageaudit.soup import attr_text, make_soup

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a page cannot be fetched as HTML."""


def normalize_url(url: str) -> str:
    """Prepend https:// to bare hosts."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url


def process_content(html: str, url: str) -> tuple[PageMetadataInfo, str, Optional[str]]:
    """Extract head metadata, body text and favicon from a page.

    Args:
        html: HTML content
        url: The page URL, used to resolve relative favicon paths

    Returns:
        Tuple of (metadata, text_content, favicon_url)
    """
    soup = make_soup(html)
    metadata = extract_page_metadata(soup)

    body = soup.find("body")
    text_content = body.get_text(separator=" ", strip=True) if body else ""

    favicon = None
    for link in soup.find_all("link"):
        rel_values = [r.lower() for r in attr_text(link, "rel").split()]
        href = attr_text(link, "href").strip()
        if "icon" in rel_values and href:
            favicon = href
            break

    if favicon and not favicon.startswith(("http", "//")):
        parsed = urlparse(url)
        favicon = urljoin(f"{parsed.scheme}://{parsed.netloc}", favicon)

    return metadata, text_content, favicon


class WebCrawler:
    """Fetches pages and turns them into ContentRecords."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: int = 3,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the web crawler.

        Args:
            user_agent: Custom user agent string (defaults to settings.USER_AGENT)
            timeout: Request timeout in seconds (defaults to settings.FETCH_TIMEOUT)
            max_retries: Maximum number of attempts for failed requests
            session: Optional preconfigured requests session
        """
        self.user_agent = user_agent or settings.USER_AGENT
        self.timeout = timeout or settings.FETCH_TIMEOUT
        self.max_retries = max(1, max_retries)
        self.session = session or requests.Session()

        self.session.headers.update({
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        })

    def _get(self, url: str) -> requests.Response:
        """GET a URL with exponential backoff between attempts."""
        last_error = None

        for attempt in range(self.max_retries):
            try:
                if attempt > 0:
                    delay = (2 ** attempt) + random.uniform(0, 1)
                    time.sleep(delay)

                response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
                response.raise_for_status()
                return response

            except requests.exceptions.HTTPError as e:
                last_error = str(e)
                # Client errors other than rate limiting will not change on retry
                if e.response is not None and 400 <= e.response.status_code < 500 \
                        and e.response.status_code != 429:
                    break

            except requests.exceptions.Timeout:
                last_error = f"Request timeout after {self.timeout}s"

            except requests.exceptions.RequestException as e:
                last_error = f"Connection error: {e}"

            logger.debug(f"Attempt {attempt + 1} for {url} failed: {last_error}")

        raise FetchError(f"Failed to fetch {url}: {last_error}")

    def fetch_html(self, url: str) -> tuple[str, str, dict[str, str]]:
        """Fetch a page and return (final_url, html, lower-cased headers).

        Raises:
            FetchError: If the request fails or the response is not HTML
        """
        url = normalize_url(url)
        logger.info(f"Fetching {url}")
        response = self._get(url)

        content_type = response.headers.get("Content-Type", "")
        if "text/html" not in content_type.lower():
            raise FetchError(
                f"{url} did not return an HTML response (Content-Type: {content_type or 'none'})"
            )

        headers = {k.lower(): v for k, v in response.headers.items()}
        return url, response.text, headers

    def fetch(self, url: str, user_id: Optional[str] = None) -> ContentRecord:
        """Fetch a page and build its content record.

        Args:
            url: Page URL (bare hosts get https:// prepended)
            user_id: Owner of the record

        Returns:
            ContentRecord with HTML, headers, metadata, favicon and body text

        Raises:
            FetchError: If the page cannot be fetched as HTML
        """
        url, html, headers = self.fetch_html(url)
        metadata, text_content, favicon = process_content(html, url)

        return ContentRecord(
            url=url,
            user_id=user_id,
            html_content=html,
            headers=headers,
            metadata=metadata,
            favicon=favicon,
            text_content=text_content,
        )
