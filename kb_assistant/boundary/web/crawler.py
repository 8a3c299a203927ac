"""
Web page fetcher for ingestion.

Downloads a page with httpx and extracts its title, main text and
last-modified date with BeautifulSoup.

Dependencies: httpx, bs4, kb_assistant.core.exceptions
System role: Page fetch/extraction adapter
"""

import logging
import re
from datetime import datetime, timezone

import httpx
from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from kb_assistant.core.exceptions import PageFetchError

logger = logging.getLogger(__name__)

CONTENT_SELECTORS = [
    "article",
    "main",
    '[role="main"]',
    ".content",
    ".main-content",
    ".post-content",
    ".entry-content",
    "#content",
    "#main",
    "body",
]

BOILERPLATE_SELECTORS = "script, style, nav, header, footer, aside, .sidebar, .navigation, .menu"

INLINE_WHITESPACE = re.compile(r"[^\S\n]+")


class CrawledPage(BaseModel):
    """Extracted page content."""

    url: str
    title: str = Field(description="Page title")
    content: str = Field(description="Main text with paragraph breaks preserved")
    last_modified: str = Field(description="Last-Modified header, meta tag, or fetch time")


def clean_text(text: str) -> str:
    """Collapse whitespace within lines and squeeze blank-line runs to one."""
    lines = [INLINE_WHITESPACE.sub(" ", line).strip() for line in text.splitlines()]

    paragraphs: list[str] = []
    current: list[str] = []
    for line in lines:
        if line:
            current.append(line)
        elif current:
            paragraphs.append("\n".join(current))
            current = []
    if current:
        paragraphs.append("\n".join(current))

    return "\n\n".join(paragraphs)


def extract_title(soup: BeautifulSoup) -> str:
    """Title from <title>, og:title, then the first <h1>."""
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)

    og_title = soup.find("meta", attrs={"property": "og:title"})
    if og_title and og_title.get("content", "").strip():
        return og_title["content"].strip()

    h1 = soup.find("h1")
    if h1 and h1.get_text(strip=True):
        return h1.get_text(strip=True)

    return "Untitled"


def extract_main_content(soup: BeautifulSoup, min_chars: int = 100) -> str:
    """
    Text of the first content container holding more than min_chars.

    Boilerplate elements are removed from each candidate before measuring.
    Falls back to the whole body.
    """
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        for unwanted in element.select(BOILERPLATE_SELECTORS):
            unwanted.decompose()
        text = element.get_text()
        if len(text.strip()) > min_chars:
            return text

    for unwanted in soup.select(BOILERPLATE_SELECTORS):
        unwanted.decompose()
    body = soup.body or soup
    return body.get_text()


class PageFetcher:
    """Fetch and extract web pages."""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        user_agent: str = "Mozilla/5.0 (compatible; KnowledgeBaseCrawler/1.0)",
        min_content_chars: int = 100,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize fetcher.

        Args:
            timeout_seconds: Request timeout
            user_agent: User-Agent header value
            min_content_chars: Minimum container text length
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.min_content_chars = min_content_chars
        self._transport = transport

    async def fetch(self, url: str) -> CrawledPage:
        """
        Download url and extract its content.

        Args:
            url: Absolute http(s) URL

        Returns:
            CrawledPage: Title, cleaned text and last-modified date

        Raises:
            PageFetchError: On network errors, timeouts, or non-2xx responses
        """
        logger.info(f"{__name__}:fetch - Fetching {url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"{__name__}:fetch - Failed to fetch {url}: {type(e).__name__}: {e}")
            raise PageFetchError(
                f"Failed to fetch {url}: {e}",
                operation="fetch",
                cause=e,
                details={"url": url},
            ) from e

        soup = BeautifulSoup(response.text, "html.parser")
        title = extract_title(soup)

        meta_modified = soup.find("meta", attrs={"name": "last-modified"})
        last_modified = (
            response.headers.get("last-modified")
            or (meta_modified.get("content") if meta_modified else None)
            or datetime.now(timezone.utc).isoformat()
        )

        content = clean_text(extract_main_content(soup, self.min_content_chars))

        logger.info(
            f"{__name__}:fetch - Extracted '{title}' ({len(content)} characters) from {url}"
        )
        return CrawledPage(
            url=url,
            title=title,
            content=content,
            last_modified=last_modified,
        )
