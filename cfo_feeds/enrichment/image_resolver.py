"""Best-effort representative image for a feed item.

Resolution is tiered and stops at the first hit:

1. media embedded in the feed (enclosure, media:thumbnail, media:content)
2. the first ``<img>`` in the item's inline HTML content
3. a guarded scrape of the article page (og:image, twitter:image, first usable ``<img>``)

Every candidate is made absolute against the item's page URL. Candidates that
do not normalize to an http(s) URL are skipped. A missing image is a normal
result, never an error.
"""

import re
from typing import Iterable, Optional
from urllib.parse import urljoin, urlparse

import aiohttp
from bs4 import BeautifulSoup
import structlog

from ..config.settings import settings
from ..ingestion.fetcher import BROWSER_USER_AGENT
from ..ingestion.interfaces import RawFeedItem
from ..ingestion.normalizer import INLINE_HTML_FIELDS, SENTINEL_URL

logger = structlog.get_logger()

_IMG_SRC_RE = re.compile(r"""<img\b[^>]*?\bsrc\s*=\s*["']([^"']+)["']""", re.IGNORECASE)

PAGE_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"


def normalize_image_url(candidate: Optional[str], base_url: Optional[str]) -> Optional[str]:
    """Absolute http(s) form of `candidate`, or None when it cannot be made one."""
    if not candidate:
        return None
    candidate = candidate.strip()
    if not candidate or candidate.lower().startswith("data:"):
        return None

    try:
        if base_url and base_url != SENTINEL_URL:
            candidate = urljoin(base_url, candidate)
        parsed = urlparse(candidate)
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return candidate


def _page_url(item: RawFeedItem) -> Optional[str]:
    return item.link or item.guid


class ImageResolver:
    """Finds an image URL for a feed item via the feed, the content, then the page."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: float = None,
        max_redirects: int = None,
    ):
        self._session = session
        self.timeout_seconds = timeout_seconds or settings.scrape_timeout_seconds
        self.max_redirects = settings.scrape_max_redirects if max_redirects is None else max_redirects

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={
                    "User-Agent": BROWSER_USER_AGENT,
                    "Accept": PAGE_ACCEPT,
                    "Accept-Language": "en-US,en;q=0.9",
                }
            )
        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def resolve(self, item: RawFeedItem) -> Optional[str]:
        """Image URL for the item, or None."""
        image = self.embedded_image(item)
        if image:
            return image
        return await self.scrape_image(_page_url(item))

    def embedded_image(self, item: RawFeedItem) -> Optional[str]:
        """Tiers that need no network: feed media, then inline content."""
        base_url = _page_url(item)

        for candidate in (item.enclosure_url, item.media_thumbnail_url, item.media_content_url):
            image = normalize_image_url(candidate, base_url)
            if image:
                return image

        for name in INLINE_HTML_FIELDS:
            html = item.content.get(name)
            if not html:
                continue
            match = _IMG_SRC_RE.search(html)
            if match:
                image = normalize_image_url(match.group(1), base_url)
                if image:
                    return image

        return None

    async def scrape_image(self, page_url: Optional[str]) -> Optional[str]:
        """Fetch the article page and pull an image from its markup."""
        if not page_url or urlparse(page_url).scheme not in ("http", "https"):
            return None

        try:
            html = await self._fetch_page(page_url)
        except Exception as e:
            logger.warning(
                "image_scrape_failed",
                url=page_url,
                error_type=type(e).__name__,
                error=str(e)
            )
            return None

        if not html:
            return None
        return self.image_from_html(html, page_url)

    async def _fetch_page(self, page_url: str) -> Optional[str]:
        session = await self._get_session()
        # aiohttp gives up once the redirect count reaches max_redirects
        async with session.get(
            page_url,
            headers={"Referer": page_url},
            allow_redirects=True,
            max_redirects=self.max_redirects + 1,
        ) as response:
            if response.status >= 400:
                logger.debug("image_scrape_status", url=page_url, status=response.status)
                return None
            return await response.text(errors="replace")

    def image_from_html(self, html: str, page_url: str) -> Optional[str]:
        """og:image, then twitter:image, then the first <img> that normalizes."""
        soup = BeautifulSoup(html, "html.parser")

        for candidate in (
            _meta_content(soup, property="og:image"),
            _meta_content(soup, name="twitter:image"),
            _meta_content(soup, property="twitter:image"),
        ):
            image = normalize_image_url(candidate, page_url)
            if image:
                return image

        return _first_image(
            (img.get("src") for img in soup.find_all("img")), page_url
        )


def _meta_content(soup: BeautifulSoup, **attrs) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    return tag.get("content")


def _first_image(candidates: Iterable[Optional[str]], base_url: str) -> Optional[str]:
    for candidate in candidates:
        image = normalize_image_url(candidate, base_url)
        if image:
            return image
    return None
