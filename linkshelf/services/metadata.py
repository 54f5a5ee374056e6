from __future__ import annotations

import logging
from html.parser import HTMLParser
from urllib.error import HTTPError, URLError
from urllib.parse import urljoin, urlsplit
from urllib.request import Request, urlopen

from linkshelf.schemas.urls import UrlMetadata

LOGGER = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
MAX_DOCUMENT_BYTES = 2 * 1024 * 1024
FAVICON_RELS = ("icon", "shortcut icon", "apple-touch-icon")


class MetadataExtractionError(RuntimeError):
    pass


class _MetadataParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.meta: dict[str, str] = {}
        self.links: dict[str, str] = {}
        self._title_parts: list[str] = []
        self._in_title = False

    @property
    def title(self) -> str:
        return " ".join("".join(self._title_parts).split())

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        values = {key.lower(): (value or "").strip() for key, value in attrs}
        if tag == "meta":
            key = (values.get("property") or values.get("name") or "").lower()
            content = values.get("content")
            # First occurrence wins.
            if key and content and key not in self.meta:
                self.meta[key] = content
        elif tag == "link":
            rel = " ".join(values.get("rel", "").lower().split())
            href = values.get("href")
            if rel and href and rel not in self.links:
                self.links[rel] = href
        elif tag == "title":
            self._in_title = True

    def handle_endtag(self, tag: str) -> None:
        if tag == "title":
            self._in_title = False

    def handle_data(self, data: str) -> None:
        if self._in_title:
            self._title_parts.append(data)


def parse_metadata(url: str, html: str) -> UrlMetadata:
    parser = _MetadataParser()
    parser.feed(html)
    parser.close()
    meta = parser.meta

    image = meta.get("og:image") or meta.get("twitter:image")
    return UrlMetadata(
        title=meta.get("og:title")
        or meta.get("twitter:title")
        or parser.title
        or "Untitled",
        description=meta.get("og:description")
        or meta.get("twitter:description")
        or meta.get("description")
        or "",
        favicon=_favicon_url(url, parser.links),
        image=urljoin(url, image) if image else None,
    )


def _favicon_url(url: str, links: dict[str, str]) -> str:
    for rel in FAVICON_RELS:
        href = links.get(rel)
        if href:
            return urljoin(url, href)
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}/favicon.ico"


def fetch_html(url: str, timeout: float) -> str:
    request = Request(
        url,
        headers={
            "User-Agent": USER_AGENT,
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
        },
    )
    try:
        with urlopen(request, timeout=timeout) as response:
            charset = response.headers.get_content_charset() or "utf-8"
            body = response.read(MAX_DOCUMENT_BYTES)
    except HTTPError as exc:
        LOGGER.warning("Metadata fetch failed url=%s status=%s", url, exc.code)
        raise MetadataExtractionError(f"Page responded with HTTP {exc.code}") from exc
    except (URLError, TimeoutError, ValueError) as exc:
        LOGGER.warning("Metadata fetch failed url=%s error=%s", url, exc)
        raise MetadataExtractionError("Failed to reach page") from exc

    try:
        return body.decode(charset, errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


class UrlMetadataExtractor:
    def __init__(self, timeout_seconds: float) -> None:
        self._timeout_seconds = timeout_seconds

    def __call__(self, url: str) -> UrlMetadata:
        html = fetch_html(url, self._timeout_seconds)
        metadata = parse_metadata(url, html)
        LOGGER.info("Extracted metadata url=%s title=%s", url, metadata.title)
        return metadata
