"""Page fetcher and on-page SEO metrics extraction.

fetch_page() downloads a single URL and raises typed fetch errors.
extract_analytics() is a pure function of (html, source URL): it never
touches the network and yields zero/empty defaults for missing elements.
Does NOT crawl subpages.
"""

import logging
import socket
from urllib.parse import urljoin, urlsplit

import requests
from bs4 import BeautifulSoup

from errors import FetchError, FetchTimeoutError, PageNotFoundError
from models import AnalyticsRecord

logger = logging.getLogger(__name__)

_REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

NON_VISIBLE_TAGS = ["script", "style", "noscript", "template"]
# Elements that start a new line when rendered; inline tags (b, span, a) do not split words.
BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "br", "button", "caption", "dd", "details",
    "dialog", "div", "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form",
    "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "option",
    "p", "pre", "section", "summary", "table", "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
]
EXCLUDED_HREF_PREFIXES = ("#", "mailto:", "tel:")
_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "failed to resolve",
)

INTERNAL = "internal"
EXTERNAL = "external"


def _is_name_resolution_error(exc: BaseException) -> bool:
    """Walk the requests/urllib3 exception chain looking for a DNS failure."""
    stack: list[BaseException] = [exc]
    seen: set[int] = set()
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, socket.gaierror) or type(current).__name__ == "NameResolutionError":
            return True
        related = [current.__cause__, current.__context__, getattr(current, "reason", None), *current.args]
        stack.extend(item for item in related if isinstance(item, BaseException))

    message = str(exc).lower()
    return any(marker in message for marker in _DNS_FAILURE_MARKERS)


def fetch_page(url: str, timeout: float = 10.0) -> str:
    """
    Fetch `url` and return its HTML.
    Raises PageNotFoundError, FetchTimeoutError or FetchError.
    """
    try:
        response = requests.get(url, timeout=timeout, headers=_REQUEST_HEADERS)
        response.raise_for_status()
        response.encoding = response.apparent_encoding or "utf-8"
        return response.text
    except requests.Timeout as e:
        logger.warning("Fetch timed out for %s: %s", url, e)
        raise FetchTimeoutError() from e
    except requests.ConnectionError as e:
        logger.warning("Fetch connection error for %s: %s", url, e)
        if _is_name_resolution_error(e):
            raise PageNotFoundError() from e
        raise FetchError() from e
    except (requests.RequestException, ValueError, OSError) as e:
        logger.warning("Fetch failed for %s: %s", url, e)
        raise FetchError() from e


def classify_link(href: str, source_url: str) -> str | None:
    """
    Return INTERNAL, EXTERNAL or None (not counted) for an anchor href.

    Hrefs that cannot be resolved are treated as relative, hence internal,
    unless they are fragment, mailto: or tel: links.
    """
    candidate = href.strip()
    if candidate.lower().startswith(EXCLUDED_HREF_PREFIXES):
        return None

    try:
        base_host = urlsplit(source_url).hostname
        resolved = urlsplit(urljoin(source_url, candidate))
        resolved_host = resolved.hostname
    except ValueError:
        return INTERNAL

    scheme = resolved.scheme.lower()
    if scheme in ("http", "https") and not resolved_host:
        return INTERNAL

    if resolved_host and resolved_host == base_host:
        return INTERNAL
    if scheme.startswith("http"):
        return EXTERNAL
    return None


def _visible_body_text(soup: BeautifulSoup) -> str:
    """Collapse the visible text under <body> to single-space separated words."""
    for tag in soup.find_all(NON_VISIBLE_TAGS):
        tag.decompose()

    root = soup.body
    if root is None:
        # html.parser does not synthesize <body> for fragments
        for tag in soup.find_all(["head", "title"]):
            tag.decompose()
        root = soup

    for tag in root.find_all(BLOCK_TAGS):
        tag.insert_before(" ")
        tag.insert_after(" ")

    return " ".join(root.get_text().split())


def extract_analytics(html: str, source_url: str) -> AnalyticsRecord:
    """Compute the fixed analytics record for `html` fetched from `source_url`."""
    soup = BeautifulSoup(html, "html.parser")

    # --- Title ---
    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if title_tag else ""

    # --- Meta description ---
    meta_desc_tag = soup.find("meta", attrs={"name": "description"})
    meta_description = ""
    if meta_desc_tag is not None:
        meta_description = meta_desc_tag.get("content") or ""

    # --- Headings ---
    h1_count = len(soup.find_all("h1"))
    h2_count = len(soup.find_all("h2"))
    h3_count = len(soup.find_all("h3"))

    # --- Images ---
    images = soup.find_all("img")
    images_without_alt = 0
    for img in images:
        alt = img.get("alt")
        if alt is None or alt.strip() == "":
            images_without_alt += 1

    # --- Links ---
    internal_links = 0
    external_links = 0
    for a in soup.find_all("a", href=True):
        href = a["href"]
        if not href:
            continue
        kind = classify_link(href, source_url)
        if kind == INTERNAL:
            internal_links += 1
        elif kind == EXTERNAL:
            external_links += 1

    # --- Word count (runs last: drops non-visible tags from the tree) ---
    visible_text = _visible_body_text(soup)
    word_count = len(visible_text.split()) if visible_text else 0

    return {
        "wordCount": word_count,
        "title": title,
        "titleLength": len(title),
        "metaDescription": meta_description,
        "metaDescriptionLength": len(meta_description),
        "h1Count": h1_count,
        "h2Count": h2_count,
        "h3Count": h3_count,
        "imageCount": len(images),
        "imagesWithoutAlt": images_without_alt,
        "internalLinks": internal_links,
        "externalLinks": external_links,
    }
