"""Web page ingest.

Fetches a recipe page and reduces its HTML to plain text, one block element
per line, ready for the text pipeline.
"""

from __future__ import annotations

import logging
import re
from typing import Final

import httpx
from bs4 import BeautifulSoup, Tag

from .exceptions import IngestError

logger = logging.getLogger(__name__)

NON_CONTENT_SELECTORS: Final[tuple[str, ...]] = (
    "script",
    "style",
    "noscript",
    "template",
    "iframe",
    "svg",
    "nav",
    "body > header",
    "body > footer",
    "aside",
    "form",
    "#comments",
    ".comments",
    ".comment-list",
    ".advertisement",
    ".ad-container",
    ".share",
    ".social-share",
    ".newsletter",
    ".related-posts",
)

# Recipe containers first, generic page content last
CONTENT_SELECTORS: Final[tuple[str, ...]] = (
    '[itemtype*="schema.org/Recipe"]',
    ".wprm-recipe-container",
    ".tasty-recipes",
    ".recipe-card",
    ".recipe-content",
    ".recipe",
    "article",
    "main",
    '[role="main"]',
    ".entry-content",
    ".post-content",
    "#content",
)

BLOCK_TAGS: Final[tuple[str, ...]] = (
    "p",
    "div",
    "li",
    "ul",
    "ol",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "tr",
    "section",
    "article",
    "blockquote",
    "figcaption",
    "dt",
    "dd",
)


def _content_root(soup: BeautifulSoup) -> Tag:
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is not None and element.get_text(strip=True):
            return element
    return soup.body or soup


def html_to_text(html: str) -> str:
    """Reduce a recipe page to text.

    Non-content elements are removed, the most specific recipe container is
    preferred and every block element becomes one line. Blank lines are
    dropped: on a web page, headings carry the structure.

    Example:
        >>> html_to_text("<article><h2>Ingredients</h2><ul><li>2 <b>eggs</b></li></ul></article>")
        'Ingredients\\n2 eggs'
    """
    soup = BeautifulSoup(html, "html.parser")
    for selector in NON_CONTENT_SELECTORS:
        for element in soup.select(selector):
            element.decompose()

    root = _content_root(soup)
    for br in root.find_all("br"):
        br.replace_with("\n")
    for block in root.find_all(BLOCK_TAGS):
        block.insert_before("\n")
        block.insert_after("\n")

    lines = (re.sub(r"[ \t\xa0]+", " ", line).strip() for line in root.get_text().split("\n"))
    return "\n".join(line for line in lines if line)


async def fetch_page_text(
    url: str,
    http_client: httpx.AsyncClient,
    logger: logging.Logger | None = None,
) -> str:
    """Fetch a web page and return its recipe text.

    Args:
        url: Page URL
        http_client: Shared HTTP client (its timeout applies)
        logger: Logger to use instead of the module logger

    Returns:
        Plain text of the page's main content

    Raises:
        IngestError: If the page cannot be fetched or holds no text
    """
    log = logger or logging.getLogger(__name__)
    log.info(f"Fetching {url}")
    try:
        response = await http_client.get(url, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise IngestError(f"Could not fetch page: {e}", url=url) from e

    text = html_to_text(response.text)
    if not text:
        raise IngestError("Page holds no text", url=url)
    log.info(f"Read {len(text)} characters from {url}")
    return text
