"""Landing-page excerpts for search results."""

import html
import re

import httpx

MAX_EXCERPT_CHARS = 4000
MAX_PAGE_BYTES = 512 * 1024

_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.DOTALL | re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[^>]*>.*?</style>", re.DOTALL | re.IGNORECASE)
_NOSCRIPT_RE = re.compile(r"<noscript[^>]*>.*?</noscript>", re.DOTALL | re.IGNORECASE)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def html_to_text(html_content: str) -> str:
    """Flatten HTML to whitespace-normalized plain text."""
    text = _SCRIPT_RE.sub(" ", html_content)
    text = _STYLE_RE.sub(" ", text)
    text = _NOSCRIPT_RE.sub(" ", text)
    text = _COMMENT_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    text = html.unescape(text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


async def fetch_excerpt(
    client: httpx.AsyncClient,
    url: str,
    timeout: float,
    max_chars: int = MAX_EXCERPT_CHARS,
    max_bytes: int = MAX_PAGE_BYTES,
) -> str:
    """
    Fetch a page and return its text, capped at max_chars.

    At most max_bytes of the body are read; the rest of the page is never
    downloaded. `timeout` applies per network operation, so callers bound
    the total duration themselves.

    Raises:
        httpx.HTTPError: On transport failure or a non-success status
    """
    body = bytearray()
    async with client.stream("GET", url, timeout=timeout, follow_redirects=True) as response:
        response.raise_for_status()
        async for chunk in response.aiter_bytes():
            body.extend(chunk)
            if len(body) >= max_bytes:
                break
        encoding = response.charset_encoding or "utf-8"

    text = bytes(body[:max_bytes]).decode(encoding, errors="replace")
    return html_to_text(text)[:max_chars]


def merge_excerpt(snippet: str, excerpt: str) -> str:
    """Append an excerpt to a snippet, or use it alone when the snippet is empty."""
    if not excerpt:
        return snippet
    if not snippet:
        return excerpt
    return f"{snippet}\n\n{excerpt}"
