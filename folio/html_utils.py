"""HTML utility functions for Folio.

This module provides the HTML string manipulation used by the built-in
filters.

Functions:
    absolutize_html_urls: Prefix root-relative URLs with a base URL.
    minify_html: Collapse insignificant whitespace and drop comments.
"""

from __future__ import annotations

import re

# href/src/action attribute values, in either quote style
_URL_ATTR_RE = re.compile(
    r"""(?P<attr>\b(?:href|src|action)=)(?P<quote>["'])(?P<url>.*?)(?P=quote)""",
    re.IGNORECASE | re.DOTALL,
)

# Elements whose contents are whitespace-sensitive
_PRESERVE_RE = re.compile(
    r"<(pre|textarea|script|style)\b.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
_PLACEHOLDER_RE = re.compile(r"<folio-keep (\d+)>")
_COMMENT_RE = re.compile(r"<!--(?!\[if).*?-->", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")
_BETWEEN_TAGS_RE = re.compile(r">\s+<")


def _is_root_relative(url: str) -> bool:
    # "//host/path" is protocol-relative, not root-relative
    return url.startswith("/") and not url.startswith("//")


def absolutize_html_urls(html: str, base_url: str) -> str:
    """Prefix root-relative URLs in HTML attributes with a base URL.

    Only values starting with a single ``/`` change. Absolute and
    protocol-relative URLs, page-relative paths, anchors and ``mailto:``
    style links are left alone.

    Args:
        html: HTML content to process.
        base_url: Site URL, with or without a trailing slash.

    Returns:
        HTML with root-relative URLs made absolute.

    Examples:
        >>> absolutize_html_urls('<a href="/about">', 'https://example.com/')
        '<a href="https://example.com/about">'
    """
    base = base_url.rstrip("/")
    if not base:
        return html

    def rewrite(match: re.Match) -> str:
        url = match.group("url")
        if not _is_root_relative(url):
            return match.group(0)
        quote = match.group("quote")
        return f"{match.group('attr')}{quote}{base}{url}{quote}"

    return _URL_ATTR_RE.sub(rewrite, html)


def minify_html(html: str) -> str:
    """Collapse insignificant whitespace and strip comments.

    Contents of ``pre``, ``textarea``, ``script`` and ``style`` elements
    are kept byte for byte. Conditional comments (``<!--[if ...``) stay.

    Args:
        html: HTML content to minify.

    Returns:
        Minified HTML.

    Examples:
        >>> minify_html('<p>\\n  Hello   world\\n</p>\\n<!-- note -->\\n<br>')
        '<p> Hello world </p><br>'
    """
    preserved: list[str] = []

    def keep(match: re.Match) -> str:
        preserved.append(match.group(0))
        return f"<folio-keep {len(preserved) - 1}>"

    text = _PRESERVE_RE.sub(keep, html)
    text = _COMMENT_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    text = _BETWEEN_TAGS_RE.sub("><", text)
    text = text.strip()
    return _PLACEHOLDER_RE.sub(lambda m: preserved[int(m.group(1))], text)
