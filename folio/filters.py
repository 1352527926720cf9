"""Built-in filters for Folio.

This module contains implementations of the Filter protocol. Each filter
does one transformation and is registered on a Layout in the order it
should run.

Key classes:
- MarkdownFilter: Renders Markdown to HTML with syntax highlighting.
- HtmlMinifier: Strips comments and insignificant whitespace.
- AbsoluteUrlFilter: Rewrites root-relative URLs against a base URL.
- CallableFilter: Adapts a plain function to the Filter protocol.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable
from typing import TYPE_CHECKING

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .html_utils import absolutize_html_urls, minify_html

if TYPE_CHECKING:
    from .content import Page

MARKDOWN_PLUGINS = ["strikethrough", "footnotes", "table", "url"]


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = re.sub(r"<[^>]+>", "", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


class _HighlightRenderer(mistune.HTMLRenderer):
    """Markdown renderer with heading anchors and Pygments code blocks."""

    def __init__(self, highlight_code: bool = True, heading_ids: bool = False):
        super().__init__(escape=False)
        self.highlight_code = highlight_code
        self.heading_ids = heading_ids
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        """Render a heading, with a de-duplicated anchor ID if enabled."""
        if not self.heading_ids:
            return super().heading(text, level, **attrs)

        base_id = _generate_heading_id(text)

        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id

        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block, highlighted when the language is known.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'javascript').

        Returns:
            HTML string with highlighted code.
        """
        lang = info.split()[0] if info else None
        if lang and self.highlight_code:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{html.escape(code, quote=False)}</code></pre>\n"


class MarkdownFilter:
    """Renders Markdown to HTML.

    Raw HTML in the source passes through and ``{TOKEN}`` placeholders
    survive as plain text, so helpers can fill them afterwards. Heading IDs
    are computed before placeholders are filled (``# {NAME}`` would get
    ``id="name"``), so they are off unless asked for.

    A fresh mistune instance is used per call, which keeps the filter safe
    to share between threads.

    Attributes:
        plugins: mistune plugin names to enable.
        highlight_code: Whether fenced code is highlighted with Pygments.
        heading_ids: Whether headings get slug ``id`` attributes.
    """

    def __init__(
        self,
        plugins: list[str] | None = None,
        highlight_code: bool = True,
        heading_ids: bool = False,
    ):
        self.plugins = list(MARKDOWN_PLUGINS if plugins is None else plugins)
        self.highlight_code = highlight_code
        self.heading_ids = heading_ids

    def apply(self, body: str, page: Page) -> str:
        renderer = _HighlightRenderer(self.highlight_code, self.heading_ids)
        markdown = mistune.create_markdown(renderer=renderer, plugins=self.plugins)
        return markdown(body)


class HtmlMinifier:
    """Strips HTML comments and collapses whitespace between tags."""

    def apply(self, body: str, page: Page) -> str:
        return minify_html(body)


class AbsoluteUrlFilter:
    """Rewrites root-relative ``href``/``src``/``action`` URLs.

    Attributes:
        base_url: URL prepended to paths starting with ``/``.
    """

    def __init__(self, base_url: str):
        self.base_url = base_url

    def apply(self, body: str, page: Page) -> str:
        return absolutize_html_urls(body, self.base_url)


class CallableFilter:
    """Adapts a ``(body, page) -> str`` function to the Filter protocol.

    Attributes:
        func: The wrapped function.
        name: Label used in logs, defaults to the function name.
    """

    def __init__(self, func: Callable[[str, Page], str], name: str | None = None):
        self.func = func
        self.name = name or getattr(func, "__name__", "callable")

    def apply(self, body: str, page: Page) -> str:
        return self.func(body, page)

    def __repr__(self) -> str:
        return f"CallableFilter({self.name})"
