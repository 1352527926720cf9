"""Page parsing for Folio.

The Parser turns a Page into HTML in a fixed sequence of steps:

1. Load the source of file-backed pages.
2. Extract the front matter block from the body.
3. Run the layout's filters over the body, in registration order.
4. Replace ``{TOKEN}`` placeholders with helper-supplied text.
5. Wrap the final text in a ParseResult.

The Parser holds no per-render state, so one instance can serve many
concurrent renders sharing the same (frozen) Layout.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from .content import Page
from .helpers import NameHelper
from .layout import Layout
from .protocols import Filter, Helper

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"\{([A-Z_]+)\}")

EMPTY_LAYOUT = Layout().freeze()


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing a single page.

    Attributes:
        html: Final rendered output.
        name: Page name at the time of rendering.
        front_matter: Front matter extracted from the page.
    """

    html: str
    name: str | None = None
    front_matter: Mapping[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.html


class Parser:
    """Renders pages through a layout's filters and helpers.

    Attributes:
        layout: Default layout, used when ``parse_page`` gets none.
    """

    def __init__(self, layout: Layout | None = None):
        """Initialize the parser.

        Args:
            layout: Optional default layout. Without one, pages are
                rendered with no filters and only the implicit NAME helper.
        """
        self.layout = layout
        self._name_helper = NameHelper()

    def parse_page(self, page: Page, layout: Layout | None = None) -> ParseResult:
        """Render a page to HTML.

        Args:
            page: Page to render. Its front matter is extracted in place.
            layout: Layout for this call, overriding the parser default.

        Returns:
            ParseResult holding the rendered HTML.

        Raises:
            SourceNotFoundError: If a file-backed page cannot be read.
            FrontMatterSyntaxError: If the page's front matter is malformed.
        """
        if layout is None:
            layout = self.layout if self.layout is not None else EMPTY_LAYOUT
        layout.freeze()

        page.load()
        page.extract_front_matter()

        body = self._apply_filters(page.body, page, layout.filters)
        html = self._substitute(body, page, layout.helpers)
        return ParseResult(
            html=html,
            name=page.name,
            front_matter=MappingProxyType(dict(page.front_matter)),
        )

    def parse_string(
        self,
        text: str,
        name: str | None = None,
        layout: Layout | None = None,
    ) -> ParseResult:
        """Render literal text as a page."""
        return self.parse_page(Page.from_string(text, name=name), layout)

    def _apply_filters(self, body: str, page: Page, filters: Sequence[Filter]) -> str:
        for item in filters:
            logger.debug("Applying %r to %r", item, page)
            body = item.apply(body, page)
        return body

    def _substitute(self, body: str, page: Page, helpers: Sequence[Helper]) -> str:
        """Replace each ``{TOKEN}`` once, left to right.

        Replacement text is never rescanned, so a helper returning
        ``{NAME}`` puts that literal text in the output.
        """
        chain = (*helpers, self._name_helper)

        def repl(match: re.Match) -> str:
            token = match.group(1)
            for helper in chain:
                if not helper.can_resolve(token):
                    continue
                value = helper.resolve(token, page)
                if value is not None:
                    return value
            logger.debug("Leaving unresolved placeholder %s in %r", match.group(0), page)
            return match.group(0)

        return TOKEN_RE.sub(repl, body)
