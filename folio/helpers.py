"""Built-in helpers for Folio.

Helpers fill ``{TOKEN}`` placeholders left in the rendered body. Each class
here implements the Helper protocol: ``can_resolve`` claims tokens and
``resolve`` supplies their text.

Key classes:
- NameHelper: ``{NAME}`` from the page name. Always consulted last.
- FrontMatterHelper: Any front matter key, spelled in upper case.
- DataHelper: Static token values, typically site-wide data.
- LinkHelper: ``{BASE_URL}`` from the configured base URL.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .content import Page


class NameHelper:
    """Resolves ``{NAME}`` to the page name.

    A page with neither an explicit name nor a ``name`` front matter key
    gets no value, so its ``{NAME}`` token stays literal.
    """

    token = "NAME"

    def can_resolve(self, token: str) -> bool:
        return token == self.token

    def resolve(self, token: str, page: Page) -> str | None:
        return page.name


class FrontMatterHelper:
    """Resolves tokens from the page's own front matter.

    ``{TITLE}`` reads the ``title`` key. Keys containing dashes are reached
    with underscores, so ``{PUBLISHED_AT}`` also matches ``published-at``.
    ``{NAME}`` is left to NameHelper so an explicitly set name still wins
    over the front matter one.
    """

    def can_resolve(self, token: str) -> bool:
        return token != NameHelper.token

    def resolve(self, token: str, page: Page) -> str | None:
        wanted = token.lower()
        for key, value in page.front_matter.items():
            normalized = key.lower().replace("-", "_")
            if normalized == wanted:
                return value
        return None


class DataHelper:
    """Resolves tokens from a static mapping.

    Attributes:
        values: Mapping of token name to replacement text.
    """

    def __init__(self, values: Mapping[str, object]):
        self.values = {str(key).upper(): str(value) for key, value in values.items()}

    def can_resolve(self, token: str) -> bool:
        return token in self.values

    def resolve(self, token: str, page: Page) -> str:
        return self.values[token]


class LinkHelper:
    """Resolves ``{BASE_URL}`` to the site's base URL.

    Attributes:
        base_url: Base URL without a trailing slash.
    """

    token = "BASE_URL"

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def can_resolve(self, token: str) -> bool:
        return token == self.token

    def resolve(self, token: str, page: Page) -> str:
        return self.base_url
