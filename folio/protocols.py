"""Protocol definitions for Folio.

This module defines the interfaces (protocols) that the parsing pipeline
depends on. Filters and helpers are registered on a Layout and driven by
the Parser; neither needs to inherit from anything, any object with the
right methods will do.

These protocols enable:
- Loose coupling between the parser and the transformations it runs
- Easy testing through small ad-hoc implementations
- Extensibility without modifying existing code
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .content import Page


@runtime_checkable
class Filter(Protocol):
    """Protocol for transforming a page body.

    Filters run in the order they were registered on a Layout and each one
    receives the output of the previous one. Implementations must not
    mutate the page and must return the whole transformed text.
    """

    @abstractmethod
    def apply(self, body: str, page: Page) -> str:
        """Transform the current body text.

        Args:
            body: Output of the previous filter (or the page body).
            page: Page being rendered, with front matter already extracted.

        Returns:
            The transformed body text.
        """
        ...


@runtime_checkable
class Helper(Protocol):
    """Protocol for resolving ``{TOKEN}`` placeholders.

    A helper is only asked to resolve tokens it claims through
    ``can_resolve``. The first registered helper that claims a token and
    returns a value wins.
    """

    @abstractmethod
    def can_resolve(self, token: str) -> bool:
        """Check if this helper supplies a value for the token.

        Args:
            token: Placeholder name without braces (e.g. ``NAME``).

        Returns:
            True if ``resolve`` should be called for this token.
        """
        ...

    @abstractmethod
    def resolve(self, token: str, page: Page) -> str | None:
        """Return the replacement text for a token.

        Args:
            token: Placeholder name without braces.
            page: Page being rendered.

        Returns:
            Replacement text, inserted as-is and never rescanned. None
            passes the token on to the next helper.
        """
        ...


@runtime_checkable
class SourceLoader(Protocol):
    """Protocol for reading page sources.

    This keeps the Page independent of any particular filesystem API.
    """

    @abstractmethod
    def load(self, path: Path) -> str:
        """Read the raw text at a path.

        Args:
            path: Location of the source.

        Returns:
            The raw source text.

        Raises:
            SourceNotFoundError: If the source is missing or unreadable.
        """
        ...
