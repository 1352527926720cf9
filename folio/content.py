"""Content model for Folio.

This module holds the Page, the unit of content that the Parser turns into
HTML, together with the loader that reads file-backed pages.

Key classes:
- Page: Raw body text, optional name and the front matter extracted from it.
- SourceKind: Whether a Page was given literal text or a path to load.
- FileSourceLoader: Implementation of the SourceLoader protocol for files.
- SourceNotFoundError: Raised when a file-backed page cannot be read.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from .frontmatter import split_front_matter
from .protocols import SourceLoader

logger = logging.getLogger(__name__)


class SourceNotFoundError(FileNotFoundError):
    """Error raised when a page source cannot be read.

    Attributes:
        path: The path that was requested.
        reason: Underlying error message, if any.
    """

    def __init__(self, path: Path, reason: str | None = None):
        self.path = path
        self.reason = reason
        message = f"Page source not found: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class SourceKind(Enum):
    """How the source given to a Page should be interpreted."""

    STRING = "string"
    FILE = "file"


class FileSourceLoader:
    """Reads page sources from the local filesystem.

    The default ``utf-8-sig`` codec drops a leading byte order mark, so a
    file saved by an editor that writes one renders like the same text
    given as a string.

    Attributes:
        encoding: Text encoding used to decode files.
    """

    def __init__(self, encoding: str = "utf-8-sig"):
        self.encoding = encoding

    def load(self, path: Path) -> str:
        """Read a file and normalize its line endings.

        Args:
            path: Path to the source file.

        Returns:
            The file contents with ``\\r\\n`` converted to ``\\n``.

        Raises:
            SourceNotFoundError: If the file is missing or unreadable.
        """
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceNotFoundError(path, str(exc)) from exc
        return text.replace("\r\n", "\n")


default_source_loader = FileSourceLoader()


class Page:
    """A content unit to be rendered.

    A Page is built once per render, optionally adjusted through the
    ``name`` and ``body`` setters, then handed to the Parser. Front matter
    is not parsed on construction; the Parser calls
    ``extract_front_matter`` so a page can be inspected first.

    Attributes:
        source_kind: Whether the page came from a string or a file.
        path: Source path for file-backed pages, otherwise None.
    """

    def __init__(
        self,
        source: str | Path | None = None,
        kind: SourceKind | None = None,
        name: str | None = None,
        loader: SourceLoader | None = None,
    ):
        """Initialize the page.

        Args:
            source: Literal body text, or a path for file-backed pages.
            kind: Explicit interpretation of ``source``. Defaults to FILE
                for ``Path`` objects and STRING for everything else, so a
                plain ``str`` is body text even when it looks like a path.
                Use ``from_file`` or ``kind=SourceKind.FILE`` to load one.
            name: Optional display name.
            loader: Loader used for file-backed pages.

        Raises:
            SourceNotFoundError: If a file-backed page cannot be read.
        """
        if kind is None:
            kind = SourceKind.FILE if isinstance(source, Path) else SourceKind.STRING

        self.source_kind = kind
        self.path: Path | None = None
        self._name = name
        self._body = ""
        self._front_matter: dict[str, str] = {}
        self._extracted = False
        self._loader = loader or default_source_loader
        self._loaded = True

        if kind is SourceKind.FILE:
            if source is None:
                raise ValueError("A file-backed page needs a source path")
            self.path = Path(source)
            self._loaded = False
            self.load()
        elif source is not None:
            self._body = str(source)

    @classmethod
    def from_string(cls, text: str, name: str | None = None) -> Page:
        """Create a page from literal body text."""
        return cls(text, kind=SourceKind.STRING, name=name)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        name: str | None = None,
        loader: SourceLoader | None = None,
    ) -> Page:
        """Create a page whose body is read from a file."""
        return cls(path, kind=SourceKind.FILE, name=name, loader=loader)

    @property
    def name(self) -> str | None:
        """Explicit name, else the front matter ``name`` once extracted."""
        if self._name is not None:
            return self._name
        return self._front_matter.get("name")

    @name.setter
    def name(self, value: str | None) -> None:
        self._name = value

    @property
    def body(self) -> str:
        return self._body

    @body.setter
    def body(self, value: str) -> None:
        # A new body is a new source: its front matter has not been read yet.
        self._body = value
        self._front_matter = {}
        self._extracted = False
        self._loaded = True

    @property
    def front_matter(self) -> Mapping[str, str]:
        """Read-only view of the extracted front matter."""
        return MappingProxyType(self._front_matter)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def extracted(self) -> bool:
        return self._extracted

    def load(self) -> None:
        """Read the source of a file-backed page if not done yet.

        Raises:
            SourceNotFoundError: If the file cannot be read.
        """
        if self._loaded or self.path is None:
            return
        self._body = self._loader.load(self.path)
        self._loaded = True
        logger.debug("Loaded page source %s", self.path)

    def extract_front_matter(self) -> Mapping[str, str]:
        """Move the front matter block out of the body.

        Runs at most once per body; later calls return the stored result.
        On failure the page is left exactly as it was.

        Returns:
            Read-only view of the extracted front matter.

        Raises:
            FrontMatterSyntaxError: If the front matter block is malformed.
        """
        if not self._extracted:
            front_matter, body = split_front_matter(self._body)
            self._front_matter = front_matter
            self._body = body
            self._extracted = True
            if front_matter:
                logger.debug(
                    "Extracted front matter keys %s from %s",
                    sorted(front_matter),
                    self,
                )
        return self.front_matter

    def __repr__(self) -> str:
        if self.path is not None:
            return f"Page(path={str(self.path)!r})"
        return f"Page(name={self.name!r})"
