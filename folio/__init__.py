"""Folio static page templating engine.

This package turns a content unit (Markdown text plus optional front
matter) into HTML by running it through a pipeline of pluggable filters and
helpers.

The core is three pieces:
- Page: the content unit, built from a string or a file.
- Layout: the ordered filters and helpers to apply.
- Parser: extracts front matter, runs the filters, fills ``{TOKEN}``
  placeholders and returns a ParseResult.

Example:
    >>> from folio import Layout, MarkdownFilter, Page, Parser
    >>> page = Page.from_string("# {NAME}", name="Hello")
    >>> Parser(Layout().add_filter(MarkdownFilter())).parse_page(page).html
    '<h1>Hello</h1>\\n'
"""

__version__ = "0.1.0"

from .build import BuildError, ConfigError
from .content import FileSourceLoader, Page, SourceKind, SourceNotFoundError
from .filters import AbsoluteUrlFilter, CallableFilter, HtmlMinifier, MarkdownFilter
from .frontmatter import FrontMatterSyntaxError, split_front_matter
from .helpers import DataHelper, FrontMatterHelper, LinkHelper, NameHelper
from .layout import Layout, LayoutFrozenError
from .parser import ParseResult, Parser
from .protocols import Filter, Helper, SourceLoader

__all__ = [
    "__version__",
    "AbsoluteUrlFilter",
    "BuildError",
    "CallableFilter",
    "ConfigError",
    "DataHelper",
    "FileSourceLoader",
    "Filter",
    "FrontMatterHelper",
    "FrontMatterSyntaxError",
    "Helper",
    "HtmlMinifier",
    "Layout",
    "LayoutFrozenError",
    "LinkHelper",
    "MarkdownFilter",
    "NameHelper",
    "Page",
    "ParseResult",
    "Parser",
    "SourceKind",
    "SourceLoader",
    "SourceNotFoundError",
    "split_front_matter",
]
