"""Front matter parsing for Folio.

A page may open with a metadata block fenced by ``---`` lines::

    ---
    name: "Hello world!"
    layout: post
    ---
    # {NAME}

Each line between the fences is a ``key: value`` pair. The block is
removed from the body before any filter runs.
"""

from __future__ import annotations

import re

import yaml

FRONTMATTER_DELIM = "---"

FRONTMATTER_LINE_RE = re.compile(r"^(?P<key>[^:#\s][^:]*?)\s*:(?P<value>.*)$")


class FrontMatterSyntaxError(ValueError):
    """Error raised when a front matter block cannot be parsed.

    Attributes:
        line: 1-based line number where the problem was found.
        reason: Human-readable description of the problem.
    """

    def __init__(self, line: int, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Front matter error on line {line}: {reason}")


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == FRONTMATTER_DELIM


def has_front_matter(text: str) -> bool:
    """Check if text opens with a front matter delimiter.

    Args:
        text: Raw page source.

    Returns:
        True if the first line is ``---``.
    """
    first, _, _ = text.partition("\n")
    return _is_delimiter(first)


def _parse_value(value: str, line: int) -> str:
    """Unquote a quoted scalar using YAML rules, keep anything else verbatim."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        try:
            loaded = yaml.safe_load(value)
        except yaml.YAMLError as exc:
            raise FrontMatterSyntaxError(line, f"invalid quoted value {value}") from exc
        return "" if loaded is None else str(loaded)
    return value


def split_front_matter(text: str) -> tuple[dict[str, str], str]:
    """Split a page source into front matter and body.

    If the first line is not a delimiter the whole text is returned as the
    body, untouched. Otherwise every line up to the closing delimiter must
    be blank, a ``#`` comment, or a ``key: value`` pair.

    Args:
        text: Raw page source.

    Returns:
        Tuple of (front matter dict, remaining body).

    Raises:
        FrontMatterSyntaxError: If the closing delimiter is missing or a
            header line is not a ``key: value`` pair.
    """
    if not has_front_matter(text):
        return {}, text

    lines = text.split("\n")
    data: dict[str, str] = {}
    for index in range(1, len(lines)):
        line = lines[index]
        number = index + 1
        if _is_delimiter(line):
            return data, "\n".join(lines[index + 1 :])

        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        match = FRONTMATTER_LINE_RE.match(stripped)
        if not match:
            raise FrontMatterSyntaxError(number, f"expected 'key: value', got {stripped!r}")
        key = match.group("key").strip()
        data[key] = _parse_value(match.group("value").strip(), number)

    raise FrontMatterSyntaxError(1, f"missing closing '{FRONTMATTER_DELIM}' delimiter")
