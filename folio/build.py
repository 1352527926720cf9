"""Site building for Folio.

This module is the thin orchestration around the Parser: it loads the
project configuration, builds one shared Layout from it, renders every
Markdown page under the content directory and writes the HTML out.

Key functions:
- load_config: Loads site configuration from folio.yaml.
- build_layout: Builds the frozen Layout described by a configuration.
- plan_outputs: Maps page sources to output files, rejecting collisions.
- build_site: Renders and writes the whole site.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Any

import yaml

from .content import Page, SourceNotFoundError
from .filters import AbsoluteUrlFilter, HtmlMinifier, MarkdownFilter
from .frontmatter import FrontMatterSyntaxError
from .helpers import DataHelper, FrontMatterHelper, LinkHelper
from .layout import Layout
from .parser import ParseResult, Parser
from .utils import ensure_clean_dir, is_internal_path, is_markdown, titleize

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "folio.yaml"

DEFAULT_CONFIG = {
    "content_dir": "content",
    "output_dir": "output",
    "base_url": "",
    "markdown": True,
    "minify": False,
    "workers": 4,
    "data": {},
}


class ConfigError(ValueError):
    """Error raised when folio.yaml cannot be used.

    Attributes:
        path: The configuration file that was read.
        reason: What is wrong with it.
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration in {path}: {reason}")


class BuildError(Exception):
    """A page of the site could not be built.

    Attributes:
        source_path: Page source the failure belongs to.
        message: Human-readable error message.
        original_error: Exception raised while rendering the page, if any.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        super().__init__(f"{source_path}: {message}")
        self.source_path = source_path
        self.message = message
        self.original_error = original_error

    @classmethod
    def from_exception(cls, source_path: Path, exc: Exception) -> BuildError:
        """Wrap a rendering failure, describing it for the build report."""
        if isinstance(exc, FrontMatterSyntaxError):
            message = f"Front matter syntax error on line {exc.line}: {exc.reason}"
        elif isinstance(exc, SourceNotFoundError):
            message = f"Source not found: {exc.reason or exc.path}"
        else:
            message = f"{type(exc).__name__}: {exc}"
        return cls(source_path, message, exc)


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        pages: Pages that were rendered, in source order.
        output_dir: Directory where the site was built.
        written: Paths of the HTML files written.
    """

    pages: list[Page]
    output_dir: Path
    written: list[Path] = field(default_factory=list)


def _check_workers(config_path: Path, value: Any) -> int:
    if value is None:
        return DEFAULT_CONFIG["workers"]
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(config_path, f"'workers' must be a positive integer, got {value!r}")
    return value


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from folio.yaml.

    Settings in the file override ``DEFAULT_CONFIG`` key by key. An empty
    or missing file gives the defaults.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping, or
            holds a setting of the wrong type.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return config

    try:
        loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(config_path, f"not valid YAML ({exc})") from exc
    if loaded is None:
        return config
    if not isinstance(loaded, dict):
        raise ConfigError(config_path, "expected a mapping of settings")

    config.update(loaded)
    config["workers"] = _check_workers(config_path, config.get("workers"))
    if not isinstance(config.get("data") or {}, dict):
        raise ConfigError(config_path, "'data' must be a mapping")
    logger.debug("Loaded configuration from %s", config_path)
    return config


def build_layout(config: dict[str, Any]) -> Layout:
    """Build the frozen layout for a site configuration.

    Filters run as Markdown, URL absolutizing, then minifying. Helpers are
    consulted as front matter, site data, then base URL.

    Args:
        config: Configuration as returned by ``load_config``.

    Returns:
        A frozen Layout shared by every page of the build.
    """
    layout = Layout()
    base_url = str(config.get("base_url") or "")

    if config.get("markdown", True):
        layout.add_filter(MarkdownFilter())
    if base_url:
        layout.add_filter(AbsoluteUrlFilter(base_url))
    if config.get("minify"):
        layout.add_filter(HtmlMinifier())

    layout.add_helper(FrontMatterHelper())
    data = config.get("data") or {}
    if isinstance(data, dict) and data:
        layout.add_helper(DataHelper(data))
    layout.add_helper(LinkHelper(base_url))
    return layout.freeze()


def iter_content_files(content_dir: Path) -> list[Path]:
    """List the Markdown pages of a site, in sorted order.

    Files under a directory starting with ``_``, or themselves starting
    with ``_``, are skipped.

    Args:
        content_dir: Directory holding the site's Markdown sources.

    Returns:
        Sorted list of page source paths.
    """
    files: list[Path] = []
    for path in sorted(content_dir.rglob("*")):
        if path.is_dir() or not is_markdown(path):
            continue
        if is_internal_path(path.relative_to(content_dir)):
            continue
        files.append(path)
    return files


def output_path_for(content_dir: Path, path: Path, output_dir: Path) -> Path:
    """Map a page source to the HTML file it is written to.

    ``index.md`` becomes ``index.html`` in the same folder, any other page
    becomes ``<stem>/index.html``.

    Args:
        content_dir: Root of the site's sources.
        path: Page source path.
        output_dir: Root of the build output.

    Returns:
        Destination path of the rendered page.
    """
    rel = path.relative_to(content_dir)
    target = output_dir / rel.parent
    if rel.stem != "index":
        target = target / rel.stem
    return target / "index.html"


def _render_file(parser: Parser, path: Path) -> tuple[Page, ParseResult]:
    """Render one source file, wrapping any failure in a BuildError."""
    try:
        page = Page.from_file(path)
        page.extract_front_matter()
        if page.name is None:
            page.name = titleize(path.name)
        result = parser.parse_page(page)
    except Exception as exc:
        raise BuildError.from_exception(path, exc) from exc
    logger.debug("Rendered %s", path)
    return page, result


def plan_outputs(content_dir: Path, files: list[Path], output_dir: Path) -> list[Path]:
    """Map each page source to its output file, rejecting collisions.

    ``about.md`` and ``about/index.md`` would both be written to
    ``about/index.html``; such a pair fails the build instead of one page
    silently replacing the other.

    Args:
        content_dir: Root of the site's sources.
        files: Page sources, as returned by ``iter_content_files``.
        output_dir: Root of the build output.

    Returns:
        Output paths, in the same order as ``files``.

    Raises:
        BuildError: If two sources map to the same output file.
    """
    claimed: dict[Path, Path] = {}
    targets: list[Path] = []
    for path in files:
        target = output_path_for(content_dir, path, output_dir)
        if target in claimed:
            other = claimed[target].relative_to(content_dir).as_posix()
            raise BuildError(
                path,
                f"Output {target.relative_to(output_dir).as_posix()} is also written by {other}",
            )
        claimed[target] = path
        targets.append(target)
    return targets


def build_site(
    project_root: Path,
    output_dir: Path | None = None,
    clean_output: bool = True,
) -> BuildResult:
    """Build the entire static site.

    Pages are rendered in parallel on a thread pool sharing one frozen
    layout, then written in source order. Output collisions are detected
    before the output directory is touched.

    Args:
        project_root: Root directory of the project.
        output_dir: Optional path to write the build output instead of the
            configured ``output_dir``.
        clean_output: Whether to wipe the output directory before building.

    Returns:
        BuildResult with the rendered pages and written files.

    Raises:
        ConfigError: If folio.yaml is invalid.
        FileNotFoundError: If the content directory does not exist.
        BuildError: If any page fails to render, or two pages share an
            output file.
    """
    config = load_config(project_root)
    content_dir = project_root / config.get("content_dir", "content")
    if not content_dir.exists():
        raise FileNotFoundError(f"Expected content directory at {content_dir}")
    output_dir = output_dir or (project_root / config.get("output_dir", "output"))

    files = iter_content_files(content_dir)
    targets = plan_outputs(content_dir, files, output_dir)
    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    parser = Parser(build_layout(config))
    with ThreadPoolExecutor(max_workers=config["workers"]) as pool:
        rendered = list(pool.map(partial(_render_file, parser), files))

    for target, (_, result) in zip(targets, rendered):
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(result.html, encoding="utf-8")

    logger.info("Built %d pages into %s", len(targets), output_dir)
    return BuildResult(
        pages=[page for page, _ in rendered],
        output_dir=output_dir,
        written=targets,
    )
