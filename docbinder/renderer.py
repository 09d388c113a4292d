"""Markdown to standalone HTML rendering."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader
from markdown_it import MarkdownIt
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from .normalizer import normalize_headings

PAGE_TEMPLATE = "page.html.j2"
PAGE_TITLE = "Markdown to PDF"


@dataclass(frozen=True)
class Theme:
    """Colour palette applied to the page stylesheet."""

    background: str
    foreground: str
    code_background: str
    header_background: str


LIGHT_THEME = Theme(
    background="white",
    foreground="black",
    code_background="#f5f5f5",
    header_background="#f9f9f9",
)

DARK_THEME = Theme(
    background="#1a1a1a",
    foreground="#e0e0e0",
    code_background="#2d2d2d",
    header_background="#3a3a3a",
)


def select_theme(dark_mode: bool) -> Theme:
    return DARK_THEME if dark_mode else LIGHT_THEME


def create_parser() -> MarkdownIt:
    """Return a CommonMark parser with strikethrough, tables, footnotes and task lists."""
    parser = MarkdownIt("commonmark").enable(["table", "strikethrough"])
    parser.use(footnote_plugin)
    parser.use(tasklists_plugin)
    return parser


class HtmlRenderer:
    """Converts Markdown text into a complete, self-contained HTML page."""

    def __init__(self, *, dark_mode: bool = False, templates_dir: Path | None = None) -> None:
        self.theme = select_theme(dark_mode)
        self.templates_dir = templates_dir
        self._parser = create_parser()
        self._env = self._create_env(templates_dir)

    def render_fragment(self, markdown: str) -> str:
        """Strip fenced code and convert ``markdown`` to an HTML fragment."""
        return self._parser.render(normalize_headings(markdown))

    def render(self, markdown: str) -> str:
        template = self._env.get_template(PAGE_TEMPLATE)
        return template.render(
            title=PAGE_TITLE,
            theme=asdict(self.theme),
            content=self.render_fragment(markdown),
        )

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


__all__ = [
    "DARK_THEME",
    "HtmlRenderer",
    "LIGHT_THEME",
    "PAGE_TITLE",
    "Theme",
    "create_parser",
    "select_theme",
]
