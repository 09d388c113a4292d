"""Bind Markdown files and directory trees into a single styled PDF."""

from .assembler import DocumentAssembler
from .discovery import SourceDiscoverer
from .export import ChromiumExporter, PageSetup
from .normalizer import normalize_headings
from .pipeline import Pipeline
from .renderer import HtmlRenderer

__version__ = "0.1.0"

__all__ = [
    "ChromiumExporter",
    "DocumentAssembler",
    "HtmlRenderer",
    "PageSetup",
    "Pipeline",
    "SourceDiscoverer",
    "__version__",
    "normalize_headings",
]
