"""Pipeline orchestration for single-file and directory conversions."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .assembler import DocumentAssembler
from .config import DEFAULT_TITLE
from .discovery import DOCUMENT_SUFFIX, SourceDiscoverer, read_document
from .errors import InputNotFoundError, InvalidInputKindError, WriteError
from .export import ChromiumExporter, write_artifact
from .logging import get_logger
from .renderer import HtmlRenderer


class Pipeline:
    """Coordinates discovery, assembly, rendering and export."""

    def __init__(
        self,
        discoverer: SourceDiscoverer | None = None,
        assembler: DocumentAssembler | None = None,
        exporter: ChromiumExporter | None = None,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        self.discoverer = discoverer or SourceDiscoverer()
        self.assembler = assembler or DocumentAssembler()
        self.exporter = exporter or ChromiumExporter()
        self.templates_dir = templates_dir
        self.logger = get_logger("pipeline")

    def build_markdown(self, input_path: Path | str, *, title: str = DEFAULT_TITLE) -> str:
        """Return the Markdown source that will be rendered for ``input_path``."""
        path = Path(input_path).expanduser()
        if not path.exists():
            raise InputNotFoundError(f"Input path does not exist: {path}", path=path)

        if path.is_file():
            if path.suffix != DOCUMENT_SUFFIX:
                raise InvalidInputKindError(
                    f"File must have {DOCUMENT_SUFFIX} extension: {path}", path=path
                )
            self.logger.info("Reading markdown file: %s", path)
            return read_document(path)

        if path.is_dir():
            self.logger.info("Scanning for markdown files in: %s", path)
            groups = self.discoverer.discover(path)
            total = sum(len(group.documents) for group in groups)
            self.logger.info("Found %d markdown files in %d directories", total, len(groups))
            for group in groups:
                self.logger.info("  %s: %d files", group.key, len(group.documents))
                for document in group.documents:
                    self.logger.debug("    %s", document.title)
            self.logger.info("Combining all files into single document...")
            return self.assembler.assemble(groups, title)

        raise InvalidInputKindError(
            f"Input path is neither file nor directory: {path}", path=path
        )

    def build_html(
        self,
        input_path: Path | str,
        *,
        dark_mode: bool = False,
        title: str = DEFAULT_TITLE,
    ) -> str:
        markdown = self.build_markdown(input_path, title=title)
        self.logger.info("Converting markdown to HTML...")
        renderer = HtmlRenderer(dark_mode=dark_mode, templates_dir=self.templates_dir)
        return renderer.render(markdown)

    def run(
        self,
        input_path: Path | str,
        output_path: Path | str,
        *,
        dark_mode: bool = False,
        title: str = DEFAULT_TITLE,
        html_output: Optional[Path | str] = None,
    ) -> Path:
        """Convert ``input_path`` and write the PDF to ``output_path``."""
        html = self.build_html(input_path, dark_mode=dark_mode, title=title)

        self.logger.info("Starting browser for PDF generation...")
        with self.exporter.session() as session:
            self.logger.info("Generating PDF: %s", output_path)
            pdf_data = session.export(html)

        # Nothing is written until the export has succeeded.
        target = write_artifact(output_path, pdf_data)
        if html_output is not None:
            try:
                html_path = write_artifact(html_output, html.encode("utf-8"))
            except WriteError:
                target.unlink(missing_ok=True)
                raise
            self.logger.info("HTML written to %s", html_path)
        self.logger.info("PDF successfully created: %s", target)
        return target


__all__ = ["Pipeline"]
