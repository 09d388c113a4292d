"""PDF export through a headless Chromium subprocess."""

from __future__ import annotations

import os
import shutil
import stat
import subprocess
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .errors import ExportFailureError, ExportUnavailableError, WriteError
from .logging import get_logger

DEFAULT_TIMEOUT = 120.0
BROWSER_CANDIDATES: Sequence[str] = (
    "chromium",
    "chromium-browser",
    "google-chrome",
    "google-chrome-stable",
    "chrome",
)

logger = get_logger("export")


@dataclass(frozen=True)
class PageSetup:
    """Fixed page parameters for the printed document (inches)."""

    paper_width: float = 8.27
    paper_height: float = 11.7
    margin_top: float = 0.4
    margin_bottom: float = 0.4
    margin_left: float = 0.4
    margin_right: float = 0.4
    landscape: bool = False
    print_background: bool = True
    scale: float = 1.0
    display_header_footer: bool = False

    def stylesheet(self) -> str:
        """Return the print CSS that applies this setup inside the browser."""
        width, height = self.paper_width, self.paper_height
        if self.landscape:
            width, height = height, width
        rules = [
            "@page {",
            f"    size: {width}in {height}in;",
            f"    margin: {self.margin_top}in {self.margin_right}in "
            f"{self.margin_bottom}in {self.margin_left}in;",
            "}",
        ]
        if self.print_background:
            rules.append(
                "html, body { -webkit-print-color-adjust: exact; print-color-adjust: exact; }"
            )
        if self.scale != 1.0:
            rules.append(f"html {{ zoom: {self.scale}; }}")
        return "\n".join(rules)


def inject_page_setup(html: str, page_setup: PageSetup) -> str:
    """Insert the print stylesheet just before ``</head>``."""
    block = f"<style>\n{page_setup.stylesheet()}\n</style>\n"
    marker = "</head>"
    if marker in html:
        head, tail = html.split(marker, 1)
        return f"{head}{block}{marker}{tail}"
    return block + html


class ExportSession:
    """A live browser workspace; obtain one from :meth:`ChromiumExporter.session`."""

    def __init__(
        self,
        executable: str,
        workdir: Path,
        *,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        page_setup: PageSetup | None = None,
    ) -> None:
        self.executable = executable
        self.workdir = workdir
        self.timeout = timeout
        self.page_setup = page_setup or PageSetup()

    def export(self, html: str) -> bytes:
        """Print ``html`` to PDF and return the document bytes."""
        page_path = self.workdir / "page.html"
        pdf_path = self.workdir / "output.pdf"
        try:
            page_path.write_text(inject_page_setup(html, self.page_setup), encoding="utf-8")
        except OSError as exc:
            raise ExportFailureError(
                f"Failed to stage HTML content: {page_path}", path=page_path, cause=exc
            ) from exc

        args = self._build_args(page_path, pdf_path)
        logger.debug("Running %s", " ".join(args))
        try:
            subprocess.run(
                args,
                check=True,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except OSError as exc:
            raise ExportUnavailableError(
                f"Failed to start browser '{self.executable}'. "
                "Make sure Chrome or Chromium is installed.",
                path=self.executable,
                cause=exc,
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ExportFailureError(
                f"Page rendering timed out after {self.timeout}s", path=page_path, cause=exc
            ) from exc
        except subprocess.CalledProcessError as exc:
            message = (exc.stderr or "").strip() or (exc.stdout or "").strip() or str(exc.returncode)
            raise ExportFailureError(
                f"Failed to generate PDF: {message}", path=page_path, cause=exc
            ) from exc

        try:
            data = pdf_path.read_bytes()
        except OSError as exc:
            raise ExportFailureError(
                "Browser exited without producing a PDF", path=pdf_path, cause=exc
            ) from exc
        if not data:
            raise ExportFailureError("Browser produced an empty PDF", path=pdf_path)
        return data

    def _build_args(self, page_path: Path, pdf_path: Path) -> List[str]:
        args = [
            self.executable,
            "--headless",
            "--disable-gpu",
            "--no-first-run",
            "--no-default-browser-check",
            f"--user-data-dir={self.workdir / 'profile'}",
            f"--print-to-pdf={pdf_path}",
        ]
        if not self.page_setup.display_header_footer:
            args.extend(["--no-pdf-header-footer", "--print-to-pdf-no-header"])
        args.append(page_path.as_uri())
        return args


class ChromiumExporter:
    """Hands rendered HTML to a headless Chromium for paginated output."""

    def __init__(
        self,
        *,
        executable: str | None = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        page_setup: PageSetup | None = None,
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self.page_setup = page_setup or PageSetup()

    def resolve_executable(self) -> str:
        if self.executable:
            candidate = Path(self.executable).expanduser()
            if candidate.is_file():
                return str(candidate)
            found = shutil.which(self.executable)
            if found:
                return found
            raise ExportUnavailableError(
                f"Browser executable not found: {self.executable}", path=self.executable
            )
        for name in BROWSER_CANDIDATES:
            found = shutil.which(name)
            if found:
                return found
        raise ExportUnavailableError(
            "Failed to start Chrome. Make sure Chrome or Chromium is installed "
            f"(looked for: {', '.join(BROWSER_CANDIDATES)})."
        )

    @contextmanager
    def session(self) -> Iterator[ExportSession]:
        """Acquire a browser workspace and release it on every exit path."""
        executable = self.resolve_executable()
        workdir = Path(tempfile.mkdtemp(prefix="docbinder-"))
        logger.debug("Browser session started with %s in %s", executable, workdir)
        try:
            yield ExportSession(
                executable,
                workdir,
                timeout=self.timeout,
                page_setup=self.page_setup,
            )
        finally:
            shutil.rmtree(workdir, ignore_errors=True)
            logger.debug("Browser session released")

    def export(self, html: str) -> bytes:
        with self.session() as session:
            return session.export(html)


def _artifact_mode(target: Path) -> int:
    """Keep an existing file's permissions, otherwise apply the process umask."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_artifact(path: Path | str, data: bytes) -> Path:
    """Write ``data`` to ``path`` atomically, overwriting any existing file."""
    target = Path(path).expanduser()
    tmp_name: str | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.chmod(tmp_name, _artifact_mode(target))
        os.replace(tmp_name, target)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteError(f"Failed to write output file: {target}", path=target, cause=exc) from exc
    return target


__all__ = [
    "BROWSER_CANDIDATES",
    "ChromiumExporter",
    "DEFAULT_TIMEOUT",
    "ExportSession",
    "PageSetup",
    "inject_page_setup",
    "write_artifact",
]
