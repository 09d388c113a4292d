"""Error taxonomy surfaced by the docbinder pipeline."""

from __future__ import annotations

from pathlib import Path


class DocBinderError(RuntimeError):
    """Base class for every failure raised by docbinder."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.cause = cause


class InputNotFoundError(DocBinderError):
    """Raised when the supplied input path does not exist."""


class InvalidInputKindError(DocBinderError):
    """Raised when the input is neither a Markdown file nor a directory."""


class EmptyInputError(DocBinderError):
    """Raised when a directory scan finds no Markdown documents."""


class ReadError(DocBinderError):
    """Raised when a selected document cannot be read as text."""


class ExportError(DocBinderError):
    """Base class for failures of the external PDF renderer."""


class ExportUnavailableError(ExportError):
    """Raised when the browser used for export cannot be started."""


class ExportFailureError(ExportError):
    """Raised when the browser started but failed to produce a PDF."""


class WriteError(DocBinderError):
    """Raised when the output artifact cannot be written to disk."""


class ConfigError(DocBinderError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "ConfigError",
    "DocBinderError",
    "EmptyInputError",
    "ExportError",
    "ExportFailureError",
    "ExportUnavailableError",
    "InputNotFoundError",
    "InvalidInputKindError",
    "ReadError",
    "WriteError",
]
