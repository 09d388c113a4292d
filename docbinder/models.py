"""Core data models shared across docbinder components."""

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

ROOT_GROUP = "Root"
UNTITLED = "Untitled"


@dataclass(frozen=True)
class SourceDocument:
    """A Markdown file read from disk during discovery."""

    path: Path
    raw_text: str
    title: str


@dataclass(frozen=True)
class DirectoryGroup:
    """Documents sharing the same parent directory, ordered by title."""

    key: str
    documents: Tuple[SourceDocument, ...]

    @property
    def is_root(self) -> bool:
        return self.key == ROOT_GROUP
