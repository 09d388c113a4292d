"""Markdown source discovery and grouping."""

from __future__ import annotations

import os
from collections import defaultdict
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Sequence, Tuple

from .errors import EmptyInputError, InputNotFoundError, InvalidInputKindError, ReadError
from .logging import get_logger
from .models import ROOT_GROUP, UNTITLED, DirectoryGroup, SourceDocument

DOCUMENT_SUFFIX = ".md"
GROUP_SEPARATOR = " > "

logger = get_logger("discovery")


def read_document(path: Path) -> str:
    """Read ``path`` as UTF-8 text, raising :class:`ReadError` on failure."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(f"Failed to read file: {path}", path=path, cause=exc) from exc


def document_title(path: Path) -> str:
    return path.stem or UNTITLED


def group_key(relative_parent: Path) -> str:
    """Return the breadcrumb label for a root-relative parent directory."""
    parts = [part for part in relative_parent.parts if part not in ("", ".")]
    if not parts:
        return ROOT_GROUP
    return GROUP_SEPARATOR.join(parts)


def _group_order(key: str) -> Tuple[int, str]:
    # Root documents always lead; the rest follow in code-point order.
    if key == ROOT_GROUP:
        return (0, "")
    return (1, key)


def _is_excluded(rel_path: str, patterns: Sequence[str]) -> bool:
    for raw in patterns:
        pattern = raw.strip().strip("/")
        if not pattern:
            continue
        if fnmatchcase(rel_path, pattern):
            return True
        if "/" not in pattern and any(fnmatchcase(part, pattern) for part in rel_path.split("/")):
            return True
    return False


class SourceDiscoverer:
    """Walks a directory tree and groups Markdown documents by directory.

    Symbolic links are neither followed nor selected, so every document is
    reached through exactly one real path below the root.
    """

    def __init__(self, exclude_paths: Sequence[str] | None = None) -> None:
        self.exclude_paths = list(exclude_paths or [])

    def discover(self, root: Path | str) -> Tuple[DirectoryGroup, ...]:
        """Return the grouped documents below ``root`` in processing order."""
        root_path = Path(root).expanduser()
        if not root_path.exists():
            raise InputNotFoundError(f"Input path does not exist: {root_path}", path=root_path)
        if not root_path.is_dir():
            raise InvalidInputKindError(f"Input path is not a directory: {root_path}", path=root_path)

        grouped: Dict[str, List[SourceDocument]] = defaultdict(list)
        for path in self._iter_documents(root_path):
            document = SourceDocument(
                path=path,
                raw_text=read_document(path),
                title=document_title(path),
            )
            key = group_key(path.parent.relative_to(root_path))
            grouped[key].append(document)
            logger.debug("Selected %s (group %s)", path, key)

        if not grouped:
            raise EmptyInputError(f"No {DOCUMENT_SUFFIX} files found in directory: {root_path}", path=root_path)

        return tuple(
            DirectoryGroup(
                key=key,
                documents=tuple(sorted(grouped[key], key=lambda document: document.title)),
            )
            for key in sorted(grouped, key=_group_order)
        )

    def _iter_documents(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept_dirs = []
            for name in sorted(dirnames):
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if (current_dir / name).is_symlink() or _is_excluded(rel_path, self.exclude_paths):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                path = current_dir / filename
                if path.suffix != DOCUMENT_SUFFIX:
                    continue
                if path.is_symlink() or not path.is_file():
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _is_excluded(rel_path, self.exclude_paths):
                    logger.debug("Excluded %s", rel_path)
                    continue
                yield path


__all__ = [
    "DOCUMENT_SUFFIX",
    "GROUP_SEPARATOR",
    "SourceDiscoverer",
    "document_title",
    "group_key",
    "read_document",
]
