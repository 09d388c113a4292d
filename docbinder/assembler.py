"""Combines grouped documents into a single Markdown source."""

from __future__ import annotations

from typing import Iterable, List

from .models import DirectoryGroup
from .normalizer import ASSEMBLY_HEADING_OFFSET, normalize_headings

SEPARATOR = "\n\n---\n\n"


class DocumentAssembler:
    """Emits a composite document with synthetic group and file headings."""

    def assemble(self, groups: Iterable[DirectoryGroup], title: str) -> str:
        parts: List[str] = [f"# {title}\n\n"]
        for group in groups:
            if not group.is_root:
                parts.append(f"# {group.key}\n\n")
            for document in group.documents:
                parts.append(f"## {document.title}\n\n")
                parts.append(
                    normalize_headings(document.raw_text, heading_offset=ASSEMBLY_HEADING_OFFSET)
                )
                parts.append(SEPARATOR)
        return "".join(parts)


__all__ = ["DocumentAssembler", "SEPARATOR"]
