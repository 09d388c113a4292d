"""Fence-aware heading depth rewriting for Markdown sources."""

from __future__ import annotations

from typing import List, Optional, Tuple

FENCE_MARKER = "```"

# Nests file headings under the composite title (level 1) and file title (level 2).
ASSEMBLY_HEADING_OFFSET = 2


def normalize_headings(
    text: str,
    *,
    heading_offset: int = 0,
    strip_fenced_content: bool = True,
) -> str:
    """Shift every heading outside fenced code by ``heading_offset`` levels.

    Fence delimiter lines toggle the fence state. With ``strip_fenced_content``
    the delimiters and everything between them are dropped; otherwise they are
    copied through untouched. An offset of zero copies non-fenced lines
    verbatim, which is how single files keep their authored depth.

    The transform is not idempotent: calling it twice with a non-zero offset
    shifts headings twice.
    """
    output: List[str] = []
    in_fence = False
    for line in split_lines(text):
        in_fence, emitted = _step(
            line,
            in_fence,
            heading_offset=heading_offset,
            strip_fenced_content=strip_fenced_content,
        )
        if emitted is not None:
            output.append(emitted)
            output.append("\n")
    return "".join(output)


def _step(
    line: str,
    in_fence: bool,
    *,
    heading_offset: int,
    strip_fenced_content: bool,
) -> Tuple[bool, Optional[str]]:
    stripped = line.strip()
    if stripped.startswith(FENCE_MARKER):
        return not in_fence, None if strip_fenced_content else line
    if in_fence:
        return in_fence, None if strip_fenced_content else line
    if heading_offset and stripped.startswith("#"):
        return in_fence, shift_heading(stripped, heading_offset)
    return in_fence, line


def split_lines(text: str) -> List[str]:
    """Split on line feeds only, dropping one trailing carriage return per line.

    Form feeds, vertical tabs and Unicode line separators stay inside the line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def shift_heading(line: str, offset: int) -> str:
    """Rewrite the leading ``#`` run of ``line`` to ``count + offset`` markers."""
    stripped = line.strip()
    count = len(stripped) - len(stripped.lstrip("#"))
    return "#" * (count + offset) + stripped[count:]


__all__ = [
    "ASSEMBLY_HEADING_OFFSET",
    "FENCE_MARKER",
    "normalize_headings",
    "shift_heading",
    "split_lines",
]
