from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.doc_tree import DocTreeBuilder


@pytest.fixture
def doc_tree(tmp_path: Path) -> DocTreeBuilder:
    """Provide a reusable Markdown tree builder rooted at the pytest tmp_path."""
    return DocTreeBuilder(tmp_path)
