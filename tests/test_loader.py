"""Tests for asynchronous document loading."""

import asyncio
from pathlib import Path

import pytest

from config import GeneratorConfig
from loader import DocumentLoadError, load_documents


def test_load_documents(tmp_path: Path) -> None:
    """Verify the awaited load returns parsed documents."""
    (tmp_path / "q.graphql").write_text("query Q { a }\nfragment F on T { b }")
    config = GeneratorConfig(source_root=str(tmp_path))
    result = asyncio.run(load_documents(config))
    assert [d.raw_sdl for d in result.documents] == ["query Q { a }", "fragment F on T { b }"]
    assert result.errors == []


def test_load_documents_missing_root(tmp_path: Path) -> None:
    """Verify a missing source root is a load failure."""
    config = GeneratorConfig(source_root=str(tmp_path / "missing"))
    with pytest.raises(DocumentLoadError):
        asyncio.run(load_documents(config))
