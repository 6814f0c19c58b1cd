# loader.py
import asyncio
import os

from config import GeneratorConfig
from extractor import ExtractionResult, extract_documents


class DocumentLoadError(RuntimeError):
    """The source tree could not be scanned at all."""


def load_documents_sync(config: GeneratorConfig) -> ExtractionResult:
    """Scan the configured source root and parse every GraphQL definition."""
    if not os.path.exists(config.source_root):
        raise DocumentLoadError(
            f"Source path '{config.source_root}' does not exist. "
            "Set GQL_SOURCE_ROOT or pass --path."
        )
    try:
        return extract_documents(
            config.source_root,
            extensions=config.extensions,
            exclude_dirs=config.exclude_dirs,
            exclude_files=config.exclude_files,
        )
    except OSError as e:
        raise DocumentLoadError(
            f"Failed while scanning {config.source_root}: {e}"
        ) from e


async def load_documents(config: GeneratorConfig) -> ExtractionResult:
    """
    Load the full document set without blocking the event loop.

    This is the only suspension point of a run; the caller awaits it once and
    processes the result synchronously.
    """
    return await asyncio.to_thread(load_documents_sync, config)
