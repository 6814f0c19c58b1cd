"""
Configuration for the GraphQL query/fragment generator.

Defaults can be overridden through environment variables (a .env file in the
working directory is picked up automatically) and then through CLI flags.
"""

import os
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

SOURCE_ROOT = "app"
ROOT_MARKER = "app/"
GENERATED_QUERIES_FOLDER_PATH = "GraphqlQueries"
GENERATED_QUERIES_FILE_NAME = "generatedQueries.json"
GENERATED_FRAGMENTS_FILE_NAME = "generatedFragments.json"

SOURCE_EXTENSIONS: Tuple[str, ...] = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".py",
    ".graphql",
    ".gql",
)
EXCLUDE_DIRS: Tuple[str, ...] = (
    ".git",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
)
# Test files never contribute operations to the generated collections
EXCLUDE_FILES: Tuple[str, ...] = (
    "*.test.*",
    "*.spec.*",
    "test_*.py",
    "*_test.py",
)


def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for one generator run."""

    source_root: str = SOURCE_ROOT
    root_marker: str = ROOT_MARKER
    output_dir: str = GENERATED_QUERIES_FOLDER_PATH
    queries_file: str = GENERATED_QUERIES_FILE_NAME
    fragments_file: str = GENERATED_FRAGMENTS_FILE_NAME
    extensions: Tuple[str, ...] = SOURCE_EXTENSIONS
    exclude_dirs: Tuple[str, ...] = EXCLUDE_DIRS
    exclude_files: Tuple[str, ...] = EXCLUDE_FILES
    log_statistics: bool = True
    log_full: bool = False
    dry_run: bool = False
    fail_on_duplicates: bool = False

    @property
    def queries_path(self) -> str:
        return os.path.join(self.output_dir, self.queries_file)

    @property
    def fragments_path(self) -> str:
        return os.path.join(self.output_dir, self.fragments_file)

    def with_overrides(self, **overrides) -> "GeneratorConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)


def load_config() -> GeneratorConfig:
    """
    Build the configuration from environment variables.

    Recognized variables: GQL_SOURCE_ROOT, GQL_ROOT_MARKER, GQL_OUTPUT_DIR,
    GQL_QUERIES_FILE, GQL_FRAGMENTS_FILE and GQL_EXCLUDE (comma-separated
    directory patterns added to the default exclusions).
    """
    config = GeneratorConfig()
    extra_excludes = _split_list(os.getenv("GQL_EXCLUDE"))
    return config.with_overrides(
        source_root=os.getenv("GQL_SOURCE_ROOT"),
        root_marker=os.getenv("GQL_ROOT_MARKER"),
        output_dir=os.getenv("GQL_OUTPUT_DIR"),
        queries_file=os.getenv("GQL_QUERIES_FILE"),
        fragments_file=os.getenv("GQL_FRAGMENTS_FILE"),
        exclude_dirs=(
            EXCLUDE_DIRS + tuple(extra_excludes) if extra_excludes else None
        ),
    )
