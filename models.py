"""
Records passed between the extractor, the aggregation pipeline and the writer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from graphql import DocumentNode


@dataclass(frozen=True)
class ParsedDocument:
    """One GraphQL definition plucked from a source file.

    location is the absolute path of the originating file, raw_sdl the
    GraphQL text as written there and document the graphql-core AST.
    """

    location: str
    raw_sdl: str
    document: DocumentNode


@dataclass(frozen=True)
class OperationRecord:
    operation_name: str
    file_name: str
    raw_query: str
    fragment_names: List[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return self.operation_name

    def renamed(self, name: str) -> "OperationRecord":
        return OperationRecord(
            operation_name=name,
            file_name=self.file_name,
            raw_query=self.raw_query,
            fragment_names=list(self.fragment_names),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operationName": self.operation_name,
            "fileName": self.file_name,
            "rawQuery": self.raw_query,
            "fragmentNames": list(self.fragment_names),
        }


@dataclass(frozen=True)
class FragmentRecord:
    name: str
    file_name: str
    raw_query: str

    @property
    def key(self) -> str:
        return self.name

    def renamed(self, name: str) -> "FragmentRecord":
        return FragmentRecord(name=name, file_name=self.file_name, raw_query=self.raw_query)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "fileName": self.file_name,
            "rawQuery": self.raw_query,
        }


@dataclass(frozen=True)
class SkippedDocument:
    """A document the pipeline could not turn into a record."""

    file_name: str
    reason: str


@dataclass
class PipelineResult:
    operations: List[OperationRecord] = field(default_factory=list)
    fragments: List[FragmentRecord] = field(default_factory=list)
    duplicate_operations: Dict[str, OperationRecord] = field(default_factory=dict)
    duplicate_fragments: Dict[str, FragmentRecord] = field(default_factory=dict)
    unnamed: List[SkippedDocument] = field(default_factory=list)
    failures: List[SkippedDocument] = field(default_factory=list)

    @property
    def duplicate_operation_names(self) -> Set[str]:
        return set(self.duplicate_operations)

    @property
    def duplicate_fragment_names(self) -> Set[str]:
        return set(self.duplicate_fragments)

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicate_operations or self.duplicate_fragments)
