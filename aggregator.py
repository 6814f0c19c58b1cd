"""
Aggregation pass: turns parsed GraphQL documents into the operation and
fragment collections the runtime loads.

For each document, in input order:
- derive the display file name relative to the project root marker,
- normalize the raw text,
- classify the first operation-or-fragment definition,
- for operations, collect the fragment names spread anywhere in the
  selection tree,
- insert the record into a fresh Registry (first definition of a name wins).

The pass is synchronous and has no side effects; every skipped document is
returned in the result for the caller to report.
"""

from typing import Iterable, Optional, Union

from graphql import FragmentDefinitionNode, OperationDefinitionNode

from config import ROOT_MARKER
from models import (
    FragmentRecord,
    OperationRecord,
    ParsedDocument,
    PipelineResult,
    SkippedDocument,
)
from normalizer import normalize
from registry import Registry
from walker import collect_fragment_names

DefinitionNode = Union[FragmentDefinitionNode, OperationDefinitionNode]


def display_file_name(location: str, root_marker: str = ROOT_MARKER) -> str:
    """
    Shorten an absolute path to start at the project root marker, e.g.
    /home/me/web/app/users/queries.ts -> app/users/queries.ts.

    The marker only matches at the start of a path segment, so
    /home/webapp/app/x.ts gives app/x.ts. Paths are reported with forward
    slashes. A path without the marker is returned whole.
    """
    path = location.replace("\\", "/")
    if not root_marker:
        return path
    if path.startswith(root_marker) or root_marker.startswith("/"):
        index = path.find(root_marker)
    else:
        index = path.find("/" + root_marker)
        if index != -1:
            index += 1
    if index == -1:
        return path
    return path[index:]


def first_definition(document: ParsedDocument) -> Optional[DefinitionNode]:
    """The first fragment or operation definition in the document, if any."""
    for definition in document.document.definitions:
        if isinstance(definition, (FragmentDefinitionNode, OperationDefinitionNode)):
            return definition
    return None


def build_fragment_record(
    definition: FragmentDefinitionNode, file_name: str, raw_query: str
) -> Optional[FragmentRecord]:
    name = definition.name.value if definition.name else None
    if not name:
        return None
    return FragmentRecord(name=name, file_name=file_name, raw_query=raw_query)


def build_operation_record(
    definition: OperationDefinitionNode, file_name: str, raw_query: str
) -> Optional[OperationRecord]:
    fragment_names = []
    if definition.selection_set and definition.selection_set.selections:
        fragment_names = collect_fragment_names(definition.selection_set.selections)
    name = definition.name.value if definition.name else None
    if not name:
        return None
    return OperationRecord(
        operation_name=name,
        file_name=file_name,
        raw_query=raw_query,
        fragment_names=fragment_names,
    )


def run(
    documents: Iterable[ParsedDocument], root_marker: str = ROOT_MARKER
) -> PipelineResult:
    """Process documents in order and return the collected records."""
    registry = Registry()
    result = PipelineResult()

    for document in documents:
        file_name = display_file_name(document.location, root_marker)

        normalized = normalize(document.raw_sdl)
        if not normalized.ok:
            result.failures.append(SkippedDocument(file_name, normalized.error))
            continue
        raw_query = normalized.value

        definition = first_definition(document)
        if isinstance(definition, FragmentDefinitionNode):
            fragment = build_fragment_record(definition, file_name, raw_query)
            if fragment is None:
                result.failures.append(
                    SkippedDocument(file_name, "unable to get fragment name")
                )
                continue
            registry.insert_fragment(fragment)
        elif isinstance(definition, OperationDefinitionNode):
            operation = build_operation_record(definition, file_name, raw_query)
            if operation is None:
                result.unnamed.append(
                    SkippedDocument(file_name, "Cannot get operation name")
                )
                continue
            registry.insert_operation(operation)

    result.operations, result.fragments = registry.snapshot()
    result.duplicate_operations = registry.duplicate_operations
    result.duplicate_fragments = registry.duplicate_fragments
    return result
