"""
Extractor for GraphQL operations and fragments embedded in a source tree.

This module recursively scans a code base and plucks every GraphQL definition
out of it, parsed with graphql-core, ready for the aggregation pass:
- Standalone .graphql and .gql files (entire file is parsed as GraphQL)
- gql`...` and graphql`...` tagged template literals in .ts/.tsx/.js/.jsx files
- gql(...) / graphql(...) calls in .py files (any quote style)
- Any .py string constant that starts with query, mutation, subscription or
  fragment and has balanced braces

Each definition becomes its own ParsedDocument, with its raw text sliced out of
the enclosing string by the parser's location info.

Edge Cases Handled:
- Template interpolations (${SomeFragment}) are dropped before parsing; the
  spread inside the template still names the fragment
- Several definitions in one string or file are split apart
- Test files (*.test.ts, test_*.py, ...) and vendored directories are skipped
- Unreadable files and explicit GraphQL that fails to parse are reported as
  ExtractionError entries instead of aborting the scan, and so is GraphQL nested too
  deeply for the recursive parser (loose strings included)
- Loose .py strings that merely look like GraphQL and fail to parse are
  dropped without a report (docstrings, log messages, ...)
- Directory entries are visited in sorted order so repeated runs produce the
  same document order

REGEX PATTERNS EXPLANATION:
1. TAGGED_TEMPLATE_REGEX: r'\\b(?:gql|graphql)\\s*`([\\s\\S]*?)`'
   - \\b(?:gql|graphql): the tag name as a whole word
   - \\s*`: optional whitespace and the opening backtick
   - ([\\s\\S]*?): the template body including newlines (non-greedy)
   - `: the closing backtick

2. INTERPOLATION_REGEX: r'\\$\\{[^}]*\\}'
   - Matches ${...} expressions inside a template literal
"""

import ast
import fnmatch
import os
import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from graphql import DocumentNode, GraphQLError, parse

from config import EXCLUDE_DIRS, EXCLUDE_FILES, SOURCE_EXTENSIONS
from models import ParsedDocument

GRAPHQL_EXTENSIONS = (".graphql", ".gql")
SCRIPT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")
GRAPHQL_KEYWORDS = ("query", "mutation", "subscription", "fragment")
GQL_CALL_NAMES = {"gql", "graphql"}

TAGGED_TEMPLATE_REGEX = re.compile(r"\b(?:gql|graphql)\s*`([\s\S]*?)`")
INTERPOLATION_REGEX = re.compile(r"\$\{[^}]*\}")


@dataclass(frozen=True)
class GraphQLCandidate:
    """A string that may hold GraphQL, and whether it was marked as such."""

    text: str
    explicit: bool


@dataclass(frozen=True)
class ExtractionError:
    location: str
    message: str


@dataclass
class ExtractionResult:
    documents: List[ParsedDocument] = field(default_factory=list)
    errors: List[ExtractionError] = field(default_factory=list)


# ----------------------------
# File discovery
# ----------------------------
def is_excluded_file(filename: str, exclude_files: Sequence[str]) -> bool:
    return any(fnmatch.fnmatch(filename, pattern) for pattern in exclude_files)


def find_source_files(
    target_path: str,
    extensions: Sequence[str] = SOURCE_EXTENSIONS,
    exclude_dirs: Sequence[str] = EXCLUDE_DIRS,
    exclude_files: Sequence[str] = EXCLUDE_FILES,
) -> List[str]:
    """
    Find all source files that may contain GraphQL, excluding test files.

    Args:
        target_path: Path to search (file or directory)
        extensions: File extensions to consider
        exclude_dirs: Directory name patterns to skip (e.g., ["node_modules", ".git"])
        exclude_files: File name patterns to skip (e.g., ["*.test.*"])

    Returns:
        Absolute file paths, in a stable sorted order
    """
    files: List[str] = []
    extensions = tuple(extensions)

    if os.path.isfile(target_path):
        filename = os.path.basename(target_path)
        if filename.endswith(extensions) and not is_excluded_file(
            filename, exclude_files
        ):
            files.append(os.path.abspath(target_path))
        return files

    for root, dirs, filenames in os.walk(target_path):
        dirs[:] = sorted(
            d
            for d in dirs
            if not any(fnmatch.fnmatch(d, pattern) for pattern in exclude_dirs)
        )
        for filename in sorted(filenames):
            if filename.endswith(extensions) and not is_excluded_file(
                filename, exclude_files
            ):
                files.append(os.path.abspath(os.path.join(root, filename)))
    return files


# ----------------------------
# GraphQL plucking per file type
# ----------------------------
def looks_like_graphql(value: str) -> bool:
    stripped = value.strip()
    return (
        stripped.startswith(GRAPHQL_KEYWORDS)
        and stripped.count("{") > 0
        and stripped.count("{") == stripped.count("}")
    )


def extract_template_literals(source: str) -> List[GraphQLCandidate]:
    candidates = []
    for match in TAGGED_TEMPLATE_REGEX.finditer(source):
        body = INTERPOLATION_REGEX.sub("", match.group(1))
        if body.strip():
            candidates.append(GraphQLCandidate(body, explicit=True))
    return candidates


def _call_name(node: ast.Call) -> Optional[str]:
    if isinstance(node.func, ast.Name):
        return node.func.id
    if isinstance(node.func, ast.Attribute):
        return node.func.attr
    return None


def _string_value(node: ast.AST) -> Optional[str]:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def extract_python_strings(source: str) -> List[GraphQLCandidate]:
    """
    Collect GraphQL strings from Python source.

    String arguments of gql(...)/graphql(...) calls are explicit GraphQL. Any
    other string constant is a loose candidate when it looks like a complete
    GraphQL definition.
    """
    tree = ast.parse(source)
    explicit_nodes = set()
    candidates: List[Tuple[int, int, GraphQLCandidate]] = []

    for node in ast.walk(tree):
        if isinstance(node, ast.Call) and _call_name(node) in GQL_CALL_NAMES:
            for arg in node.args[:1]:
                value = _string_value(arg)
                if value is not None and value.strip():
                    explicit_nodes.add(id(arg))
                    candidates.append(
                        (arg.lineno, arg.col_offset, GraphQLCandidate(value, True))
                    )

    for node in ast.walk(tree):
        if id(node) in explicit_nodes:
            continue
        value = _string_value(node)
        if value is not None and looks_like_graphql(value):
            candidates.append(
                (
                    getattr(node, "lineno", 0),
                    getattr(node, "col_offset", 0),
                    GraphQLCandidate(value, False),
                )
            )

    # ast.walk is breadth-first; report in source order
    candidates.sort(key=lambda item: (item[0], item[1]))
    return [candidate for _, _, candidate in candidates]


def extract_graphql_strings(path: str, source: str) -> List[GraphQLCandidate]:
    """Pick the plucking strategy from the file extension."""
    if path.endswith(GRAPHQL_EXTENSIONS):
        return [GraphQLCandidate(source, explicit=True)] if source.strip() else []
    if path.endswith(SCRIPT_EXTENSIONS):
        return extract_template_literals(source)
    if path.endswith(".py"):
        return extract_python_strings(source)
    return []


# ----------------------------
# Splitting a GraphQL string into one document per definition
# ----------------------------
def split_definitions(location: str, text: str) -> List[ParsedDocument]:
    """
    Parse text and return one ParsedDocument per top-level definition.

    Raises GraphQLError when text is not valid GraphQL.
    """
    ast_doc = parse(text, no_location=False)
    documents = []
    for defn in ast_doc.definitions:
        if defn.loc:
            raw = text[defn.loc.start : defn.loc.end]
        else:
            raw = text
        documents.append(
            ParsedDocument(
                location=location,
                raw_sdl=raw,
                document=DocumentNode(definitions=(defn,)),
            )
        )
    return documents


def extract_file(path: str, source: str) -> ExtractionResult:
    result = ExtractionResult()
    try:
        candidates = extract_graphql_strings(path, source)
    except (SyntaxError, ValueError, RecursionError) as e:
        result.errors.append(ExtractionError(path, f"cannot parse source file: {e}"))
        return result

    for candidate in candidates:
        try:
            result.documents.extend(split_definitions(path, candidate.text))
        except GraphQLError as e:
            if candidate.explicit:
                result.errors.append(ExtractionError(path, e.message))
        except RecursionError:
            result.errors.append(
                ExtractionError(path, "GraphQL nested too deeply to parse")
            )
    return result


def read_source(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def iter_extraction(paths: Iterable[str]) -> Iterator[ExtractionResult]:
    for path in paths:
        try:
            source = read_source(path)
        except (OSError, UnicodeDecodeError) as e:
            yield ExtractionResult(errors=[ExtractionError(path, f"unreadable file: {e}")])
            continue
        yield extract_file(path, source)


def extract_documents(
    target_path: str,
    extensions: Sequence[str] = SOURCE_EXTENSIONS,
    exclude_dirs: Sequence[str] = EXCLUDE_DIRS,
    exclude_files: Sequence[str] = EXCLUDE_FILES,
) -> ExtractionResult:
    """
    Scan target_path (file or directory) and return every GraphQL definition
    found, in file order then source order.
    """
    paths = find_source_files(target_path, extensions, exclude_dirs, exclude_files)
    combined = ExtractionResult()
    for result in iter_extraction(paths):
        combined.documents.extend(result.documents)
        combined.errors.extend(result.errors)
    return combined
