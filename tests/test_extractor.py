"""Tests for source discovery and GraphQL plucking."""

import os
from pathlib import Path

import pytest
from graphql import FragmentDefinitionNode, GraphQLError, OperationDefinitionNode

from extractor import (
    extract_documents,
    extract_graphql_strings,
    find_source_files,
    split_definitions,
)

TS_SOURCE = '''import { gql } from "@apollo/client";
import { USER_FIELDS } from "./fragments";

export const GET_USER = gql`
  ${USER_FIELDS}
  query GetUser($id: ID!) {
    user(id: $id) {
      ...UserFields
    }
  }
`;
'''

PY_SOURCE = '''"""Query the user service."""
from gql import gql

GET_ORDER = gql("""
query GetOrder {
  order { id }
}
""")

RAW_FRAGMENT = "fragment OrderFields on Order { id total }"
MESSAGE = "query failed: {error}"
'''


def test_find_source_files_skips_tests_and_vendored(tmp_path: Path) -> None:
    """Verify test files and excluded directories are skipped."""
    (tmp_path / "b.ts").write_text("")
    (tmp_path / "a.tsx").write_text("")
    (tmp_path / "a.test.ts").write_text("")
    (tmp_path / "test_a.py").write_text("")
    (tmp_path / "notes.md").write_text("")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "x.ts").write_text("")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.graphql").write_text("")

    files = find_source_files(str(tmp_path))
    assert [Path(f).relative_to(tmp_path).as_posix() for f in files] == [
        "a.tsx",
        "b.ts",
        "sub/c.graphql",
    ]
    assert all(Path(f).is_absolute() for f in files)


def test_find_source_files_single_file(tmp_path: Path) -> None:
    """Verify a single file path is accepted."""
    target = tmp_path / "q.graphql"
    target.write_text("query Q { a }")
    assert find_source_files(str(target)) == [os.path.abspath(target)]


def test_template_literals_drop_interpolations() -> None:
    """Verify gql templates are plucked without ${...} expressions."""
    candidates = extract_graphql_strings("app/users.ts", TS_SOURCE)
    assert len(candidates) == 1
    assert "${" not in candidates[0].text
    assert "query GetUser" in candidates[0].text
    assert candidates[0].explicit


def test_python_strings() -> None:
    """Verify gql() calls and GraphQL-looking constants are plucked."""
    candidates = extract_graphql_strings("app/orders.py", PY_SOURCE)
    texts = [c.text.strip() for c in candidates]
    assert texts[0].startswith("query GetOrder")
    assert candidates[0].explicit
    assert texts[1] == "fragment OrderFields on Order { id total }"
    assert not candidates[1].explicit
    # Loose look-alikes are candidates; they are dropped when they fail to parse
    assert texts[2] == "query failed: {error}"
    assert len(candidates) == 3


def test_split_definitions_one_document_each() -> None:
    """Verify each definition becomes its own document."""
    text = "fragment F on User { id }\nquery Q { user { ...F } }"
    documents = split_definitions("/w/app/q.graphql", text)
    assert [d.raw_sdl for d in documents] == [
        "fragment F on User { id }",
        "query Q { user { ...F } }",
    ]
    assert isinstance(documents[0].document.definitions[0], FragmentDefinitionNode)
    assert isinstance(documents[1].document.definitions[0], OperationDefinitionNode)
    assert len(documents[1].document.definitions) == 1


def test_split_definitions_invalid() -> None:
    """Verify invalid GraphQL raises a GraphQLError."""
    with pytest.raises(GraphQLError):
        split_definitions("/w/app/q.graphql", "query {")


def test_extract_documents_tree(tmp_path: Path) -> None:
    """Verify a mixed tree yields documents in file then source order."""
    app = tmp_path / "app"
    app.mkdir()
    (app / "fragments.graphql").write_text("fragment UserFields on User { id name }\n")
    (app / "users.ts").write_text(TS_SOURCE)
    (app / "orders.py").write_text(PY_SOURCE)
    (app / "users.test.ts").write_text("const q = gql`query Ignored { a }`;")
    (app / "broken.gql").write_text("query Broken {")

    result = extract_documents(str(app))
    names = [d.document.definitions[0].name.value for d in result.documents]
    assert names == ["UserFields", "GetOrder", "OrderFields", "GetUser"]
    assert len(result.errors) == 1
    assert result.errors[0].location.endswith("broken.gql")


def test_extract_documents_bad_python(tmp_path: Path) -> None:
    """Verify a Python file that cannot be parsed is reported."""
    (tmp_path / "bad.py").write_text("def broken(:\n")
    result = extract_documents(str(tmp_path))
    assert result.documents == []
    assert "cannot parse source file" in result.errors[0].message


def test_deeply_nested_graphql_does_not_stop_scan(tmp_path: Path) -> None:
    """Verify a file too deep to parse is reported and the rest still load."""
    (tmp_path / "a.graphql").write_text("query GetUser { user { id } }")
    (tmp_path / "deep.graphql").write_text(
        "query Deep " + "{ a " * 3000 + "}" * 3000
    )

    result = extract_documents(str(tmp_path))
    names = [d.document.definitions[0].name.value for d in result.documents]
    assert names == ["GetUser"]
    assert len(result.errors) == 1
    assert result.errors[0].location.endswith("deep.graphql")
    assert "too deeply" in result.errors[0].message


def test_python_source_rejected_by_ast_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify a ValueError from ast.parse (null bytes on older Pythons) is reported."""
    import extractor

    def reject(source: str) -> None:
        raise ValueError("source code string cannot contain null bytes")

    monkeypatch.setattr(extractor.ast, "parse", reject)
    result = extractor.extract_file("/w/app/null.py", "x = 1\x00")
    assert result.documents == []
    assert "null bytes" in result.errors[0].message
