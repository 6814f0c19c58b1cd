#!/usr/bin/env python3
"""
Reporter module for the generator's console output.

This module handles all the printing for a run (statistics, duplicate
warnings, skipped documents and the optional full listing), keeping the
pipeline itself free of side effects.
"""

import json
import sys
from typing import Any, Dict, List, Sequence

from extractor import ExtractionError
from models import FragmentRecord, OperationRecord, PipelineResult, SkippedDocument

SEPARATOR = "=============="


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)


def output_json(result: PipelineResult) -> None:
    """
    Output both collections as JSON for piping to other tools.

    Args:
        result: The aggregation result
    """
    payload: Dict[str, List[Dict[str, Any]]] = {
        "operations": [record.to_dict() for record in result.operations],
        "fragments": [record.to_dict() for record in result.fragments],
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False))


class GenerationReporter:
    """Handles all output and logging for the generator."""

    @staticmethod
    def log_scanning(path: str) -> None:
        print(f"Scanning {path} for all queries and fragments...")

    @staticmethod
    def report_warnings(skipped: Sequence[SkippedDocument], level: str = "warning") -> None:
        """Report skipped documents in standard format."""
        for item in skipped:
            print(f"{item.file_name}: {level}: {item.reason}")

    @staticmethod
    def report_extraction_errors(errors: Sequence[ExtractionError]) -> None:
        """Report files or GraphQL strings that could not be extracted."""
        for err in errors:
            print(f"{err.location}: warning: {err.message}")

    @staticmethod
    def report_duplicates(
        kind: str, singular: str, label: str, names: Sequence[str]
    ) -> None:
        if names:
            print(
                f":\\ Alas, there are duplicate {kind} by {label}. Please fix before going forward."
            )
            print(f"Duplicate {kind.capitalize()}: {len(names)}")
            print(f"Duplicate {singular} names: {','.join(names)}")
        else:
            print(f"Awesome! No duplicate {kind}")

    @staticmethod
    def print_statistics(result: PipelineResult) -> None:
        """Print counts and every duplicate name."""
        print("Overall Statistics")
        print(SEPARATOR)
        print(f"Operations: {len(result.operations)}")
        print(f"Fragments: {len(result.fragments)}")
        GenerationReporter.report_duplicates(
            "queries", "Query", "operation name", list(result.duplicate_operations)
        )
        GenerationReporter.report_duplicates(
            "fragments", "Fragment", "fragment name", list(result.duplicate_fragments)
        )
        if result.unnamed:
            print(f"Unnamed operations skipped: {len(result.unnamed)}")
        if result.failures:
            print(f"Documents skipped: {len(result.failures)}")
        print(
            "Please do check to see if queries are generated and DO NOT forget to commit them !"
        )
        print(SEPARATOR)

    @staticmethod
    def print_operation(item: OperationRecord) -> None:
        print(SEPARATOR)
        print(f"Operation Name: {item.operation_name}")
        print(f"File Name: {item.file_name}")
        if item.fragment_names:
            print(f"Fragment Names: {', '.join(item.fragment_names)}")
        print(f"Raw Query: {item.raw_query}")
        print(SEPARATOR)

    @staticmethod
    def print_fragment(item: FragmentRecord) -> None:
        print(SEPARATOR)
        print(f"Fragment Name: {item.name}")
        print(f"File Name: {item.file_name}")
        print(f"Raw Query: {item.raw_query}")
        print(SEPARATOR)

    @staticmethod
    def print_full(result: PipelineResult) -> None:
        """Print every emitted record with its normalized text."""
        print("Logging All")
        print(SEPARATOR)
        print("Queries")
        for item in result.operations:
            GenerationReporter.print_operation(item)
        print("Fragments")
        for item in result.fragments:
            GenerationReporter.print_fragment(item)
        print(SEPARATOR)
        print()

    @staticmethod
    def log_written(paths: Sequence[str]) -> None:
        for path in paths:
            print(f"Wrote {path}")

    @staticmethod
    def log_dry_run(paths: Sequence[str]) -> None:
        for path in paths:
            print(f"Dry run: would write {path}")
