#!/usr/bin/env python3
"""
CLI for generating the GraphQL operation and fragment collections

Scans a source tree for every GraphQL operation and fragment, cleans up their
text, flags duplicate names and writes two JSON files the backend loads at
startup and serves by name:
- <output-dir>/generatedQueries.json
- <output-dir>/generatedFragments.json

Usage:
    python cli.py                          # Scan ./app, write ./GraphqlQueries
    python cli.py --path src --root-marker src/
    python cli.py --verbose                # Also print every generated record
    python cli.py --dry-run                # Report without writing files
    python cli.py --json                   # Print the collections as JSON
    python cli.py --fail-on-duplicates     # Exit with status 2 on duplicate names
"""

import argparse
import asyncio
import sys
from typing import List, Optional

import aggregator
from config import GeneratorConfig, load_config
from loader import DocumentLoadError, load_documents
from models import PipelineResult
from reporter import GenerationReporter, output_json, print_error
from writer import OutputWriteError, write_collections

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_DUPLICATES = 2


class GeneratorCLI:
    """Runs one generation pass and reports on it."""

    def __init__(self, config: GeneratorConfig, print_json: bool = False):
        self.config = config
        self.print_json = print_json
        self.reporter = GenerationReporter

    def generate(self) -> PipelineResult:
        """Load every document (the single awaited step), then aggregate."""
        if not self.print_json:
            self.reporter.log_scanning(self.config.source_root)
        extraction = asyncio.run(load_documents(self.config))
        if extraction.errors and not self.print_json:
            self.reporter.report_extraction_errors(extraction.errors)
        return aggregator.run(extraction.documents, self.config.root_marker)

    def report(self, result: PipelineResult) -> None:
        self.reporter.report_warnings(result.unnamed)
        self.reporter.report_warnings(result.failures)
        if self.config.log_statistics:
            self.reporter.print_statistics(result)
        if self.config.log_full:
            self.reporter.print_full(result)

    def persist(self, result: PipelineResult) -> None:
        paths = [self.config.queries_path, self.config.fragments_path]
        if self.config.dry_run:
            if not self.print_json:
                self.reporter.log_dry_run(paths)
            return
        written = write_collections(
            result.operations,
            result.fragments,
            self.config.output_dir,
            self.config.queries_file,
            self.config.fragments_file,
        )
        if not self.print_json:
            self.reporter.log_written(written)

    def run(self) -> int:
        """Run the whole generation; never raises."""
        try:
            result = self.generate()
        except DocumentLoadError as e:
            print_error(f"Failed while processing queries/fragments: {e}")
            return EXIT_FAILURE
        except Exception as e:
            print_error(f"Generation Failed: {e}")
            return EXIT_FAILURE

        if self.print_json:
            output_json(result)
        else:
            self.report(result)

        try:
            self.persist(result)
        except OutputWriteError as e:
            print_error(str(e))
            return EXIT_FAILURE
        except Exception as e:
            print_error(f"Generation Failed: {e}")
            return EXIT_FAILURE

        if self.config.fail_on_duplicates and result.has_duplicates:
            return EXIT_DUPLICATES
        return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate GraphQL operation and fragment collections from a source tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment variables (also read from .env):
  GQL_SOURCE_ROOT, GQL_ROOT_MARKER, GQL_OUTPUT_DIR,
  GQL_QUERIES_FILE, GQL_FRAGMENTS_FILE, GQL_EXCLUDE
        """,
    )
    parser.add_argument(
        "--path", type=str, help="Source tree (or single file) to scan (default: app)"
    )
    parser.add_argument(
        "--root-marker",
        type=str,
        help="Path segment where reported file names start (default: app/)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        help="Directory for the generated JSON files (default: GraphqlQueries)",
    )
    parser.add_argument(
        "--exclude",
        type=str,
        default="",
        help="Comma-separated directory patterns to exclude, added to the defaults",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print every generated record with its normalized text",
    )
    parser.add_argument(
        "--no-stats", action="store_true", help="Do not print the statistics summary"
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Report without writing output files"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print both collections as JSON instead of the human-readable report",
    )
    parser.add_argument(
        "--fail-on-duplicates",
        action="store_true",
        help="Exit with status 2 when duplicate names are found",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    config = load_config()
    exclude = [p.strip() for p in args.exclude.split(",") if p.strip()]
    return config.with_overrides(
        source_root=args.path,
        root_marker=args.root_marker,
        output_dir=args.output_dir,
        exclude_dirs=config.exclude_dirs + tuple(exclude) if exclude else None,
        log_statistics=not args.no_stats,
        log_full=args.verbose,
        dry_run=args.dry_run,
        fail_on_duplicates=args.fail_on_duplicates,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    config = config_from_args(args)
    cli = GeneratorCLI(config, print_json=args.json)
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
