"""
CLI commands - entry points for serving and indexing.

Each command follows a consistent pattern:
1. Parse arguments
2. Load environment
3. Validate the samples folder
4. Run
5. Return exit code

Exit codes:
    0  success
    1  indexing finished with failures
    2  samples folder does not exist
    3  samples folder has no .cs or .md files
    4  embedding backend unreachable or misconfigured
    130 interrupted
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from sample_search.config import ServiceConfig
from sample_search.core.errors import ConfigurationError
from sample_search.indexing import Corpus

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _load_env() -> None:
    """Load environment variables from .env file."""
    load_dotenv()


def _configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def _resolve_config(folder: str | None) -> tuple[ServiceConfig | None, int]:
    """Build the config, validating the samples folder. Returns (config, exit_code)."""
    config = ServiceConfig.from_env()
    if folder:
        config = replace(config, samples_path=Path(folder).resolve())

    corpus = Corpus(config.samples_path)
    if not corpus.exists():
        print(f"Error: The specified folder '{config.samples_path}' does not exist.", file=sys.stderr)
        return None, 2
    if not corpus.has_samples():
        print(
            f"Error: The specified folder '{config.samples_path}' does not contain any .cs or .md files.",
            file=sys.stderr,
        )
        return None, 3
    return config, 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-f", "--folder", help="Samples folder (default: $SAMPLES_PATH)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def run_serve_cli(argv: list[str] | None = None) -> int:
    """CLI entry point for the HTTP server."""
    import uvicorn

    from sample_search.api import create_app
    from sample_search.observability import init_tracing, shutdown_tracing
    from sample_search.observability.instrumentation import instrument_app
    from sample_search.service import SearchService

    _load_env()

    parser = argparse.ArgumentParser(description="Serve keyword and semantic search over code samples")
    _add_common_arguments(parser)
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    config, code = _resolve_config(args.folder)
    if config is None:
        return code

    try:
        service = SearchService(config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 4

    # Result is logged; serving continues either way
    service.semantic.check_connectivity()

    tracing = init_tracing()
    app = create_app(service)
    if tracing:
        instrument_app(app)

    try:
        uvicorn.run(app, host=args.host, port=args.port)
    finally:
        shutdown_tracing()
    return 0


def run_index_cli(argv: list[str] | None = None) -> int:
    """CLI entry point for a one-off indexing run."""
    from sample_search.service import SearchService

    _load_env()

    parser = argparse.ArgumentParser(description="Index code samples once and report the outcome")
    _add_common_arguments(parser)
    parser.add_argument("--quiet", action="store_true", help="Minimal output")
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    config, code = _resolve_config(args.folder)
    if config is None:
        return code

    try:
        service = SearchService(config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 4

    print("=" * 60)
    print("INDEX CODE SAMPLES")
    print("=" * 60)
    print(f"Samples:  {config.samples_path}")
    print(f"Backend:  {config.embedding.backend} ({config.embedding.resolved_model})")

    try:
        if not service.semantic.check_connectivity():
            print("\n>>> EMBEDDING BACKEND UNAVAILABLE <<<")
            return 4
        report = service.pipeline.index_all(service.corpus.discover())
    finally:
        service.close()

    if not args.quiet:
        for failure in report.errors:
            print(f"  [FAIL] {failure.path} ({failure.kind.value}): {failure.reason}")

    print(f"\nIndexed: {report.indexed_count}/{report.file_count}")
    print(f"Dimension: {service.store.dimension}")

    if report.all_indexed:
        print("\n>>> INDEXING: COMPLETE <<<")
        return 0
    print("\n>>> INDEXING: INCOMPLETE <<<")
    return 1


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        sample-search serve -f ./samples   # Run the HTTP API
        sample-search index -f ./samples   # Index once and report
    """
    parser = argparse.ArgumentParser(
        description="Code sample search service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  serve       Start the HTTP API; indexing runs in the background
  index       Index all samples once and print a report

Examples:
  sample-search serve -f ../samples --port 8080
  EMBEDDING_BACKEND=azure sample-search index -f ../samples
        """,
    )

    parser.add_argument(
        "command",
        choices=["serve", "index"],
        help="Command to run",
    )

    argv = sys.argv[1:] if argv is None else argv
    args, remaining = parser.parse_known_args(argv)

    commands = {
        "serve": run_serve_cli,
        "index": run_index_cli,
    }

    try:
        return commands[args.command](remaining)
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
