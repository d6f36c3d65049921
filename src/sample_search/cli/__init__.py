"""
CLI module - command-line interface.

Provides entry points for:
- Serving the search API
- Running a one-off indexing pass
"""

from sample_search.cli.commands import (
    main,
    run_serve_cli,
    run_index_cli,
)

__all__ = [
    "main",
    "run_serve_cli",
    "run_index_cli",
]
