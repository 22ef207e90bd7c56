"""Tests for runtime config precedence behavior."""

from __future__ import annotations

from queue_resume.cli import build_parser
from queue_resume.runtime_config import (
    DEFAULT_CATALOG_BATCH_SIZE,
    normalize_batch_size,
    resolve_log_level,
)


def test_resolve_log_level_precedence_matrix() -> None:
    assert resolve_log_level(verbose=False, quiet=False) == "INFO"
    assert resolve_log_level(verbose=True, quiet=False) == "DEBUG"
    assert resolve_log_level(verbose=False, quiet=True) == "WARNING"
    assert resolve_log_level(verbose=True, quiet=True) == "WARNING"


def test_parser_flags_feed_log_resolution() -> None:
    args = build_parser().parse_args(["--verbose", "--quiet", "show"])
    assert resolve_log_level(verbose=args.verbose, quiet=args.quiet) == "WARNING"


def test_normalize_batch_size_clamps() -> None:
    assert normalize_batch_size(None) == DEFAULT_CATALOG_BATCH_SIZE == 200
    assert normalize_batch_size(50) == 50
    assert normalize_batch_size(0) == 1
    assert normalize_batch_size(-5) == 1
    assert normalize_batch_size(10_000) == 200
    assert normalize_batch_size(True) == 200
