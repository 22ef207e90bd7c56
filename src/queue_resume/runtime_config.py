"""Runtime configuration normalization helpers.

CLI flags and programmatic callers go through these so every entrypoint
interprets them the same way.
"""

from __future__ import annotations

# Upper bound accepted by the catalog for a single lookup request.
MAX_CATALOG_BATCH_SIZE = 200
DEFAULT_CATALOG_BATCH_SIZE = MAX_CATALOG_BATCH_SIZE


def resolve_log_level(*, verbose: bool, quiet: bool) -> str:
    """Resolve effective log level from CLI flags.

    Precedence is deterministic: --quiet overrides --verbose.
    """
    if quiet:
        return "WARNING"
    if verbose:
        return "DEBUG"
    return "INFO"


def normalize_batch_size(value: int | None) -> int:
    """Clamp a requested catalog batch size into the accepted range."""
    if value is None or isinstance(value, bool):
        return DEFAULT_CATALOG_BATCH_SIZE
    return max(1, min(int(value), MAX_CATALOG_BATCH_SIZE))
