"""Structured logging for the vecdiff oracle.

Every mismatch the comparator reports to its diagnostic sink is also logged at
DEBUG level, so a failing differential run can be traced from the log alone
when the sink is not printed.

Usage:
    from vecdiff._logging import get_logger
    logger = get_logger(__name__)
    logger.debug("comparing %s against %s", a_arch, b_arch)
"""

from __future__ import annotations

import logging
import os
import sys


# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

_LOG_FORMAT = "[vecdiff] %(levelname)s %(name)s: %(message)s"
_LOG_FORMAT_VERBOSE = (
    "[vecdiff %(asctime)s] %(levelname)s %(name)s (%(filename)s:%(lineno)d): %(message)s"
)

# Values: DEBUG, INFO, WARNING, ERROR, CRITICAL  (case-insensitive)
_ENV_LOG_LEVEL = "VECDIFF_LOG_LEVEL"

# When set to "1", use the verbose format with timestamps and line numbers.
_ENV_LOG_VERBOSE = "VECDIFF_LOG_VERBOSE"


# ---------------------------------------------------------------------------
# Internal state
# ---------------------------------------------------------------------------

_root_logger_configured = False


def _resolve_log_level() -> int:
    """Read the desired log level from the environment, defaulting to WARNING."""
    env_val = os.environ.get(_ENV_LOG_LEVEL, "").strip().upper()
    return getattr(logging, env_val, logging.WARNING)


def _configure_root_logger() -> None:
    """One-time setup of the ``vecdiff`` logger hierarchy.

    A :class:`logging.StreamHandler` (stderr) is attached to the top-level
    ``vecdiff`` logger so that every sub-logger (e.g.
    ``vecdiff.comparator``) inherits it.
    """
    global _root_logger_configured  # noqa: PLW0603
    if _root_logger_configured:
        return

    root = logging.getLogger("vecdiff")
    root.setLevel(_resolve_log_level())

    # Leave existing handlers alone (test fixtures, user logging config).
    if not root.handlers:
        verbose = os.environ.get(_ENV_LOG_VERBOSE, "0").strip() == "1"
        fmt = _LOG_FORMAT_VERBOSE if verbose else _LOG_FORMAT
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    _root_logger_configured = True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Return a logger scoped under the ``vecdiff`` namespace.

    Args:
        name: Typically ``__name__`` of the calling module.

    Returns:
        A :class:`logging.Logger` that inherits the package's root handler.
    """
    _configure_root_logger()
    return logging.getLogger(name)


def set_log_level(level: str) -> None:
    """Change the package log level at runtime.

    Args:
        level: One of ``"DEBUG"``, ``"INFO"``, ``"WARNING"``, ``"ERROR"``,
            ``"CRITICAL"``.  Unknown names fall back to WARNING.

    Example::

        import vecdiff
        vecdiff.set_log_level("DEBUG")  # log every mismatch
    """
    _configure_root_logger()
    logging.getLogger("vecdiff").setLevel(
        getattr(logging, level.strip().upper(), logging.WARNING)
    )
