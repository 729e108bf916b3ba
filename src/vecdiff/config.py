"""Environment-driven configuration.

Settings are read from ``VECDIFF_*`` environment variables, the same way the
log level is.  An unparsable value is logged as a warning and replaced by the
default, so a typo in the environment never aborts a comparison run.
Nothing is cached: call :func:`load_config` again after changing the
environment.

Environment Variables
---------------------
``VECDIFF_SHOW_HEX``
    Set to ``1`` to append the raw element bytes (hex) to value diagnostics.
``VECDIFF_DEFAULT_PRECISION``
    Initial allowed error in ULPs for new results sets.  Default: ``0``.
``VECDIFF_REFERENCE_ARCH``
    Label of the reference back-end when none is given.  Default:
    ``reference``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from vecdiff._logging import get_logger

logger = get_logger(__name__)

_ENV_SHOW_HEX = "VECDIFF_SHOW_HEX"
_ENV_DEFAULT_PRECISION = "VECDIFF_DEFAULT_PRECISION"
_ENV_REFERENCE_ARCH = "VECDIFF_REFERENCE_ARCH"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})


@dataclass(frozen=True)
class OracleConfig:
    """Settings that affect recording and reporting.

    Attributes:
        show_hex: Whether value diagnostics include the raw element bytes.
        default_precision_ulp: Precision new results sets start with.
        reference_arch: Label for the reference back-end.
    """

    show_hex: bool = False
    default_precision_ulp: int = 0
    reference_arch: str = "reference"


def _read_bool(name: str) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw not in _FALSE_VALUES:
        logger.warning("%s must be 0 or 1, got '%s'; using 0", name, raw)
    return False


def _read_precision(name: str) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return 0
    try:
        value = int(raw)
    except ValueError:
        value = -1
    if value < 0:
        logger.warning(
            "%s must be a non-negative integer, got '%s'; using 0", name, raw,
        )
        return 0
    return value


def load_config() -> OracleConfig:
    """Build an :class:`OracleConfig` from the current environment."""
    reference = os.environ.get(_ENV_REFERENCE_ARCH, "").strip() or "reference"
    return OracleConfig(
        show_hex=_read_bool(_ENV_SHOW_HEX),
        default_precision_ulp=_read_precision(_ENV_DEFAULT_PRECISION),
        reference_arch=reference,
    )
