"""Public exception hierarchy for vecdiff.

All vecdiff exceptions inherit from :class:`VecdiffError`, so users can
``except VecdiffError`` to catch any library error, or be specific with a
subclass.

Example::

    from vecdiff.exceptions import ContractError, VecdiffError

    try:
        results.push("float16", 4, __file__, 10)
    except ContractError as e:
        print(f"bad push: {e}")
"""

from vecdiff._exceptions import (  # noqa: F401
    ContractError,
    VecdiffError,
)

__all__ = [
    "VecdiffError",
    "ContractError",
]
