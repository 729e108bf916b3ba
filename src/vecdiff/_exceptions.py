"""Custom exception hierarchy for vecdiff.

Only contract violations are exceptions.  Value and structural mismatches
between two back-ends are ordinary data and go to the diagnostic sink.

Usage::

    from vecdiff._exceptions import ContractError

    try:
        record.set(16, payload)
    except ContractError as e:
        print(f"Harness bug: {e}")
"""

from __future__ import annotations


class VecdiffError(Exception):
    """Base exception for all vecdiff errors.

    Catch this to handle any error raised by the library without
    catching unrelated exceptions.
    """


class ContractError(VecdiffError):
    """Raised when the harness breaks the recording contract.

    Examples:
    - ``Result.set`` with an element index outside ``[0, length)``
    - a payload whose size is not the element size
    - pushing a result with a non-positive length
    - comparing ``None`` instead of a results set

    These indicate the harness itself is not producing comparable data,
    so they are never downgraded to diagnostics.
    """
