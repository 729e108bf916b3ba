"""Capture of PyTorch tensors into results sets.

Back-ends that run on torch devices hand their outputs over as tensors.
:func:`push_tensor` flattens the tensor, pushes one record of the matching
element type and fills every element, recording the caller's file and line
unless they are given explicitly.

``torch`` is imported lazily so the rest of vecdiff works without it.
"""

from __future__ import annotations

import inspect
from typing import Any, Optional

from vecdiff._exceptions import ContractError
from vecdiff._logging import get_logger
from vecdiff.results import Result, ResultsSet
from vecdiff.elements import ElementType

logger = get_logger(__name__)

_torch: Optional[Any] = None


def _import_torch() -> Any:
    """Lazily import torch, caching the result."""
    global _torch  # noqa: PLW0603
    if _torch is None:
        try:
            import torch  # type: ignore[import-untyped]
            _torch = torch
        except ImportError:
            raise ImportError(
                "PyTorch is required for tensor capture but not installed. "
                "Install it with: pip install torch>=2.0"
            ) from None
    return _torch


def push_tensor(
    results: ResultsSet,
    tensor: Any,
    file: Optional[str] = None,
    line: Optional[int] = None,
) -> Result:
    """Push *tensor* into *results* as one flattened vector.

    Args:
        results: Results set of the running back-end.
        tensor: Any tensor with at least one element, on any device.
        file: Source file to record; defaults to the caller's.
        line: Source line to record; defaults to the caller's.

    Raises:
        ContractError: If *tensor* is not a tensor, is empty, or has a
            dtype with no element type.
    """
    torch = _import_torch()
    if not isinstance(tensor, torch.Tensor):
        raise ContractError(f"push_tensor() expects a torch.Tensor, got {type(tensor).__name__}")

    try:
        etype = ElementType.from_torch_dtype(tensor.dtype)
    except ValueError as e:
        raise ContractError(str(e)) from None

    if file is None or line is None:
        caller = inspect.currentframe().f_back
        file = caller.f_code.co_filename if file is None else file
        line = caller.f_lineno if line is None else line

    flat = tensor.detach().cpu().reshape(-1)
    if flat.numel() == 0:
        raise ContractError(f"Cannot capture an empty tensor at {file}:{line}")

    result = results.push(etype, flat.numel(), file, line)
    for i, value in enumerate(flat.tolist()):
        result.set_value(i, value)
    logger.debug(
        "%s: captured %s[%d] from %s (seq %d)",
        results.name, etype.value, result.length, tensor.device, result.seq,
    )
    return result
