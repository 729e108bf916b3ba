"""Scalar element types of captured vectors.

The tag selects both the storage size of a :class:`~vecdiff.results.Result`
and the comparison routine the comparator uses for it.
"""

from __future__ import annotations

import enum
from typing import Any, Dict, Union


class ElementType(enum.Enum):
    """Element kinds a vector result can hold."""

    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    UINT32 = "uint32"
    INT32 = "int32"
    UINT64 = "uint64"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    @property
    def size(self) -> int:
        """Byte width of one element."""
        return _SIZES[self]

    @property
    def format(self) -> str:
        """``struct`` format for one element in native byte order."""
        return "=" + _FORMATS[self]

    @property
    def is_float(self) -> bool:
        return self in (ElementType.FLOAT32, ElementType.FLOAT64)

    @classmethod
    def from_name(cls, name: Union[str, "ElementType"]) -> "ElementType":
        """Parse a type name such as ``"float32"`` (case-insensitive)."""
        if isinstance(name, ElementType):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown element type '{name}'. "
                f"Supported: {[t.value for t in cls]}"
            ) from None

    @classmethod
    def from_torch_dtype(cls, dtype: Any) -> "ElementType":
        """Map a ``torch.dtype`` to its element type.

        Raises:
            ValueError: If the dtype has no element type (e.g. ``float16``,
                ``bool``, complex types).
        """
        # torch.float32 prints as "torch.float32"
        name = str(dtype).rsplit(".", 1)[-1]
        name = _TORCH_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unsupported tensor dtype '{dtype}'") from None


_SIZES: Dict[ElementType, int] = {
    ElementType.INT8: 1,
    ElementType.UINT8: 1,
    ElementType.INT16: 2,
    ElementType.UINT16: 2,
    ElementType.UINT32: 4,
    ElementType.INT32: 4,
    ElementType.UINT64: 8,
    ElementType.INT64: 8,
    ElementType.FLOAT32: 4,
    ElementType.FLOAT64: 8,
}

_FORMATS: Dict[ElementType, str] = {
    ElementType.INT8: "b",
    ElementType.UINT8: "B",
    ElementType.INT16: "h",
    ElementType.UINT16: "H",
    ElementType.UINT32: "I",
    ElementType.INT32: "i",
    ElementType.UINT64: "Q",
    ElementType.INT64: "q",
    ElementType.FLOAT32: "f",
    ElementType.FLOAT64: "d",
}

# torch spells a few dtypes differently
_TORCH_ALIASES: Dict[str, str] = {
    "float": "float32",
    "double": "float64",
    "short": "int16",
    "int": "int32",
    "long": "int64",
}
