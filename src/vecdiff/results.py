"""Result records and results sets for one back-end run.

A :class:`ResultsSet` holds every vector value one back-end computed for one
test case, split into sections by :meth:`ResultsSet.sync_archs`.  Each value
is a :class:`Result`: a contiguous byte buffer plus its element type, its
comparison policy and where it was captured.

The policy fields (allowed error in ULPs, whether ``+0.0 == -0.0``) live on
the results set as a cursor.  :meth:`ResultsSet.push` copies the cursor into
the new record, so changing the cursor later never alters records that were
already pushed.

Usage::

    results = ResultsSet("permute_bytes16")
    results.set_precision(2)
    r = results.push(ElementType.FLOAT32, 4, __file__, 42)
    for i, v in enumerate(values):
        r.set_value(i, v)
    results.sync_archs()   # every back-end calls this at the same point
"""

from __future__ import annotations

import struct
from typing import Any, List, Optional, Tuple, Union

from vecdiff._exceptions import ContractError
from vecdiff._logging import get_logger
from vecdiff.config import load_config
from vecdiff.elements import ElementType

logger = get_logger(__name__)


class Result:
    """One captured vector value.

    Args:
        type: Element type of the vector.
        length: Number of elements (must be positive).
        file: Source file the value was captured in.
        line: Source line the value was captured at.
        seq: 1-based position within the section.
        precision_ulp: Allowed error in ULPs, 0 for exact.
        fp_zero_equal: Whether ``+0.0`` and ``-0.0`` compare equal.

    The buffer starts zero-filled and is populated with :meth:`set`.
    """

    def __init__(
        self,
        type: ElementType,
        length: int,
        file: str,
        line: int,
        seq: int,
        precision_ulp: int = 0,
        fp_zero_equal: bool = False,
    ) -> None:
        if length <= 0:
            raise ContractError(f"Result length must be positive, got {length}")
        if precision_ulp < 0:
            raise ContractError(
                f"Precision must be non-negative, got {precision_ulp}"
            )
        self._type = type
        self._length = length
        self._element_size = type.size
        self._file = file
        self._line = line
        self._seq = seq
        self._precision_ulp = precision_ulp
        self._fp_zero_equal = fp_zero_equal
        self._data = bytearray(length * self._element_size)

    @property
    def type(self) -> ElementType:
        return self._type

    @property
    def length(self) -> int:
        return self._length

    @property
    def element_size(self) -> int:
        return self._element_size

    @property
    def file(self) -> str:
        return self._file

    @property
    def line(self) -> int:
        return self._line

    @property
    def source_location(self) -> str:
        return f"{self._file}:{self._line}"

    @property
    def seq(self) -> int:
        return self._seq

    @property
    def precision_ulp(self) -> int:
        return self._precision_ulp

    @property
    def fp_zero_equal(self) -> bool:
        return self._fp_zero_equal

    @property
    def effective_precision(self) -> int:
        """Allowed error in ULPs; always 0 for integer types."""
        return self._precision_ulp if self._type.is_float else 0

    @property
    def raw(self) -> bytes:
        """Read-only copy of the whole buffer."""
        return bytes(self._data)

    def element_bytes(self, index: int) -> bytes:
        start = index * self._element_size
        return bytes(self._data[start:start + self._element_size])

    def set(self, index: int, raw_bytes: Union[bytes, bytearray, memoryview]) -> None:
        """Copy one element's bytes into slot *index*.

        Raises:
            ContractError: If *index* is not an int, is outside
                ``[0, length)``, or the payload is not exactly ``element_size`` bytes.
        """
        if not isinstance(index, int) or isinstance(index, bool):
            raise ContractError(
                f"Element index must be an int, got {type(index).__name__}"
            )
        if not 0 <= index < self._length:
            raise ContractError(
                f"Element index {index} out of range for result of length "
                f"{self._length} captured at {self.source_location}"
            )
        payload = bytes(raw_bytes)
        if len(payload) != self._element_size:
            raise ContractError(
                f"Element payload is {len(payload)} bytes, expected "
                f"{self._element_size} for {self._type.value}"
            )
        start = index * self._element_size
        self._data[start:start + self._element_size] = payload

    def set_value(self, index: int, value: Any) -> None:
        """Pack a Python scalar with the element format and store it."""
        try:
            payload = struct.pack(self._type.format, value)
        except struct.error as e:
            raise ContractError(
                f"Cannot store {value!r} as {self._type.value}: {e}"
            ) from None
        self.set(index, payload)

    def values(self) -> Tuple[Any, ...]:
        """Decode the buffer into Python scalars."""
        return tuple(v for (v,) in struct.iter_unpack(self._type.format, self._data))

    def __repr__(self) -> str:
        return (
            f"Result(type={self._type.value}, length={self._length}, "
            f"seq={self._seq}, at={self.source_location})"
        )


class ResultsSet:
    """All results one back-end produced for one test case.

    Args:
        name: Test case name, shared by every back-end being compared.
        precision_ulp: Initial precision cursor.  Defaults to
            ``VECDIFF_DEFAULT_PRECISION`` from the environment.

    Built single-threaded by one harness run and treated as read-only once
    handed to the comparator.
    """

    def __init__(self, name: str, precision_ulp: Optional[int] = None) -> None:
        self._name = name
        self._seq = 1
        if precision_ulp is None:
            precision_ulp = load_config().default_precision_ulp
        self._precision_ulp = 0
        self.set_precision(precision_ulp)
        self._fp_zero_equal = False
        self._sections: List[List[Result]] = [[]]

    @property
    def name(self) -> str:
        return self._name

    @property
    def current_seq(self) -> int:
        return self._seq

    @property
    def current_precision_ulp(self) -> int:
        return self._precision_ulp

    @property
    def current_fp_zero_equal(self) -> bool:
        return self._fp_zero_equal

    @property
    def sections(self) -> Tuple[Tuple[Result, ...], ...]:
        return tuple(tuple(section) for section in self._sections)

    def push(
        self,
        type: Union[ElementType, str],
        length: int,
        file: str,
        line: int,
    ) -> Result:
        """Append a new zero-filled result to the current section.

        The record takes the next sequence number and a copy of the current
        precision and zero-equality settings.  Fill it with
        :meth:`Result.set`.
        """
        try:
            etype = ElementType.from_name(type)
        except ValueError as e:
            raise ContractError(str(e)) from None
        result = Result(
            etype, length, file, line, self._seq,
            precision_ulp=self._precision_ulp,
            fp_zero_equal=self._fp_zero_equal,
        )
        self._sections[-1].append(result)
        self._seq += 1
        return result

    def set_precision(self, num_ulp: int) -> None:
        """Allow *num_ulp* ULPs of error for floating-point results pushed
        from now on, until :meth:`unset_precision`."""
        if num_ulp < 0:
            raise ContractError(f"Precision must be non-negative, got {num_ulp}")
        self._precision_ulp = num_ulp

    def unset_precision(self) -> None:
        self._precision_ulp = 0

    def set_fp_zero_equal(self) -> None:
        """Treat ``+0.0`` and ``-0.0`` as equal for results pushed from now on."""
        self._fp_zero_equal = True

    def unset_fp_zero_equal(self) -> None:
        self._fp_zero_equal = False

    def reset_seq(self) -> None:
        self._seq = 1

    def sync_archs(self) -> None:
        """Close the current section and open a new one.

        Must be called at the same points by every back-end's run of a test
        case, including runs that skipped the operations in between, so that
        later sections stay aligned.  Resets the sequence number.
        """
        self._sections.append([])
        self.reset_seq()
        logger.debug("%s: section %d opened", self._name, len(self._sections) - 1)

    def num_results(self) -> int:
        return sum(len(section) for section in self._sections)

    def num_sections(self) -> int:
        return len(self._sections)

    def __repr__(self) -> str:
        return (
            f"ResultsSet(name={self._name!r}, sections={self.num_sections()}, "
            f"results={self.num_results()})"
        )
