"""
intcode/memory.py
═════════════════

Two-tier cell store used by :class:`intcode.machine.Machine`.

    address:   0 ........ len(image)-1 │ len(image) ........ max_address
               ┌──────────────────────┐│┌───────────────────────────────┐
               │ dense list (image)   │││ sparse dict  {addr: value}    │
               └──────────────────────┘│└───────────────────────────────┘

The dense tier is the program image.  It is mutable but never grows.
Addresses past it go to the sparse tier, and any address never written
reads as the domain's zero.  Addresses are non-negative; a negative
address, or one above ``max_address``, raises
:class:`~intcode.errors.AddressingError`.
"""

from __future__ import annotations

from typing import Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from intcode.errors import AddressFault, AddressingError

V = TypeVar("V")

DEFAULT_MAX_ADDRESS = (1 << 63) - 1


class Memory(Generic[V]):
    """Dense image plus sparse overflow, zero-initialised.

    Parameters
    ----------
    image : iterable
        Initial cell values (already in the machine's domain).
    zero : V
        Value returned for never-written cells.
    max_address : int
        Largest address that may be read or written.
    """

    __slots__ = ("_dense", "_sparse", "_zero", "max_address")

    def __init__(
        self,
        image: Iterable[V],
        zero: V,
        max_address: int = DEFAULT_MAX_ADDRESS,
    ) -> None:
        self._dense: List[V] = list(image)
        self._sparse: Dict[int, V] = {}
        self._zero = zero
        self.max_address = max_address

    def check(self, address: int, pc: Optional[int] = None) -> int:
        """Validate ``address``; returns it unchanged."""
        if address < 0:
            raise AddressingError(AddressFault.NEGATIVE, address, pc)
        if address > self.max_address:
            raise AddressingError(AddressFault.TOO_FAR, address, pc)
        return address

    def read(self, address: int) -> V:
        self.check(address)
        if address < len(self._dense):
            return self._dense[address]
        return self._sparse.get(address, self._zero)

    def write(self, address: int, value: V) -> None:
        self.check(address)
        if address < len(self._dense):
            self._dense[address] = value
        else:
            self._sparse[address] = value

    def reset(self, image: Iterable[V]) -> None:
        """Replace the dense tier and forget every sparse cell."""
        self._dense = list(image)
        self._sparse.clear()

    def dump(self) -> List[V]:
        """Copy of the dense tier."""
        return list(self._dense)

    def sparse_items(self) -> List[Tuple[int, V]]:
        """Cells written beyond the dense tier, by address."""
        return sorted(self._sparse.items())

    def __len__(self) -> int:
        return len(self._dense)

    def __repr__(self) -> str:
        return f"Memory(dense={len(self._dense)}, sparse={len(self._sparse)})"
