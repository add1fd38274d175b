"""Memory reader capability and an in-process snapshot reader.

The traversal never owns memory access. It borrows any object implementing
MemoryReader for the duration of one print call and asks it to decode a value
of a given type at a given address.

MappedMemory is the simplest conforming reader: a mapping of addresses to
already-decoded objects. It is useful for replaying captured snapshots and for
tests; live process readers only need to provide the same ``read`` method.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

from pointerprint.errors import ReadError

T = TypeVar("T")


@runtime_checkable
class MemoryReader(Protocol):
    """Protocol for objects that resolve (address, type) to a value.

    Implementations raise ReadError when the address cannot be read or does
    not hold a value of the requested type.
    """

    def read(self, address: int, target: type[T]) -> T: ...


class MappedMemory:
    """A MemoryReader backed by a dict of address -> decoded object.

    Args:
        contents: Optional initial mapping of addresses to values.

    Example::

        memory = MappedMemory({0x1000: Node(id=2, next=Pointer[Node](0x1000))})
        memory.read(0x1000, Node)
    """

    def __init__(self, contents: Mapping[int, Any] | None = None):
        self._cells: dict[int, Any] = {}
        for address, value in (contents or {}).items():
            self.place(address, value)

    def place(self, address: int, value: Any) -> None:
        """Store a value at an address, replacing anything already there."""
        if address < 0:
            raise ValueError(f"address must be non-negative, got {address}")
        self._cells[address] = value

    def read(self, address: int, target: type[T]) -> T:
        try:
            value = self._cells[address]
        except KeyError:
            raise ReadError(f"address {address:#x} is not mapped", address) from None
        if not isinstance(value, target):
            raise ReadError(
                f"expected {target.__name__} at {address:#x}, "
                f"found {type(value).__name__}",
                address,
            )
        return value

    def __contains__(self, address: object) -> bool:
        return address in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._cells))
