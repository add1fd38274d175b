"""Pointer-like field types.

A field is followed during traversal when its declared type subclasses
AddressedReadable. That explicit marker decides classification; type names
play no part in it, so a record called ``PointerTable`` is still printed as a
plain value.

Pointer is the stock implementation. Subscripting it with a record class
creates (and caches) a specialised subclass that knows its pointee type, in
the same spirit as ``ctypes.POINTER``::

    @traversable
    @dataclass
    class Node:
        id: int
        next: Pointer[Node]

    node = Node(id=1, next=Pointer[Node](0x1000))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pointerprint.errors import ReadError

if TYPE_CHECKING:
    from pointerprint.memory import MemoryReader


class AddressedReadable(ABC):
    """Capability marker for values that reference memory by address.

    Implementations expose an integer ``address`` and a ``read`` method that
    resolves the pointee through a MemoryReader. The class attribute
    ``target`` names the pointee type when it is known statically.
    """

    address: int
    target: ClassVar[type | None] = None

    @abstractmethod
    def read(self, memory: MemoryReader) -> Any:
        """Return the pointee, raising ReadError if it cannot be read."""


@dataclass(frozen=True, repr=False)
class Pointer(AddressedReadable):
    """An address in a target address space, typed by its pointee.

    Use ``Pointer[Record](address)``; the unsubscripted form has no target
    and every read through it fails.

    Attributes:
        address: Unsigned address of the pointee.
    """

    address: int

    _specializations: ClassVar[dict[tuple[type, type], type[Pointer]]] = {}

    def __post_init__(self):
        if self.address < 0:
            raise ValueError(f"address must be non-negative, got {self.address}")

    def __class_getitem__(cls, target: type) -> type[Pointer]:
        if cls.target is not None:
            raise TypeError(f"{cls.__qualname__} is already specialised")
        if not isinstance(target, type):
            raise TypeError(
                f"Pointer target must be a class, got {target!r}; "
                "use 'from __future__ import annotations' for self references"
            )
        key = (cls, target)
        specialized = cls._specializations.get(key)
        if specialized is None:
            name = f"{cls.__name__}[{target.__name__}]"
            specialized = type(
                name,
                (cls,),
                {"target": target, "__qualname__": name, "__module__": cls.__module__},
            )
            cls._specializations[key] = specialized
        return specialized

    def read(self, memory: MemoryReader) -> Any:
        if self.target is None:
            raise ReadError(f"pointer {self.address:#x} has no target type", self.address)
        return memory.read(self.address, self.target)

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}({self.address:#x})"
