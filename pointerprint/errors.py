"""Exception types raised by pointerprint.

Two failure categories exist:

- GenerationError: a field-visiting procedure cannot be built for a type.
  Raised when a class is decorated (or, for records that reference classes
  defined later, on first traversal). Never recovered.
- ReadError: the memory reader could not produce a pointee. Raised by
  readers and recovered per field by the traversal.
"""

from __future__ import annotations


class PointerPrintError(Exception):
    """Base class for all pointerprint errors."""


class ReadError(PointerPrintError):
    """The memory reader failed to decode a value at an address.

    Attributes:
        address: The address that was being read, if known.
    """

    def __init__(self, message: str, address: int | None = None):
        super().__init__(message)
        self.address = address


class GenerationError(PointerPrintError, TypeError):
    """A field-visiting procedure could not be generated for a type.

    Attributes:
        record: The class generation was attempted for.
    """

    def __init__(self, message: str, record: type | None = None):
        super().__init__(message)
        self.record = record
