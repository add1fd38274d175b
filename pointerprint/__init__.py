"""Print records from memory-mapped data, following their pointer fields.

    from dataclasses import dataclass
    from pointerprint import MappedMemory, Pointer, pointer_print, traversable

    @traversable
    @dataclass
    class Node:
        id: int
        next: Pointer[Node]

    pointer_print(root, MappedMemory({...}), max_depth=3)
"""

import logging

from pointerprint.config import TraversalConfig
from pointerprint.engine import TraversalState, pointer_print, visited_addresses
from pointerprint.errors import GenerationError, PointerPrintError, ReadError
from pointerprint.generator import (
    FieldSpec,
    Traversable,
    build_visitor,
    describe_record,
    is_traversable,
    record_fields,
    traversable,
)
from pointerprint.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
)
from pointerprint.memory import MappedMemory, MemoryReader
from pointerprint.pointer import AddressedReadable, Pointer

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Traversal
    "pointer_print",
    "visited_addresses",
    "TraversalState",
    "TraversalConfig",
    # Generation
    "traversable",
    "Traversable",
    "FieldSpec",
    "build_visitor",
    "describe_record",
    "is_traversable",
    "record_fields",
    # Memory
    "AddressedReadable",
    "Pointer",
    "MemoryReader",
    "MappedMemory",
    # Errors
    "PointerPrintError",
    "ReadError",
    "GenerationError",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
]
