"""Depth-limited, cycle-safe printing of records with pointer fields.

Usage::

    from pointerprint import MappedMemory, Pointer, pointer_print

    memory = MappedMemory({0x1000: Node(id=2, next=Pointer[Node](0x1000))})
    pointer_print(Node(id=1, next=Pointer[Node](0x1000)), memory)

prints::

    Node {
      id: int = 1
      next-> Node {
        id: int = 2
        next → Already visited address 0x1000
      }
    }

Each call owns a fresh TraversalState; nothing carries over between calls.
"""

from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TextIO

from pointerprint.config import TraversalConfig
from pointerprint.generator import is_traversable, prepare
from pointerprint.pointer import AddressedReadable

if TYPE_CHECKING:
    from pointerprint.memory import MemoryReader

logger = logging.getLogger(__name__)


@dataclass
class TraversalState:
    """Mutable state of one top-level traversal.

    Attributes:
        max_depth: Depth ceiling for pointer following.
        depth: Depth the traversal starts at (0 for the root).
        visited: Addresses already entered during this traversal.
    """

    max_depth: int
    depth: int = 0
    visited: set[int] = field(default_factory=set)


def _resolve_max_depth(max_depth: int | None, config: TraversalConfig | None) -> int:
    if max_depth is None:
        return (config or TraversalConfig()).max_depth
    if max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")
    return max_depth


def _traverse(
    value: Any,
    memory: MemoryReader,
    max_depth: int | None,
    out: TextIO,
    config: TraversalConfig | None,
) -> TraversalState:
    state = TraversalState(max_depth=_resolve_max_depth(max_depth, config))

    root = value
    if isinstance(value, AddressedReadable):
        # The root's own address counts as visited so back references stop there
        state.visited.add(value.address)
        root = value.read(memory)

    if not is_traversable(type(root)):
        raise TypeError(
            f"{type(root).__qualname__} has no field procedure; decorate it with @traversable"
        )
    prepare(type(root))

    logger.debug("Printing %s (max_depth=%d)", type(root).__qualname__, state.max_depth)
    root.visit_fields(memory, state.depth, state.max_depth, state.visited, out=out)
    logger.debug(
        "Finished %s: %d addresses visited", type(root).__qualname__, len(state.visited)
    )
    return state


def pointer_print(
    value: Any,
    memory: MemoryReader,
    max_depth: int | None = None,
    *,
    out: TextIO | None = None,
    config: TraversalConfig | None = None,
) -> None:
    """Print a record as an indented tree, following its pointer fields.

    Args:
        value: A @traversable record, or a pointer to one. Passing a pointer
            marks the root's address as visited, so cycles back to the root
            are reported instead of printed twice.
        memory: Reader used to resolve every pointer field.
        max_depth: Pointer-following ceiling. Defaults to ``config.max_depth``
            (5). Zero prints only the root's delimiters.
            Each followed pointer costs two interpreter frames, so chains
            of several hundred links need a ceiling below
            ``sys.getrecursionlimit() // 2``.
        out: Stream to write to. Defaults to sys.stdout.
        config: Settings supplying the default depth.

    Raises:
        ValueError: If max_depth is negative.
        TypeError: If the root is not traversable.
        GenerationError: If the root or a record reachable through its
            pointer fields cannot be built. Raised before any output.
        ReadError: If ``value`` is a pointer whose pointee cannot be read.
            Failures on fields are printed inline instead.
    """
    _traverse(value, memory, max_depth, sys.stdout if out is None else out, config)


def visited_addresses(
    value: Any,
    memory: MemoryReader,
    max_depth: int | None = None,
    *,
    config: TraversalConfig | None = None,
) -> frozenset[int]:
    """Run a traversal without output and return the addresses it entered."""
    return frozenset(_traverse(value, memory, max_depth, io.StringIO(), config).visited)
