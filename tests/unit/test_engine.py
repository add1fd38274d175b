"""Unit tests for pointer_print and the traversal state."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pytest

from pointerprint import (
    MappedMemory,
    Pointer,
    ReadError,
    TraversalConfig,
    TraversalState,
    pointer_print,
    traversable,
    visited_addresses,
)


@traversable
@dataclass
class Link:
    id: int
    next: Pointer[Link]


@traversable
@dataclass
class Leaf:
    value: int


@dataclass
class PlainLeaf(Leaf):
    note: str


@dataclass
class Untracked:
    value: int


@pytest.fixture
def chain():
    """Root Link(0) -> 0x10 -> 0x20 -> 0x30 -> 0x0 (unmapped)."""
    memory = MappedMemory(
        {
            0x10: Link(1, Pointer[Link](0x20)),
            0x20: Link(2, Pointer[Link](0x30)),
            0x30: Link(3, Pointer[Link](0x0)),
        }
    )
    return Link(0, Pointer[Link](0x10)), memory


class TestTraversalState:
    def test_defaults(self):
        state = TraversalState(max_depth=3)
        assert state.depth == 0
        assert state.visited == set()

    def test_visited_not_shared(self):
        assert TraversalState(1).visited is not TraversalState(1).visited


class TestDepthCeiling:
    def test_default_depth_follows_whole_chain(self, chain, out):
        root, memory = chain
        pointer_print(root, memory, out=out)

        assert out.getvalue() == (
            "Link {\n"
            "  id: int = 0\n"
            "  next-> Link {\n"
            "    id: int = 1\n"
            "    next-> Link {\n"
            "      id: int = 2\n"
            "      next-> Link {\n"
            "        id: int = 3\n"
            "        next → Error reading: address 0x0 is not mapped\n"
            "      }\n"
            "    }\n"
            "  }\n"
            "}\n"
        )

    def test_zero_prints_only_root_delimiters(self, chain, out):
        root, memory = chain
        pointer_print(root, memory, 0, out=out)
        assert out.getvalue() == "Link {\n}\n"

    def test_one_follows_a_single_level(self, chain, out):
        root, memory = chain
        pointer_print(root, memory, 1, out=out)

        assert out.getvalue() == (
            "Link {\n"
            "  id: int = 0\n"
            "  next-> Link { ... }\n"
            "}\n"
        )

    def test_two(self, chain, out):
        root, memory = chain
        pointer_print(root, memory, 2, out=out)

        assert out.getvalue() == (
            "Link {\n"
            "  id: int = 0\n"
            "  next-> Link {\n"
            "    id: int = 1\n"
            "    next-> Link { ... }\n"
            "  }\n"
            "}\n"
        )

    def test_negative_depth_rejected(self, chain, out):
        root, memory = chain
        with pytest.raises(ValueError, match="max_depth"):
            pointer_print(root, memory, -1, out=out)
        assert out.getvalue() == ""

    def test_config_supplies_default(self, chain, out):
        root, memory = chain
        pointer_print(root, memory, out=out, config=TraversalConfig(max_depth=0))
        assert out.getvalue() == "Link {\n}\n"

    def test_explicit_depth_overrides_config(self, chain, out):
        root, memory = chain
        pointer_print(root, memory, 0, out=out, config=TraversalConfig(max_depth=5))
        assert out.getvalue() == "Link {\n}\n"


class TestVisitedAddresses:
    def test_addresses_marked_before_read(self, chain):
        root, memory = chain
        # 0x0 fails to read but was still entered
        assert visited_addresses(root, memory) == {0x10, 0x20, 0x30, 0x0}

    def test_depth_limits_visits(self, chain):
        root, memory = chain
        assert visited_addresses(root, memory, 0) == frozenset()
        assert visited_addresses(root, memory, 2) == {0x10, 0x20}

    def test_state_never_leaks_between_calls(self, chain, out):
        root, memory = chain
        pointer_print(root, memory, out=out)
        first = out.getvalue()

        out.seek(0)
        out.truncate()
        pointer_print(root, memory, out=out)

        assert out.getvalue() == first
        assert "Already visited" not in first


class TestRoot:
    def test_defaults_to_stdout(self, capsys):
        pointer_print(Leaf(4), MappedMemory())
        assert capsys.readouterr().out == "Leaf {\n  value: int = 4\n}\n"

    def test_untraversable_root(self, out):
        with pytest.raises(TypeError, match="decorate it with @traversable"):
            pointer_print(Untracked(1), MappedMemory(), out=out)

    def test_undecorated_subclass_root(self, out):
        with pytest.raises(TypeError, match="PlainLeaf has no field procedure"):
            pointer_print(PlainLeaf(1, "hidden"), MappedMemory(), out=out)
        assert out.getvalue() == ""

    def test_pointer_root_is_dereferenced(self, out):
        memory = MappedMemory({0x80: Leaf(8)})
        pointer_print(Pointer[Leaf](0x80), memory, out=out)
        assert out.getvalue() == "Leaf {\n  value: int = 8\n}\n"

    def test_pointer_root_address_counts_as_visited(self, out):
        memory = MappedMemory({0x80: Link(1, Pointer[Link](0x80))})
        pointer_print(Pointer[Link](0x80), memory, out=out)

        assert out.getvalue() == (
            "Link {\n"
            "  id: int = 1\n"
            "  next → Already visited address 0x80\n"
            "}\n"
        )

    def test_unreadable_pointer_root_raises(self, out):
        with pytest.raises(ReadError):
            pointer_print(Pointer[Leaf](0x80), MappedMemory(), out=out)
        assert out.getvalue() == ""


class TestLogging:
    def test_logs_start_finish_and_failures(self, chain, out, caplog):
        root, memory = chain
        with caplog.at_level(logging.DEBUG, logger="pointerprint"):
            pointer_print(root, memory, out=out)

        assert "Printing Link (max_depth=5)" in caplog.text
        assert "Reading Link.next at 0x0 failed" in caplog.text
        assert "Finished Link: 4 addresses visited" in caplog.text

    def test_tree_is_not_logged(self, chain, out, caplog):
        root, memory = chain
        with caplog.at_level(logging.DEBUG, logger="pointerprint"):
            pointer_print(root, memory, out=out)

        assert "id: int" not in caplog.text
