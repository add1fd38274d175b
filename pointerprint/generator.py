"""Field-visiting procedures generated once per record type.

``@traversable`` turns a dataclass record into something pointer_print can
walk. When the class is decorated, its field list is read once and turned
into a record description (a tuple of FieldSpec). From that description a
procedure specialised to the record is assembled out of one step per visible
field, and installed as ``visit_fields``. Traversal then only calls the
prepared steps; no field or type inspection happens while printing.

Per-field policy, in declaration order:

1. Names containing the padding marker (``"_pad"``) produce no output.
2. Fields declared with an AddressedReadable type (e.g. ``Pointer[Node]``)
   are followed through the memory reader.
3. Everything else prints as ``name: Type = repr(value)``.

Records that point at classes defined further down the module cannot have
their annotations resolved yet when decorated. Their procedure is built on
first traversal instead and cached from then on.
"""

from __future__ import annotations

import dataclasses
import logging
import sys
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, TextIO, runtime_checkable

from pointerprint.config import DEFAULT_PADDING_MARKER, INDENT
from pointerprint.errors import GenerationError, ReadError
from pointerprint.pointer import AddressedReadable

if TYPE_CHECKING:
    from pointerprint.memory import MemoryReader

logger = logging.getLogger(__name__)

FIELDS_ATTR = "__pointerprint_fields__"
PADDING_ATTR = "__pointerprint_padding_marker__"

# (record, memory, depth, max_depth, visited, out)
Step = Callable[..., None]


@runtime_checkable
class Traversable(Protocol):
    """Protocol shared by every generated procedure.

    Hand-written implementations are accepted too, provided they honour the
    same output format and depth/visited contract.
    """

    def visit_fields(
        self,
        memory: MemoryReader,
        depth: int,
        max_depth: int,
        visited: set[int],
        *,
        out: TextIO | None = None,
    ) -> None: ...


@dataclass(frozen=True)
class FieldSpec:
    """Static description of one record field.

    Attributes:
        name: Attribute name on the record.
        type_label: Display name of the declared type.
        is_pointer: True if the field is followed through memory.
        is_padding: True if the field is excluded from output.
        target: Pointee record type for pointer fields.
    """

    name: str
    type_label: str
    is_pointer: bool
    is_padding: bool
    target: type | None = None


def is_traversable(cls: Any) -> bool:
    """Return True if ``cls`` defines its own visit_fields procedure.

    A procedure inherited from a traversable base does not count: it would
    print the subclass under the base's name and without its extra fields.
    """
    return isinstance(cls, type) and callable(cls.__dict__.get("visit_fields"))


def _type_label(annotation: Any) -> str:
    if annotation is type(None):
        return "None"
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return " | ".join(_type_label(arg) for arg in typing.get_args(annotation))
    origin = origin or annotation
    if isinstance(origin, type):
        return origin.__name__
    return "Unknown"


def _require_record(cls: Any) -> None:
    if not isinstance(cls, type):
        raise GenerationError(f"{cls!r} is not a class; only records can be traversed")
    if not dataclasses.is_dataclass(cls):
        raise GenerationError(
            f"{cls.__qualname__} is not a dataclass record; only types with a "
            "field list can be traversed (apply @traversable above @dataclass)",
            cls,
        )


def describe_record(
    cls: type, padding_marker: str = DEFAULT_PADDING_MARKER
) -> tuple[FieldSpec, ...]:
    """Build the static field description of a dataclass record.

    Raises:
        GenerationError: If ``cls`` is not a dataclass, an annotation cannot
            be evaluated (e.g. ``Pointer[T]`` with a type variable), or a
            pointer field has no traversable target type.
        NameError: If an annotation refers to a class that does not exist yet.
    """
    _require_record(cls)
    try:
        # The record itself is not bound in its module while being decorated
        hints = typing.get_type_hints(cls, localns={cls.__name__: cls})
    except TypeError as exc:
        raise GenerationError(
            f"cannot evaluate field types of {cls.__qualname__}: {exc}", cls
        ) from exc

    specs = []
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        is_padding = padding_marker in f.name
        is_pointer = (
            not is_padding
            and isinstance(annotation, type)
            and issubclass(annotation, AddressedReadable)
        )
        target = annotation.target if is_pointer else None
        if is_pointer:
            if target is None:
                raise GenerationError(
                    f"pointer field {cls.__qualname__}.{f.name} has no target type; "
                    "annotate it as Pointer[Record]",
                    cls,
                )
            if target is not cls and not is_traversable(target):
                raise GenerationError(
                    f"pointer field {cls.__qualname__}.{f.name} targets "
                    f"{target.__qualname__}, which is not @traversable",
                    cls,
                )
        specs.append(
            FieldSpec(
                name=f.name,
                type_label=_type_label(annotation),
                is_pointer=is_pointer,
                is_padding=is_padding,
                target=target,
            )
        )
    return tuple(specs)


def _plain_step(spec: FieldSpec) -> Step:
    name = spec.name
    label = f"{INDENT}{name}: {spec.type_label} = "

    def step(record, memory, depth, max_depth, visited, out):
        out.write(f"{INDENT * depth}{label}{getattr(record, name)!r}\n")

    return step


def _pointer_step(record_name: str, spec: FieldSpec) -> Step:
    name = spec.name

    def step(record, memory, depth, max_depth, visited, out):
        indent = INDENT * (depth + 1)
        pointer = getattr(record, name)
        address = pointer.address
        if address in visited:
            out.write(f"{indent}{name} → Already visited address {address:#x}\n")
            return

        # Marked before reading so back references resolve as visited
        visited.add(address)
        try:
            pointee = pointer.read(memory)
        except ReadError as exc:
            logger.debug("Reading %s.%s at %#x failed: %s", record_name, name, address, exc)
            out.write(f"{indent}{name} → Error reading: {exc}\n")
            return

        out.write(f"{indent}{name}->")
        pointee.visit_fields(memory, depth + 1, max_depth, visited, out=out)

    return step


def build_visitor(
    cls: type, padding_marker: str = DEFAULT_PADDING_MARKER
) -> Callable[..., None]:
    """Generate the visit_fields procedure for a record type.

    The returned function is not installed on ``cls``; see traversable().
    """
    specs = describe_record(cls, padding_marker)
    type_name = cls.__name__
    steps = [
        _pointer_step(type_name, spec) if spec.is_pointer else _plain_step(spec)
        for spec in specs
        if not spec.is_padding
    ]

    def visit_fields(self, memory, depth, max_depth, visited, *, out=None):
        if out is None:
            out = sys.stdout
        indent = INDENT * depth

        if depth >= max_depth:
            if depth == 0:
                out.write(f"{indent}{type_name} {{\n{indent}}}\n")
            else:
                # Terminates the caller's "field->" line
                out.write(f" {type_name} {{ ... }}\n")
            return

        if depth == 0:
            out.write(f"{indent}{type_name} {{\n")
        else:
            out.write(f" {type_name} {{\n")
        for step in steps:
            step(self, memory, depth, max_depth, visited, out)
        out.write(f"{indent}}}\n")

    visit_fields.__qualname__ = f"{cls.__qualname__}.visit_fields"
    visit_fields.__doc__ = f"Print the fields of {type_name}, following pointers."
    setattr(visit_fields, FIELDS_ATTR, specs)

    logger.debug(
        "Built field procedure for %s: %d fields, %d pointers, %d padding",
        cls.__qualname__,
        len(specs),
        sum(spec.is_pointer for spec in specs),
        sum(spec.is_padding for spec in specs),
    )
    return visit_fields


def _install(cls: type, padding_marker: str) -> Callable[..., None]:
    procedure = build_visitor(cls, padding_marker)
    cls.visit_fields = procedure
    setattr(cls, FIELDS_ATTR, getattr(procedure, FIELDS_ATTR))
    return procedure


def _build_deferred(cls: type) -> Callable[..., None]:
    try:
        return _install(cls, cls.__dict__[PADDING_ATTR])
    except NameError as exc:
        raise GenerationError(
            f"cannot resolve field types of {cls.__qualname__}: {exc}", cls
        ) from exc


def _deferred_visitor(cls: type) -> Callable[..., None]:
    def visit_fields(self, memory, depth, max_depth, visited, *, out=None):
        procedure = _build_deferred(cls)
        procedure(self, memory, depth, max_depth, visited, out=out)

    visit_fields.__qualname__ = f"{cls.__qualname__}.visit_fields"
    return visit_fields


def _pointer_print_method(self, memory, max_depth=None, *, out=None):
    """Print this record, following pointer fields through ``memory``."""
    from pointerprint.engine import pointer_print

    pointer_print(self, memory, max_depth, out=out)


def traversable(cls=None, *, padding_marker: str = DEFAULT_PADDING_MARKER):
    """Class decorator that generates the field-visiting procedure of a record.

    Adds ``visit_fields`` (the Traversable contract) and a ``pointer_print``
    convenience method to a dataclass.

    Args:
        padding_marker: Fields whose name contains this substring are hidden.

    Raises:
        GenerationError: If the class is not a dataclass or a pointer field
            is malformed.

    Example::

        @traversable
        @dataclass
        class Node:
            id: int
            next: Pointer[Node]
            _pad0: bytes = b""
    """
    if not padding_marker:
        raise ValueError("padding_marker must not be empty")

    def wrap(cls):
        _require_record(cls)
        setattr(cls, PADDING_ATTR, padding_marker)
        cls.pointer_print = _pointer_print_method
        try:
            _install(cls, padding_marker)
        except NameError as exc:
            logger.debug("Deferring field procedure for %s: %s", cls.__qualname__, exc)
            cls.visit_fields = _deferred_visitor(cls)
        return cls

    if cls is None:
        return wrap
    return wrap(cls)


def record_fields(cls: type) -> tuple[FieldSpec, ...]:
    """Return the field description a traversable record was built from.

    Builds a deferred procedure first if needed.

    Raises:
        GenerationError: If ``cls`` itself was not decorated with @traversable.
    """
    if not isinstance(cls, type) or PADDING_ATTR not in cls.__dict__:
        raise GenerationError(f"{cls!r} is not @traversable")
    if FIELDS_ATTR not in cls.__dict__:
        _build_deferred(cls)
    return cls.__dict__[FIELDS_ATTR]


def prepare(cls: type) -> None:
    """Build every deferred procedure reachable from ``cls``.

    Follows pointer targets transitively, so generation errors surface
    before a traversal has written anything. Hand-written Traversable
    classes are left alone.

    Raises:
        GenerationError: If any reachable record cannot be built.
    """
    seen = set()
    pending = [cls]
    while pending:
        current = pending.pop()
        if current in seen or PADDING_ATTR not in current.__dict__:
            continue
        seen.add(current)
        pending.extend(spec.target for spec in record_fields(current) if spec.is_pointer)
