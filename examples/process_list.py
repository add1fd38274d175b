"""Walk a captured process list and print it with pointers followed.

Each process entry links to the next one (forming a ring back to the head)
and to an image descriptor. Layout padding fields are hidden from the output.
One entry has a corrupted image pointer to show how read failures are
reported inline without stopping the walk.

Run with PP_LOGGING=DEBUG to see generation and read-failure diagnostics on
stderr, and PP_MAX_DEPTH to change how far pointers are followed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pointerprint import (
    MappedMemory,
    Pointer,
    TraversalConfig,
    configure_from_env,
    pointer_print,
    traversable,
)


@traversable
@dataclass
class ImageInfo:
    name: str
    base: int
    _pad_0x10: bytes = field(default=bytes(8), repr=False)


@traversable
@dataclass
class Process:
    pid: int
    _pad_0x4: bytes
    image: Pointer[ImageInfo]
    flink: Pointer[Process]
    exit_status: int | None = None


def build_snapshot() -> MappedMemory:
    memory = MappedMemory()
    memory.place(0x7000, ImageInfo("systemd", 0x5555_0000))
    memory.place(0x7100, ImageInfo("sshd", 0x5566_0000))

    memory.place(0x2000, Process(1, bytes(4), Pointer[ImageInfo](0x7000), Pointer[Process](0x2400)))
    memory.place(0x2400, Process(812, bytes(4), Pointer[ImageInfo](0x7100), Pointer[Process](0x2800)))
    # Image pointer overwritten with garbage
    memory.place(0x2800, Process(813, bytes(4), Pointer[ImageInfo](0x4141_4141), Pointer[Process](0x2000)))
    return memory


if __name__ == "__main__":
    configure_from_env()
    config = TraversalConfig.from_env()

    pointer_print(Pointer[Process](0x2000), build_snapshot(), config=config)
