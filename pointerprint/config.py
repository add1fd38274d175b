"""Traversal settings.

Environment variables:
    PP_MAX_DEPTH: Default pointer-following depth for TraversalConfig.from_env().
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_DEPTH = 5
DEFAULT_PADDING_MARKER = "_pad"

# Output indentation per depth level
INDENT = "  "


@dataclass(frozen=True)
class TraversalConfig:
    """Settings shared by pointer_print calls.

    Attributes:
        max_depth: Depth ceiling used when a call does not pass one.
    """

    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")

    @classmethod
    def from_env(cls) -> TraversalConfig:
        """Build a config from PP_MAX_DEPTH, falling back to defaults."""
        raw = os.environ.get("PP_MAX_DEPTH", "").strip()
        if not raw:
            return cls()
        try:
            max_depth = int(raw)
        except ValueError:
            raise ValueError(f"PP_MAX_DEPTH must be an integer, got {raw!r}") from None
        return cls(max_depth=max_depth)
