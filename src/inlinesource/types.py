from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol


class ArtifactLike(Protocol):
    """Minimal protocol for a build artifact: content retrieved on demand."""

    def source(self) -> str | bytes:  # pragma: no cover - typing
        ...


ArtifactTable = Mapping[str, ArtifactLike]

# Progress/decision callback: (event name, payload)
InlineEventCallback = Callable[[str, dict[str, Any]], None]
