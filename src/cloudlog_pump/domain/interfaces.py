"""Domain-level interfaces defining the pump lifecycle contract."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from .models import WriteContext


class IPump(Protocol):
    """Contract every analytics pump must satisfy."""

    @classmethod
    def new(cls, **kwargs: Any) -> "IPump":
        """Return a fresh, unconfigured instance of the pump."""

    def get_name(self) -> str:
        """Return the human-readable identifier used in diagnostics."""

    def init(self, config: Any) -> None:
        """Decode and store the pump configuration."""

    def write_data(self, ctx: WriteContext, records: Sequence[Any]) -> None:
        """Forward one batch of analytics records to the pump's sink."""

    def set_timeout(self, timeout: int) -> None:
        """Store the per-write timeout in seconds."""

    def get_timeout(self) -> int:
        """Return the per-write timeout in seconds."""

    def close(self) -> None:
        """Release the resources owned by the pump."""
