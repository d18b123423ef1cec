"""CloudLog analytics pump package following Clean Architecture layering."""

from .core.container import PumpContainer
from .pumps.cloudlog_pump import CloudLogPump

__all__ = [
    "CloudLogPump",
    "PumpContainer",
    "domain",
    "core",
    "pumps",
    "utils",
]
