"""Pump factory that wires HTTP clients to concrete pump classes."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Type

import httpx

from cloudlog_pump.domain.exceptions import UnknownPumpTypeError

from .base import BasePump
from .cloudlog_pump import CloudLogPump


class PumpFactory:
    """Registry mapping pump type names to classes; every create is fresh."""

    def __init__(
        self, http_client_factory: Optional[Callable[[], httpx.Client]] = None
    ):
        self._http_client_factory = http_client_factory or httpx.Client
        self._registry: Dict[str, Type[BasePump]] = {}
        self._register_defaults()

    def create(self, pump_type: str) -> BasePump:
        pump_cls = self._detect_pump(pump_type)
        if pump_cls.REQUIRES_HTTP_CLIENT:
            return pump_cls.new(http_client=self._http_client_factory())
        return pump_cls.new()

    def register_pump(self, pump_type: str, pump_class: Type[BasePump]) -> None:
        self._registry[self._normalize(pump_type)] = pump_class

    def available_types(self) -> List[str]:
        return sorted(self._registry)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _register_defaults(self) -> None:
        self.register_pump("cloudlog", CloudLogPump)

    def _detect_pump(self, pump_type: str) -> Type[BasePump]:
        try:
            return self._registry[self._normalize(pump_type)]
        except KeyError as exc:
            raise UnknownPumpTypeError(
                f"No pump registered for type '{pump_type}'",
                context={"available": self.available_types()},
            ) from exc

    @staticmethod
    def _normalize(pump_type: str) -> str:
        return pump_type.strip().lower()
