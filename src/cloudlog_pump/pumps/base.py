"""Pump abstractions and shared lifecycle behavior."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from cloudlog_pump.domain.exceptions import InvalidRecordError
from cloudlog_pump.domain.models import AnalyticsRecord, WriteContext

PumpLogger = Union[logging.Logger, logging.LoggerAdapter]


class BasePump(ABC):
    """Template base class that handles logging context and timeouts."""

    LOG_PREFIX = "pump"
    NAME = "Base Pump"
    REQUIRES_HTTP_CLIENT = False

    def __init__(self, *, logger: Optional[logging.Logger] = None) -> None:
        self._base_logger = logger or logging.getLogger(
            f"{__name__}.{self.__class__.__name__}"
        )
        self.log: PumpLogger = self._base_logger
        self._timeout = 0

    @classmethod
    def new(cls, **kwargs: Any) -> "BasePump":
        """Return a fresh, unconfigured instance."""

        return cls(**kwargs)

    def get_name(self) -> str:
        return self.NAME

    def init(self, config: Any) -> None:
        """Attach the prefixed logging context, then decode ``config``."""

        self.log = logging.LoggerAdapter(
            self._base_logger, {"prefix": self.LOG_PREFIX}
        )
        self._configure(config)

    @abstractmethod
    def _configure(self, config: Any) -> None:
        """Pump-specific configuration decoding implemented by subclasses."""

    @abstractmethod
    def write_data(self, ctx: WriteContext, records: Sequence[Any]) -> None:
        """Forward one batch of records to the pump's sink."""

    def set_timeout(self, timeout: int) -> None:
        if timeout < 0:
            raise ValueError("timeout cannot be negative")
        self._timeout = timeout

    def get_timeout(self) -> int:
        return self._timeout

    def close(self) -> None:
        """Release resources held by the pump; safe to call more than once."""

    def _coerce_records(self, records: Sequence[Any]) -> List[AnalyticsRecord]:
        """Validate every batch element, failing the batch on the first bad one."""

        coerced: List[AnalyticsRecord] = []
        for index, item in enumerate(records):
            if isinstance(item, AnalyticsRecord):
                coerced.append(item)
                continue
            if isinstance(item, Mapping):
                try:
                    coerced.append(AnalyticsRecord.model_validate(item))
                except ValidationError as exc:
                    raise InvalidRecordError(
                        "Record failed validation",
                        context={"index": index, "errors": exc.error_count()},
                    ) from exc
                continue
            raise InvalidRecordError(
                "Unsupported record type",
                context={"index": index, "type": type(item).__name__},
            )
        return coerced
