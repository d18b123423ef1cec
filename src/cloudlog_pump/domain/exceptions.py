"""Exception hierarchy for pump configuration and delivery failures."""

from __future__ import annotations

from typing import Any, Mapping


class PumpError(Exception):
    """Base class for all errors raised by analytics pumps."""

    default_message = "Pump error occurred"

    def __init__(
        self, message: str | None = None, *, context: Mapping[str, Any] | None = None
    ):
        self.message = message or self.default_message
        self.context: Mapping[str, Any] = dict(context or {})
        formatted = self._format_message()
        super().__init__(formatted)

    def _format_message(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


class PumpConfigError(PumpError):
    """Pump configuration could not be decoded or failed validation."""

    default_message = "Failed to decode configuration"


class InvalidRecordError(PumpError):
    """A batch element is not a usable analytics record."""

    default_message = "Invalid analytics record"


class PumpSerializationError(PumpError):
    """The outbound envelope could not be encoded."""

    default_message = "Failed to serialize records"


class PumpDeliveryError(PumpError):
    """The envelope could not be handed to the remote endpoint."""

    default_message = "Failed to deliver records"


class UnknownPumpTypeError(PumpError):
    """No pump class is registered under the requested type name."""

    default_message = "Unknown pump type"
