"""Domain value objects consumed and produced by analytics pumps."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnalyticsRecord(BaseModel):
    """Immutable gateway analytics record as supplied by the collector."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    method: str = ""
    host: str = ""
    path: str = ""
    raw_path: str = ""
    content_length: int = 0
    user_agent: str = ""
    day: int = 0
    month: int = 0
    year: int = 0
    hour: int = 0
    response_code: int = 0
    api_key: str = ""
    api_version: str = ""
    api_name: str = ""
    api_id: str = ""
    org_id: str = ""
    oauth_id: str = ""
    request_time: int = Field(default=0, description="Upstream latency in ms")
    raw_request: str = ""
    raw_response: str = ""
    ip_address: str = ""
    tags: List[str] = Field(default_factory=list)
    track_path: bool = False
    expire_at: Optional[datetime] = None


class CloudLogPumpConfig(BaseModel):
    """Typed settings recognised by the CloudLog pump."""

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    url: str
    token: str = ""
    environment: str = ""

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("url must be a non-empty string")
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError("url must use the http or https scheme")
        return value


@dataclass
class WriteContext:
    """Cancellable per-call context with an optional monotonic deadline."""

    deadline: Optional[float] = None
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def background(cls) -> "WriteContext":
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "WriteContext":
        if seconds < 0:
            raise ValueError("timeout cannot be negative")
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when unbounded."""

        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    @property
    def done(self) -> bool:
        if self.cancelled:
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0
