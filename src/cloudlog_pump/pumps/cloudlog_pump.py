"""CloudLog pump that forwards analytics batches to a log-ingestion endpoint."""

from __future__ import annotations

import json
import logging
from typing import (
    AbstractSet,
    Any,
    Dict,
    Iterable,
    List,
    NamedTuple,
    Optional,
    Sequence,
)

import httpx
from pydantic import ValidationError

from cloudlog_pump.domain.exceptions import (
    PumpConfigError,
    PumpDeliveryError,
    PumpSerializationError,
)
from cloudlog_pump.domain.models import (
    AnalyticsRecord,
    CloudLogPumpConfig,
    WriteContext,
)
from cloudlog_pump.utils.timefmt import format_rfc3339

from .base import BasePump


CLOUDLOG_TAG_PREFIX = "engine-cloudlog"
CLOUDLOG_TAG_SEPARATOR = "::"


class HeaderTagRule(NamedTuple):
    prefix: str
    field: str
    exclude: Optional[str] = None


# accept-language- must stay ahead of the bare accept- rule, which skips it.
HEADER_TAG_RULES = (
    HeaderTagRule("x-origin-path-", "origin_path"),
    HeaderTagRule("x-origin-method-", "origin_method"),
    HeaderTagRule("accept-language-", "accept_language"),
    HeaderTagRule("accept-", "accept", exclude="accept-language-"),
    HeaderTagRule("content-type-", "content_type"),
    HeaderTagRule("referer-", "referer"),
    HeaderTagRule("origin-", "origin"),
)


def apply_cloudlog_keys(
    tags: Iterable[str],
    document: Dict[str, Any],
    reserved: AbstractSet[str] = frozenset(),
) -> None:
    """Copy ``engine-cloudlog::<key>::<value>`` tags into ``document``.

    Keys listed in ``reserved`` are never overwritten.
    """

    for tag in tags:
        parts = tag.split(CLOUDLOG_TAG_SEPARATOR)
        if len(parts) == 3 and parts[0] == CLOUDLOG_TAG_PREFIX:
            if parts[1] in reserved:
                continue
            document[parts[1]] = parts[2]


def apply_header_keys(tags: Iterable[str], document: Dict[str, Any]) -> None:
    """Map header-style tags (``referer-...`` etc.) onto named fields."""

    for tag in tags:
        for rule in HEADER_TAG_RULES:
            if not tag.startswith(rule.prefix):
                continue
            if rule.exclude is not None and tag.startswith(rule.exclude):
                continue
            document[rule.field] = tag[len(rule.prefix):]


class CloudLogPump(BasePump):
    """Pump that POSTs ``{"records": [...]}`` envelopes to CloudLog."""

    LOG_PREFIX = "cloudlog-pump"
    NAME = "CloudLog Pump"
    REQUIRES_HTTP_CLIENT = True

    def __init__(
        self,
        http_client: Optional[httpx.Client] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(logger=logger)
        self._http = http_client or httpx.Client()
        self._config: Optional[CloudLogPumpConfig] = None

    @property
    def config(self) -> CloudLogPumpConfig:
        if self._config is None:
            raise PumpConfigError("CloudLog pump used before init()")
        return self._config

    def close(self) -> None:
        """Close the HTTP client; the pump owns it once handed over."""

        self._http.close()

    def _configure(self, config: Any) -> None:
        if isinstance(config, CloudLogPumpConfig):
            self._config = config
        else:
            try:
                self._config = CloudLogPumpConfig.model_validate(config)
            except ValidationError as exc:
                self.log.error("Failed to decode configuration: %s", exc)
                raise PumpConfigError(
                    "Failed to decode configuration",
                    context={"pump": self.NAME, "errors": exc.error_count()},
                ) from exc

        self.log.info("Initializing CloudLog Pump")

    def write_data(
        self, ctx: Optional[WriteContext], records: Sequence[Any]
    ) -> None:
        ctx = ctx or WriteContext.background()
        self.log.info("Writing %d records", len(records))

        batch = self._coerce_records(records)
        envelope = {"records": [self.build_document(record) for record in batch]}
        payload = self._serialize(envelope)

        try:
            self._push(ctx, payload)
        except PumpDeliveryError as exc:
            self.log.error("Cannot log data to cloudlog: %s", exc)

    def build_document(self, record: AnalyticsRecord) -> Dict[str, Any]:
        """Flatten one record into the outbound key/value document."""

        document: Dict[str, Any] = {
            "timestamp": format_rfc3339(record.timestamp),
            "environment": self.config.environment,
            "method": record.method,
            "host": record.host,
            "path": record.path,
            "raw_path": record.raw_path,
            "response_code": record.response_code,
            "api_key": record.api_key,
            "api_version": record.api_version,
            "api_name": record.api_name,
            "api_id": record.api_id,
            "org_id": record.org_id,
            "oauth_id": record.oauth_id,
            "raw_request": record.raw_request,
            "raw_response": record.raw_response,
            "request_time": record.request_time,
            "ip_address": record.ip_address,
            "user_agent": record.user_agent,
            # Optional
            "track_path": record.track_path,
            "expire_at": format_rfc3339(record.expire_at),
            "day": record.day,
            "month": record.month,
            "year": record.year,
            "hour": record.hour,
            "content_length": record.content_length,
            "tags": list(record.tags),
        }
        # Base fields are fixed; structured tags may only add new keys.
        apply_cloudlog_keys(record.tags, document, reserved=frozenset(document))
        apply_header_keys(record.tags, document)
        return document

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _serialize(envelope: Dict[str, List[Dict[str, Any]]]) -> bytes:
        try:
            encoded = json.dumps(
                envelope,
                separators=(",", ":"),
                ensure_ascii=False,
                allow_nan=False,
            ).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise PumpSerializationError(
                f"failed to marshal decoded data: {exc}"
            ) from exc
        return encoded

    def _push(self, ctx: WriteContext, payload: bytes) -> None:
        if ctx.done:
            raise PumpDeliveryError(
                "Write context finished before delivery",
                context={"cancelled": ctx.cancelled},
            )

        request_kwargs: Dict[str, Any] = {}
        timeout = self._request_timeout(ctx)
        if timeout is not None:
            request_kwargs["timeout"] = timeout

        try:
            # Token bytes go out as-is; no scheme prefix is added.
            headers = {
                "Authorization": self.config.token.encode("utf-8"),
                "Content-Type": "application/json",
            }
            request = self._http.build_request(
                "POST",
                self.config.url,
                content=payload,
                headers=headers,
                **request_kwargs,
            )
        except (httpx.InvalidURL, ValueError) as exc:
            self.log.error("Cannot create new request: %s", exc)
            raise PumpDeliveryError(
                "Cannot create new request", context={"url": self.config.url}
            ) from exc

        try:
            response = self._http.send(request)
        except httpx.HTTPError as exc:
            self.log.error("Cannot post data: %s", exc)
            raise PumpDeliveryError(
                "Cannot post data", context={"url": self.config.url}
            ) from exc

        try:
            self.log.info(
                "CloudLog request responded with a %d status code",
                response.status_code,
                extra={"status_code": response.status_code},
            )
        finally:
            response.close()

    def _request_timeout(self, ctx: WriteContext) -> Optional[float]:
        """Pump timeout capped by the context deadline; None means client default."""

        candidates = [float(self._timeout)] if self._timeout > 0 else []
        remaining = ctx.remaining()
        if remaining is not None:
            candidates.append(remaining)
        return min(candidates) if candidates else None
