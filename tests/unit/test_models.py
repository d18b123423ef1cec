import time
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from cloudlog_pump.domain.models import (
    AnalyticsRecord,
    CloudLogPumpConfig,
    WriteContext,
)


def test_analytics_record_defaults_and_is_immutable():
    record = AnalyticsRecord(timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc))

    assert record.method == ""
    assert record.response_code == 0
    assert record.tags == []
    assert record.track_path is False
    assert record.expire_at is None

    with pytest.raises(ValidationError):
        record.method = "GET"  # type: ignore[misc]


def test_analytics_record_parses_iso_timestamps():
    record = AnalyticsRecord.model_validate(
        {"timestamp": "2024-05-01T10:00:00Z", "tags": ["a", "b"]}
    )

    assert record.timestamp == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
    assert record.tags == ["a", "b"]


def test_cloudlog_config_decodes_known_fields_and_ignores_extras():
    config = CloudLogPumpConfig.model_validate(
        {
            "url": " https://logs.example.com/ingest ",
            "token": "secret",
            "environment": "staging",
            "unused": 42,
        }
    )

    assert config.url == "https://logs.example.com/ingest"
    assert config.token == "secret"
    assert config.environment == "staging"
    assert not hasattr(config, "unused")


def test_cloudlog_config_defaults_token_and_environment():
    config = CloudLogPumpConfig(url="http://localhost:9000")

    assert config.token == ""
    assert config.environment == ""


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"url": ""},
        {"url": "   "},
        {"url": "ftp://logs.example.com"},
        {"url": 123},
        {"url": "https://logs.example.com", "token": 99},
    ],
)
def test_cloudlog_config_rejects_malformed_values(payload):
    with pytest.raises(ValidationError):
        CloudLogPumpConfig.model_validate(payload)


def test_cloudlog_config_is_immutable():
    config = CloudLogPumpConfig(url="https://logs.example.com")

    with pytest.raises(ValidationError):
        config.url = "https://other.example.com"  # type: ignore[misc]


def test_background_context_never_expires():
    ctx = WriteContext.background()

    assert ctx.remaining() is None
    assert ctx.done is False


def test_context_cancel_marks_done():
    ctx = WriteContext.background()
    ctx.cancel()

    assert ctx.cancelled is True
    assert ctx.done is True


def test_context_with_timeout_counts_down():
    ctx = WriteContext.with_timeout(30)

    remaining = ctx.remaining()
    assert remaining is not None
    assert 0 < remaining <= 30
    assert ctx.done is False


def test_context_with_elapsed_deadline_is_done():
    ctx = WriteContext(deadline=time.monotonic() - 1)

    assert ctx.remaining() == 0.0
    assert ctx.done is True


def test_context_rejects_negative_timeout():
    with pytest.raises(ValueError):
        WriteContext.with_timeout(-1)
