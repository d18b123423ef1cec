"""Basic pump example: build from env-style settings and ship one batch."""

import logging
from datetime import datetime, timezone

from cloudlog_pump.core.config import PumpDefinition, PumpsConfig
from cloudlog_pump.core.container import PumpContainer
from cloudlog_pump.domain.models import AnalyticsRecord, WriteContext


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    config = PumpsConfig(
        pumps={
            "cloudlog": PumpDefinition(
                name="cloudlog",
                timeout=5,
                meta={
                    "url": "https://cloudlog.example.com/api/v1/logs",
                    "token": "demo-token",
                    "environment": "staging",
                },
            )
        }
    )
    pump = PumpContainer.create_pumps(config)["cloudlog"]

    record = AnalyticsRecord(
        timestamp=datetime.now(timezone.utc),
        method="GET",
        path="/v1/users",
        response_code=200,
        tags=["engine-cloudlog::team::identity", "accept-language-en-US"],
    )
    pump.write_data(WriteContext.with_timeout(10), [record])


if __name__ == "__main__":
    main()
