"""Container that assembles fully-initialized pumps from configuration."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from cloudlog_pump.core.config import PumpDefinition, PumpsConfig
from cloudlog_pump.domain.interfaces import IPump
from cloudlog_pump.pumps.factory import PumpFactory

logger = logging.getLogger(__name__)


class PumpContainer:
    """Factory helpers that build configured pump instances."""

    @staticmethod
    def create_pumps(
        config: Optional[PumpsConfig] = None,
        *,
        factory: Optional[PumpFactory] = None,
    ) -> Dict[str, IPump]:
        cfg = config or PumpsConfig.from_env()
        if not cfg.pumps:
            raise ValueError("At least one pump must be configured")

        pump_factory = factory or PumpFactory()
        pumps: Dict[str, IPump] = {}
        for name, definition in cfg.pumps.items():
            pumps[name] = PumpContainer.create_pump(definition, pump_factory)
        return pumps

    @staticmethod
    def create_pump(definition: PumpDefinition, factory: PumpFactory) -> IPump:
        pump = factory.create(definition.type)
        pump.set_timeout(definition.timeout)
        pump.init(dict(definition.meta))
        logger.info(
            "pump_initialized",
            extra={
                "pump": definition.name,
                "type": definition.type,
                "display_name": pump.get_name(),
                "timeout": definition.timeout,
            },
        )
        return pump
