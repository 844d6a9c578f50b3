"""Telemetry hooks for resource operations.

Metric backends plug in as a ``TelemetryProvider``. The client only talks to a
``TelemetryHandler``, which never lets a telemetry failure break a request.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Optional, Protocol

from .errors import TelemetryConfigurationError


logger = logging.getLogger(__name__)


class TelemetryResourceOperation(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class TelemetryProvider(Protocol):
    def validate(self) -> None:
        """Raise ``TelemetryConfigurationError`` when the provider cannot be used."""
        ...

    async def inc_plugin_version_total_runs_counter(self, plugin_version: str) -> None: ...

    async def inc_resource_total_runs_counter(
        self, provider_name: str, resource_name: str, operation: TelemetryResourceOperation
    ) -> None: ...


class TelemetryHandler(Protocol):
    async def submit_plugin_execution_metrics(self) -> None: ...

    async def submit_resource_execution_metrics(
        self, resource_name: str, operation: TelemetryResourceOperation
    ) -> None: ...


class ProviderTelemetryHandler:
    """Forwards metrics to a provider, bounded by ``timeout_seconds``.

    Provider errors and timeouts are logged and dropped.
    """

    def __init__(
        self,
        provider_name: str,
        plugin_version: str,
        telemetry_provider: TelemetryProvider,
        timeout_seconds: float = 2,
    ) -> None:
        self.provider_name = provider_name
        self.plugin_version = plugin_version
        self.telemetry_provider = telemetry_provider
        self.timeout_seconds = timeout_seconds

    async def submit_plugin_execution_metrics(self) -> None:
        await self._submit(
            "plugin version counter",
            self.telemetry_provider.inc_plugin_version_total_runs_counter(self.plugin_version),
        )

    async def submit_resource_execution_metrics(
        self, resource_name: str, operation: TelemetryResourceOperation
    ) -> None:
        await self._submit(
            f"resource counter ({resource_name} {operation.value})",
            self.telemetry_provider.inc_resource_total_runs_counter(
                self.provider_name, resource_name, operation
            ),
        )

    async def _submit(self, metric: str, submission: Awaitable[None]) -> None:
        try:
            await asyncio.wait_for(submission, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("Telemetry submission timed out after %ss: %s", self.timeout_seconds, metric)
        except Exception as exc:
            logger.warning("Telemetry submission failed: %s (%s)", metric, exc)


def build_telemetry_handler(
    provider_name: str,
    plugin_version: str,
    telemetry_provider: Optional[TelemetryProvider],
    timeout_seconds: float = 2,
) -> Optional[ProviderTelemetryHandler]:
    """Return a handler for a valid provider; telemetry stays disabled otherwise."""
    if telemetry_provider is None:
        return None
    try:
        telemetry_provider.validate()
    except TelemetryConfigurationError as exc:
        logger.warning("Telemetry disabled, provider configuration is not valid: %s", exc)
        return None
    return ProviderTelemetryHandler(provider_name, plugin_version, telemetry_provider, timeout_seconds)
