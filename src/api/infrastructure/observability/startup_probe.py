"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_starting(self, version: str, driver: str) -> None:
        """Record that the application lifespan has begun."""
        ...

    def control_plane_schema_ensured(self, database: str) -> None:
        """Record that the tenant registry table exists."""
        ...

    def control_plane_pool_warmed(self, connections: int) -> None:
        """Record that the control-plane pool holds its minimum connections."""
        ...

    def application_stopped(self) -> None:
        """Record that every pool and engine was released."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        """Create a new probe with observation context bound."""
        return DefaultStartupProbe(logger=self._logger, context=context)

    def application_starting(self, version: str, driver: str) -> None:
        """Record that the application lifespan has begun."""
        self._logger.info(
            "application_starting",
            version=version,
            driver=driver,
            **self._get_context_kwargs(),
        )

    def control_plane_schema_ensured(self, database: str) -> None:
        """Record that the tenant registry table exists."""
        self._logger.info(
            "control_plane_schema_ensured",
            database=database,
            **self._get_context_kwargs(),
        )

    def control_plane_pool_warmed(self, connections: int) -> None:
        self._logger.info(
            "control_plane_pool_warmed",
            connections=connections,
            **self._get_context_kwargs(),
        )

    def application_stopped(self) -> None:
        """Record that every pool and engine was released."""
        self._logger.info(
            "application_stopped",
            **self._get_context_kwargs(),
        )
