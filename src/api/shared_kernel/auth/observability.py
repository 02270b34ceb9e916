"""Domain probe for bearer token validation.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to token validation.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class TokenValidatorProbe(Protocol):
    """Domain probe for token validation operations."""

    def token_validated(self, user_id: str, tenant_id: str | None) -> None:
        """Record that a token was successfully validated."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """Record that token validation failed."""
        ...

    def with_context(self, context: ObservationContext) -> TokenValidatorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTokenValidatorProbe:
    """Default implementation of TokenValidatorProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTokenValidatorProbe:
        """Create a new probe with observation context bound."""
        return DefaultTokenValidatorProbe(logger=self._logger, context=context)

    def token_validated(self, user_id: str, tenant_id: str | None) -> None:
        """Record that a token was successfully validated."""
        self._logger.debug(
            "token_validated",
            user_id=user_id,
            token_tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def token_validation_failed(self, reason: str) -> None:
        """Record that token validation failed."""
        self._logger.warning(
            "token_validation_failed",
            reason=reason,
            **self._get_context_kwargs(),
        )
