"""Observation context for domain-oriented observability.

A probe bound to a context adds the context's metadata to every event it
emits. Request-scoped values (request id, tenant id, principal id) are
normally carried by structlog context variables instead; an explicit
context names the actor of a provisioning run or the application at
startup.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable metadata attached to probe events.

    Attributes:
        request_id: Identifier of the request or operation.
        user_id: Principal performing the operation.
        extra: Any further key/value pairs.
    """

    request_id: str | None = None
    user_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Flatten to logging kwargs, dropping unset values."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result
