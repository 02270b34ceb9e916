"""Domain-oriented observability infrastructure.

This module provides domain probes following the Domain Oriented Observability
pattern described by Martin Fowler. Domain probes encapsulate instrumentation
details and provide a clean, domain-focused API for observability.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from infrastructure.observability.context import ObservationContext
from infrastructure.observability.probes import (
    DatabaseAdminProbe,
    DefaultDatabaseAdminProbe,
    DefaultTenantPoolProbe,
    TenantPoolProbe,
)
from infrastructure.observability.startup_probe import (
    DefaultStartupProbe,
    StartupProbe,
)

__all__ = [
    "DatabaseAdminProbe",
    "DefaultDatabaseAdminProbe",
    "DefaultStartupProbe",
    "DefaultTenantPoolProbe",
    "ObservationContext",
    "StartupProbe",
    "TenantPoolProbe",
]
