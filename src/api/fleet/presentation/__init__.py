"""Fleet presentation layer.

Read-only routes over the tenant-isolated schema.
"""

from fleet.presentation.routes import public_router, router

__all__ = ["public_router", "router"]
