"""Shared infrastructure dependencies.

Provides ONLY application-scoped infrastructure resources stored on
``app.state`` during startup. Does NOT import from bounded contexts to
maintain DDD boundaries.
"""

from fastapi import Request

from infrastructure.settings import Settings


def get_app_settings(request: Request) -> Settings:
    """Get the settings instance the application was created with.

    Tests build apps with explicit settings, so handlers read them from the
    app rather than from the process-wide ``get_settings()`` cache.
    """
    return request.app.state.settings
