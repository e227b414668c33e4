"""
Catalog package for the cheese shop API.

This package holds the cheese schemas, the JSON file persistence, the
thread-safe in-memory store built on top of it and the REST routes
that expose the store. ``main.create_app`` mounts ``catalog_router``
and builds the store during application startup.
"""

from .router import router as catalog_router  # noqa: F401
