"""Exceptions raised by the catalog store."""


class CatalogError(Exception):
    """Base class for catalog failures."""


class CatalogValidationError(CatalogError, ValueError):
    """Caller-supplied data is missing a required field or has a bad value."""


class CheeseNotFound(CatalogError, LookupError):
    def __init__(self, cheese_id: int):
        super().__init__(f"cheese {cheese_id} not found")
        self.cheese_id = cheese_id


class PersistenceError(CatalogError):
    """The data file could not be written.

    When raised by a store mutation, the in-memory change has already
    been applied and is kept.
    """


class StoreNotReady(CatalogError, RuntimeError):
    """A mutation was attempted before ``CatalogStore.init()`` succeeded."""
