"""
In-memory cheese catalog backed by a JSON file.

``CatalogStore`` owns the ordered list of cheeses and the id counter.
Every mutation runs under one lock together with the save of the full
catalog, so two concurrent requests can neither hand out the same id
nor overwrite each other's changes on disk. Reads take the same lock
and return a copy of the list.

A failed save is reported as ``PersistenceError`` but the in-memory
change is kept: the caller sees the mutation, and the next successful
save brings the file back in line with memory.
"""

from __future__ import annotations

import enum
import logging
import math
import re
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from .errors import (
    CatalogValidationError,
    CheeseNotFound,
    PersistenceError,
    StoreNotReady,
)
from .schemas import UNSPECIFIED, Cheese, CheeseIn
from .storage import CatalogFile, LoadStatus


logger = logging.getLogger(__name__)

MISSING_FIELDS = "name and price are required"
PRICE_NOT_A_NUMBER = "price must be a valid number"
NEGATIVE_PRICE = "price must not be negative"
WEIGHT_NOT_A_NUMBER = "weight must be a valid number"
EMPTY_BATCH = "batch must be a non-empty list of cheeses"

# Plain decimal notation, e.g. "12", "12.50", ".5", "1e3".
_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_SEED = (
    {
        "id": 1,
        "name": "Mozzarella",
        "category": "Fresh",
        "price": 20.50,
        "weight": 500,
        "origin": "Brazil",
        "created_at": "2023-01-15T12:00:00Z",
    },
    {
        "id": 2,
        "name": "Cheddar",
        "category": "Aged",
        "price": 35.00,
        "weight": 300,
        "origin": "England",
        "created_at": "2023-02-20T14:30:00Z",
    },
    {
        "id": 3,
        "name": "Gorgonzola",
        "category": "Blue",
        "price": 45.75,
        "weight": 400,
        "origin": "Italy",
        "created_at": "2023-03-10T09:15:00Z",
    },
    {
        "id": 4,
        "name": "Brie",
        "category": "Fresh",
        "price": 28.90,
        "weight": 200,
        "origin": "France",
        "created_at": "2023-04-05T11:45:00Z",
    },
)


def default_seed() -> List[Cheese]:
    """Return the cheeses used when there is no usable data file."""
    return [Cheese.model_validate(entry) for entry in _SEED]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoreState(str, enum.Enum):
    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
    SEEDED = "seeded"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Input validation
#
# These helpers are pure: they never touch the store, so they run before
# the lock is taken and a rejected request leaves no trace.

def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_price(value: object) -> float:
    if isinstance(value, bool):
        raise CatalogValidationError(PRICE_NOT_A_NUMBER)
    if isinstance(value, str):
        value = value.strip()
        if not _DECIMAL.fullmatch(value):
            raise CatalogValidationError(PRICE_NOT_A_NUMBER)
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise CatalogValidationError(PRICE_NOT_A_NUMBER) from None
    if not math.isfinite(price):
        raise CatalogValidationError(PRICE_NOT_A_NUMBER)
    if price < 0:
        raise CatalogValidationError(NEGATIVE_PRICE)
    return price


def validate_input(data: CheeseIn) -> CheeseIn:
    """Check ``data`` and return a normalised copy.

    ``name`` and ``price`` must be present, ``price`` must parse as a
    finite, non-negative number and ``weight``, when given, must be
    finite. The returned copy carries ``price`` and ``weight`` as floats
    and treats an empty ``category`` as not supplied.

    Raises
    ------
    CatalogValidationError
        With ``MISSING_FIELDS`` when a required field is absent, or a
        more specific message when a value is unusable.
    """
    if _is_blank(data.name) or _is_blank(data.price):
        raise CatalogValidationError(MISSING_FIELDS)
    price = _parse_price(data.price)
    if data.weight is not None and not math.isfinite(data.weight):
        raise CatalogValidationError(WEIGHT_NOT_A_NUMBER)
    weight = float(data.weight) if data.weight is not None else None
    return data.model_copy(
        update={"price": price, "weight": weight, "category": data.category or None}
    )


def build_cheese(data: CheeseIn, cheese_id: int, created_at: datetime) -> Cheese:
    """Turn validated input into a stored cheese, filling in defaults."""
    return Cheese(
        id=cheese_id,
        name=data.name,
        category=data.category if data.category is not None else UNSPECIFIED,
        price=data.price,
        weight=data.weight if data.weight is not None else 0,
        origin=UNSPECIFIED,
        created_at=created_at,
    )


class CatalogStore:
    """Thread-safe cheese catalog persisted through a ``CatalogFile``."""

    def __init__(
        self,
        catalog_file: CatalogFile,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._file = catalog_file
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        self._cheeses: List[Cheese] = []
        self._next_id = 1
        self.state = StoreState.NOT_LOADED

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    # ------------------------------------------------------------------
    # Initialisation
    # ------------------------------------------------------------------
    def init(self) -> StoreState:
        """Load the data file, falling back to the default seed.

        A missing or malformed file yields an empty catalog; any other
        read error yields the seed. An empty catalog is then replaced by
        the seed and saved straight away. ``next_id`` ends up one past
        the highest id present so that ids are never reused across
        restarts.

        Raises
        ------
        PersistenceError
            If the seed could not be saved. The store is left ``FAILED``.
        """
        with self._lock:
            result = self._file.load()
            if result.status is LoadStatus.OK:
                cheeses = result.cheeses
            elif result.status is LoadStatus.ABSENT:
                logger.warning("Catalog file %s not found, starting empty", self._file.path)
                cheeses = []
            elif result.status is LoadStatus.MALFORMED:
                logger.error(
                    "Catalog file %s is malformed (%s), starting empty",
                    self._file.path,
                    result.error,
                )
                cheeses = []
            else:
                logger.error(
                    "Could not read catalog file %s (%s), using default cheeses",
                    self._file.path,
                    result.error,
                )
                cheeses = []

            if cheeses:
                self._cheeses = list(cheeses)
                self.state = StoreState.LOADED
                logger.info("Loaded %d cheeses from %s", len(cheeses), self._file.path)
            else:
                self._cheeses = default_seed()
                try:
                    self._file.save(self._cheeses)
                except PersistenceError:
                    self.state = StoreState.FAILED
                    raise
                self.state = StoreState.SEEDED
                logger.info("Seeded catalog with %d default cheeses", len(self._cheeses))

            self._next_id = max((c.id for c in self._cheeses), default=0) + 1
            return self.state

    def _require_ready(self) -> None:
        if self.state not in (StoreState.LOADED, StoreState.SEEDED):
            raise StoreNotReady(f"catalog store is {self.state.value}")

    def _index_of(self, cheese_id: int) -> int:
        for index, cheese in enumerate(self._cheeses):
            if cheese.id == cheese_id:
                return index
        raise CheeseNotFound(cheese_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list(self) -> List[Cheese]:
        with self._lock:
            return list(self._cheeses)

    def get(self, cheese_id: int) -> Cheese:
        with self._lock:
            return self._cheeses[self._index_of(cheese_id)]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create(self, data: CheeseIn) -> Cheese:
        data = validate_input(data)
        with self._lock:
            self._require_ready()
            cheese = build_cheese(data, self._next_id, self._clock())
            self._next_id += 1
            self._cheeses.append(cheese)
            self._file.save(self._cheeses)
        logger.info("Created cheese %d (%s)", cheese.id, cheese.name)
        return cheese

    def update(self, cheese_id: int, data: CheeseIn) -> Cheese:
        data = validate_input(data)
        changes = {"name": data.name, "price": data.price}
        if data.category is not None:
            changes["category"] = data.category
        if data.weight is not None:
            changes["weight"] = data.weight
        with self._lock:
            self._require_ready()
            index = self._index_of(cheese_id)
            updated = self._cheeses[index].model_copy(update=changes)
            self._cheeses[index] = updated
            self._file.save(self._cheeses)
        logger.info("Updated cheese %d", cheese_id)
        return updated

    def delete(self, cheese_id: int) -> Cheese:
        with self._lock:
            self._require_ready()
            removed = self._cheeses.pop(self._index_of(cheese_id))
            self._file.save(self._cheeses)
        logger.info("Deleted cheese %d", cheese_id)
        return removed

    def create_batch(self, items: Sequence[CheeseIn]) -> List[Cheese]:
        """Create several cheeses at once.

        Every item is validated before anything is added, so an invalid
        item anywhere in the batch rejects the whole batch. The new
        cheeses share one ``created_at`` and are saved with a single
        write.
        """
        if not items:
            raise CatalogValidationError(EMPTY_BATCH)
        validated = []
        for position, item in enumerate(items, start=1):
            try:
                validated.append(validate_input(item))
            except CatalogValidationError as exc:
                raise CatalogValidationError(f"batch item {position}: {exc}") from exc

        with self._lock:
            self._require_ready()
            created_at = self._clock()
            created = []
            for data in validated:
                created.append(build_cheese(data, self._next_id, created_at))
                self._next_id += 1
            self._cheeses.extend(created)
            self._file.save(self._cheeses)
        logger.info("Created %d cheeses in batch", len(created))
        return created
