"""
JSON file persistence for the cheese catalog.

The whole catalog lives in a single JSON document: an array of cheese
objects. ``CatalogFile.load()`` reports what it found as a
``LoadResult`` so that the store can pick a recovery policy, and
``CatalogFile.save()`` replaces the document atomically by writing a
temporary file next to it and renaming it into place.
"""

from __future__ import annotations

import enum
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from .errors import PersistenceError
from .schemas import Cheese


logger = logging.getLogger(__name__)

_CHEESE_LIST = TypeAdapter(List[Cheese])


class LoadStatus(str, enum.Enum):
    OK = "ok"
    ABSENT = "absent"
    MALFORMED = "malformed"
    IO_ERROR = "io_error"


@dataclass
class LoadResult:
    status: LoadStatus
    cheeses: List[Cheese] = field(default_factory=list)
    error: Optional[BaseException] = None


def _parse_document(raw: str) -> List[Cheese]:
    """Parse and validate the document text.

    Raises ``ValueError`` (``json.JSONDecodeError`` and pydantic's
    ``ValidationError`` are both subclasses) when the content is not a
    list of valid cheeses with distinct ids.
    """
    cheeses = _CHEESE_LIST.validate_python(json.loads(raw))
    ids = [c.id for c in cheeses]
    if len(ids) != len(set(ids)):
        raise ValueError("duplicate cheese ids in catalog document")
    return cheeses


class CatalogFile:
    """Reads and writes the catalog document at ``path``."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> LoadResult:
        """Read the catalog document.

        Returns
        -------
        LoadResult
            ``OK`` with the parsed cheeses, ``ABSENT`` when the file does
            not exist, ``MALFORMED`` when it exists but is not a valid
            catalog, or ``IO_ERROR`` for any other read failure.
        """
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError as exc:
            return LoadResult(LoadStatus.ABSENT, error=exc)
        except UnicodeDecodeError as exc:
            return LoadResult(LoadStatus.MALFORMED, error=exc)
        except OSError as exc:
            return LoadResult(LoadStatus.IO_ERROR, error=exc)

        try:
            cheeses = _parse_document(raw)
        except (ValueError, ValidationError) as exc:
            return LoadResult(LoadStatus.MALFORMED, error=exc)
        return LoadResult(LoadStatus.OK, cheeses=cheeses)

    def save(self, cheeses: Sequence[Cheese]) -> None:
        """Replace the document with ``cheeses``.

        The new content is written to a temporary file in the same
        directory, flushed to disk and renamed over the old document, so
        a reader sees either the previous content or the new one.

        Raises
        ------
        PersistenceError
            If any step fails. The previous document is left untouched.
        """
        payload = _CHEESE_LIST.dump_python(list(cheeses), mode="json")
        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("Failed to write catalog to %s: %s", self.path, exc)
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"unable to write {self.path}") from exc
        logger.debug("Wrote %d cheeses to %s", len(payload), self.path)
