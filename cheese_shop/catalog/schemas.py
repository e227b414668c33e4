"""
Pydantic schema definitions for the catalog module.

The ``Cheese`` model is what the store keeps in memory, what the API
returns and what gets written to the data file. It is frozen: the store
replaces entries instead of mutating them, so a cheese handed to a
caller can never change underneath it. ``CheeseIn`` is the request body
for create, update and batch create; every field is optional so that
the store, not FastAPI, decides which fields are required and reports
missing ones with its own messages.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt

# Value used for ``category`` and ``origin`` when nothing was supplied.
UNSPECIFIED = "unspecified"


class Cheese(BaseModel):
    """A single cheese entry.

    ``id``, ``origin`` and ``created_at`` are assigned by the store on
    creation and never change afterwards. ``price`` is always a finite,
    non-negative number once a cheese has been stored.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0)
    name: str = Field(min_length=1)
    category: str = UNSPECIFIED
    price: float = Field(ge=0, allow_inf_nan=False)
    weight: float = Field(default=0, allow_inf_nan=False)
    origin: str = UNSPECIFIED
    created_at: datetime


class CheeseIn(BaseModel):
    """Caller-supplied fields for creating or updating a cheese.

    ``None`` means the field was not supplied. ``price`` is accepted as
    either a number or a numeric string (``"12.50"``). Numbers are strict
    so that JSON ``true``/``false`` are not read as 1 and 0; a boolean
    price is kept as is and rejected by the store along with
    non-numeric strings.
    """

    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Union[StrictFloat, StrictInt, StrictBool, str]] = None
    weight: Optional[Union[StrictFloat, StrictInt]] = None
