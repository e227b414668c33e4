"""
Route definitions for the cheese catalogue API.

Endpoints under /api/catalog:
- GET    /cheeses             : list every cheese
- GET    /cheeses/{cheese_id} : get one cheese
- POST   /cheeses             : create a cheese
- POST   /cheeses/batch       : create several cheeses at once
- PUT    /cheeses/{cheese_id} : update a cheese
- DELETE /cheeses/{cheese_id} : delete a cheese

Handlers are plain ``def`` functions, so FastAPI runs them in its
thread pool; ``CatalogStore`` serialises the ones that write.
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from .errors import CatalogValidationError, CheeseNotFound, PersistenceError
from .schemas import Cheese, CheeseIn
from .store import CatalogStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def get_store(request: Request) -> CatalogStore:
    """Return the store created by the application lifespan."""
    return request.app.state.store


@router.get("/cheeses", response_model=List[Cheese])
def list_cheeses(store: CatalogStore = Depends(get_store)) -> List[Cheese]:
    return store.list()


@router.get("/cheeses/{cheese_id}", response_model=Cheese)
def get_cheese(cheese_id: int, store: CatalogStore = Depends(get_store)) -> Cheese:
    try:
        return store.get(cheese_id)
    except CheeseNotFound:
        raise HTTPException(status_code=404, detail="Cheese not found")


@router.post("/cheeses", response_model=Cheese, status_code=201)
def create_cheese(req: CheeseIn, store: CatalogStore = Depends(get_store)) -> Cheese:
    try:
        return store.create(req)
    except CatalogValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError:
        logger.exception("Saving a new cheese failed")
        raise HTTPException(status_code=500, detail="Failed to save the new cheese")


@router.post("/cheeses/batch", response_model=List[Cheese], status_code=201)
def create_cheese_batch(
    req: List[CheeseIn], store: CatalogStore = Depends(get_store)
) -> List[Cheese]:
    """Create every cheese in the request body or none of them.

    The body must be a non-empty JSON array; if any element is invalid
    the whole batch is rejected with 400 and nothing is added.
    """
    try:
        return store.create_batch(req)
    except CatalogValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError:
        logger.exception("Saving a batch of %d cheeses failed", len(req))
        raise HTTPException(status_code=500, detail="Failed to save the batch")


@router.put("/cheeses/{cheese_id}", response_model=Cheese)
def update_cheese(
    cheese_id: int, req: CheeseIn, store: CatalogStore = Depends(get_store)
) -> Cheese:
    try:
        return store.update(cheese_id, req)
    except CatalogValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CheeseNotFound:
        raise HTTPException(status_code=404, detail="Cheese not found")
    except PersistenceError:
        logger.exception("Saving the update of cheese %d failed", cheese_id)
        raise HTTPException(status_code=500, detail="Failed to save the update")


@router.delete("/cheeses/{cheese_id}", response_model=Cheese)
def delete_cheese(cheese_id: int, store: CatalogStore = Depends(get_store)) -> Cheese:
    try:
        return store.delete(cheese_id)
    except CheeseNotFound:
        raise HTTPException(status_code=404, detail="Cheese not found")
    except PersistenceError:
        logger.exception("Saving after deleting cheese %d failed", cheese_id)
        raise HTTPException(status_code=500, detail="Failed to save after deletion")
