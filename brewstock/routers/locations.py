from fastapi import APIRouter, Depends, Query

from brewstock.core.api_docs import error_responses
from brewstock.core.deps import get_store
from brewstock.core.errors import NotFoundError
from brewstock.schemas.common import DeletedOut
from brewstock.schemas.location import (
    LocationAssignIn,
    LocationAssignmentOut,
    LocationAssignOut,
    LocationCreateIn,
    LocationListOut,
    LocationOut,
    LocationUpdateIn,
)
from brewstock.services.aggregation_service import location_assignment
from brewstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/locations", tags=["locations"])


@router.post(
    "",
    response_model=LocationOut,
    status_code=201,
    summary="Create location",
    responses=error_responses(400, 422, 500),
)
def create_location(payload: LocationCreateIn, store: InventoryStore = Depends(get_store)):
    return LocationOut.model_validate(store.add_location(payload))


@router.get(
    "",
    response_model=LocationListOut,
    summary="List locations",
    responses=error_responses(500),
)
def list_locations(store: InventoryStore = Depends(get_store)):
    return LocationListOut(items=[LocationOut.model_validate(row) for row in store.list_locations()])


@router.get(
    "/{location_id}",
    response_model=LocationOut,
    summary="Get location",
    responses=error_responses(404, 500),
)
def get_location(location_id: str, store: InventoryStore = Depends(get_store)):
    return LocationOut.model_validate(store.get_location(location_id))


@router.patch(
    "/{location_id}",
    response_model=LocationOut,
    summary="Update location",
    responses=error_responses(400, 404, 422, 500),
)
def update_location(
    location_id: str,
    payload: LocationUpdateIn,
    store: InventoryStore = Depends(get_store),
):
    return LocationOut.model_validate(store.update_location(location_id, payload))


@router.delete(
    "/{location_id}",
    response_model=DeletedOut,
    summary="Delete location and its stock levels",
    responses=error_responses(404, 500),
)
def delete_location(location_id: str, store: InventoryStore = Depends(get_store)):
    store.delete_location(location_id)
    return DeletedOut(id=location_id)


@router.get(
    "/{location_id}/assignments",
    response_model=LocationAssignmentOut,
    summary="Items assigned and unassigned at a location",
    responses=error_responses(404, 500),
)
def get_assignments(location_id: str, store: InventoryStore = Depends(get_store)):
    result = location_assignment(store.snapshot(), location_id)
    if result is None:
        raise NotFoundError("Location not found")
    return result


@router.post(
    "/{location_id}/assignments",
    response_model=LocationAssignOut,
    summary="Assign items to a location",
    responses=error_responses(400, 404, 422, 500),
)
def assign_items(
    location_id: str,
    payload: LocationAssignIn,
    store: InventoryStore = Depends(get_store),
):
    assigned, skipped = store.assign_items(location_id, payload.item_ids)
    return LocationAssignOut(
        location_id=location_id,
        assigned_item_ids=assigned,
        skipped_item_ids=skipped,
    )


@router.post(
    "/{location_id}/assignments/copy",
    response_model=LocationAssignOut,
    summary="Copy item assignments from another location",
    responses=error_responses(400, 404, 422, 500),
)
def copy_assignments(
    location_id: str,
    source_location_id: str = Query(..., min_length=1),
    store: InventoryStore = Depends(get_store),
):
    assigned, skipped = store.copy_assignments(source_location_id, location_id)
    return LocationAssignOut(
        location_id=location_id,
        assigned_item_ids=assigned,
        skipped_item_ids=skipped,
    )
