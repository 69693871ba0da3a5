from fastapi import APIRouter, Depends

from brewstock.core.api_docs import error_responses
from brewstock.core.deps import get_store
from brewstock.models.location import LocationType
from brewstock.schemas.common import DeletedOut
from brewstock.schemas.location import (
    LocationTypeCreateIn,
    LocationTypeListOut,
    LocationTypeOut,
    LocationTypeUpdateIn,
)
from brewstock.services.inventory_store import InventoryStore

router = APIRouter(prefix="/location-types", tags=["location-types"])


def _type_out(location_type: LocationType, usage: dict[str, int]) -> LocationTypeOut:
    return LocationTypeOut(
        id=location_type.id,
        name=location_type.name,
        description=location_type.description,
        color=location_type.color,
        icon=location_type.icon,
        is_default=location_type.is_default,
        location_count=usage.get(location_type.name, 0),
    )


@router.get(
    "",
    response_model=LocationTypeListOut,
    summary="List location types",
    responses=error_responses(500),
)
def list_location_types(store: InventoryStore = Depends(get_store)):
    usage = store.location_type_usage()
    return LocationTypeListOut(items=[_type_out(row, usage) for row in store.list_location_types()])


@router.post(
    "",
    response_model=LocationTypeOut,
    status_code=201,
    summary="Create location type",
    responses=error_responses(400, 409, 422, 500),
)
def create_location_type(payload: LocationTypeCreateIn, store: InventoryStore = Depends(get_store)):
    location_type = store.add_location_type(payload)
    return _type_out(location_type, store.location_type_usage())


@router.get(
    "/{type_id}",
    response_model=LocationTypeOut,
    summary="Get location type",
    responses=error_responses(404, 500),
)
def get_location_type(type_id: str, store: InventoryStore = Depends(get_store)):
    return _type_out(store.get_location_type(type_id), store.location_type_usage())


@router.patch(
    "/{type_id}",
    response_model=LocationTypeOut,
    summary="Update location type",
    description="Renaming a type also renames it on every location that uses it.",
    responses=error_responses(400, 404, 409, 422, 500),
)
def update_location_type(
    type_id: str,
    payload: LocationTypeUpdateIn,
    store: InventoryStore = Depends(get_store),
):
    location_type = store.update_location_type(type_id, payload)
    return _type_out(location_type, store.location_type_usage())


@router.delete(
    "/{type_id}",
    response_model=DeletedOut,
    summary="Delete location type",
    responses=error_responses(404, 409, 500),
)
def delete_location_type(type_id: str, store: InventoryStore = Depends(get_store)):
    store.delete_location_type(type_id)
    return DeletedOut(id=type_id)
