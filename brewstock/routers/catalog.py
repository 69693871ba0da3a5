from fastapi import APIRouter, Depends

from brewstock.core.api_docs import error_responses
from brewstock.core.deps import get_store
from brewstock.schemas.catalog import (
    CategoryCreateIn,
    CategoryListOut,
    CategoryOut,
    CategoryUpdateIn,
    ItemCreateIn,
    ItemListOut,
    ItemOut,
    ItemUpdateIn,
    SupplierCreateIn,
    SupplierListOut,
    SupplierOut,
    SupplierUpdateIn,
)
from brewstock.schemas.common import DeletedOut
from brewstock.services.inventory_store import InventoryStore

categories_router = APIRouter(prefix="/categories", tags=["categories"])
suppliers_router = APIRouter(prefix="/suppliers", tags=["suppliers"])
items_router = APIRouter(prefix="/items", tags=["items"])


@categories_router.get("", response_model=CategoryListOut, summary="List categories")
def list_categories(store: InventoryStore = Depends(get_store)):
    return CategoryListOut(items=[CategoryOut.model_validate(row) for row in store.list_categories()])


@categories_router.post(
    "",
    response_model=CategoryOut,
    status_code=201,
    summary="Create category",
    responses=error_responses(400, 422, 500),
)
def create_category(payload: CategoryCreateIn, store: InventoryStore = Depends(get_store)):
    return CategoryOut.model_validate(store.add_category(payload))


@categories_router.get(
    "/{category_id}",
    response_model=CategoryOut,
    summary="Get category",
    responses=error_responses(404, 500),
)
def get_category(category_id: str, store: InventoryStore = Depends(get_store)):
    return CategoryOut.model_validate(store.get_category(category_id))


@categories_router.patch(
    "/{category_id}",
    response_model=CategoryOut,
    summary="Update category",
    responses=error_responses(400, 404, 422, 500),
)
def update_category(
    category_id: str,
    payload: CategoryUpdateIn,
    store: InventoryStore = Depends(get_store),
):
    return CategoryOut.model_validate(store.update_category(category_id, payload))


@categories_router.delete(
    "/{category_id}",
    response_model=DeletedOut,
    summary="Delete category",
    description="Items in the category are kept and become uncategorized.",
    responses=error_responses(404, 500),
)
def delete_category(category_id: str, store: InventoryStore = Depends(get_store)):
    store.delete_category(category_id)
    return DeletedOut(id=category_id)


@suppliers_router.get("", response_model=SupplierListOut, summary="List suppliers")
def list_suppliers(store: InventoryStore = Depends(get_store)):
    return SupplierListOut(items=[SupplierOut.model_validate(row) for row in store.list_suppliers()])


@suppliers_router.post(
    "",
    response_model=SupplierOut,
    status_code=201,
    summary="Create supplier",
    responses=error_responses(400, 422, 500),
)
def create_supplier(payload: SupplierCreateIn, store: InventoryStore = Depends(get_store)):
    return SupplierOut.model_validate(store.add_supplier(payload))


@suppliers_router.get(
    "/{supplier_id}",
    response_model=SupplierOut,
    summary="Get supplier",
    responses=error_responses(404, 500),
)
def get_supplier(supplier_id: str, store: InventoryStore = Depends(get_store)):
    return SupplierOut.model_validate(store.get_supplier(supplier_id))


@suppliers_router.patch(
    "/{supplier_id}",
    response_model=SupplierOut,
    summary="Update supplier",
    responses=error_responses(400, 404, 422, 500),
)
def update_supplier(
    supplier_id: str,
    payload: SupplierUpdateIn,
    store: InventoryStore = Depends(get_store),
):
    return SupplierOut.model_validate(store.update_supplier(supplier_id, payload))


@suppliers_router.delete(
    "/{supplier_id}",
    response_model=DeletedOut,
    summary="Delete supplier",
    responses=error_responses(404, 500),
)
def delete_supplier(supplier_id: str, store: InventoryStore = Depends(get_store)):
    store.delete_supplier(supplier_id)
    return DeletedOut(id=supplier_id)


@items_router.get("", response_model=ItemListOut, summary="List items")
def list_items(store: InventoryStore = Depends(get_store)):
    return ItemListOut(items=[ItemOut.model_validate(row) for row in store.list_items()])


@items_router.post(
    "",
    response_model=ItemOut,
    status_code=201,
    summary="Create item",
    responses=error_responses(400, 404, 422, 500),
)
def create_item(payload: ItemCreateIn, store: InventoryStore = Depends(get_store)):
    return ItemOut.model_validate(store.add_item(payload))


@items_router.get(
    "/{item_id}",
    response_model=ItemOut,
    summary="Get item",
    responses=error_responses(404, 500),
)
def get_item(item_id: str, store: InventoryStore = Depends(get_store)):
    return ItemOut.model_validate(store.get_item(item_id))


@items_router.patch(
    "/{item_id}",
    response_model=ItemOut,
    summary="Update item",
    responses=error_responses(400, 404, 422, 500),
)
def update_item(item_id: str, payload: ItemUpdateIn, store: InventoryStore = Depends(get_store)):
    return ItemOut.model_validate(store.update_item(item_id, payload))


@items_router.delete(
    "/{item_id}",
    response_model=DeletedOut,
    summary="Delete item and its stock levels",
    responses=error_responses(404, 500),
)
def delete_item(item_id: str, store: InventoryStore = Depends(get_store)):
    store.delete_item(item_id)
    return DeletedOut(id=item_id)
