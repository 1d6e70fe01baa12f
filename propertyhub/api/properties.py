from fastapi import APIRouter, Depends, Request, status

from ..core.firebase import PropertyStore
from ..models.filters import PropertyFilters
from ..models.property import PropertyCreate, PropertyOut, PropertyUpdate
from ..services import property_service

router = APIRouter(prefix="/api/properties", tags=["properties"])


def get_store(request: Request) -> PropertyStore:
  return request.app.state.store


def get_filters(request: Request) -> PropertyFilters:
  # Parsed by hand so malformed values are dropped instead of answered with 400.
  return PropertyFilters.from_query(request.query_params)


@router.get("", response_model=list[PropertyOut])
async def list_properties(
  filters: PropertyFilters = Depends(get_filters),
  store: PropertyStore = Depends(get_store),
):
  return await property_service.list_properties(store, filters)


@router.get("/{property_id}", response_model=PropertyOut)
async def get_property(property_id: str, store: PropertyStore = Depends(get_store)):
  return await property_service.get_property(store, property_id)


@router.post("", response_model=PropertyOut, status_code=status.HTTP_201_CREATED)
async def create_property(payload: PropertyCreate, store: PropertyStore = Depends(get_store)):
  return await property_service.create_property(store, payload)


@router.put("/{property_id}", response_model=PropertyOut)
async def update_property(
  property_id: str,
  payload: PropertyUpdate,
  store: PropertyStore = Depends(get_store),
):
  return await property_service.update_property(store, property_id, payload)


@router.delete("/{property_id}")
async def delete_property(property_id: str, store: PropertyStore = Depends(get_store)):
  return await property_service.delete_property(store, property_id)
