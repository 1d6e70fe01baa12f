from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pydantic

from ..core.errors import NotFoundError, StoreError, ValidationError, format_validation_errors
from ..core.firebase import PropertyStore
from ..core.logging import get_logger
from ..models.filters import PropertyFilters
from ..models.property import EDITABLE_FIELDS, PropertyCreate, PropertyOut, PropertyUpdate

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Property not found"
UPDATE_ATTEMPTS = 3


def utc_now() -> str:
  return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def map_single(record_id: str, record: Optional[dict]) -> dict:
  # Firebase drops empty arrays, so list fields can be missing on read.
  data = record or {}
  return {
    "_id": record_id,
    "title": data.get("title"),
    "description": data.get("description"),
    "price": data.get("price"),
    "location": data.get("location"),
    "bedrooms": data.get("bedrooms"),
    "bathrooms": data.get("bathrooms"),
    "area": data.get("area"),
    "type": data.get("type"),
    "status": data.get("status") or "available",
    "images": list(data.get("images") or []),
    "amenities": list(data.get("amenities") or []),
    "createdAt": data.get("createdAt") or "",
    "updatedAt": data.get("updatedAt") or data.get("createdAt") or "",
  }


def to_output(record_id: str, record: Optional[dict]) -> Dict[str, Any]:
  return PropertyOut.model_validate(map_single(record_id, record)).model_dump(by_alias=True)


def _created_key(item: Dict[str, Any]) -> datetime:
  try:
    return datetime.fromisoformat(item["createdAt"].replace("Z", "+00:00"))
  except (AttributeError, ValueError):
    return datetime.min.replace(tzinfo=timezone.utc)


async def list_properties(store: PropertyStore, filters: PropertyFilters) -> List[Dict[str, Any]]:
  snapshot = await store.list()
  records = [map_single(record_id, record) for record_id, record in snapshot.items()]
  matching = [item for item in records if filters.matches(item)]
  matching.sort(key=_created_key, reverse=True)
  results = []
  for item in matching:
    try:
      results.append(PropertyOut.model_validate(item).model_dump(by_alias=True))
    except pydantic.ValidationError as exc:
      logger.warning("Skipping malformed property %s: %s", item["_id"], exc.error_count())
  return results


async def get_property(store: PropertyStore, property_id: str) -> Dict[str, Any]:
  record = await store.get(property_id)
  if record is None:
    raise NotFoundError(NOT_FOUND_MESSAGE)
  try:
    return to_output(property_id, record)
  except pydantic.ValidationError:
    logger.warning("Stored property %s is malformed", property_id)
    raise NotFoundError(NOT_FOUND_MESSAGE)


async def create_property(store: PropertyStore, payload: PropertyCreate) -> Dict[str, Any]:
  now = utc_now()
  body = {**payload.model_dump(include=set(EDITABLE_FIELDS)), "createdAt": now, "updatedAt": now}
  property_id = await store.insert(body)
  logger.info("Created property %s (%s)", property_id, body["title"])
  return to_output(property_id, body)


def _merge(existing: dict, patch: Dict[str, Any]) -> Dict[str, Any]:
  current = map_single("", existing)
  merged = {field: current[field] for field in EDITABLE_FIELDS}
  merged.update(patch)
  try:
    validated = PropertyCreate.model_validate(merged)
  except pydantic.ValidationError as exc:
    raise ValidationError("Invalid property data", format_validation_errors(exc.errors())) from exc
  now = utc_now()
  return {
    **validated.model_dump(include=set(EDITABLE_FIELDS)),
    "createdAt": existing.get("createdAt") or now,
    "updatedAt": now,
  }


async def update_property(store: PropertyStore, property_id: str, payload: PropertyUpdate) -> Dict[str, Any]:
  # Whole-record PUT guarded by the ETag of the read, so a concurrent delete
  # or edit is detected instead of being overwritten or resurrected.
  patch = payload.model_dump(exclude_unset=True, include=set(EDITABLE_FIELDS))
  for attempt in range(1, UPDATE_ATTEMPTS + 1):
    existing, etag = await store.get_with_etag(property_id)
    if existing is None:
      raise NotFoundError(NOT_FOUND_MESSAGE)
    body = _merge(existing, patch)
    if await store.replace(property_id, body, etag or ""):
      logger.info("Updated property %s fields=%s", property_id, sorted(patch))
      return to_output(property_id, body)
    logger.info("Property %s changed during update, retrying (attempt %s)", property_id, attempt)
  raise StoreError("Property was modified concurrently, please retry")


async def delete_property(store: PropertyStore, property_id: str) -> Dict[str, str]:
  existing = await store.get(property_id)
  if existing is None:
    raise NotFoundError(NOT_FOUND_MESSAGE)
  await store.delete(property_id)
  logger.info("Deleted property %s", property_id)
  return {"message": "Property deleted successfully"}
