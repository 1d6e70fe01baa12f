import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .property import PROPERTY_STATUSES, PROPERTY_TYPES


def _clean(value: Any) -> Optional[str]:
  if value is None:
    return None
  stripped = str(value).strip()
  return stripped or None


def parse_number(value: Any) -> Optional[float]:
  text = _clean(value)
  if text is None:
    return None
  try:
    number = float(text)
  except ValueError:
    return None
  return number if math.isfinite(number) else None


def parse_int(value: Any) -> Optional[int]:
  text = _clean(value)
  if text is None:
    return None
  try:
    return int(text)
  except ValueError:
    return None


@dataclass(frozen=True)
class PropertyFilters:
  """Typed list criteria; every field left as ``None`` matches everything."""

  type: Optional[str] = None
  status: Optional[str] = None
  minPrice: Optional[float] = None
  maxPrice: Optional[float] = None
  bedrooms: Optional[int] = None
  location: Optional[str] = None

  @classmethod
  def from_query(cls, params: Mapping[str, Any]) -> "PropertyFilters":
    """Parse raw query-string values.

    Values that do not parse, or enum values outside their set, are dropped
    instead of rejected so that a stray parameter never fails the listing.
    """
    prop_type = _clean(params.get("type"))
    status = _clean(params.get("status"))
    return cls(
      type=prop_type if prop_type in PROPERTY_TYPES else None,
      status=status if status in PROPERTY_STATUSES else None,
      minPrice=parse_number(params.get("minPrice")),
      maxPrice=parse_number(params.get("maxPrice")),
      bedrooms=parse_int(params.get("bedrooms")),
      location=_clean(params.get("location")),
    )

  @property
  def is_empty(self) -> bool:
    return not self.to_params()

  def to_params(self) -> Dict[str, str]:
    params = {}
    for key, value in self.__dict__.items():
      if value is None:
        continue
      if isinstance(value, float) and value.is_integer():
        value = int(value)
      params[key] = str(value)
    return params

  def matches(self, record: Mapping[str, Any]) -> bool:
    if self.type is not None and record.get("type") != self.type:
      return False
    if self.status is not None and (record.get("status") or "available") != self.status:
      return False
    if self.bedrooms is not None and record.get("bedrooms") != self.bedrooms:
      return False
    if self.location is not None:
      location = str(record.get("location") or "")
      if self.location.casefold() not in location.casefold():
        return False
    if self.minPrice is not None or self.maxPrice is not None:
      price = record.get("price")
      if not isinstance(price, (int, float)):
        return False
      if self.minPrice is not None and price < self.minPrice:
        return False
      if self.maxPrice is not None and price > self.maxPrice:
        return False
    return True
