from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

PropertyType = Literal["apartment", "house", "condo", "townhouse"]
PropertyStatus = Literal["available", "sold", "rented"]

PROPERTY_TYPES = get_args(PropertyType)
PROPERTY_STATUSES = get_args(PropertyStatus)

# Fields a client may write; identity and timestamps are owned by the service.
EDITABLE_FIELDS = (
  "title",
  "description",
  "price",
  "location",
  "bedrooms",
  "bathrooms",
  "area",
  "type",
  "status",
  "images",
  "amenities",
)


def _required_text(value: str, field: str) -> str:
  cleaned = value.strip()
  if not cleaned:
    raise ValueError(f"{field} is required")
  return cleaned


def _clean_list(values: List[str]) -> List[str]:
  return [item.strip() for item in values if item and item.strip()]


class PropertyBase(BaseModel):
  title: str
  description: str
  price: float = Field(ge=0, allow_inf_nan=False)
  location: str
  bedrooms: int = Field(ge=0)
  bathrooms: float = Field(ge=0, allow_inf_nan=False)
  area: float = Field(ge=0, allow_inf_nan=False)
  type: PropertyType
  status: PropertyStatus = "available"
  images: List[str] = Field(default_factory=list)
  amenities: List[str] = Field(default_factory=list)

  @field_validator("title", "description", "location")
  @classmethod
  def validate_text(cls, value: str, info) -> str:
    return _required_text(value, info.field_name)

  @field_validator("images", "amenities")
  @classmethod
  def validate_lists(cls, value: List[str]) -> List[str]:
    return _clean_list(value)


class PropertyCreate(PropertyBase):
  pass


class PropertyUpdate(BaseModel):
  title: Optional[str] = None
  description: Optional[str] = None
  price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
  location: Optional[str] = None
  bedrooms: Optional[int] = Field(default=None, ge=0)
  bathrooms: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
  area: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
  type: Optional[PropertyType] = None
  status: Optional[PropertyStatus] = None
  images: Optional[List[str]] = None
  amenities: Optional[List[str]] = None

  @field_validator("*")
  @classmethod
  def reject_null(cls, value, info):
    # Only runs for fields present in the payload.
    if value is None:
      raise ValueError(f"{info.field_name} cannot be null")
    return value

  @field_validator("title", "description", "location")
  @classmethod
  def validate_text(cls, value: Optional[str], info) -> Optional[str]:
    if value is None:
      return None
    return _required_text(value, info.field_name)

  @field_validator("images", "amenities")
  @classmethod
  def validate_lists(cls, value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
      return None
    return _clean_list(value)


class PropertyOut(PropertyBase):
  model_config = ConfigDict(populate_by_name=True)

  id: str = Field(alias="_id")
  createdAt: str
  updatedAt: str
