from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from pydantic import ValidationError

from ..core.errors import format_validation_errors
from ..models.property import PropertyCreate


@dataclass
class PropertyForm:
  title: str = ""
  description: str = ""
  price: float = 0
  location: str = ""
  bedrooms: int = 1
  bathrooms: float = 1
  area: float = 0
  type: str = "apartment"
  status: str = "available"
  images: List[str] = field(default_factory=list)
  amenities: List[str] = field(default_factory=list)

  @classmethod
  def from_initial(cls, initial: Dict[str, Any]) -> "PropertyForm":
    known = {key: value for key, value in initial.items() if key in cls.__dataclass_fields__ and value is not None}
    return cls(**known)

  def add_image(self, url: str) -> bool:
    url = url.strip()
    if not url:
      return False
    self.images.append(url)
    return True

  def remove_image(self, index: int) -> None:
    if 0 <= index < len(self.images):
      del self.images[index]

  def add_amenity(self, amenity: str) -> bool:
    amenity = amenity.strip()
    if not amenity:
      return False
    self.amenities.append(amenity)
    return True

  def remove_amenity(self, index: int) -> None:
    if 0 <= index < len(self.amenities):
      del self.amenities[index]

  def validate(self) -> List[Dict[str, str]]:
    """Check the form against the same rules the service applies."""
    try:
      PropertyCreate.model_validate(self.to_payload())
    except ValidationError as exc:
      return format_validation_errors(exc.errors())
    return []

  def to_payload(self) -> Dict[str, Any]:
    return asdict(self)
