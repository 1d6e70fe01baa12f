"""View controllers for the list, detail, favorites and create screens.

Each view owns its loading/error state and talks to the listing service
through ``PropertyApi``. Loads are tagged with a request token; a response
is applied only while its token is the latest one issued by the view and
the id or filters it was made for still match the view, so a slow reply
can never overwrite the result of a newer request.
"""

from typing import Any, Dict, List, Optional

from ..core.logging import get_logger
from ..models.filters import PropertyFilters
from .api import ApiError, ApiNotFound, PropertyApi
from .favorites import FavoritesService
from .forms import PropertyForm

logger = get_logger(__name__)


class BaseView:
  def __init__(self, api: PropertyApi, favorites: FavoritesService):
    self.api = api
    self.favorites = favorites
    self.loading = False
    self.error: Optional[str] = None
    self._token = 0

  def _begin(self) -> int:
    self._token += 1
    self.loading = True
    self.error = None
    return self._token

  def _is_current(self, token: int) -> bool:
    return token == self._token

  def _finish(self, token: int) -> None:
    if self._is_current(token):
      self.loading = False

  def dismiss_error(self) -> None:
    self.error = None

  def is_favorite(self, property_id: str) -> bool:
    return self.favorites.is_favorite(property_id)

  def toggle_favorite(self, property_id: str) -> bool:
    return self.favorites.toggle(property_id)


class ListView(BaseView):
  def __init__(self, api: PropertyApi, favorites: FavoritesService):
    super().__init__(api, favorites)
    self.filters = PropertyFilters()
    self.properties: List[Dict[str, Any]] = []

  async def load(self, filters: Optional[PropertyFilters] = None) -> bool:
    """Fetch the list; returns False when the result was dropped or failed."""
    if filters is not None:
      self.filters = filters
    requested = self.filters
    token = self._begin()
    try:
      data = await self.api.get_properties(requested)
    except ApiError as exc:
      if self._is_current(token):
        logger.error("Error fetching properties: %s", exc.message)
        self.error = "Failed to fetch properties. Please try again."
      return False
    finally:
      self._finish(token)
    if not self._is_current(token) or requested != self.filters:
      return False
    self.properties = data
    # Only an unfiltered listing is the full set of live ids.
    if requested.is_empty:
      self.favorites.sync_with_existing(item["_id"] for item in data)
    return True

  async def apply_filters(self, filters: PropertyFilters) -> bool:
    return await self.load(filters)

  async def clear_filters(self) -> bool:
    return await self.load(PropertyFilters())

  async def retry(self) -> bool:
    return await self.load()


class DetailView(BaseView):
  def __init__(self, api: PropertyApi, favorites: FavoritesService):
    super().__init__(api, favorites)
    self.property_id: Optional[str] = None
    self.property: Optional[Dict[str, Any]] = None
    self.favorite = False
    self.deleting = False
    self.navigate_to: Optional[str] = None

  async def open(self, property_id: str) -> bool:
    self.property_id = property_id
    self.property = None
    self.favorite = self.favorites.is_favorite(property_id)
    token = self._begin()
    try:
      data = await self.api.get_property(property_id)
    except ApiNotFound:
      if self._is_current(token) and self.property_id == property_id:
        self.favorites.remove(property_id)
        self.favorite = False
        self.error = "Property not found"
      return False
    except ApiError as exc:
      if self._is_current(token) and self.property_id == property_id:
        logger.error("Error fetching property %s: %s", property_id, exc.message)
        self.error = "Failed to fetch property details. Please try again."
      return False
    finally:
      self._finish(token)
    if not self._is_current(token) or self.property_id != property_id:
      return False
    self.property = data
    return True

  async def retry(self) -> bool:
    if self.property_id is None:
      return False
    return await self.open(self.property_id)

  def toggle(self) -> bool:
    if self.property is None:
      return self.favorite
    self.favorite = self.favorites.toggle(self.property["_id"])
    return self.favorite

  async def delete(self) -> bool:
    """Delete the shown property; local effects wait for the server."""
    if self.property is None or self.deleting:
      return False
    property_id = self.property["_id"]
    self.deleting = True
    self.error = None
    try:
      await self.api.delete_property(property_id)
    except ApiError as exc:
      logger.error("Error deleting property %s: %s", property_id, exc.message)
      self.error = "Failed to delete property. Please try again."
      return False
    finally:
      self.deleting = False
    self.favorites.remove(property_id)
    self.favorite = False
    self.navigate_to = "/"
    return True


class FavoritesView(BaseView):
  def __init__(self, api: PropertyApi, favorites: FavoritesService):
    super().__init__(api, favorites)
    self.properties: List[Dict[str, Any]] = []

  async def load(self) -> bool:
    token = self._begin()
    favorite_ids = self.favorites.get_favorites()
    if not favorite_ids:
      self.properties = []
      self._finish(token)
      return True
    try:
      data = await self.api.get_properties()
    except ApiError as exc:
      if self._is_current(token):
        logger.error("Error fetching favorites: %s", exc.message)
        self.error = "Failed to fetch favorite properties. Please try again."
      return False
    finally:
      self._finish(token)
    if not self._is_current(token):
      return False
    kept = set(self.favorites.sync_with_existing(item["_id"] for item in data))
    self.properties = [item for item in data if item["_id"] in kept]
    return True

  async def retry(self) -> bool:
    return await self.load()

  def clear(self) -> None:
    self.favorites.clear()
    self.properties = []

  def toggle_favorite(self, property_id: str) -> bool:
    favorite = super().toggle_favorite(property_id)
    if not favorite:
      self.properties = [item for item in self.properties if item["_id"] != property_id]
    return favorite


class CreateView(BaseView):
  def __init__(self, api: PropertyApi, favorites: FavoritesService, form: Optional[PropertyForm] = None):
    super().__init__(api, favorites)
    self.form = form or PropertyForm()
    self.field_errors: List[Dict[str, str]] = []
    self.created: Optional[Dict[str, Any]] = None
    self.success = False
    self.navigate_to: Optional[str] = None

  async def submit(self) -> bool:
    if self.loading:
      return False
    self.field_errors = self.form.validate()
    if self.field_errors:
      self.error = "Please correct the highlighted fields."
      return False
    token = self._begin()
    try:
      created = await self.api.create_property(self.form.to_payload())
    except ApiError as exc:
      logger.error("Error creating property: %s", exc.message)
      self.error = "Failed to create property. Please try again."
      return False
    finally:
      self._finish(token)
    self.created = created
    self.success = True
    self.navigate_to = f"/properties/{created['_id']}"
    return True

  def cancel(self) -> None:
    self.navigate_to = "/"
