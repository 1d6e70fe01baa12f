import json
from typing import Iterable, List

from ..core.logging import get_logger
from .storage import KeyValueStorage

logger = get_logger(__name__)

STORAGE_KEY = "property-favorites"


class FavoritesService:
  """Favorite listing ids kept in local storage, never on the server."""

  def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY):
    self.storage = storage
    self.key = key

  def get_favorites(self) -> List[str]:
    try:
      raw = self.storage.get_item(self.key)
      data = json.loads(raw) if raw else []
    except (OSError, ValueError, TypeError):
      return []
    if not isinstance(data, list):
      return []
    return [item for item in data if isinstance(item, str)]

  def _save(self, favorites: List[str]) -> None:
    try:
      self.storage.set_item(self.key, json.dumps(favorites))
    except (OSError, ValueError, TypeError) as exc:
      logger.warning("Could not save favorites: %s", exc)

  def add(self, property_id: str) -> None:
    favorites = self.get_favorites()
    if property_id not in favorites:
      favorites.append(property_id)
      self._save(favorites)

  def remove(self, property_id: str) -> None:
    favorites = self.get_favorites()
    if property_id in favorites:
      self._save([item for item in favorites if item != property_id])

  def toggle(self, property_id: str) -> bool:
    """Flip the favorite flag and return the new state."""
    if self.is_favorite(property_id):
      self.remove(property_id)
      return False
    self.add(property_id)
    return True

  def is_favorite(self, property_id: str) -> bool:
    return property_id in self.get_favorites()

  def clear(self) -> None:
    try:
      self.storage.remove_item(self.key)
    except (OSError, ValueError) as exc:
      logger.warning("Could not clear favorites: %s", exc)

  def sync_with_existing(self, existing_ids: Iterable[str]) -> List[str]:
    """Drop favorites whose listing no longer exists; returns what is kept."""
    live = set(existing_ids)
    favorites = self.get_favorites()
    kept = [item for item in favorites if item in live]
    if kept != favorites:
      self._save(kept)
    return kept
