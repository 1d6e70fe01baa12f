"""Key-value storage used by the client for local state.

Mirrors the browser ``localStorage`` surface so favorites logic can run
against memory in tests and against a JSON file on disk from the CLI.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Protocol

from ..core.logging import get_logger

logger = get_logger(__name__)


class KeyValueStorage(Protocol):
  def get_item(self, key: str) -> Optional[str]: ...

  def set_item(self, key: str, value: str) -> None: ...

  def remove_item(self, key: str) -> None: ...


class MemoryStorage:
  def __init__(self, initial: Optional[Dict[str, str]] = None):
    self.items: Dict[str, str] = dict(initial or {})

  def get_item(self, key: str) -> Optional[str]:
    return self.items.get(key)

  def set_item(self, key: str, value: str) -> None:
    self.items[key] = value

  def remove_item(self, key: str) -> None:
    self.items.pop(key, None)


def default_storage_path() -> Path:
  return Path.home() / ".propertyhub" / "storage.json"


class FileStorage:
  """All keys live in one JSON object written back on every change."""

  def __init__(self, path: Optional[Path] = None):
    self.path = Path(path) if path else default_storage_path()

  def _read(self) -> Dict[str, str]:
    if not self.path.exists():
      return {}
    try:
      data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
    except ValueError as exc:
      # Unreadable content is replaced on the next write.
      logger.warning("Ignoring corrupt storage file %s: %s", self.path, exc)
      return {}
    return data if isinstance(data, dict) else {}

  def _write(self, data: Dict[str, str]) -> None:
    self.path.parent.mkdir(parents=True, exist_ok=True)
    self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

  def get_item(self, key: str) -> Optional[str]:
    value = self._read().get(key)
    return value if isinstance(value, str) else None

  def set_item(self, key: str, value: str) -> None:
    data = self._read()
    data[key] = value
    self._write(data)

  def remove_item(self, key: str) -> None:
    data = self._read()
    if data.pop(key, None) is not None:
      self._write(data)
