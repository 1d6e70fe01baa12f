"""Firebase Realtime Database access over its REST interface."""

import re
from typing import Any, Dict, Optional, Tuple

import httpx

from .errors import StoreError
from .logging import get_logger
from .settings import Settings

logger = get_logger(__name__)

# Firebase keys may not contain these characters or control characters.
_INVALID_KEY = re.compile(r"[.$#\[\]/\x00-\x1f\x7f]")
_MAX_KEY_BYTES = 768


def is_valid_key(record_id: Optional[str]) -> bool:
  if not record_id or not record_id.strip():
    return False
  if len(record_id.encode("utf-8")) > _MAX_KEY_BYTES:
    return False
  return _INVALID_KEY.search(record_id) is None


def build_firebase_url(settings: Settings, resource: str, record_id: Optional[str] = None) -> str:
  if not settings.firebase_database_url:
    raise StoreError("Firebase is not configured.")
  base = str(settings.firebase_database_url).rstrip("/")
  return f"{base}/{resource}{f'/{record_id}' if record_id else ''}.json"


class PropertyStore:
  """Handle on the properties collection.

  Created once per process from settings and a shared ``httpx.AsyncClient``.
  ``open`` pings the database so that a bad URL or secret fails at startup
  rather than on the first request; ``close`` releases the client.
  """

  def __init__(self, settings: Settings, client: httpx.AsyncClient):
    self.settings = settings
    self.client = client
    self.collection = settings.properties_collection

  @classmethod
  def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "PropertyStore":
    client = httpx.AsyncClient(timeout=settings.store_timeout, transport=transport)
    return cls(settings, client)

  async def _request(
    self,
    method: str = "GET",
    record_id: Optional[str] = None,
    body: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
    allowed: Tuple[int, ...] = (),
  ) -> httpx.Response:
    url = build_firebase_url(self.settings, self.collection, record_id)
    query = dict(params or {})
    if self.settings.firebase_database_secret:
      query["auth"] = self.settings.firebase_database_secret
    try:
      response = await self.client.request(method, url, json=body, params=query or None, headers=headers)
    except httpx.HTTPError as exc:
      logger.error("Firebase %s %s unreachable: %s", method, url, exc)
      raise StoreError("Document store unavailable") from exc
    if response.status_code >= 400 and response.status_code not in allowed:
      logger.error("Firebase %s %s returned %s: %s", method, url, response.status_code, response.text)
      raise StoreError(f"Document store error {response.status_code}")
    return response

  @staticmethod
  def _payload(response: httpx.Response) -> Any:
    if response.status_code == 204 or not response.text:
      return None
    return response.json()

  async def open(self) -> None:
    await self.ping()
    logger.info("Connected to document store collection %r", self.collection)

  async def close(self) -> None:
    await self.client.aclose()

  async def ping(self) -> None:
    await self._request(params={"shallow": "true"})

  async def list(self) -> Dict[str, Dict[str, Any]]:
    snapshot = self._payload(await self._request())
    if not isinstance(snapshot, dict):
      return {}
    return {key: value for key, value in snapshot.items() if isinstance(value, dict)}

  async def get(self, record_id: str) -> Optional[Dict[str, Any]]:
    record, _ = await self.get_with_etag(record_id)
    return record

  async def get_with_etag(self, record_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """Read a record together with the ETag needed for a conditional write."""
    if not is_valid_key(record_id):
      return None, None
    response = await self._request(record_id=record_id, headers={"X-Firebase-ETag": "true"})
    record = self._payload(response)
    return (record if isinstance(record, dict) else None), response.headers.get("ETag")

  async def insert(self, body: Dict[str, Any]) -> str:
    snapshot = self._payload(await self._request(method="POST", body=body))
    if not isinstance(snapshot, dict) or not snapshot.get("name"):
      raise StoreError("Document store did not return an identifier")
    return snapshot["name"]

  async def replace(self, record_id: str, body: Dict[str, Any], etag: str) -> bool:
    """PUT the whole record only if it still matches ``etag``.

    Returns False when the record changed or vanished since it was read.
    """
    response = await self._request(
      method="PUT",
      record_id=record_id,
      body=body,
      headers={"if-match": etag},
      allowed=(412,),
    )
    return response.status_code != 412

  async def delete(self, record_id: str) -> None:
    await self._request(method="DELETE", record_id=record_id)
