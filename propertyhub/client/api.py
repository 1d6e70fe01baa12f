"""HTTP client for the listing service."""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..models.filters import PropertyFilters

API_BASE_URL = "http://localhost:8080/api"


class ApiError(Exception):
  def __init__(self, message: str, status_code: Optional[int] = None):
    super().__init__(message)
    self.message = message
    self.status_code = status_code


class ApiNotFound(ApiError):
  pass


def _error_message(response: httpx.Response) -> str:
  try:
    body = response.json()
  except ValueError:
    return response.text or f"HTTP {response.status_code}"
  if isinstance(body, dict) and body.get("message"):
    return str(body["message"])
  return f"HTTP {response.status_code}"


class PropertyApi:
  def __init__(
    self,
    base_url: str = API_BASE_URL,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 15,
  ):
    self.base_url = base_url.rstrip("/")
    self.client = client or httpx.AsyncClient(timeout=timeout)

  async def aclose(self) -> None:
    await self.client.aclose()

  async def __aenter__(self) -> "PropertyApi":
    return self

  async def __aexit__(self, *exc_info) -> None:
    await self.aclose()

  async def _request(self, method: str, path: str, **kwargs) -> Any:
    url = f"{self.base_url}{path}"
    try:
      response = await self.client.request(method, url, **kwargs)
    except httpx.HTTPError as exc:
      raise ApiError(f"Could not reach the listing service: {exc}") from exc
    if response.status_code == 404:
      raise ApiNotFound(_error_message(response), response.status_code)
    if response.status_code >= 400:
      raise ApiError(_error_message(response), response.status_code)
    return response.json() if response.content else None

  @staticmethod
  def _item_path(property_id: str) -> str:
    # Ids are opaque; "/", "?" and "#" must stay inside the path segment.
    return f"/properties/{quote(property_id, safe='')}"

  async def get_properties(self, filters: Optional[PropertyFilters] = None) -> List[Dict[str, Any]]:
    params = filters.to_params() if filters else {}
    return await self._request("GET", "/properties", params=params)

  async def get_property(self, property_id: str) -> Dict[str, Any]:
    return await self._request("GET", self._item_path(property_id))

  async def create_property(self, data: Dict[str, Any]) -> Dict[str, Any]:
    return await self._request("POST", "/properties", json=data)

  async def update_property(self, property_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return await self._request("PUT", self._item_path(property_id), json=data)

  async def delete_property(self, property_id: str) -> None:
    await self._request("DELETE", self._item_path(property_id))
