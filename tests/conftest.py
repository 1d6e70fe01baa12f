"""Pytest configuration and fixtures."""

import hashlib
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from propertyhub.core.settings import Settings
from propertyhub.main import create_app

FIREBASE_URL = "https://propertyhub-test.firebaseio.com"


class FakeFirebase:
  """In-memory Firebase Realtime Database REST endpoint.

  Record reads made with ``X-Firebase-ETag: true`` carry an ``ETag`` header,
  and a PUT with ``if-match`` answers 412 when the record has changed since.
  ``after_get`` runs after each record read, to simulate a concurrent writer.
  """

  def __init__(self, collection: str = "properties"):
    self.collection = collection
    self.data: Dict[str, Dict[str, Any]] = {}
    self.requests: List[httpx.Request] = []
    self.fail_status: Optional[int] = None
    self.unreachable = False
    self.after_get: Optional[Callable[[str], None]] = None
    self._counter = 0

  def seed(self, record_id: str, **fields) -> Dict[str, Any]:
    record = {**sample_payload(), "createdAt": "2024-01-01T00:00:00.000Z", "updatedAt": "2024-01-01T00:00:00.000Z"}
    record.update(fields)
    self.data[record_id] = record
    return record

  def etag(self, record_id: str) -> str:
    encoded = json.dumps(self.data.get(record_id), sort_keys=True).encode()
    return hashlib.md5(encoded).hexdigest()

  def _respond(self, payload: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
    return httpx.Response(
      status_code,
      content=json.dumps(payload).encode(),
      headers={"content-type": "application/json", **(headers or {})},
    )

  def handler(self, request: httpx.Request) -> httpx.Response:
    self.requests.append(request)
    if self.unreachable:
      raise httpx.ConnectError("connection refused", request=request)
    if self.fail_status:
      return self._respond({"error": "boom"}, self.fail_status)

    path = request.url.path.strip("/")
    assert path.endswith(".json")
    parts = path[: -len(".json")].split("/")
    assert parts[0] == self.collection
    record_id = parts[1] if len(parts) > 1 else None

    if request.method == "GET" and record_id is None:
      if request.url.params.get("shallow") == "true":
        return self._respond({key: True for key in self.data} or None)
      return self._respond(self.data or None)
    if request.method == "GET":
      headers = {"ETag": self.etag(record_id)} if request.headers.get("X-Firebase-ETag") == "true" else None
      response = self._respond(self.data.get(record_id), headers=headers)
      if self.after_get:
        self.after_get(record_id)
      return response
    if request.method == "POST":
      self._counter += 1
      new_id = f"-Nfake{self._counter:04d}"
      self.data[new_id] = json.loads(request.content)
      return self._respond({"name": new_id})
    if request.method == "PUT":
      expected = request.headers.get("if-match")
      if expected is not None and expected != self.etag(record_id):
        return self._respond(self.data.get(record_id), 412, {"ETag": self.etag(record_id)})
      body = json.loads(request.content)
      self.data[record_id] = {key: value for key, value in body.items() if value is not None and value != []}
      return self._respond(body)
    if request.method == "DELETE":
      self.data.pop(record_id, None)
      return self._respond(None)
    return self._respond({"error": "unsupported"}, 405)


def sample_payload(**overrides) -> Dict[str, Any]:
  payload = {
    "title": "Sunny Lakeside Cottage",
    "description": "Two bedroom cottage with a private dock.",
    "price": 150000,
    "location": "12 Lakeside Ave, Springfield",
    "bedrooms": 2,
    "bathrooms": 1.5,
    "area": 1100,
    "type": "house",
    "images": ["https://img.example.com/cottage.jpg"],
    "amenities": ["Dock", "Fireplace"],
  }
  payload.update(overrides)
  return payload


@pytest.fixture
def firebase() -> FakeFirebase:
  return FakeFirebase()


@pytest.fixture
def settings() -> Settings:
  return Settings(FIREBASE_DATABASE_URL=FIREBASE_URL)


@pytest.fixture
def client(settings, firebase):
  app = create_app(settings, transport=httpx.MockTransport(firebase.handler))
  with TestClient(app) as test_client:
    yield test_client
