from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging import get_logger

logger = get_logger(__name__)


class ServiceError(Exception):
  status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

  def __init__(self, message: str):
    super().__init__(message)
    self.message = message

  def to_body(self) -> Dict[str, Any]:
    return {"message": self.message}


class ValidationError(ServiceError):
  status_code = status.HTTP_400_BAD_REQUEST

  def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
    super().__init__(message)
    self.errors = errors or []

  def to_body(self) -> Dict[str, Any]:
    body = super().to_body()
    if self.errors:
      body["errors"] = self.errors
    return body


class NotFoundError(ServiceError):
  status_code = status.HTTP_404_NOT_FOUND


class StoreError(ServiceError):
  status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def format_validation_errors(errors) -> List[Dict[str, str]]:
  """Flatten pydantic error dicts into ``{"field", "message"}`` pairs."""
  formatted = []
  for error in errors:
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    formatted.append({"field": ".".join(location) or "body", "message": error.get("msg", "Invalid value")})
  return formatted


def register_error_handlers(app: FastAPI) -> None:
  @app.exception_handler(ServiceError)
  async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
      logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())

  @app.exception_handler(RequestValidationError)
  async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = ValidationError("Invalid property data", format_validation_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_body())

  @app.exception_handler(Exception)
  async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
      status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
      content={"message": "Internal server error"},
    )
