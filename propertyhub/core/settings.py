import functools
from typing import List, Literal, Optional

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: Optional[str]) -> List[str]:
  if not value:
    return []
  return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
  model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

  port: int = Field(8080, alias="PORT")
  client_origin: str = Field("http://localhost:5173", alias="CLIENT_ORIGIN")

  firebase_database_url: Optional[AnyHttpUrl] = Field(None, alias="FIREBASE_DATABASE_URL")
  firebase_database_secret: Optional[str] = Field(None, alias="FIREBASE_DATABASE_SECRET")
  properties_collection: str = Field("properties", alias="PROPERTIES_COLLECTION")
  store_timeout: float = Field(15, alias="STORE_TIMEOUT")

  log_level: str = Field("INFO", alias="LOG_LEVEL")
  log_format: Literal["standard", "json"] = Field("standard", alias="LOG_FORMAT")

  allowed_origins: List[str] = Field(default_factory=list, validate_default=True)

  @field_validator("allowed_origins", mode="before")
  @classmethod
  def fill_origins(cls, value, info):
    if value:
      return value
    client_origin = info.data.get("client_origin") or "http://localhost:5173"
    return _split_csv(client_origin)

  @field_validator("properties_collection")
  @classmethod
  def strip_slashes(cls, value: str) -> str:
    cleaned = value.strip().strip("/")
    if not cleaned:
      raise ValueError("PROPERTIES_COLLECTION must not be empty")
    return cleaned


@functools.lru_cache
def get_settings() -> Settings:
  return Settings()  # type: ignore[arg-type]
