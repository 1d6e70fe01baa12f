import contextlib
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import properties
from .core.errors import StoreError, register_error_handlers
from .core.firebase import PropertyStore
from .core.logging import get_logger, setup_logging
from .core.settings import Settings, get_settings

logger = get_logger(__name__)


def create_app(
  settings: Optional[Settings] = None,
  transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
  settings = settings or get_settings()

  @contextlib.asynccontextmanager
  async def lifespan(app: FastAPI):
    store = PropertyStore.from_settings(settings, transport=transport)
    try:
      await store.open()
    except StoreError as exc:
      await store.close()
      logger.critical("Document store connection failed: %s", exc.message)
      raise
    app.state.store = store
    try:
      yield
    finally:
      await store.close()
      logger.info("Document store connection closed")

  app = FastAPI(title="PropertyHub API", version="1.0.0", lifespan=lifespan)

  app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
  )

  register_error_handlers(app)
  app.include_router(properties.router)

  @app.get("/")
  async def root():
    return {"message": "Property Management API is running!"}

  @app.get("/api/health")
  async def health():
    return {"status": "ok"}

  return app


app = create_app()


def run() -> None:  # pragma: no cover
  import uvicorn

  settings = get_settings()
  setup_logging(settings.log_level, settings.log_format)
  uvicorn.run("propertyhub.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":  # pragma: no cover
  run()
