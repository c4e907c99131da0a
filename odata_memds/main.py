import logging

from fastapi import FastAPI

from odata_memds.api.exception_handlers import register_exception_handlers
from odata_memds.api.router import api_router
from odata_memds.core.config import Settings, settings

logging.basicConfig(level=settings.log_level)


def create_app(app_settings: Settings = settings) -> FastAPI:
    app = FastAPI(title="odata-memds")

    register_exception_handlers(app)

    # Registered before the entity set routes: with an empty API prefix /{entity_set} would match it
    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(api_router, prefix=app_settings.api_prefix)
    return app


app = create_app()
