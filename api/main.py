"""
FastAPI application entrypoint.
"""
from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI

from api.routes import router
from companion.config import Settings
from companion.store import init_db, make_engine

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.DEBUG))
    engine = make_engine(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        yield
        engine.dispose()

    app = FastAPI(title="Emotion Companion API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.include_router(router)

    @app.get("/health")
    def health() -> dict:
        """
        Health check endpoint.

        Returns:
            dict: Simple status payload.
        """
        return {"status": "ok"}

    logger.debug(f"[api] app created log_level={settings.LOG_LEVEL}")
    return app


app = create_app()
