import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from packages.aic_core.config import AICConfig
from packages.aic_core.logging import add_runtime_file_handler, get_logger

from AIC.api.dependencies import get_session_service
from AIC.api.health import router as health_router
from AIC.api.history import router as history_router
from AIC.api.session import router as session_router
from AIC.api.tools import router as tools_router

config = AICConfig.load()
logger = get_logger("aic.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    runtime_handler = add_runtime_file_handler()
    logger.info(
        f"Starting {config.PROJECT_NAME} v{config.VERSION} "
        f"(providers={config.PROVIDER_MODE}, media={config.MEDIA_BACKEND})"
    )

    yield

    # Sessions still open at shutdown hold device streams
    service = get_session_service()
    logger.info(f"Server shutting down, closing {service.active_session_count} session(s)")
    await service.close_all()
    logging.getLogger().removeHandler(runtime_handler)
    runtime_handler.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title=config.PROJECT_NAME,
        version=config.VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url=None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix="", tags=["Status"])
    app.include_router(session_router, prefix="/api/v1")
    app.include_router(history_router, prefix="/api/v1")
    app.include_router(tools_router, prefix="/api/v1")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("AIC.main:app", host="0.0.0.0", port=8000, reload=True)
