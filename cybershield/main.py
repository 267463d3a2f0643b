"""CyberShield training API - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cybershield.core.config import get_settings
from cybershield.core.errors import CyberShieldError
from cybershield.core.logging_setup import configure_logging
from cybershield.db.base import Base
from cybershield.db.session import engine
from cybershield.routers import api, progress, training

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # create tables (alembic manages upgrades)
    Base.metadata.create_all(bind=engine)
    logger.info(f"Starting {settings.app_name}")
    yield
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    description="Cybersecurity awareness training: sessions, progression and AI scenarios",
    lifespan=lifespan,
)


@app.exception_handler(CyberShieldError)
async def cybershield_error_handler(request: Request, exc: CyberShieldError):
    content = {"error": exc.message}
    if exc.status_code >= 500:
        content["retryable"] = True
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=content)


app.include_router(training.router)
app.include_router(progress.router)
app.include_router(api.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cybershield.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
