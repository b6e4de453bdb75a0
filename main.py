import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

import core.events  # noqa: F401  registers ORM listeners
from core.async_engine import AsyncSessionLocal, async_engine
from core.exceptions import register_exception_handlers
from core.settings import settings
from crud.voter_crud import voter_crud as VoterCrud
from api.api import api_router

logging.basicConfig(level=settings.LOG_LEVEL.upper() if settings.LOG_LEVEL != "trace" else "DEBUG")
logger = logging.getLogger(__name__)


async def provision_admins() -> int:
    """Promote already-registered voters listed in ADMIN_EMAILS."""
    if not settings.ADMIN_EMAILS:
        return 0
    async with AsyncSessionLocal() as session:
        async with session.begin():
            promoted = await VoterCrud.promote_admins(session, settings.ADMIN_EMAILS)
    logger.info(f"Admin provisioning promoted {promoted} voter(s)")
    return promoted


@asynccontextmanager
async def lifespan(app: FastAPI):
    await provision_admins()
    yield
    await async_engine.dispose()


app = FastAPI(title="Voting API", version="1.0.0", lifespan=lifespan)

if settings.BACKEND_CORS_ORIGINS:
    logger.info(f"Adding CORS middleware with origins: {settings.BACKEND_CORS_ORIGINS}")
    cors_origins = [str(origin) for origin in settings.BACKEND_CORS_ORIGINS]
else:
    logger.info("No CORS origins configured, using wildcard")
    cors_origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=cors_origins != ["*"],  # credentials are not allowed with wildcard
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=32400,
)

register_exception_handlers(app)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {"message": "Voting API", "version": "1.0.0"}

@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "cors_origins": settings.BACKEND_CORS_ORIGINS,
        "frontend_url": settings.FRONTEND_URL
    }


if __name__ == "__main__":
    run_args = {
        "app": "main:app",
        "host": settings.SERVER_ADDRESS or "0.0.0.0",
        "port": settings.SERVER_PORT,
        "log_level": settings.LOG_LEVEL,
        "reload": settings.WATCH_FILES,
    }

    uvicorn.run(**run_args)
