"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from file_manager.config import settings
from file_manager.database import async_session, engine
from file_manager.exceptions import FileStoreError
from file_manager.models import Base

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, dispose the engine on shutdown."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("File storage root: %s", settings.FILE_STORAGE_PATH)

    yield

    await engine.dispose()


app = FastAPI(
    title="File Manager API",
    version="1.0.0",
    description="Upload, list, download and delete files with stored metadata.",
    lifespan=lifespan,
)

# CORS
origins = [o.strip() for o in settings.CORS_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FileStoreError)
async def file_store_error_handler(request: Request, exc: FileStoreError):
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/api/health")
async def health_check():
    """Report whether the metadata database answers a trivial query."""
    try:
        async with async_session() as db:
            await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Health check failed: %s", e)
        return {"status": "error", "database": str(e)}
    return {"status": "ok", "database": "connected"}


# Register routers
from file_manager.routes.files import router as files_router
app.include_router(files_router)


def run():
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "file_manager.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
