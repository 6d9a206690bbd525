import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from . import __version__
from .config import settings
from .routes import admin, auth, interviews, mock_interview, practice, report, resume
from .utils.database import close_db_connection, connect_to_db
from .utils.errors import PrepError, StorageUnavailable

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Open the database on startup and close it on shutdown
    """
    await connect_to_db()
    yield
    await close_db_connection()


app = FastAPI(
    title="Placement Prep API",
    description="Practice tests, interview tracking and review console",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=r"https://.*\.vercel\.app",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(PrepError)
async def prep_error_handler(request: Request, exc: PrepError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(PyMongoError)
async def storage_error_handler(request: Request, exc: PyMongoError):
    logger.error(f"Unhandled storage error on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=StorageUnavailable.status_code,
        content={"detail": StorageUnavailable.default_detail},
    )


app.include_router(auth.router)
app.include_router(practice.router)
app.include_router(report.router)
app.include_router(interviews.router)
app.include_router(mock_interview.router)
app.include_router(resume.router)
app.include_router(admin.router)


@app.get("/health", include_in_schema=False)
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
