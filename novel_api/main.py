"""
Novel reader platform - FastAPI main application
"""

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from pymongo.database import Database
import logging

from novel_api import __version__
from novel_api.core import database
from novel_api.core.config import settings
from novel_api.core.database import get_db
from novel_api.core.exceptions import register_exception_handlers
from novel_api.services.user_service import ensure_user_indexes

from novel_api.api.novels import router as novels_router
from novel_api.api.auth import router as auth_router
from novel_api.api.comments import router as comments_router

# Logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Runs at application start and shutdown"""
    logger.info("🚀 Novel reader API starting")

    # A store that cannot be reached at startup is fatal
    client = database.connect()
    ensure_user_indexes(client[settings.DB_NAME])

    yield

    database.close()
    logger.info("👋 Novel reader API stopped")


app = FastAPI(
    title="Novel Reader API",
    description="Novel catalog, chapters, accounts and comments",
    version=__version__,
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Novel Reader API",
        "version": __version__,
        "docs": "/docs",
        "status": "running",
    }


@app.get("/health")
def health_check(db: Database = Depends(get_db)):
    """Health check endpoint"""
    if not database.ping(db):
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "unreachable"},
        )
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "database": "connected",
    }


app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(comments_router, prefix="/comments", tags=["comments"])
# Catalog last: its /api/{novel_name} routes are catch-alls
app.include_router(novels_router, prefix="/api", tags=["novels"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "novel_api.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
    )
