import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

import models
from database import engine, get_db
from errors import CatalogError, InvalidArgument, NotFound, PreconditionFailed, StorageError
from routers import books, comments
from config import settings
from logging_config import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidArgument: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    PreconditionFailed: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic
    logger.info("Starting up catalog-service...")
    if settings.CREATE_SCHEMA:
        models.Base.metadata.create_all(bind=engine)
    yield
    # Shutdown logic
    logger.info("Shutting down catalog-service...")

app = FastAPI(
    title="Book Catalog Service",
    description="Books catalog with paginated search and comments",
    version="1.0.0",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins or ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    logger.info(
        "%s %s -> %s (%.2f ms) ip=%s",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        request.client.host if request.client else "unknown",
    )
    return response

@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if isinstance(exc, StorageError):
        logger.error(f"DB error while {request.method} {request.url.path}", exc_info=exc)
        detail = "DB error"
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        detail = exc.message
    return JSONResponse(status_code=status_code, content={"detail": detail, "code": exc.code})

# Health check endpoint
@app.get("/health", tags=["System"])
def health_check(db: Session = Depends(get_db)):
    health_status = {"status": "healthy", "service": "catalog-service", "components": {}}

    # Check database
    try:
        db.execute(text("SELECT 1"))
        health_status["components"]["database"] = "connected"
    except Exception as e:
        logger.error(f"DB health check failed: {e}")
        health_status["components"]["database"] = "unhealthy"
        health_status["status"] = "degraded"

    if health_status["status"] != "healthy":
         raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=health_status
        )
    return health_status

app.include_router(books.router)
app.include_router(comments.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8002)
