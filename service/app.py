# service/app.py

from fastapi import FastAPI
import logging

from service.config import settings
from service.utils import setup_logging
from service.api import analysis, storage, tailoring

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# Include API routers
app.include_router(analysis.router, prefix="/api/analysis", tags=["analysis"])
app.include_router(tailoring.router, prefix="/api/tailoring", tags=["tailoring"])
app.include_router(storage.router, prefix="/api/storage", tags=["storage"])


@app.on_event("startup")
async def startup():
    logger.info(f"{settings.app_name} started (data: {settings.data_path})")


# ============= Health Check =============

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": "1.0.0"
    }


def main():
    import uvicorn

    setup_logging(settings.log_path, settings.log_level)
    uvicorn.run(
        "service.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )


if __name__ == "__main__":
    main()
