"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cfo_helper import __version__
from cfo_helper.config import settings
from cfo_helper.advisor import routes as advisor_routes
from cfo_helper.dashboard import routes as dashboard_routes
from cfo_helper.dashboard.registry import session_registry
from cfo_helper.dashboard.scheduler import setup_apscheduler
from cfo_helper.gateway import routes as gateway_routes
from cfo_helper.identity import routes as identity_routes
from cfo_helper.middleware import limiter, setup_rate_limiting

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the history ticker with the app and stop it on shutdown."""
    scheduler = AsyncIOScheduler()
    setup_apscheduler(scheduler)
    scheduler.start()
    logger.info("CFO Helper API started")
    try:
        yield
    finally:
        scheduler.shutdown(wait=False)
        session_registry.clear()
        logger.info("CFO Helper API stopped")


# Create FastAPI app
app = FastAPI(
    title="CFO Helper API",
    description="Financial scenario simulation and AI advice for founders",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_rate_limiting(app)

# Include routers
app.include_router(dashboard_routes.router, prefix=f"{settings.API_V1_PREFIX}/dashboard", tags=["Dashboard"])
app.include_router(advisor_routes.router, prefix=f"{settings.API_V1_PREFIX}/advisor", tags=["Advisor"])
app.include_router(identity_routes.router, prefix=settings.API_V1_PREFIX, tags=["Onboarding"])
app.include_router(gateway_routes.router, prefix=settings.API_V1_PREFIX, tags=["Data"])


@app.get("/")
@limiter.exempt
async def root():
    """Root endpoint."""
    return {
        "message": "CFO Helper API",
        "version": __version__,
        "docs": "/docs",
    }


@app.get("/health")
@limiter.exempt
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "cfo_helper.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
