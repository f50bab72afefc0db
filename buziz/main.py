"""
Main application entry point.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import logging

from buziz.core.config import settings, log_config_info
from buziz.db.mongodb import mongodb
from buziz.dependencies.storage import build_data_access
from buziz.storage.events import ChangeFeed

# Import API routers
from buziz.api.offices.router import router as offices_router
from buziz.api.employees.router import router as employees_router
from buziz.api.roles.router import router as roles_router
from buziz.api.clock.router import router as clock_router
from buziz.api.data.router import router as data_router
from buziz.api.shifts.router import router as shifts_router
from buziz.api.subscription.router import router as subscription_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

# Setup CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.change_feed = ChangeFeed()


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": f"Internal server error: {str(exc)}"}
    )


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Event triggered on application startup."""
    log_config_info(logger)

    # One instance for the whole process so the fallback decision is shared
    app.state.data_access = build_data_access()

    logger.info("Application started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Event triggered on application shutdown."""
    await mongodb.close_mongodb_connection()

    logger.info("Application shutdown")


# Include API routers
app.include_router(offices_router, prefix=f"{settings.API_V1_STR}/offices", tags=["offices"])
app.include_router(employees_router, prefix=f"{settings.API_V1_STR}/employees", tags=["employees"])
app.include_router(roles_router, prefix=f"{settings.API_V1_STR}/roles", tags=["roles"])
app.include_router(clock_router, prefix=f"{settings.API_V1_STR}/clock", tags=["clock"])
app.include_router(data_router, prefix=f"{settings.API_V1_STR}/data", tags=["data"])
app.include_router(shifts_router, prefix=f"{settings.API_V1_STR}/shifts", tags=["shifts"])
app.include_router(subscription_router, prefix=f"{settings.API_V1_STR}/subscription", tags=["subscription"])


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": f"Welcome to {settings.PROJECT_NAME} API"}


@app.get(f"{settings.API_V1_STR}/health")
async def health(request: Request):
    """Report which store is serving requests."""
    data_access = getattr(request.app.state, "data_access", None)
    return {
        "status": "ok",
        "storageMode": settings.STORAGE_MODE,
        "usingLocal": data_access.using_local if data_access else None,
        "backend": data_access.active_backend.name if data_access else None,
    }
