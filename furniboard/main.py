from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from furniboard.api.middleware import RequestLogMiddleware
from furniboard.api.v1.router import v1_router
from furniboard.common.logging import get_logger, setup_logging
from furniboard.config import settings

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if not settings.AUTH_PASSWORD:
        logger.warning("AUTH_PASSWORD is not set; admin login is disabled")
    logger.info("Furniboard API starting (%s)", settings.APP_ENV)
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Furniboard API",
    description="Furniture showroom: catalog, quote and contact ticket boards",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLogMiddleware)

# API routes
app.include_router(v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "furniboard",
        "version": "1.0.0",
        "env": settings.APP_ENV,
    }
