"""FastAPI application for LabelScan."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from labelscan.api.routers import history, scan
from labelscan.api.schemas.response import HealthResponse
from labelscan.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log server start and stop."""
    logger.info("Starting LabelScan API server")
    yield
    logger.info("Shutting down LabelScan API server")


# Create FastAPI application
app = FastAPI(
    title="LabelScan API",
    description="Safety and nutrition analysis of photographed consumer items",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware - allow requests from the camera frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:5173",
        "http://localhost:8080",  # Built frontend
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(scan.router, prefix="/api/scan", tags=["scan"])
app.include_router(history.router, prefix="/api/history", tags=["history"])


@app.get("/", response_model=HealthResponse)
async def root():
    """Root endpoint with basic API information."""
    return HealthResponse(status="running", version="1.0.0")


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version="1.0.0")
