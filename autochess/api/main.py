"""
FastAPI main application.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .routes import combat, data
from .schemas.common import HealthResponse, StatusResponse

API_NAME = "Autochess Combat API"
API_VERSION = "1.0.0"

app = FastAPI(
    title=API_NAME,
    description="Autobattler combat simulation API",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(combat.router, prefix="/api/combat", tags=["Combat"])
app.include_router(data.router, prefix="/api/data", tags=["Data"])


@app.get("/", response_model=StatusResponse)
async def root():
    """API status check."""
    return StatusResponse(name=API_NAME, version=API_VERSION)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse()
