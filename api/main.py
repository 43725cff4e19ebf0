"""
safedsl API - FastAPI Application

Run with: uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes.execute import router as execute_router
from api.routes.validate import router as validate_router
from api.routes.capabilities import router as capabilities_router
from api.routes.health import router as health_router
from safedsl import __version__

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("safedsl API starting...")
    yield
    logger.info("safedsl API shutting down...")


app = FastAPI(
    title="safedsl API",
    description="Sandboxed interpreter for a SwiftUI-style UI DSL",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["Health"])
app.include_router(execute_router, prefix="/api/v1", tags=["Execution"])
app.include_router(validate_router, prefix="/api/v1", tags=["Validation"])
app.include_router(capabilities_router, prefix="/api/v1", tags=["Capabilities"])


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "name": "safedsl API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
