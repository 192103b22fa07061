"""
Depot Cart Engine Application

HTTP surface over the cart reconciliation, pricing and delivery schedule
engine for the storefront UI.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from .core.config import settings
from .engine import build_engine
from .routes import cart_router, pricing_router, delivery_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    if not hasattr(app.state, "engine"):
        app.state.engine = build_engine(settings)
    yield
    await app.state.engine.close()
    logger.info(f"{settings.app_name} shutting down...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Cart reconciliation, subscription pricing and delivery dates",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(cart_router)
app.include_router(pricing_router)
app.include_router(delivery_router)


@app.get("/")
async def home():
    """API index"""
    return {
        "message": settings.app_name,
        "docs": "/docs",
        "endpoints": {
            "cart": "/api/cart",
            "pricing": "/api/pricing",
            "delivery": "/api/delivery",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "depot-cart-engine"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "depot_cart.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
