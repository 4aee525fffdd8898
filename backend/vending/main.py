"""
FastAPI application entry point.

WHAT: Main application setup and wiring
WHY: Build the vendor session and expose it over HTTP
HOW: Create FastAPI app, register middleware, routers, handlers
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.vendor_session import VendorSession
from .core.vendor_store import LoggingVendorListener
from .pricing.provider_factory import build_provider
from .services.offer_planner import OfferPlanner
from .services.pricing_policy import PricingPolicy
from .utils.exceptions import VendingException
from .utils.logger import setup_logging, get_logger
from .middleware.error_handler import register_exception_handlers
from .api.v1.router import api_router

logger = get_logger(__name__)


def build_session() -> VendorSession:
    """Build the vendor session described by settings."""
    planner = OfferPlanner(
        policy=PricingPolicy.from_settings(settings),
        max_concurrency=settings.PRICE_LOOKUP_CONCURRENCY
    )
    session = VendorSession(settings, provider=build_provider(settings), planner=planner)
    session.store.add_listener(LoggingVendorListener())
    return session


async def initialize_session(vendor_session: VendorSession) -> None:
    """
    Run the bot once at startup and plan the first offer.
    
    A bot that cannot start or a bad cart report is logged, not fatal:
    the API still comes up so the vendor can refresh from the log later.
    """
    try:
        offer = await vendor_session.init()
    except VendingException as e:
        logger.error(f"Startup init failed ({e.code}): {e.message}")
        return
    if offer is None:
        logger.warning("No cart report at startup; use /api/v1/vendor/offers/refresh later")


def create_app(session: Optional[VendorSession] = None) -> FastAPI:
    """
    Create the FastAPI application.
    
    Args:
        session: Prebuilt vendor session; built from settings at startup when omitted
    """
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.
        
        WHAT: Startup and shutdown logic
        WHY: One vendor session per process; the bot is stopped on exit
        HOW: Async context manager for FastAPI lifespan
        """
        if session is None:
            setup_logging(settings)
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        vendor_session = session or build_session()
        app.state.vendor_session = vendor_session
        
        if vendor_session.settings.INIT_ON_STARTUP:
            await initialize_session(vendor_session)
        logger.info("Application startup complete")
        
        yield
        
        logger.info("Shutting down application")
        vendor_session.close()
        logger.info("Application shutdown complete")
    
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan
    )
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    register_exception_handlers(app)
    app.include_router(api_router)
    
    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running"
        }
    
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "vending.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
