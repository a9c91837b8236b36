"""
Minibank API Application Factory
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..system import BankingSystem
from .users import router as users_router
from .accounts import router as accounts_router
from .search import router as search_router


def create_app(system: Optional[BankingSystem] = None) -> FastAPI:
    """
    Create and configure the FastAPI application

    Args:
        system: Banking system to serve. When omitted, one is built from
            the configuration and loaded from its snapshot file before
            the app is returned.
    """
    if system is None:
        system = BankingSystem.from_config()
        system.load()

    app = FastAPI(
        title="Minibank API",
        description="Users, accounts and deposit/withdraw operations",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.banking_system = system

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(users_router, prefix="/users", tags=["Users"])
    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])
    app.include_router(search_router, prefix="/search", tags=["Search"])

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    # Root endpoint
    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Minibank API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "users": "/users",
                "accounts": "/accounts",
                "search": "/search",
            }
        }

    return app
