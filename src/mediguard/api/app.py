"""FastAPI application for MediGuard"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mediguard.api.dependencies import get_container
from mediguard.api.routes import hospital, provider

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan context manager.

    Resolves the dependency container (a container installed beforehand
    with set_container is kept) and loads its configuration.
    """
    container = get_container()
    config = container.get_config()
    log.info("MediGuard API ready (scheme=%s, public_url=%s)", config.code_scheme, config.public_url)

    yield

    log.info("Shutting down MediGuard API")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="MediGuard",
        description="""
        Privacy-preserving health credential verification

        ## Endpoints

        ### Provider
        - `POST /api/provider/request` - Open a verification session
        - `POST /api/provider/request/catalog` - Open a session for a catalog predicate
        - `GET /api/provider/catalog` - List catalog predicates
        - `GET /api/provider/request/{request_id}/status` - Session status
        - `GET /api/provider/request/{request_id}/qrcode` - Session QR code
        - `POST /api/provider/verify` - Submit a proof
        - `GET /api/provider/{provider_id}/audit` - Audit feed, newest first

        ### Hospital
        - `POST /api/hospital/init` - Register an issuer key
        - `GET /api/hospital/{hospital_id}/public-key` - Issuer public key
        - `POST /api/hospital/issue` - Issue a signed credential
        """,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Wallet and provider frontends are served from other origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(provider.router)
    app.include_router(hospital.router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint"""
        return JSONResponse(content={"status": "healthy", "service": "mediguard"})

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    from mediguard.logging_config import configure_logging

    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000, log_config=None)
