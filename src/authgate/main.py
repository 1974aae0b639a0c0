"""AuthGate main application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from authgate import __version__
from authgate.api import router
from authgate.auth.token import TokenManager
from authgate.config import Settings, settings
from authgate.engine.core import IdentityEngine
from authgate.state.base import create_state_driver

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("authgate")


def build_token_manager(config: Settings, engine: IdentityEngine) -> TokenManager:
    """Token manager signing with the configured secret."""
    tokens = TokenManager(
        secret=config.jwt_secret,
        algorithm=config.jwt_algorithm,
        ttl_seconds=config.token_ttl_seconds,
    )
    if config.reject_inactive_tokens:
        tokens.add_principal_check(engine.ensure_active)
        logger.info("Tokens of disabled or deleted identities will be rejected")
    return tokens


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting AuthGate server...")
    logger.info(f"Environment: {settings.env.value}")
    logger.info(f"State backend: {settings.state_backend.value} (root {settings.state_root})")

    driver = create_state_driver(settings)
    engine = IdentityEngine(driver, settings.state_root, settings.bcrypt_rounds)
    app.state.engine = engine
    app.state.token_manager = build_token_manager(settings, engine)

    if settings.bootstrap_default_users:
        created = await engine.ensure_default_users(
            settings.admin_password, settings.ops_password
        )
        if created:
            logger.info(f"Bootstrapped built-in users: {', '.join(created)}")

    yield

    # Cleanup
    logger.info("Shutting down AuthGate server...")
    await driver.close()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title="AuthGate",
        description="Identity and authorization backbone of an authenticating proxy",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


app = create_app()


def main():
    """Entry point for the application."""
    uvicorn.run(
        "authgate.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
