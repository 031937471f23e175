import logging
from typing import Optional

from fastapi import FastAPI  # type: ignore
from fastapi.middleware.cors import CORSMiddleware  # type: ignore

from project_tracker import __version__
from project_tracker.config import Config, ConfigError
from project_tracker.constants import API_PREFIX
from project_tracker.services import TrackerServices
from project_tracker.utils.logs import setup_logger
from .routes import router

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None, services: Optional[TrackerServices] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Effective configuration (loaded from the config layers when omitted)
        services: Services to serve; a fresh in-memory set when omitted

    Returns:
        The configured application
    """
    config = config or Config.load_config()

    app = FastAPI(
        title="Project Tracker",
        description="Projects and tasks with schedules, tags and dependencies",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc"
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.services = services or TrackerServices()

    # Include API routes
    app.include_router(router, prefix=API_PREFIX)

    logger.info(f"Project Tracker API {__version__} ready under {API_PREFIX}")
    return app


def main():
    """Entry point for the web server."""
    import uvicorn

    try:
        config = Config.load_config()
    except ConfigError as e:
        print(f"Error: Invalid configuration: {e}")
        return 1

    setup_logger(
        log_file=config.logging.file,
        log_level=config.logging.level,
        log_dir=config.logging.directory,
    )
    app = create_app(config)

    print("\n\033[96m=== Project Tracker Server ===\033[0m")
    print(f"\033[96mAPI documentation: http://{config.server.host}:{config.server.port}/api/docs\033[0m\n")

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
