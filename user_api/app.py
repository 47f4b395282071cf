"""
FastAPI application for the User API.

Run with:
    python -m user_api.app

or build an app around an existing DatabaseContext (e.g. in tests):
    app = create_app(context=InMemoryDbContext())
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import register_error_handlers, router
from .config import UsersDatabaseSettings
from .database import (
    DatabaseContext,
    MongoDbContext,
    close_shared_client,
    get_shared_mongo_client,
    verify_shared_client,
)
from .observability import CorrelationIdMiddleware
from .services import UserService

logger = logging.getLogger(__name__)


def create_app(
    settings: UsersDatabaseSettings | None = None,
    context: DatabaseContext | None = None,
) -> FastAPI:
    """
    Build the User API application.

    Args:
        settings: Database settings (read from the environment when omitted)
        context: DatabaseContext to use; when omitted a MongoDB context is
            created from ``settings`` at startup and closed at shutdown

    Returns:
        Configured FastAPI app
    """
    settings = settings or UsersDatabaseSettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_client = False
        db_context = context
        if db_context is None:
            settings.validate()
            client = get_shared_mongo_client(
                settings.connection_string,
                max_pool_size=settings.max_pool_size,
                min_pool_size=settings.min_pool_size,
                server_selection_timeout_ms=settings.server_selection_timeout_ms,
                app_name=settings.application_name,
            )
            owns_client = True
            db_context = MongoDbContext(client[settings.db_name])
            if not await verify_shared_client():
                logger.warning("MongoDB is not reachable yet; requests will fail until it is")

        app.state.user_service = UserService(db_context, settings)
        logger.info(f"User API started (database={settings.db_name})")
        try:
            yield
        finally:
            app.state.user_service = None
            if owns_client:
                close_shared_client()
            logger.info("User API stopped")

    app = FastAPI(
        title="User API",
        description="CRUD service for users backed by MongoDB",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(CorrelationIdMiddleware)
    register_error_handlers(app)
    app.include_router(router)
    return app


def main() -> None:
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
