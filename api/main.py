from contextlib import asynccontextmanager

import uvicorn
from fastapi import APIRouter, Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from auth import dependencies as auth_dependencies
from core import db, errors, settings
from core.logging import configure_logging
from health import router as health_router
from resources import mount_resources
from rpc import router as rpc_router

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    auth_dependencies.log_api_key_mode()
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


def create_app() -> FastAPI:
    configure_logging(settings.log_level())

    app = FastAPI(title="tablegate", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(errors.ApiError, errors.api_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)

    # Everything under the versioned prefix requires the API key (when set).
    api_router = APIRouter(dependencies=[Depends(auth_dependencies.require_api_key)])
    mount_resources(api_router)
    api_router.include_router(rpc_router.build_router())
    app.include_router(api_router, prefix=API_PREFIX)

    app.include_router(health_router.router, tags=["health"])
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host(), port=settings.port())
