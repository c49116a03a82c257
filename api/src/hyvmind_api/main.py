"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hyvmind_api.config import settings
from hyvmind_api.routes import admin, attributes, buzz, graph, nodes, profile, swarms, votes
from hyvmind_core.errors import (
    AlreadyExists,
    AlreadyRequested,
    AlreadyVoted,
    Forbidden,
    HyvmindError,
    NotFound,
    Unauthorized,
)
from hyvmind_core.log import configure_logging

logger = logging.getLogger(__name__)

# Most specific first; anything else in the taxonomy is a 422.
ERROR_STATUS: list[tuple[type[HyvmindError], int]] = [
    (Forbidden, 403),
    (Unauthorized, 401),
    (NotFound, 404),
    (AlreadyExists, 409),
    (AlreadyVoted, 409),
    (AlreadyRequested, 409),
]


def status_for(error: HyvmindError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 422


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    configure_logging(settings.log_level)
    yield


app = FastAPI(
    title="Hyvmind API",
    description="Legal-annotation graph: curations, swarms, locations, law and interpretation tokens",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HyvmindError)
async def hyvmind_error_handler(request: Request, exc: HyvmindError) -> JSONResponse:
    status = status_for(exc)
    logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=status,
        content={"error": type(exc).__name__, "message": exc.message, "details": exc.details},
    )


# Include routers
app.include_router(graph.router, prefix="/api", tags=["graph"])
app.include_router(nodes.router, prefix="/api", tags=["nodes"])
app.include_router(swarms.router, prefix="/api/swarms", tags=["swarms"])
app.include_router(votes.router, prefix="/api/nodes", tags=["votes"])
app.include_router(buzz.router, prefix="/api/buzz", tags=["buzz"])
app.include_router(attributes.router, prefix="/api/attributes", tags=["attributes"])
app.include_router(profile.router, prefix="/api/profile", tags=["profile"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
