"""FastAPI application entrypoint for the cricket records API."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from cricstats.api.v1 import batting, bowling, fielding, health, partnerships, scorecards, teams
from cricstats.core.config import settings
from cricstats.core.logging import configure_logging, get_logger
from cricstats.services.records.errors import DataSourceError, InvalidSortFieldError

configure_logging(settings.ENVIRONMENT, settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("api_starting", environment=settings.ENVIRONMENT)
    # The schema is owned by the loading pipeline; nothing is created here
    yield
    logger.info("api_stopping")


async def invalid_sort_field_handler(request: Request, exc: InvalidSortFieldError) -> JSONResponse:
    logger.info("invalid_sort_field", path=request.url.path, sort_field=str(exc.sort_field))
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def data_source_error_handler(request: Request, exc: DataSourceError) -> JSONResponse:
    logger.error("data_source_unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"detail": "Records are temporarily unavailable"})


def create_application() -> FastAPI:
    """Instantiate the FastAPI application with middleware and routers."""
    app = FastAPI(
        title="Cricket Records API",
        description=(
            "Career, ground, opponent, season and series records for batting, "
            "bowling, fielding, partnerships and teams, plus full scorecards."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1_000)

    app.add_exception_handler(InvalidSortFieldError, invalid_sort_field_handler)
    app.add_exception_handler(DataSourceError, data_source_error_handler)

    # Health and meta endpoints (not versioned)
    app.include_router(health.router, tags=["health"])

    app.include_router(batting.router, prefix="/api/v1/batting", tags=["batting"])
    app.include_router(bowling.router, prefix="/api/v1/bowling", tags=["bowling"])
    app.include_router(fielding.router, prefix="/api/v1/fielding", tags=["fielding"])
    app.include_router(partnerships.router, prefix="/api/v1/partnerships", tags=["partnerships"])
    app.include_router(teams.router, prefix="/api/v1/teams", tags=["teams"])
    app.include_router(scorecards.router, prefix="/api/v1/scorecards", tags=["scorecards"])

    @app.get("/")
    async def root() -> dict[str, str]:
        return {
            "message": "Cricket Records API",
            "version": "0.1.0",
            "api_version": "v1",
            "docs": "/docs",
        }

    return app


app = create_application()
