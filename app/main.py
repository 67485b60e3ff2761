# app/main.py
import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import routes_dashboard, routes_players, routes_startsit
from app.core.config import settings
from app.db.engine import engine
from app.db.models import Base
from app.middleware.cache_log import CacheHeaderLogMiddleware
from app.services.cache import TTLCache
from app.services.ranking.metrics import MetricsCalculator
from app.services.sleeper.client import SleeperClient
from app.services.sleeper.players import PlayerDirectory

logger = logging.getLogger(__name__)


def build_directory() -> PlayerDirectory:
    return PlayerDirectory(
        SleeperClient(settings.SLEEPER_API_BASE, timeout=settings.SLEEPER_TIMEOUT_SECONDS),
        TTLCache(default_ttl_seconds=settings.PLAYER_CACHE_TTL_SECONDS),
        season=settings.SLEEPER_SEASON,
        ttl_seconds=settings.PLAYER_CACHE_TTL_SECONDS,
        fake_mode=settings.SLEEPER_FAKE_MODE,
        coalesce=settings.PLAYER_FETCH_COALESCE,
    )


def create_app(
    directory: Optional[PlayerDirectory] = None,
    calculator: Optional[MetricsCalculator] = None,
    *,
    init_db: bool = True,
) -> FastAPI:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings.validate_at_startup()
        if init_db:
            Base.metadata.create_all(bind=engine)
        # one directory/cache/calculator per application, never module globals
        app.state.directory = directory or build_directory()
        app.state.calculator = calculator or MetricsCalculator(random.Random())
        logger.info(
            "Started %s env=%s season=%s fake_mode=%s",
            settings.APP_NAME, settings.APP_ENV, settings.SLEEPER_SEASON, settings.SLEEPER_FAKE_MODE,
        )
        yield

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.add_middleware(CacheHeaderLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1):5173$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Cache", "X-Data-Freshness"],
        max_age=600,
    )

    # Routers
    app.include_router(routes_players.router)
    app.include_router(routes_startsit.router)
    app.include_router(routes_dashboard.router)

    @app.get("/health")
    def health():
        return {"ok": True, "env": settings.APP_ENV, "season": settings.SLEEPER_SEASON}

    return app


app = create_app()
