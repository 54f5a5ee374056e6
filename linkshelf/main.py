import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from linkshelf.config import Settings, settings as default_settings
from linkshelf.database import create_db_engine, init_db, make_session_factory
from linkshelf.routers import auth, health, urls
from linkshelf.schemas.urls import UrlMetadata
from linkshelf.services.cookies import SessionCookiePolicy
from linkshelf.services.logout import LogoutHandler
from linkshelf.services.metadata import UrlMetadataExtractor
from linkshelf.services.sessions import SessionStore
from linkshelf.services.users import UserStore

LOGGER = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    metadata_extractor: Optional[Callable[[str], UrlMetadata]] = None,
) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.log_level)

    engine = engine or create_db_engine(settings.database_url)
    session_factory = make_session_factory(engine)
    session_store = SessionStore(session_factory, settings.session_ttl_days)
    user_store = UserStore(session_factory)
    cookie_policy = SessionCookiePolicy.from_settings(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        init_db(engine)
        if settings.seed_email:
            try:
                user_store.ensure_user(settings.seed_email, settings.seed_name or None)
            except ValueError:
                LOGGER.warning("Ignoring invalid SEED_EMAIL=%s", settings.seed_email)
        LOGGER.info(
            "Started environment=%s secure_cookies=%s",
            settings.environment,
            cookie_policy.secure,
        )
        yield

    app = FastAPI(title="Linkshelf API", lifespan=lifespan)
    app.state.settings = settings
    app.state.session_store = session_store
    app.state.user_store = user_store
    app.state.cookie_policy = cookie_policy
    app.state.logout_handler = LogoutHandler(session_store, cookie_policy)
    app.state.metadata_extractor = metadata_extractor or UrlMetadataExtractor(
        settings.metadata_fetch_timeout_seconds
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(urls.router, prefix="/api")

    @app.get("/")
    def root():
        return {"status": "Backend running"}

    return app


app = create_app()
