# tranquilstay/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException

from tranquilstay.config import Settings, get_settings
from tranquilstay.database import create_db_engine, create_session_factory, init_db
from tranquilstay.routes import session, users, rooms, bookings, feedback

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    settings = settings or get_settings()
    owns_engine = engine is None
    engine = engine or create_db_engine(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create the database tables
        init_db(engine)
        yield
        if owns_engine:
            engine.dispose()
            logger.info("Database connection closed")

    app = FastAPI(
        title="Tranquil Stay",
        description="Room listings, bookings and guest feedback for the Tranquil Stay hotel",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=exc.headers,
        )

    # Registering Routers
    app.include_router(session.router)
    app.include_router(users.router)
    app.include_router(rooms.router)
    app.include_router(bookings.router)
    app.include_router(feedback.router)

    @app.get("/", tags=["Root"], response_class=PlainTextResponse)
    def read_root():
        return "Tranquil stay server is running"

    return app
