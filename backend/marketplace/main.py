import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from .config import settings
from .db import Base, SessionLocal, engine
from .routes import admin as admin_routes
from .routes import balances as balances_routes
from .routes import contracts as contracts_routes
from .routes import jobs as jobs_routes
from .services.seed import seed_database

logger = logging.getLogger("marketplace")


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Marketplace Payments API", version="0.1.0")

    # CORS: allow explicit origins; use regex only if provided
    allow_origins = [str(o) for o in settings.cors_origins]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Create tables (best-effort; avoid crash if DB temporarily unreachable)
    try:
        Base.metadata.create_all(bind=engine)
        if settings.seed_on_startup:
            with SessionLocal() as db:
                seed_database(db)
    except SQLAlchemyError as e:
        logger.warning("Database setup skipped: %s", e)

    @app.get("/healthz")
    def healthz():
        try:
            with engine.connect() as conn:
                conn.exec_driver_sql("SELECT 1")
            return {"status": "ok"}
        except SQLAlchemyError as e:
            return {"status": "db_error", "detail": str(e)}

    # Routers
    app.include_router(contracts_routes.router)
    app.include_router(jobs_routes.router)
    app.include_router(balances_routes.router)
    app.include_router(admin_routes.router)

    @app.get("/")
    def root():
        return {"ok": True, "docs": "/docs"}

    return app


app = create_app()
