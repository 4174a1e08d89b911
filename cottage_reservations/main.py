# cottage_reservations/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cottage_reservations.config import ALLOWED_ORIGINS, AUTO_CREATE_TABLES, SEED_ROOMS
from cottage_reservations.logging_config import setup_logging
from cottage_reservations.middleware import RequestIDMiddleware
from cottage_reservations.routes.health import router as health_router
from cottage_reservations.routes.metrics import router as metrics_router
from cottage_reservations.routes.reservations import router as reservations_router
from cottage_reservations.routes.rooms import router as rooms_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Cottage Reservations API",
    description="Room availability and reservation lifecycle for the cottage",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(rooms_router, prefix="/api", tags=["Rooms"])
app.include_router(reservations_router, prefix="/api", tags=["Reservations"])


@app.on_event("startup")
def startup_event() -> None:
    """Optionally create tables and seed the room inventory on startup."""
    from cottage_reservations.db.engine import engine
    from cottage_reservations.db.writers.rooms import seed_rooms
    from cottage_reservations.models import reservations, rooms  # noqa: F401
    from cottage_reservations.models.base import Base

    logger.info("FastAPI application starting up...")

    if AUTO_CREATE_TABLES:
        Base.metadata.create_all(engine)
        logger.info("database_tables_ensured")

    if SEED_ROOMS:
        inserted = seed_rooms(engine)
        logger.info("rooms_seeded", inserted=inserted)

    logger.info("FastAPI application initialized")
