"""Application entry point for the surplus food marketplace API.

Defines the FastAPI app, middleware and exception handlers, and includes
the routers from the `api` package. The lifespan handler creates the
tables and the outbound clients; the listing feed lives on `app.state`
so request handlers receive it through dependencies.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from core.error_handlers import register_exception_handlers
from core.exceptions import DatabaseError
from core.logger import get_logger
from database import init_db
from database.deps import get_db_read
from services.geocoder import ReverseGeocoder
from services.listing_feed import ListingFeed

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the schema and the geocoding client before serving requests."""
    init_db()
    if getattr(app.state, "geocoder", None) is None:
        app.state.geocoder = ReverseGeocoder()
    yield
    app.state.geocoder.close()


app = FastAPI(title="Surplus Food Marketplace API", version="1.0.0", lifespan=lifespan)
app.state.listing_feed = ListingFeed()
app.state.geocoder = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

from api.users import router as users_router
from api.listings import router as listings_router
from api.orders import router as orders_router
from api.ratings import router as ratings_router
from api.geocode import router as geocode_router
from api.live import router as live_router


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming requests and their responses."""
    logger.info("%s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response
    except Exception:
        logger.exception("Request error: %s %s", request.method, request.url.path)
        raise


@app.get("/health")
def health(db: Session = Depends(get_db_read)):
    """Return basic health status and database connectivity.

    Raises:
        DatabaseError: If database connection fails.
    """
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception:
        logger.exception("Health check failed")
        raise DatabaseError("Database health check failed", operation="health_check")


app.include_router(users_router)
app.include_router(listings_router)
app.include_router(orders_router)
app.include_router(ratings_router)
app.include_router(geocode_router)
app.include_router(live_router)


if __name__ == "__main__":
    # Allow starting the app via `python ./main.py`
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
