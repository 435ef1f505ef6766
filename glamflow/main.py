import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import FRONTEND_URL, RATE_LIMIT_ENABLED
from .dependencies import get_sync_layer
from .domain.bookings import admin_router as admin_bookings_router
from .domain.bookings import router as bookings_router
from .domain.catalog import router as catalog_router
from .domain.clients import router as clients_router
from .domain.scheduling import router as availability_router
from .domain.tracking import router as tracking_router
from .errors import GlamflowError
from .routes.concierge import router as concierge_router
from .services.concierge_service import ConciergeService
from .store import create_record_store
from .store.base import RecordStore
from .sync import SyncLayer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def create_app(
    store_factory: Callable[[], RecordStore] = create_record_store,
    concierge: Optional[ConciergeService] = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting up...")
        store = store_factory()
        sync = SyncLayer(store)
        await sync.start()
        app.state.sync = sync
        app.state.concierge = concierge or ConciergeService()

        if RATE_LIMIT_ENABLED:
            from .rate_limiter import get_redis_client

            if get_redis_client() is None:
                logger.warning("Redis unavailable - rate limiting counts per process only")

        yield
        logger.info("Application shutting down...")
        await sync.stop()
        store.close()

    app = FastAPI(title="GlamFlow API", version="1.0.0", lifespan=lifespan)

    @app.exception_handler(GlamflowError)
    async def glamflow_exception_handler(request: Request, exc: GlamflowError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.detail}")
        else:
            logger.info(f"{request.method} {request.url.path} - {exc.status_code}: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    allowed_origins = [o.strip() for o in FRONTEND_URL.split(",") if o.strip()]
    logger.info(f"CORS allowed origins: {allowed_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(catalog_router)
    app.include_router(availability_router)
    app.include_router(clients_router)
    app.include_router(bookings_router)
    app.include_router(admin_bookings_router)
    app.include_router(tracking_router)
    app.include_router(concierge_router)

    @app.get("/")
    def root():
        return {"message": "GlamFlow API is running"}

    @app.get("/health")
    def health(sync: SyncLayer = Depends(get_sync_layer)):
        mirror = sync.mirror
        return {
            "status": "healthy" if mirror.connected else "degraded",
            "connected": mirror.connected,
            "failures": mirror.failures,
            "synced": sorted(r.value for r in mirror.received),
            "lastChange": {r.value: at for r, at in sync.last_change.items()},
        }

    return app


app = create_app()
