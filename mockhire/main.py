import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ✅ Import All API Routes
from mockhire.api.routes import admin, auth, bookings, health, interviews, notifications, points, timeslots
from mockhire.core import config
from mockhire.core.exceptions import DomainError
from mockhire.core.logging_config import sanitize_log_data, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL)
    logger.info(f"Starting MockHire API: {sanitize_log_data({'database_url': config.DATABASE_URL, 'log_level': config.LOG_LEVEL})}")

    if config.RUN_MIGRATIONS:
        from mockhire.db.migrate import run_migrations
        run_migrations()

    yield


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="MockHire API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ DOMAIN ERROR MAPPING
# ============================================

@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.code}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(timeslots.router)
app.include_router(bookings.router)
app.include_router(interviews.router)
app.include_router(points.router)
app.include_router(notifications.router)
app.include_router(admin.router)
app.include_router(health.router)


@app.get("/")
def root():
    return {"status": "MockHire API running"}
