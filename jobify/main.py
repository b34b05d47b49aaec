# jobify/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobify.api.v1.applications import router as applications_router
from jobify.api.v1.auth import router as auth_router
from jobify.api.v1.jobs import router as jobs_router
from jobify.api.v1.uploads import router as uploads_router
from jobify.core.config import settings
from jobify.core.errors import register_exception_handlers
from jobify.db.mongo import close_db, init_db
from jobify.services.mailer import Mailer
from jobify.services.storage import ResumeStorage

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # external collaborators are built once and reached through dependencies
    app.state.storage = ResumeStorage(settings)
    app.state.mailer = Mailer(settings)
    await init_db()
    logger.info(
        "Jobify API started (env=%s, storage=%s, smtp=%s)",
        settings.APP_ENV,
        "s3" if app.state.storage.uses_s3 else "local",
        "on" if app.state.mailer.enabled else "off",
    )
    yield
    close_db()


app = FastAPI(title="Jobify API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api/v1")
app.include_router(uploads_router, prefix="/api/v1")
app.include_router(jobs_router, prefix="/api/v1")
app.include_router(applications_router, prefix="/api/v1")


@app.get("/health", tags=["health"])
async def health():
    return {"success": True, "status": "ok"}
