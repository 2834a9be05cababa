import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from articles import router as articles_router
from content import repository as content_repository
from content import router as content_router
from content import service as content_service
from content.errors import ContentError
from core import db, settings
from gallery import router as gallery_router
from projects import router as projects_router

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process, then (re)build the content index.
    await db.init_pool()
    try:
        await content_repository.ensure_schema()
        if settings.sync_on_startup():
            try:
                report = await content_service.sync_content()
            except ContentError:
                # Serve whatever is already indexed; `POST /api/v1/content/sync` can retry.
                logger.exception("startup_sync_failed")
            else:
                logger.info("startup_sync indexed=%s errors=%s", report["indexed"], report["errors"])
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow the frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(articles_router.router, tags=["articles"])
app.include_router(gallery_router.router, tags=["gallery"])
app.include_router(projects_router.router, tags=["projects"])
app.include_router(content_router.router, tags=["content"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "prism content api"}
