import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from loguru import logger

from looptimer.ai.routes import router as ai_router
from looptimer.config.settings import settings
from looptimer.core.logger import setup_logger
from looptimer.db.models import Base
from looptimer.db.session import get_engine, get_session
from looptimer.editor.routes import router as editor_router
from looptimer.preferences.routes import router as preferences_router
from looptimer.sharing.routes import router as sharing_router
from looptimer.templates.routes import router as templates_router
from looptimer.templates.seed import TemplateLibraryError, seed_templates
from looptimer.timers.routes import router as timers_router


def init_database(seed: bool) -> None:
    """Create missing tables and optionally refresh the built-in templates."""
    logger.info("Ensuring database tables exist")
    Base.metadata.create_all(bind=get_engine())
    logger.info("Database tables verified")

    if not seed:
        return
    try:
        with get_session() as session:
            seed_templates(session)
    except TemplateLibraryError as e:
        logger.error(f"Template seeding failed (non-fatal): {e}")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Configure logging and the database on startup.

    Note: FastAPI requires async for lifespan context manager,
    even if no await operations are used.
    """
    setup_logger(settings)
    init_database(seed=settings.seed_templates_on_startup)

    await asyncio.sleep(0)
    yield

    logger.info("Looptimer API shutting down")


app = FastAPI(title="Looptimer", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(timers_router)
app.include_router(editor_router)
app.include_router(sharing_router)
app.include_router(templates_router)
app.include_router(preferences_router)
app.include_router(ai_router)

logger.info("FastAPI application initialized")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.debug(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
    return response


@app.get("/", response_class=HTMLResponse)
def root():
    return """
    <html>
        <head>
            <title>Looptimer</title>
        </head>
        <body>
            <h1>Looptimer</h1>
            <p>Interval workout timers with nested loops</p>
            <h2>Available Endpoints:</h2>
            <ul>
                <li><a href="/docs">API Documentation (Swagger)</a></li>
                <li><a href="/redoc">API Documentation (ReDoc)</a></li>
                <li><a href="/templates">Built-in templates</a></li>
            </ul>
        </body>
    </html>
    """
