from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pymongo import MongoClient

from . import __version__
from .db import ClientFactory, connect, get_collection
from .errors import register_exception_handlers
from .logging_config import get_logger, setup_logging
from .middleware import RequestLoggingMiddleware
from .repositories import TodoRepository
from .routers import todos as todos_router
from .settings import Settings, get_settings

logger = get_logger(__name__)

DEFAULT_LANDING_TEMPLATE = Path(__file__).parent / "templates" / "home.html"

openapi_tags = [
    {"name": "home", "description": "Landing page."},
    {"name": "todos", "description": "Create, list, update and delete Todo items."},
]


def load_landing_page(path: Path) -> str:
    """
    Read the landing page template. A missing template is a startup failure.
    """
    return path.read_text(encoding="utf-8")


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    client_factory: ClientFactory = MongoClient,
    landing_template: Path = DEFAULT_LANDING_TEMPLATE,
) -> FastAPI:
    """
    Build the FastAPI application.

    The store client is opened by the lifespan on startup, shared by every
    request through ``app.state.repository`` and closed on shutdown. Failing
    to load the landing page or to reach the store aborts startup.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.landing_page = load_landing_page(landing_template)
        client = connect(settings, client_factory)
        app.state.repository = TodoRepository(get_collection(client, settings))
        try:
            yield
        finally:
            client.close()
            logger.info("Closed document store connection")

    app = FastAPI(
        title="Todo",
        description="Todo items stored in a document store, served as JSON.",
        version=__version__,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    # PUBLIC_INTERFACE
    @app.get("/", summary="Landing page", tags=["home"], response_class=HTMLResponse)
    def home(request: Request) -> HTMLResponse:
        """
        Serve the landing page loaded at startup.
        """
        return HTMLResponse(request.app.state.landing_page)

    app.include_router(todos_router.router)
    return app


# Module-level app so ``uvicorn todo_api.main:app`` works; nothing connects until startup.
app = create_app()
