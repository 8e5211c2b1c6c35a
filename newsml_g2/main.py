"""FastAPI entrypoint for the NewsML-G2 importer."""

from fastapi import FastAPI

from newsml_g2.api.routes_health import router as health_router
from newsml_g2.api.routes_newsml import router as newsml_router
from newsml_g2.config import Settings, get_settings
from newsml_g2.services.newsml.chooser import ParserChooser, default_parsers


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the application with one parser registry shared by all requests."""
    settings = settings or get_settings()

    application = FastAPI(
        title="NewsML-G2 Importer",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    application.include_router(health_router)
    application.include_router(newsml_router)

    application.state.settings = settings
    application.state.chooser = ParserChooser(default_parsers(settings))
    return application


app = create_app()
