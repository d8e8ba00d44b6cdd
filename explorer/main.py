# explorer/main.py
import logging
from typing import Optional

from fastapi import FastAPI

from .discovery import explorer_router
from .discovery.googlebooks_service import CatalogTransport, GoogleBooksTransport
from .discovery.presets import PresetRegistry
from .discovery.store import SessionRegistry
from .settings import Settings, get_settings


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[CatalogTransport] = None,
    presets: Optional[PresetRegistry] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="Book Explorer",
        description=(
            "Search a remote book catalogue, then filter, sort and page "
            "through the results without re-querying the remote."
        ),
        version="1.0.0",
    )
    app.state.sessions = SessionRegistry(
        transport or GoogleBooksTransport(settings),
        settings,
        presets=presets,
    )

    # 🔹 Route de base pour tester rapidement
    @app.get("/")
    def health_check():
        return {"status": "ok", "sessions": len(app.state.sessions)}

    app.include_router(explorer_router)
    return app


app = create_app()
