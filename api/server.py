"""
api/server.py
FastAPI surface over the source clients.
Exposes catalog listings, filters, details, chapters and page lists as JSON.

Endpoints are plain ``def`` so FastAPI runs each request on its worker
thread pool; concurrent walks against one source share its rate limiter.
"""

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from rich.console import Console

from scrapers.client import SourceClient
from scrapers.errors import (
    ConfigurationError,
    ExtractionError,
    PermanentFetchError,
    ScraperError,
    TransientFetchError,
    UnsupportedOperation,
)
from scrapers.models import CatalogEntry, ChapterRef
from sources import all_sources

console = Console()


def error_status(exc: ScraperError) -> int:
    if isinstance(exc, UnsupportedOperation):
        return 501
    if isinstance(exc, ConfigurationError):
        return 400
    if isinstance(exc, ExtractionError):
        return 422
    if isinstance(exc, TransientFetchError):
        return 503
    if isinstance(exc, PermanentFetchError):
        return 502
    return 500


def create_app(clients=None) -> FastAPI:
    app = FastAPI(title="Gallery Scrape API", version="1.0.0")
    if clients is None:
        clients = {source.name: SourceClient.from_config(source) for source in all_sources()}
    app.state.clients = dict(clients)

    def get_client(name: str) -> SourceClient:
        client = app.state.clients.get(name.lower())
        if client is None:
            raise HTTPException(404, f"Unknown source: {name}")
        return client

    # -------------------------------------------------------
    # 🧠 Lifecycle & Health
    # -------------------------------------------------------

    @app.exception_handler(ScraperError)
    async def scraper_error_handler(request, exc: ScraperError):
        status = error_status(exc)
        console.log(f"[red]❌ {request.url.path}: {type(exc).__name__}: {exc}[/red]")
        return JSONResponse(status_code=status, content={"detail": str(exc), "error": type(exc).__name__})

    @app.on_event("shutdown")
    def shutdown():
        """Close every source's HTTP client."""
        for client in app.state.clients.values():
            client.close()

    @app.get("/health")
    def health():
        """Simple health check for Docker and monitoring."""
        return {"status": "ok"}

    # -------------------------------------------------------
    # ⚙️ Sources & Filters
    # -------------------------------------------------------

    @app.get("/api/v1/sources")
    def get_sources():
        """Return configured sources."""
        return [
            {
                "name": client.name,
                "base_url": client.source.base_url,
                "lang": client.source.lang,
                "supports_latest": client.supports_latest,
            }
            for client in app.state.clients.values()
        ]

    @app.get("/api/v1/sources/{name}/filters")
    def get_filters(name: str):
        """Return selectable filter options; index 0 means no filter."""
        options = get_client(name).get_filter_options()
        return [{"index": i, **option.to_dict()} for i, option in enumerate(options)]

    # -------------------------------------------------------
    # 📚 Catalog
    # -------------------------------------------------------

    @app.get("/api/v1/sources/{name}/browse")
    def browse(name: str, page: int = Query(1, ge=1)):
        return get_client(name).browse(page).to_dict()

    @app.get("/api/v1/sources/{name}/latest")
    def latest(name: str, page: int = Query(1, ge=1)):
        return get_client(name).latest(page).to_dict()

    @app.get("/api/v1/sources/{name}/search")
    def search(name: str, q: str = "", filter: int = 0, page: int = Query(1, ge=1)):
        """
        Search a source. A non-zero ``filter`` index replaces the text query.
        Example: /api/v1/sources/misskon/search?q=cosplay&page=2
        """
        client = get_client(name)
        filters = client.filter_model()
        filters.select(filter)
        return client.search(q, filters, page).to_dict()

    # -------------------------------------------------------
    # 📸 Entries
    # -------------------------------------------------------

    @app.get("/api/v1/sources/{name}/details")
    def details(name: str, id: str):
        return get_client(name).resolve_details(CatalogEntry(id=id, title="")).to_dict()

    @app.get("/api/v1/sources/{name}/chapter")
    def chapter(name: str, id: str, title: str = ""):
        return get_client(name).resolve_chapter(CatalogEntry(id=id, title=title or id)).to_dict()

    @app.get("/api/v1/sources/{name}/pages")
    def pages(name: str, id: str):
        chapter_ref = ChapterRef(id=id, display_label="")
        return [page.to_dict() for page in get_client(name).resolve_pages(chapter_ref)]

    return app
