"""Web routes (HTML) using Jinja2."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from flashkit.web import BROWSER_PIPELINE, render

router = APIRouter(dependencies=BROWSER_PIPELINE)


@router.get("/", response_class=HTMLResponse, tags=["web"])
def index(request: Request) -> HTMLResponse:
    """Render home page with any pending flash messages."""
    return render(request, "index.html", {"title": "Flashkit"})
