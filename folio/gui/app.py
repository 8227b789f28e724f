"""FastAPI + HTMX web application for Folio."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from folio import __version__
from folio.config import Settings
from folio.gui.routers import admin, api, common, gallery, magazine
from folio.gui.state import init_state

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize services on startup."""
    init_state(Settings.load())
    yield


app = FastAPI(title="Folio", version=__version__, lifespan=lifespan)

base_dir = os.path.dirname(__file__)
app.mount("/static", StaticFiles(directory=os.path.join(base_dir, "static")), name="static")

app.include_router(common.router)
app.include_router(gallery.router)
app.include_router(magazine.router)
app.include_router(admin.router)
app.include_router(api.router)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    """Report request validation failures as ``{"error": message}``."""
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request")
    return JSONResponse({"error": f"{where}: {message}" if where else message}, status_code=422)
