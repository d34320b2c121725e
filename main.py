"""
Phonebook API.

``create_app`` builds the FastAPI application around a
``PhonebookStore``.  A default instance is created at import time as
``app``, so the service can be started with::

    uvicorn main:app

or with ``python main.py``, which reads host and port from ``config``.
"""

import logging
import os
import re
from datetime import datetime
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, settings as default_settings
from logging_config import setup_logging
from schemas import ErrorResponse, Person, PersonCreate
from store import NameConflictError, PhonebookStore

logger = logging.getLogger(__name__)

MISSING_FIELDS = "name or number missing"
MALFORMED_JSON = "malformed JSON"
NAME_EXISTS = "name already exists"
UNEXPECTED_ERROR = "An unexpected error occurred on the server."

router = APIRouter()


def get_store(request: Request) -> PhonebookStore:
    return request.app.state.store


DECIMAL_ID = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
PREFIXED_ID = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)", re.ASCII)


def parse_person_id(value: str) -> Optional[int]:
    """Parse a path segment as an id.

    Follows the usual JavaScript number syntax: surrounding whitespace is
    ignored, decimals and exponents are accepted when they denote a whole
    number (``1.0``, ``1e0``), and ``0x``/``0o``/``0b`` prefixes are
    understood.  Only ASCII digits count.  Anything else matches nothing.
    """
    value = value.strip()
    if PREFIXED_ID.fullmatch(value):
        return int(value, 0)
    if not DECIMAL_ID.fullmatch(value):
        return None
    number = float(value)
    if not number.is_integer():
        return None
    return int(number)


def format_timestamp(moment: datetime) -> str:
    """Render a local time as e.g. ``Fri Oct 16 2026 12:00:00 GMT+0000 (UTC)``."""
    return f"{moment.strftime('%a %b %d %Y %H:%M:%S GMT%z')} ({moment.tzname()})"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/", response_class=HTMLResponse)
def root() -> str:
    logger.info("GET / request received.")
    return "<h1>Phonebook Backend is Running!</h1>"


@router.get("/api/persons", response_model=List[Person])
def list_persons(store: PhonebookStore = Depends(get_store)):
    logger.info("GET /api/persons request received.")
    return store.list()


@router.get("/info", response_class=HTMLResponse)
def info(store: PhonebookStore = Depends(get_store)) -> str:
    logger.info("GET /info request received.")
    now = datetime.now().astimezone()
    return (
        "<div>"
        f"<p>Phonebook has info for {len(store)} people</p>"
        f"<p>{format_timestamp(now)}</p>"
        "</div>"
    )


@router.get(
    "/api/persons/{person_id}",
    response_model=Person,
    responses={status.HTTP_404_NOT_FOUND: {"description": "No record with this id"}},
)
def get_person(person_id: str, store: PhonebookStore = Depends(get_store)):
    parsed_id = parse_person_id(person_id)
    person = store.get(parsed_id) if parsed_id is not None else None
    if person is None:
        logger.info("GET /api/persons/%s request received. Person not found.", person_id)
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    logger.info("GET /api/persons/%s request received. Found person: %s", person_id, person.name)
    return person


@router.post(
    "/api/persons",
    response_model=Person,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def create_person(person_in: PersonCreate, store: PhonebookStore = Depends(get_store)):
    logger.info("POST /api/persons request received. Request data: %s", person_in.model_dump())
    try:
        person = store.create(person_in.name, person_in.number)
    except NameConflictError:
        logger.info("Error: Name '%s' already exists.", person_in.name)
        return error_response(status.HTTP_409_CONFLICT, NAME_EXISTS)
    except Exception:
        logger.exception("Unhandled error in POST /api/persons")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_ERROR)
    logger.info("New person added: %s", person.model_dump())
    return person


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies are a client mistake, so they get a 400 like any
    # other invalid payload.
    if any(error.get("type") == "json_invalid" for error in exc.errors()):
        logger.info("Error: %s %s sent malformed JSON.", request.method, request.url.path)
        return error_response(status.HTTP_400_BAD_REQUEST, MALFORMED_JSON)
    logger.info("Error: Name or number is missing.")
    return error_response(status.HTTP_400_BAD_REQUEST, MISSING_FIELDS)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # FastAPI raises a bare 400 when it cannot decode the body at all,
    # e.g. invalid UTF-8.
    if exc.status_code == status.HTTP_400_BAD_REQUEST:
        logger.info("Error: %s %s sent an unreadable body.", request.method, request.url.path)
        message = MALFORMED_JSON
    else:
        message = exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error in %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_ERROR)


def create_app(store: Optional[PhonebookStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    store : Optional[PhonebookStore]
        Collection to serve.  A store holding the seed records is built
        when omitted.
    settings : Optional[Settings]
        Overrides for the module-level settings.

    Returns
    -------
    FastAPI
        A configured application.  The store is kept on ``app.state.store``.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.store = store if store is not None else PhonebookStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(router)

    # The front end is mounted last so the API routes above take priority.
    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        logger.warning("Static directory %s not found; front end will not be served", settings.static_dir)

    return app


app = create_app()


def run() -> None:
    """Serve ``app`` with uvicorn on the configured host and port.

    ``log_config=None`` keeps uvicorn from installing its own handlers;
    its records go through the ones ``setup_logging`` attached.
    """
    logger.info("Server running on port %s", default_settings.port)
    uvicorn.run(
        app,
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    run()
