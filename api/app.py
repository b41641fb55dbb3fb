"""HTTP surface for the generator."""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from errors import CapsError, RequestValidationError
from orchestrator import KitManager, KitResult, ResultCache, archive_filename
from prompts import TemplateResolver
from providers import ModelGateway, list_providers
from .validation import validate_request

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR_MESSAGE = "Failed to generate starter kit. An internal error occurred."


async def _build_kit(request: Request) -> KitResult:
    body = await request.body()
    generation_request = validate_request(body)
    manager: KitManager = request.app.state.kit_manager
    return await manager.build(generation_request)


@router.post("/generate", response_model=Dict[str, Any])
async def generate(request: Request):
    """Generate a kit and return it inline.

    Response JSON: ``{"results": {<task>: "success"|"error"}, "zipData": <base64>}``
    """
    kit = await _build_kit(request)
    return {"results": kit.status_strings(), "zipData": kit.archive_base64()}


@router.post("/generate/zip")
async def generate_zip(request: Request):
    """Generate a kit and return the archive as a download.

    The status map travels in the ``X-Generation-Results`` header.
    """
    kit = await _build_kit(request)
    manager: KitManager = request.app.state.kit_manager
    filename = archive_filename(manager.settings.archive_prefix)
    return Response(
        content=kit.archive,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Generation-Results": json.dumps(kit.status_strings()),
        },
    )


@router.get("/providers", response_model=Dict[str, Any])
async def providers(request: Request):
    """Which providers have a credential configured (values are never returned)."""
    manager: KitManager = request.app.state.kit_manager
    return {"providers": list_providers(manager.settings)}


async def _caps_error_handler(request: Request, exc: CapsError) -> JSONResponse:
    if isinstance(exc, RequestValidationError):
        logger.warning("Input validation failed: %s", exc.message)
    else:
        logger.error("Request failed (%s): %s", exc.__class__.__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Error during starter kit generation")
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


def create_app(
    settings=None,
    gateway: Optional[ModelGateway] = None,
    cache: Optional[ResultCache] = None,
    resolver: Optional[TemplateResolver] = None,
) -> FastAPI:
    """Build the FastAPI app around one KitManager (and so one shared cache)."""
    app = FastAPI(title="CAPS Starter Kit Generator")
    app.state.kit_manager = KitManager(
        settings=settings,
        gateway=gateway,
        resolver=resolver,
        cache=cache,
    )
    app.add_exception_handler(CapsError, _caps_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
    app.include_router(router, prefix="/api")
    return app


app = create_app()
