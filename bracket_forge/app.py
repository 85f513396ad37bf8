# bracket_forge/app.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from .config import CORS_ORIGINS, EXPORT_FORMAT, PLATE_DEPTH, PLATE_WIDTH
from .export import CONTENT_TYPES, export_bytes, export_filename, normalize_format
from .models import ALIASES, REGISTRY, get_builder, resolve_slug
from .models._booleans import Engine, EngineError, engine_ready, setup_engine
from .models.psu_bracket import derive_dims
from .params import (
    DEFAULT_PARAMS,
    PLATE_PRESETS,
    BracketParams,
    ParameterError,
    fit_to_plate,
    num,
    parse_params,
)

logger = logging.getLogger(__name__)

DEFAULT_SLUG = "psu_bracket"

# -------------------------- App --------------------------

app = FastAPI(title="FORGE PSU Bracket Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------- Schemas --------------------------


class GenerateBody(BaseModel):
    slug: str = DEFAULT_SLUG      # snake o kebab
    params: Dict[str, Any] = Field(default_factory=dict)
    fmt: Optional[str] = None     # "3mf" | "stl"


# -------------------------- Helpers --------------------------

def get_engine() -> Engine:
    try:
        return setup_engine()
    except EngineError as e:
        logger.exception("CSG engine unavailable")
        raise HTTPException(status_code=500, detail=f"CSG engine error: {e}")


def _parse_or_400(data: Dict[str, Any]) -> BracketParams:
    try:
        return parse_params(data)
    except ParameterError as e:
        raise HTTPException(status_code=400, detail=f"Invalid parameters: {e}")


def _format_or_400(fmt: Optional[str]) -> str:
    try:
        return normalize_format(fmt, EXPORT_FORMAT)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _generate(slug: str, data: Dict[str, Any], fmt: Optional[str], engine: Engine) -> Response:
    builder = get_builder(slug or DEFAULT_SLUG)
    if builder is None:
        raise HTTPException(status_code=404, detail=f"Model '{slug}' not found")

    f = _format_or_400(fmt)
    params = _parse_or_400(data)

    try:
        mesh = builder(params, engine=engine)
    except EngineError as e:
        logger.exception("build failed for %s", slug)
        raise HTTPException(status_code=500, detail=f"Model build error: {e}")

    payload = export_bytes(mesh, f)
    filename = export_filename(params, f)
    return Response(
        content=payload,
        media_type=CONTENT_TYPES[f],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# -------------------------- Endpoints --------------------------

@app.get("/health")
def health():
    return {
        "ok": True,
        "service": "forge-bracket",
        "origins": CORS_ORIGINS,
        "loaded_models": sorted(REGISTRY.keys()),
        "aliases_count": len(ALIASES),
        "engine_ready": engine_ready(),
        "plate": {"width": PLATE_WIDTH, "depth": PLATE_DEPTH},
        "export_format": EXPORT_FORMAT,
    }


@app.get("/defaults")
def defaults():
    return {
        "params": DEFAULT_PARAMS.as_form(),
        "plate": {"width": PLATE_WIDTH, "depth": PLATE_DEPTH},
        "plate_presets": {k: {"width": w, "depth": d} for k, (w, d) in PLATE_PRESETS.items()},
    }


@app.post("/dimensions")
def dimensions(body: Dict[str, Any]):
    params = _parse_or_400(body)
    plate_w = num(body.get("plateWidth"), PLATE_WIDTH)
    plate_d = num(body.get("plateDepth"), PLATE_DEPTH)
    fitted, report = fit_to_plate(params, plate_w, plate_d)
    return {
        "params": fitted.as_form(),
        "plate": report.model_dump(),
        "derived": derive_dims(fitted).as_dict(),
    }


@app.post("/generate")
def generate(body: GenerateBody, request: Request, engine: Engine = Depends(get_engine)):
    fmt = body.fmt or request.query_params.get("fmt")
    return _generate(body.slug, dict(body.params or {}), fmt, engine)


@app.get("/generate")
def generate_from_query(request: Request, engine: Engine = Depends(get_engine)):
    """Mismos parámetros que el formulario, en la query string (enlace compartible)."""
    query = dict(request.query_params)
    slug = query.pop("slug", DEFAULT_SLUG)
    fmt = query.pop("fmt", None)
    if resolve_slug(slug) is None:
        raise HTTPException(status_code=404, detail=f"Model '{slug}' not found")
    return _generate(slug, query, fmt, engine)
