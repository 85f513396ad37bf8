# bracket_forge/export.py
from __future__ import annotations

import io
import logging
from typing import Dict

import trimesh

from .params import BracketParams

logger = logging.getLogger(__name__)

CONTENT_TYPES: Dict[str, str] = {
    "3mf": "model/3mf",
    "stl": "model/stl",
}


def normalize_format(fmt: str | None, default: str = "3mf") -> str:
    f = (fmt or default or "").strip().lower().lstrip(".")
    if f not in CONTENT_TYPES:
        raise ValueError(f"unsupported export format {fmt!r} (use one of {sorted(CONTENT_TYPES)})")
    return f


def _dim(v: float) -> str:
    v = float(v)
    return str(int(v)) if v.is_integer() else f"{v}"


def export_filename(params: BracketParams, fmt: str = "3mf") -> str:
    """bracket-{ancho}x{fondo}x{alto}.{ext}"""
    dims = f"{_dim(params.width)}x{_dim(params.depth)}x{_dim(params.height)}"
    return f"bracket-{dims}.{normalize_format(fmt)}"


def export_bytes(mesh: trimesh.Trimesh, fmt: str = "3mf") -> bytes:
    f = normalize_format(fmt)
    if not isinstance(mesh, trimesh.Trimesh) or not len(mesh.faces):
        raise ValueError("nothing to export")
    if not mesh.metadata.get("unit"):
        mesh = mesh.copy()
        mesh.metadata["unit"] = "mm"

    buf = io.BytesIO()
    mesh.export(file_obj=buf, file_type=f)
    data = buf.getvalue()
    logger.info("exported %s: %d faces, %d bytes", f, len(mesh.faces), len(data))
    return data


__all__ = ["CONTENT_TYPES", "export_bytes", "export_filename", "normalize_format"]
