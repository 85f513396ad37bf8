# bracket_forge/config.py
from __future__ import annotations

import os
from typing import Optional

# ---------------- Config ----------------


def _split_origins(s: Optional[str]) -> list[str]:
    if not s:
        return []
    return [x.strip() for x in s.split(",") if x.strip()]


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name, "") or "").strip()
    if not raw:
        return default
    try:
        return float(raw.replace(",", "."))
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


CORS_ALLOW = os.getenv("CORS_ALLOW_ORIGINS", "")
CORS_ORIGINS = _split_origins(CORS_ALLOW) or ["*"]

# Placa texturizada Bambu X1C por defecto
PLATE_WIDTH = _env_float("FORGE_PLATE_WIDTH", 256.0)
PLATE_DEPTH = _env_float("FORGE_PLATE_DEPTH", 256.0)

EXPORT_FORMAT = (os.getenv("FORGE_EXPORT_FORMAT", "3mf") or "3mf").strip().lower()

# facetas de agujeros y postes redondeados
CIRCULAR_SEGMENTS = max(8, int(_env_float("FORGE_CIRCULAR_SEGMENTS", 64)))

DEBUG = os.getenv("DEBUG_FORGE", "0") == "1"
