"""
Autodiscovery de builders de FORGE.

Para cada módulo `models/<nombre>.py` se intenta registrar un builder con
las siguientes reglas (en orden):

1) Si define `BUILDER: Callable`, se usa.
2) Si define `BUILD: dict`, se intenta `BUILD["make"]` o `BUILD["build"]`.
3) Si expone una función `make_model` / `make`, se usa.
4) Se crean alias snake <-> kebab automáticamente.
5) Si el módulo define `NAME: str` y/o `SLUGS: list[str]`, se añaden como alias.

Los módulos que empiezan por "_" son helpers y no se registran.
"""
from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import Callable, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

# --------------------- Registro y alias globales ---------------------

REGISTRY: Dict[str, Callable] = {}
ALIASES: Dict[str, str] = {}


def _register(name_snake: str, fn: Callable) -> None:
    """Registra el callable y crea alias básicos snake/kebab."""
    key = name_snake.lower()
    REGISTRY[key] = fn
    ALIASES.setdefault(key, key)
    ALIASES.setdefault(key.replace("_", "-"), key)


def _add_alias(raw_slug: str, target_snake: str) -> None:
    """Añade alias sin pisar entradas existentes."""
    if not raw_slug or not target_snake:
        return
    raw = raw_slug.strip().lower()
    snake = target_snake.strip().lower()
    ALIASES.setdefault(raw, snake)
    if "_" in raw:
        ALIASES.setdefault(raw.replace("_", "-"), snake)
    else:
        ALIASES.setdefault(raw.replace("-", "_"), snake)
    ALIASES.setdefault(snake.replace("_", "-"), snake)


def _pick_builder(mod) -> Optional[Callable]:
    fn = getattr(mod, "BUILDER", None)
    if callable(fn):
        return fn
    build_dict = getattr(mod, "BUILD", None)
    if isinstance(build_dict, dict):
        cand = build_dict.get("make") or build_dict.get("build")
        if callable(cand):
            return cand
    for attr in ("make_model", "make"):
        f = getattr(mod, attr, None)
        if callable(f):
            return f
    return None


# --------------------- Descubrimiento de módulos ---------------------

for _finder, _name, _ispkg in pkgutil.iter_modules(__path__):
    if _ispkg or _name.startswith("_"):
        continue

    try:
        mod = importlib.import_module(f"{__name__}.{_name}")
    except Exception:
        # si un módulo falla al importar, seguimos con el resto
        logger.exception("could not import builder module %r", _name)
        continue

    fn = _pick_builder(mod)
    if fn is None:
        continue
    _register(_name, fn)

    name_alias = getattr(mod, "NAME", None)
    if isinstance(name_alias, str) and name_alias.strip():
        _add_alias(name_alias, _name)

    slugs: Iterable[str] = getattr(mod, "SLUGS", []) or []
    for s in slugs:
        if isinstance(s, str) and s.strip():
            _add_alias(s, _name)


def resolve_slug(slug_or_name: str) -> Optional[str]:
    if not slug_or_name:
        return None
    raw = slug_or_name.strip().lower()
    snake = ALIASES.get(raw, ALIASES.get(raw.replace("-", "_"), raw.replace("-", "_")))
    return snake if snake in REGISTRY else None


def get_builder(slug_or_name: str) -> Optional[Callable]:
    """Resuelve un slug usando ALIASES y devuelve el callable."""
    snake = resolve_slug(slug_or_name)
    return REGISTRY.get(snake) if snake else None


__all__ = ["REGISTRY", "ALIASES", "get_builder", "resolve_slug"]
