# bracket_forge/models/_booleans.py
"""
Motor CSG de FORGE.

Los booleanos pasan por `trimesh.boolean` con el backend de Manifold3D.
El motor se inicializa una sola vez por proceso con `setup_engine()`, que
devuelve un handle `Engine`; los builders lo reciben como argumento.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import trimesh

logger = logging.getLogger(__name__)


class EngineError(RuntimeError):
    """El motor no arranca o un booleano no devuelve un sólido cerrado."""


def _valid(mesh: trimesh.Trimesh) -> bool:
    return isinstance(mesh, trimesh.Trimesh) and mesh.vertices.shape[0] > 0


def _prep(meshes: Iterable[trimesh.Trimesh]) -> List[trimesh.Trimesh]:
    ms = list(meshes or [])
    for m in ms:
        if not _valid(m):
            raise EngineError("boolean input is empty or not a mesh")
    return ms


@dataclass(frozen=True)
class Engine:
    name: str = "manifold"
    version: str = ""

    def _check(self, result, op: str) -> trimesh.Trimesh:
        if isinstance(result, (list, tuple)):
            result = trimesh.util.concatenate([m for m in result if _valid(m)])
        if not isinstance(result, trimesh.Trimesh) or not result.is_volume:
            raise EngineError(f"{op} produced a non-manifold result")
        return result

    def union(self, meshes: Iterable[trimesh.Trimesh]) -> trimesh.Trimesh:
        ms = _prep(meshes)
        if not ms:
            raise EngineError("union of nothing")
        if len(ms) == 1:
            return ms[0].copy()
        try:
            res = trimesh.boolean.union(ms, engine=self.name)
        except Exception as exc:
            raise EngineError(f"union failed: {exc}") from exc
        return self._check(res, "union")

    def difference(
        self,
        base: trimesh.Trimesh,
        cutters: Iterable[trimesh.Trimesh] | trimesh.Trimesh,
    ) -> trimesh.Trimesh:
        """`base` menos la unión de los cortadores."""
        if isinstance(cutters, trimesh.Trimesh):
            cutters = [cutters]
        A = _prep([base])[0]
        B = _prep(cutters)
        if not B:
            return A.copy()
        cutter = B[0] if len(B) == 1 else self.union(B)
        try:
            res = trimesh.boolean.difference([A, cutter], engine=self.name)
        except Exception as exc:
            raise EngineError(f"difference failed: {exc}") from exc
        return self._check(res, "difference")


# ---------------------- Inicialización (una vez) ----------------------

_engine: Optional[Engine] = None


def setup_engine() -> Engine:
    global _engine
    if _engine is None:
        try:
            import manifold3d
        except ImportError as exc:
            raise EngineError("manifold3d is not installed (pip install manifold3d)") from exc

        eng = Engine(name="manifold", version=str(getattr(manifold3d, "__version__", "")))

        # prueba mínima: dos cubos solapados deben dar un sólido cerrado
        a = trimesh.creation.box(extents=(1.0, 1.0, 1.0))
        b = a.copy()
        b.apply_translation((0.5, 0.5, 0.5))
        eng.union([a, b])

        _engine = eng
        logger.info("CSG engine ready: %s %s", eng.name, eng.version or "")
    return _engine


def engine_ready() -> bool:
    return _engine is not None


__all__ = ["Engine", "EngineError", "setup_engine", "engine_ready"]
