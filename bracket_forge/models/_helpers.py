# bracket_forge/models/_helpers.py
from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import numpy as np
import shapely.geometry as sg
import trimesh

from ..config import CIRCULAR_SEGMENTS

# Todas las funciones devuelven una malla nueva: nunca modifican la entrada.


# ---------------------- Primitivas ----------------------

def cube(size: Sequence[float]) -> trimesh.Trimesh:
    """Caja con una esquina en el origen: ocupa [0,x] x [0,y] x [0,z] (mm)."""
    ext = np.asarray(size, dtype=float)
    if ext.shape != (3,) or np.any(ext <= 0):
        raise ValueError(f"cube size must be three positive lengths, got {tuple(ext)}")
    m = trimesh.creation.box(extents=ext)
    m.apply_translation(ext / 2.0)
    return m


def cylinder(height: float, radius: float, sections: int = CIRCULAR_SEGMENTS) -> trimesh.Trimesh:
    """Cilindro sobre el eje Z, centrado en X/Y, de z=0 a z=height."""
    h = float(height)
    r = float(radius)
    if h <= 0 or r <= 0:
        raise ValueError(f"cylinder needs positive height/radius, got h={h} r={r}")
    s = int(sections) if sections and sections > 3 else 32
    m = trimesh.creation.cylinder(radius=r, height=h, sections=s)
    m.apply_translation((0.0, 0.0, h / 2.0))
    return m


def extrude_contour(contour: sg.Polygon, height: float) -> trimesh.Trimesh:
    """
    Extruye un contorno 2D (plano XY) a lo largo de +Z, de z=0 a z=height.
    Admite contornos cóncavos y con agujeros.
    """
    h = float(height)
    if h <= 0:
        raise ValueError(f"extrusion height must be positive, got {h}")
    if contour.is_empty or not contour.is_valid or contour.area <= 0:
        raise ValueError("contour is empty or degenerate")
    return trimesh.creation.extrude_polygon(contour, h)  # extruye en +Z


def hull(meshes: Iterable[trimesh.Trimesh]) -> trimesh.Trimesh:
    lst = [m for m in meshes if isinstance(m, trimesh.Trimesh) and len(m.vertices)]
    if not lst:
        raise ValueError("hull of nothing")
    return trimesh.convex.convex_hull(np.vstack([m.vertices for m in lst]))


def rounded_cube(
    size: Sequence[float],
    radius: float = 20.0,
    sections: int = CIRCULAR_SEGMENTS,
) -> trimesh.Trimesh:
    """
    Prisma con las aristas paralelas a Y redondeadas.
    size=(ancho X, alto Y, fondo Z); ocupa [0,x] x [0,y] x [0,z].
    Cuatro postes cilíndricos en las esquinas de la huella XZ y su envolvente convexa.
    El radio se recorta a la mitad del lado menor de la huella.
    """
    width, height, depth = (float(v) for v in size)
    r = min(float(radius), width / 2.0, depth / 2.0)
    if r <= 0:
        return cube((width, height, depth))

    # poste a lo largo de +Y con el eje en (x=r, z=r)
    post = rotate(translate(cylinder(height, r, sections), (-r, -r, 0.0)), (0.0, 90.0, 90.0))

    walkx = width - r * 2.0
    walkz = depth - r * 2.0
    return hull([
        post,
        translate(post, (walkx, 0.0, 0.0)),
        translate(post, (walkx, 0.0, walkz)),
        translate(post, (0.0, 0.0, walkz)),
    ])


# ---------------------- Transformaciones ----------------------

def translate(mesh: trimesh.Trimesh, offset: Sequence[float]) -> trimesh.Trimesh:
    out = mesh.copy()
    out.apply_translation(np.asarray(offset, dtype=float))
    return out


def rotate(mesh: trimesh.Trimesh, degrees: Sequence[float]) -> trimesh.Trimesh:
    """Giro de Euler en grados: primero sobre X, luego Y, luego Z (ejes fijos)."""
    ax, ay, az = np.radians(np.asarray(degrees, dtype=float))
    out = mesh.copy()
    out.apply_transform(trimesh.transformations.euler_matrix(ax, ay, az, axes="sxyz"))
    return out


def mirror(mesh: trimesh.Trimesh, normal: Sequence[float]) -> trimesh.Trimesh:
    """Simetría respecto al plano por el origen con normal `normal`."""
    M = trimesh.transformations.reflection_matrix((0.0, 0.0, 0.0), np.asarray(normal, dtype=float))
    out = mesh.copy()
    out.apply_transform(M)
    # la reflexión invierte la orientación de las caras
    if out.volume < 0:
        out.invert()
    return out


def bounds(mesh: trimesh.Trimesh) -> Tuple[np.ndarray, np.ndarray]:
    """(min, max) de la caja envolvente."""
    bb = np.asarray(mesh.bounds, dtype=float)
    return bb[0], bb[1]


__all__ = [
    "cube",
    "cylinder",
    "extrude_contour",
    "hull",
    "rounded_cube",
    "translate",
    "rotate",
    "mirror",
    "bounds",
]
