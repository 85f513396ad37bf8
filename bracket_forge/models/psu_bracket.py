# bracket_forge/models/psu_bracket.py
# Soporte en "C" para fuente de alimentación, con orejas de anclaje a ambos lados.
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np
import shapely.geometry as sg
import trimesh

from ..params import BracketParams, parse_params, total_width
from ..spacing import calculate_spacing, hole_edge_padding, linear_hole_positions
from ._booleans import Engine, setup_engine
from ._helpers import (
    bounds,
    cube,
    cylinder,
    extrude_contour,
    mirror,
    rotate,
    rounded_cube,
    translate,
)

logger = logging.getLogger(__name__)

NAME = "psu_bracket"
SLUGS = ["psu-bracket", "bracket", "soporte_fuente"]

RIB_WIDTH_RATIO = 0.5    # sobre el ancho de oreja
RIB_HEIGHT_RATIO = 0.8   # sobre alto + espesor
KEY_ROUNDING = 10.0
# solape entre piezas que se unen y sobrecorte de los taladros (mm)
OVERLAP = 0.01

# Convenciones:
#   - Unidades en mm.
#   - X ancho, Y alto (la base apoya en Y=0), Z fondo.
#   - El canal queda abierto por arriba; las orejas salen a ras del borde superior.


@dataclass(frozen=True)
class BracketDims:
    thickness: float
    height_with_thickness: float
    width_with_thickness: float
    total_width: float
    hole_diameter: float
    hole_padding: float
    rib_width: float
    rib_height: float
    rib_positions: Tuple[float, ...]
    hole_positions: Tuple[float, ...]
    overlap: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "thickness": self.thickness,
            "height_with_thickness": self.height_with_thickness,
            "width_with_thickness": self.width_with_thickness,
            "total_width": self.total_width,
            "hole_diameter": self.hole_diameter,
            "hole_padding": self.hole_padding,
            "rib_width": self.rib_width,
            "rib_height": self.rib_height,
            "rib_positions": list(self.rib_positions),
            "hole_positions": list(self.hole_positions),
        }


@dataclass(frozen=True)
class BracketParts:
    solid: trimesh.Trimesh
    shell: trimesh.Trimesh
    left_ear: trimesh.Trimesh
    right_ear: trimesh.Trimesh


def derive_dims(p: BracketParams) -> BracketDims:
    t = p.bracket_thickness
    hwt = p.height + t
    hole_d = p.effective_hole_diameter

    ribs: List[float] = []
    if p.ribbing_count > 0:
        ribs = calculate_spacing(p.depth, p.ribbing_thickness, p.ribbing_count)

    holes: List[float] = []
    if hole_d > 0:
        holes = linear_hole_positions(p.depth, hole_d, p.hole_count)

    return BracketDims(
        thickness=t,
        height_with_thickness=hwt,
        width_with_thickness=p.width + t * 2,
        total_width=total_width(p),
        hole_diameter=hole_d,
        hole_padding=hole_edge_padding(hole_d) if p.hole_count > 1 and hole_d > 0 else 0.0,
        rib_width=p.ear_width * RIB_WIDTH_RATIO,
        rib_height=hwt * RIB_HEIGHT_RATIO,
        rib_positions=tuple(ribs),
        hole_positions=tuple(holes),
        # nunca más de un cuarto de pared
        overlap=min(OVERLAP, t / 4),
    )


# ---------------------- Piezas ----------------------

def _shell(engine: Engine, p: BracketParams, d: BracketDims) -> trimesh.Trimesh:
    t, ov = d.thickness, d.overlap
    body = cube((p.width + t * 2, p.height + t * 2, p.depth))

    if p.has_bottom:
        # desplazado un espesor en Z: queda un extremo cerrado
        cut = translate(cube((p.width, p.height + t + ov, p.depth)), (t, t, -t))
    else:
        cut = translate(cube((p.width, p.height + t + ov, p.depth + ov * 2)), (t, t, -ov))
    return engine.difference(body, cut)


def _rib(p: BracketParams, d: BracketDims) -> trimesh.Trimesh:
    """Escuadra triangular bajo la oreja; el cateto vertical apoya en la pared."""
    rw, rh, ov = d.rib_width, d.rib_height, d.overlap
    contour = sg.Polygon([
        (rw, ov),
        (rw * 2 + ov, ov),
        (rw * 2 + ov, -rh),
    ])
    return extrude_contour(contour, p.ribbing_thickness)


def _ear_body(engine: Engine, p: BracketParams, d: BracketDims) -> trimesh.Trimesh:
    # la oreja entra `overlap` en la pared del canal
    ear = cube((p.ear_width + d.overlap, d.thickness, p.depth))
    if not d.rib_positions:
        return ear
    rib = _rib(p, d)
    ribs = [translate(rib, (0.0, 0.0, z)) for z in d.rib_positions]
    return engine.union([ear] + ribs)


def hole_cutter(
    engine: Engine,
    p: BracketParams,
    d: Optional[BracketDims] = None,
) -> Optional[trimesh.Trimesh]:
    """
    Cortador de un taladro, en coordenadas de la oreja y centrado en z=0.
    Atraviesa espesor + nervio. None si el diámetro recortado no es positivo.
    """
    d = d or derive_dims(p)
    hd, ov = d.hole_diameter, d.overlap
    if hd <= 0:
        return None

    length = d.thickness + d.rib_height + ov * 2
    # cilindro con eje Y
    hole = rotate(cylinder(length, hd / 2), (0.0, 90.0, 90.0))

    if p.key_hole:
        # ranura redondeada que sale del centro hacia +Z
        key = translate(rounded_cube((hd / 2, length, hd), KEY_ROUNDING), (-hd / 4, 0.0, 0.0))
        hole = engine.union([hole, key])

    return translate(hole, (p.ear_width / 2, -d.rib_height - ov, 0.0))


def _ear(engine: Engine, p: BracketParams, d: BracketDims) -> trimesh.Trimesh:
    ear = _ear_body(engine, p, d)
    cutter = hole_cutter(engine, p, d)
    if cutter is None:
        logger.debug("hole diameter %s <= 0, ears without holes", d.hole_diameter)
        return ear
    holes = [translate(cutter, (0.0, 0.0, z)) for z in d.hole_positions]
    return engine.difference(ear, holes)


# ---------------------- Montaje ----------------------

def build_parts(engine: Engine, params: BracketParams) -> BracketParts:
    p = params
    d = derive_dims(p)
    logger.debug("psu_bracket dims: %s", d.as_dict())

    shell = _shell(engine, p, d)

    left = translate(_ear(engine, p, d), (-p.ear_width, d.height_with_thickness, 0.0))
    right = translate(mirror(left, (1.0, 0.0, 0.0)), (d.width_with_thickness, 0.0, 0.0))

    bracket = engine.union([shell, left, right])

    # centrado en X y Z; en Y se queda apoyado en la placa
    lo, hi = bounds(bracket)
    center = (lo + hi) / 2.0
    offset = np.array([-center[0], 0.0, -center[2]])

    solid = translate(bracket, offset)
    solid.metadata = {"name": NAME, "unit": "mm"}
    return BracketParts(
        solid=solid,
        shell=translate(shell, offset),
        left_ear=translate(left, offset),
        right_ear=translate(right, offset),
    )


def build(engine: Engine, params: BracketParams) -> trimesh.Trimesh:
    return build_parts(engine, params).solid


def make_model(
    params: Union[BracketParams, Mapping[str, Any], None] = None,
    engine: Optional[Engine] = None,
) -> trimesh.Trimesh:
    """Entrada del registro: acepta el mapa crudo del formulario o parámetros ya validados."""
    p = parse_params(params)
    return build(engine or setup_engine(), p)


BUILD = {"make": make_model}
__all__ = [
    "NAME",
    "SLUGS",
    "BracketDims",
    "BracketParts",
    "derive_dims",
    "hole_cutter",
    "build_parts",
    "build",
    "make_model",
    "BUILD",
]
