# bracket_forge/params.py
"""
Esquema de parámetros del soporte PSU.

Los datos llegan como un mapa plano clave/valor (formulario, query string o
JSON). `parse_params` los normaliza y valida y devuelve un `BracketParams`
inmutable, o lanza `ParameterError`. Nada inválido llega a la geometría.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .config import PLATE_DEPTH, PLATE_WIDTH
from .spacing import hole_edge_padding

logger = logging.getLogger(__name__)


class ParameterError(ValueError):
    """Parámetros que no describen un soporte construible."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []


# ---------------------- Utilidades numéricas ----------------------

def num(x: Any, default: Optional[float] = None) -> Optional[float]:
    if x is None:
        return default
    if isinstance(x, bool):
        return float(x)
    if isinstance(x, (int, float)):
        return float(x)
    try:
        return float(str(x).strip().replace(",", "."))
    except ValueError:
        return default


_TRUE = {"on", "true", "1", "yes", "si", "sí"}
_FALSE = {"off", "false", "0", "no", ""}


def as_bool(x: Any) -> Any:
    """Checkbox de formulario: "on" → True. Lo no reconocido se deja pasar al esquema."""
    if isinstance(x, bool):
        return x
    if isinstance(x, (int, float)):
        return bool(x)
    s = str(x).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return x


def clamp_hole_diameter(hole_diameter: float, ear_width: float, depth: float) -> float:
    """El taladro no puede romper el borde de la oreja ni salirse del fondo."""
    return min(hole_diameter, (ear_width / 2) - 1, (depth / 2) - 1)


# ---------------------- Esquema ----------------------

class BracketParams(BaseModel):
    """Parámetros del soporte (mm). Las claves de entrada son las del formulario (camelCase)."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, extra="ignore", allow_inf_nan=False
    )

    width: float = Field(200.0, gt=0)
    depth: float = Field(25.0, gt=0)
    height: float = Field(16.0, gt=0)
    bracket_thickness: float = Field(3.0, gt=0, alias="bracketThickness")
    ribbing_count: int = Field(3, ge=0, alias="ribbingCount")
    ribbing_thickness: float = Field(2.0, gt=0, alias="ribbingThickness")
    hole_diameter: float = Field(2.0, gt=0, alias="holeDiameter")
    hole_count: int = Field(1, ge=1, alias="holeCount")
    ear_width: float = Field(10.0, gt=0, alias="earWidth")
    has_bottom: bool = Field(False, alias="hasBottom")
    key_hole: bool = Field(False, alias="keyHole")

    @model_validator(mode="after")
    def _features_fit_depth(self) -> "BracketParams":
        if self.ribbing_count > 0:
            needed = self.ribbing_thickness * (self.ribbing_count + 2)
            if needed >= self.depth:
                raise ValueError(
                    f"{self.ribbing_count} ribs of {self.ribbing_thickness}mm need a depth "
                    f"greater than {needed}mm (depth={self.depth})"
                )
        if self.hole_count > 1 and self.effective_hole_diameter > 0:
            padding = hole_edge_padding(self.effective_hole_diameter)
            if self.depth < padding * 2:
                raise ValueError(
                    f"{self.hole_count} holes need a depth of at least {padding * 2}mm "
                    f"(edge padding {padding}mm, depth={self.depth})"
                )
        return self

    @property
    def effective_hole_diameter(self) -> float:
        return clamp_hole_diameter(self.hole_diameter, self.ear_width, self.depth)

    def as_form(self) -> Dict[str, Any]:
        """Mapa con las claves del formulario (camelCase)."""
        return self.model_dump(by_alias=True)


DEFAULT_PARAMS = BracketParams()

_BOOL_FIELDS = {name for name, f in BracketParams.model_fields.items() if f.annotation is bool}


def _field_key(name: str) -> str:
    return BracketParams.model_fields[name].alias or name


def normalize_form(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convierte un mapa tipo formulario en valores tipados "best effort":
    checkboxes a bool y números en texto (admite coma decimal) a float.
    Acepta la clave camelCase o el nombre en snake_case; ignora el resto.
    """
    out: Dict[str, Any] = {}
    for name in BracketParams.model_fields:
        key = _field_key(name)
        if key in data:
            raw = data[key]
        elif name in data:
            raw = data[name]
        else:
            continue
        if name in _BOOL_FIELDS:
            out[key] = as_bool(raw)
        else:
            n = num(raw)
            out[key] = raw if n is None else n
    return out


def parse_params(data: Optional[Mapping[str, Any]] = None) -> BracketParams:
    if isinstance(data, BracketParams):
        return data
    values = normalize_form(data or {})
    try:
        params = BracketParams.model_validate(values)
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        msg = "; ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ())) or 'params'}: {e.get('msg')}"
            for e in errors
        )
        raise ParameterError(msg, errors) from exc
    if params.effective_hole_diameter != params.hole_diameter:
        logger.debug(
            "hole diameter %s clamped to %s", params.hole_diameter, params.effective_hole_diameter
        )
    return params


# ---------------------- Placa de impresión ----------------------

PLATE_PRESETS: Dict[str, Tuple[float, float]] = {
    "bambu-x1c": (256.0, 256.0),
    "prusa-mk4": (250.0, 210.0),
    "ender-3": (220.0, 220.0),
    "prusa-mini": (180.0, 180.0),
}


def total_width(params: BracketParams) -> float:
    return params.width + (params.bracket_thickness * 2) + (params.ear_width * 2)


def max_inner_width(ear_width: float, bracket_thickness: float, plate_width: float) -> float:
    return plate_width - (ear_width * 2) - (bracket_thickness * 2)


class PlateFit(BaseModel):
    plate_width: float
    plate_depth: float
    max_width: float
    total_width: float
    over_limit: bool
    clamped: bool


def fit_to_plate(
    params: BracketParams,
    plate_width: float = PLATE_WIDTH,
    plate_depth: float = PLATE_DEPTH,
) -> Tuple[BracketParams, PlateFit]:
    """
    Recorta el ancho interior para que el soporte completo quepa en la placa.
    Si ni siquiera las orejas caben, se deja como está y se marca `over_limit`.
    """
    max_w = max_inner_width(params.ear_width, params.bracket_thickness, plate_width)
    clamped = False
    if 0 < max_w < params.width:
        logger.debug("width %s clamped to plate limit %s", params.width, max_w)
        params = params.model_copy(update={"width": max_w})
        clamped = True
    tw = total_width(params)
    return params, PlateFit(
        plate_width=plate_width,
        plate_depth=plate_depth,
        max_width=max_w,
        total_width=tw,
        over_limit=tw > plate_width,
        clamped=clamped,
    )


__all__ = [
    "BracketParams",
    "DEFAULT_PARAMS",
    "ParameterError",
    "PLATE_PRESETS",
    "PlateFit",
    "as_bool",
    "clamp_hole_diameter",
    "fit_to_plate",
    "max_inner_width",
    "normalize_form",
    "num",
    "parse_params",
    "total_width",
]
