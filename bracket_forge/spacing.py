# bracket_forge/spacing.py
"""
Reparto de elementos repetidos a lo largo de un eje.

Hay dos reglas distintas y no deben unificarse:
  - `calculate_spacing`: nervios. Margen de un ancho de elemento en cada
    extremo y pasada de corrección proporcional al índice.
  - `linear_hole_positions`: taladros múltiples. Margen fijo
    `max(3·diámetro, 10)` e interpolación lineal entre extremos.
"""
from __future__ import annotations

from typing import List

MIN_HOLE_PADDING = 10.0
HOLE_PADDING_FACTOR = 3.0


def calculate_spacing(available_width: float, item_width: float, item_count: int) -> List[float]:
    """
    Posiciones de inicio de `item_count` elementos de ancho `item_width`
    repartidos en `available_width`.

    Con un solo elemento devuelve el centro (ignora el ancho). No valida que
    quepan: `available_width > item_width * (item_count + 2)` es cosa del
    llamante.
    """
    if item_count < 1:
        raise ValueError(f"item_count must be >= 1, got {item_count}")
    if item_count == 1:
        return [available_width / 2]

    total_item_width = item_width * item_count
    # hueco total descontando un ancho de elemento en cada extremo
    total_spacing = available_width - total_item_width - (item_width * 2)
    gap = total_spacing / (item_count - 1)

    positions = [item_width + i * (item_width + gap) for i in range(item_count)]

    last = positions[-1]
    if last + item_width > available_width - item_width:
        adjustment = (last + item_width) - (available_width - item_width)
        # corrección lineal: cuanto mayor el índice, más se desplaza
        positions = [
            pos - (adjustment * i / (len(positions) - 1))
            for i, pos in enumerate(positions)
        ]

    return positions


def hole_edge_padding(diameter: float) -> float:
    return max(diameter * HOLE_PADDING_FACTOR, MIN_HOLE_PADDING)


def linear_hole_positions(depth: float, diameter: float, count: int) -> List[float]:
    """Centros de los taladros (eje Z de la oreja, 0..depth)."""
    if count < 1:
        raise ValueError(f"hole count must be >= 1, got {count}")
    if count == 1:
        return [depth / 2]

    padding = hole_edge_padding(diameter)
    step = (depth - padding * 2) / (count - 1)
    return [padding + i * step for i in range(count)]


__all__ = ["calculate_spacing", "linear_hole_positions", "hole_edge_padding"]
