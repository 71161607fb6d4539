"""Container-loading estimate: how many boxes fit, and in which orientation."""

from __future__ import annotations

import math

from taskboard.domain.models import PackingResult

# Inner dimensions in centimetres (length, width, height).
CONTAINERS: dict[str, tuple[float, float, float]] = {
    "20ft": (590, 235, 239),
    "40ft": (1200, 235, 239),
}

# Which product side runs along the container's length, width and height.
_ORIENTATIONS: list[tuple[str, tuple[int, int, int]]] = [
    ("original", (0, 1, 2)),
    ("length/width swapped", (1, 0, 2)),
    ("length/height swapped", (2, 1, 0)),
    ("width/height swapped", (0, 2, 1)),
    ("rotated width-height-length", (1, 2, 0)),
    ("rotated height-length-width", (2, 0, 1)),
]


def estimate(length: float, width: float, height: float, container: str) -> PackingResult:
    """Return the best of the six axis-aligned orientations for one container.

    Ties go to the orientation listed first.
    """
    if length <= 0 or width <= 0 or height <= 0:
        raise ValueError("Product dimensions must be greater than 0")
    try:
        inner = CONTAINERS[container]
    except KeyError:
        raise ValueError(f"Unknown container size: {container}") from None

    product = (length, width, height)
    best = PackingResult(count=0, arrangement="")
    for label, sides in _ORIENTATIONS:
        count = 1
        for axis, side in zip(inner, sides):
            count *= math.floor(axis / product[side])
        if count > best.count or not best.arrangement:
            best = PackingResult(count=count, arrangement=label)
    return best


def estimate_all(length: float, width: float, height: float) -> dict[str, PackingResult]:
    return {name: estimate(length, width, height, name) for name in CONTAINERS}
