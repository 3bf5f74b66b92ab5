"""Easing curves mapping linear progress onto shaped progress.

Back and elastic curves overshoot the ``[0, 1]`` range on purpose; callers must
not clamp the result.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Callable, Dict, List, Union


logger = logging.getLogger(__name__)


class Easing(str, Enum):
    LINEAR = "linear"
    EASE_IN_QUAD = "easeInQuad"
    EASE_OUT_QUAD = "easeOutQuad"
    EASE_IN_OUT_QUAD = "easeInOutQuad"
    EASE_IN_CUBIC = "easeInCubic"
    EASE_OUT_CUBIC = "easeOutCubic"
    EASE_IN_OUT_CUBIC = "easeInOutCubic"
    EASE_IN_QUART = "easeInQuart"
    EASE_OUT_QUART = "easeOutQuart"
    EASE_IN_OUT_QUART = "easeInOutQuart"
    EASE_IN_BACK = "easeInBack"
    EASE_OUT_BACK = "easeOutBack"
    EASE_IN_OUT_BACK = "easeInOutBack"
    EASE_IN_ELASTIC = "easeInElastic"
    EASE_OUT_ELASTIC = "easeOutElastic"
    EASE_IN_OUT_ELASTIC = "easeInOutElastic"
    EASE_OUT_BOUNCE = "easeOutBounce"


BACK_C1 = 1.70158
BACK_C2 = BACK_C1 * 1.525
BACK_C3 = BACK_C1 + 1.0
ELASTIC_C4 = (2.0 * math.pi) / 3.0
ELASTIC_C5 = (2.0 * math.pi) / 4.5
BOUNCE_N1 = 7.5625
BOUNCE_D1 = 2.75


def linear(t: float) -> float:
    return t


def ease_in_quad(t: float) -> float:
    return t * t


def ease_out_quad(t: float) -> float:
    return t * (2.0 - t)


def ease_in_out_quad(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return -1.0 + (4.0 - 2.0 * t) * t


def ease_in_cubic(t: float) -> float:
    return t * t * t


def ease_out_cubic(t: float) -> float:
    u = t - 1.0
    return u * u * u + 1.0


def ease_in_out_cubic(t: float) -> float:
    if t < 0.5:
        return 4.0 * t * t * t
    return (t - 1.0) * (2.0 * t - 2.0) * (2.0 * t - 2.0) + 1.0


def ease_in_quart(t: float) -> float:
    return t * t * t * t


def ease_out_quart(t: float) -> float:
    u = t - 1.0
    return 1.0 - u * u * u * u


def ease_in_out_quart(t: float) -> float:
    if t < 0.5:
        return 8.0 * t * t * t * t
    u = t - 1.0
    return 1.0 - 8.0 * u * u * u * u


def ease_in_back(t: float) -> float:
    return BACK_C3 * t * t * t - BACK_C1 * t * t


def ease_out_back(t: float) -> float:
    return 1.0 + BACK_C3 * (t - 1.0) ** 3 + BACK_C1 * (t - 1.0) ** 2


def ease_in_out_back(t: float) -> float:
    if t < 0.5:
        return ((2.0 * t) ** 2 * ((BACK_C2 + 1.0) * 2.0 * t - BACK_C2)) / 2.0
    return ((2.0 * t - 2.0) ** 2 * ((BACK_C2 + 1.0) * (t * 2.0 - 2.0) + BACK_C2) + 2.0) / 2.0


def ease_in_elastic(t: float) -> float:
    if t == 0.0 or t == 1.0:
        return t
    return -(2.0 ** (10.0 * t - 10.0)) * math.sin((t * 10.0 - 10.75) * ELASTIC_C4)


def ease_out_elastic(t: float) -> float:
    if t == 0.0 or t == 1.0:
        return t
    return 2.0 ** (-10.0 * t) * math.sin((t * 10.0 - 0.75) * ELASTIC_C4) + 1.0


def ease_in_out_elastic(t: float) -> float:
    if t == 0.0 or t == 1.0:
        return t
    if t < 0.5:
        return -(2.0 ** (20.0 * t - 10.0) * math.sin((20.0 * t - 11.125) * ELASTIC_C5)) / 2.0
    return (2.0 ** (-20.0 * t + 10.0) * math.sin((20.0 * t - 11.125) * ELASTIC_C5)) / 2.0 + 1.0


def ease_out_bounce(t: float) -> float:
    if t < 1.0 / BOUNCE_D1:
        return BOUNCE_N1 * t * t
    if t < 2.0 / BOUNCE_D1:
        t -= 1.5 / BOUNCE_D1
        return BOUNCE_N1 * t * t + 0.75
    if t < 2.5 / BOUNCE_D1:
        t -= 2.25 / BOUNCE_D1
        return BOUNCE_N1 * t * t + 0.9375
    t -= 2.625 / BOUNCE_D1
    return BOUNCE_N1 * t * t + 0.984375


EASING_FUNCTIONS: Dict[Easing, Callable[[float], float]] = {
    Easing.LINEAR: linear,
    Easing.EASE_IN_QUAD: ease_in_quad,
    Easing.EASE_OUT_QUAD: ease_out_quad,
    Easing.EASE_IN_OUT_QUAD: ease_in_out_quad,
    Easing.EASE_IN_CUBIC: ease_in_cubic,
    Easing.EASE_OUT_CUBIC: ease_out_cubic,
    Easing.EASE_IN_OUT_CUBIC: ease_in_out_cubic,
    Easing.EASE_IN_QUART: ease_in_quart,
    Easing.EASE_OUT_QUART: ease_out_quart,
    Easing.EASE_IN_OUT_QUART: ease_in_out_quart,
    Easing.EASE_IN_BACK: ease_in_back,
    Easing.EASE_OUT_BACK: ease_out_back,
    Easing.EASE_IN_OUT_BACK: ease_in_out_back,
    Easing.EASE_IN_ELASTIC: ease_in_elastic,
    Easing.EASE_OUT_ELASTIC: ease_out_elastic,
    Easing.EASE_IN_OUT_ELASTIC: ease_in_out_elastic,
    Easing.EASE_OUT_BOUNCE: ease_out_bounce,
}

_missing = set(Easing) - set(EASING_FUNCTIONS)
if _missing:  # pragma: no cover - guards edits to the table above
    raise RuntimeError(f"Easing kinds without a function: {sorted(e.value for e in _missing)}")


def resolve_easing(name: Union[Easing, str, None]) -> Easing:
    """Return the :class:`Easing` for ``name``, defaulting to linear."""

    if isinstance(name, Easing):
        return name
    if not name:
        return Easing.LINEAR
    try:
        return Easing(str(name))
    except ValueError:
        logger.debug("Unknown easing %r, using linear", name)
        return Easing.LINEAR


def ease(kind: Union[Easing, str, None], t: float) -> float:
    return EASING_FUNCTIONS[resolve_easing(kind)](float(t))


def easing_names() -> List[str]:
    return [e.value for e in Easing]
