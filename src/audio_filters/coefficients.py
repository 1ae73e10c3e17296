"""
BiQuad coefficient derivation

- RBJ Audio-EQ-Cookbook formulas, one pure function per FilterKind
- Registry + decorator dispatch on the kind tag
- Raw (a0 != 1) and normalized (a0 == 1) coefficient sets

Operation order follows the cookbook grouping so results are
reproducible against other implementations of the same formulas.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from .errors import InvalidShelfSlope
from .params import FilterKind, FilterParameters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoefficientSet:
    """
    Coefficients of one BiQuad stage.

    H(z) = (b0 + b1 z^-1 + b2 z^-2) / (a0 + a1 z^-1 + a2 z^-2)

    Sets returned by derive() are normalized: a0 == 1.0 and the other
    five values are pre-divided by the raw a0.
    """
    b0: float
    b1: float
    b2: float
    a0: float
    a1: float
    a2: float

    @classmethod
    def from_ba(cls, b: Sequence[float], a: Sequence[float]) -> "CoefficientSet":
        """
        Build from numerator/denominator lists.

        Args:
            b: [b0, b1, b2]
            a: [a0, a1, a2], or [a1, a2] with an implicit a0 of 1.0

        Raises:
            ValueError: On wrong lengths
        """
        if len(b) != 3:
            raise ValueError(f"Expected 3 b coefficients, got {len(b)}")
        if len(a) == 2:
            a = (1.0, a[0], a[1])
        elif len(a) != 3:
            raise ValueError(f"Expected 2 or 3 a coefficients, got {len(a)}")
        return cls(
            b0=float(b[0]), b1=float(b[1]), b2=float(b[2]),
            a0=float(a[0]), a1=float(a[1]), a2=float(a[2]),
        )

    @property
    def b(self) -> Tuple[float, float, float]:
        return (self.b0, self.b1, self.b2)

    @property
    def a(self) -> Tuple[float, float, float]:
        return (self.a0, self.a1, self.a2)

    @property
    def is_normalized(self) -> bool:
        return self.a0 == 1.0

    def normalized(self) -> "CoefficientSet":
        """Divide everything by a0 so the recursion needs no division"""
        if self.a0 == 1.0:
            return self
        a0 = self.a0
        return CoefficientSet(
            b0=self.b0 / a0,
            b1=self.b1 / a0,
            b2=self.b2 / a0,
            a0=1.0,
            a1=self.a1 / a0,
            a2=self.a2 / a0,
        )

    def is_stable(self) -> bool:
        """True if both poles lie strictly inside the unit circle"""
        n = self.normalized()
        # Stability triangle for z^2 + a1 z + a2
        return abs(n.a2) < 1.0 and abs(n.a1) < 1.0 + n.a2

    def to_dict(self) -> dict:
        return {"b": list(self.b), "a": list(self.a)}

    @classmethod
    def from_dict(cls, data: dict) -> "CoefficientSet":
        return cls.from_ba(data["b"], data["a"])


Deriver = Callable[[FilterParameters], CoefficientSet]

_DERIVERS: Dict[FilterKind, Deriver] = {}


def register_kind(kind: FilterKind):
    """
    Decorator registering the coefficient formula for one filter kind.

    Usage:
        @register_kind(FilterKind.LOWPASS)
        def _lowpass(params):
            ...

    Raises:
        ValueError: If the kind already has a formula
    """
    def decorator(func: Deriver) -> Deriver:
        if kind in _DERIVERS:
            raise ValueError(f"Filter kind '{kind.value}' already registered")
        _DERIVERS[kind] = func
        return func

    return decorator


def available_kinds() -> List[FilterKind]:
    """List kinds that have a registered formula"""
    return [kind for kind in FilterKind if kind in _DERIVERS]


def derive_unnormalized(params: FilterParameters) -> CoefficientSet:
    """
    Validate parameters and compute the raw cookbook coefficients.

    Raises:
        FilterError: If the parameters cannot describe a stable filter
    """
    params.validate()
    deriver = _DERIVERS[params.kind]
    return deriver(params)


def derive(params: FilterParameters) -> CoefficientSet:
    """
    Compute the normalized coefficients (a0 == 1) for a filter.

    Args:
        params: Filter description

    Returns:
        Normalized CoefficientSet

    Raises:
        InvalidSampleRate, InvalidFrequency, InvalidQFactor, InvalidGain,
        InvalidShelfSlope: On invalid parameters
    """
    coeffs = derive_unnormalized(params).normalized()
    logger.debug("Derived %s @ %.2f Hz (fs=%s, Q=%s, gain=%s dB): %s",
                 params.kind.value, params.frequency, params.sample_rate,
                 params.q_factor, params.gain_db, coeffs)
    return coeffs


def _angular(params: FilterParameters) -> Tuple[float, float, float]:
    """Return (w0, cos w0, sin w0)"""
    w0 = 2.0 * math.pi * params.frequency / params.sample_rate
    return w0, math.cos(w0), math.sin(w0)


def _alpha(sin_w0: float, q_factor: float) -> float:
    return sin_w0 / (2.0 * q_factor)


def _amplitude(gain_db: float) -> float:
    # Square root of the linear gain: split between numerator and denominator
    return 10.0 ** (gain_db / 40.0)


def _shelf_alpha(params: FilterParameters, sin_w0: float, big_a: float) -> float:
    if params.shelf_slope is None:
        return _alpha(sin_w0, params.q_factor)

    slope_term = (big_a + 1.0 / big_a) * (1.0 / params.shelf_slope - 1.0) + 2.0
    if slope_term <= 0.0:
        raise InvalidShelfSlope(
            f"Shelf slope {params.shelf_slope} is too steep for "
            f"{params.gain_db} dB of gain"
        )
    return sin_w0 / 2.0 * math.sqrt(slope_term)


@register_kind(FilterKind.LOWPASS)
def _lowpass(params: FilterParameters) -> CoefficientSet:
    _, cos_w0, sin_w0 = _angular(params)
    alpha = _alpha(sin_w0, params.q_factor)

    b0 = (1.0 - cos_w0) / 2.0
    b1 = 1.0 - cos_w0
    b2 = (1.0 - cos_w0) / 2.0
    a0 = 1.0 + alpha
    a1 = -2.0 * cos_w0
    a2 = 1.0 - alpha
    return CoefficientSet(b0, b1, b2, a0, a1, a2)


@register_kind(FilterKind.HIGHPASS)
def _highpass(params: FilterParameters) -> CoefficientSet:
    _, cos_w0, sin_w0 = _angular(params)
    alpha = _alpha(sin_w0, params.q_factor)

    b0 = (1.0 + cos_w0) / 2.0
    b1 = -(1.0 + cos_w0)
    b2 = (1.0 + cos_w0) / 2.0
    a0 = 1.0 + alpha
    a1 = -2.0 * cos_w0
    a2 = 1.0 - alpha
    return CoefficientSet(b0, b1, b2, a0, a1, a2)


@register_kind(FilterKind.BANDPASS)
def _bandpass(params: FilterParameters) -> CoefficientSet:
    # Constant skirt gain, peak gain = Q
    _, cos_w0, sin_w0 = _angular(params)
    alpha = _alpha(sin_w0, params.q_factor)

    b0 = sin_w0 / 2.0
    b1 = 0.0
    b2 = -sin_w0 / 2.0
    a0 = 1.0 + alpha
    a1 = -2.0 * cos_w0
    a2 = 1.0 - alpha
    return CoefficientSet(b0, b1, b2, a0, a1, a2)


@register_kind(FilterKind.ALLPASS)
def _allpass(params: FilterParameters) -> CoefficientSet:
    _, cos_w0, sin_w0 = _angular(params)
    alpha = _alpha(sin_w0, params.q_factor)

    b0 = 1.0 - alpha
    b1 = -2.0 * cos_w0
    b2 = 1.0 + alpha
    a0 = 1.0 + alpha
    a1 = -2.0 * cos_w0
    a2 = 1.0 - alpha
    return CoefficientSet(b0, b1, b2, a0, a1, a2)


@register_kind(FilterKind.NOTCH)
def _notch(params: FilterParameters) -> CoefficientSet:
    _, cos_w0, sin_w0 = _angular(params)
    alpha = _alpha(sin_w0, params.q_factor)

    b0 = 1.0
    b1 = -2.0 * cos_w0
    b2 = 1.0
    a0 = 1.0 + alpha
    a1 = -2.0 * cos_w0
    a2 = 1.0 - alpha
    return CoefficientSet(b0, b1, b2, a0, a1, a2)


@register_kind(FilterKind.PEAK)
def _peak(params: FilterParameters) -> CoefficientSet:
    _, cos_w0, sin_w0 = _angular(params)
    alpha = _alpha(sin_w0, params.q_factor)
    big_a = _amplitude(params.gain_db)

    b0 = 1.0 + alpha * big_a
    b1 = -2.0 * cos_w0
    b2 = 1.0 - alpha * big_a
    a0 = 1.0 + alpha / big_a
    a1 = -2.0 * cos_w0
    a2 = 1.0 - alpha / big_a
    return CoefficientSet(b0, b1, b2, a0, a1, a2)


@register_kind(FilterKind.LOWSHELF)
def _lowshelf(params: FilterParameters) -> CoefficientSet:
    _, cos_w0, sin_w0 = _angular(params)
    big_a = _amplitude(params.gain_db)
    alpha = _shelf_alpha(params, sin_w0, big_a)

    pmc = (big_a + 1.0) - (big_a - 1.0) * cos_w0
    ppmc = (big_a + 1.0) + (big_a - 1.0) * cos_w0
    mpc = (big_a - 1.0) - (big_a + 1.0) * cos_w0
    pmpc = (big_a - 1.0) + (big_a + 1.0) * cos_w0
    aa2 = 2.0 * math.sqrt(big_a) * alpha

    b0 = big_a * (pmc + aa2)
    b1 = 2.0 * big_a * mpc
    b2 = big_a * (pmc - aa2)
    a0 = ppmc + aa2
    a1 = -2.0 * pmpc
    a2 = ppmc - aa2
    return CoefficientSet(b0, b1, b2, a0, a1, a2)


@register_kind(FilterKind.HIGHSHELF)
def _highshelf(params: FilterParameters) -> CoefficientSet:
    # Mirror of the low shelf: cos w0 terms change sign
    _, cos_w0, sin_w0 = _angular(params)
    big_a = _amplitude(params.gain_db)
    alpha = _shelf_alpha(params, sin_w0, big_a)

    pmc = (big_a + 1.0) - (big_a - 1.0) * cos_w0
    ppmc = (big_a + 1.0) + (big_a - 1.0) * cos_w0
    mpc = (big_a - 1.0) - (big_a + 1.0) * cos_w0
    pmpc = (big_a - 1.0) + (big_a + 1.0) * cos_w0
    aa2 = 2.0 * math.sqrt(big_a) * alpha

    b0 = big_a * (ppmc + aa2)
    b1 = -2.0 * big_a * pmpc
    b2 = big_a * (ppmc - aa2)
    a0 = pmc + aa2
    a1 = 2.0 * mpc
    a2 = pmc - aa2
    return CoefficientSet(b0, b1, b2, a0, a1, a2)


@register_kind(FilterKind.PEAK_EQ)
def _peak_eq(params: FilterParameters) -> CoefficientSet:
    """
    Constant-Q peaking EQ (Zolzer, DAFX pp. 50-55).

    Gain is measured at the -3 dB points like an analog peaking EQ,
    which makes it suited to cascaded graphic equalizers. Boost and cut
    are mirror images. The result is already normalized.
    """
    q = params.q_factor
    k = math.tan(math.pi * params.frequency / params.sample_rate)
    k_sqr = k ** 2

    v0 = 10.0 ** (params.gain_db / 20.0)
    # Invert gain if a cut
    if v0 < 1.0:
        v0 = 1.0 / v0

    if params.gain_db > 0.0:
        # Boost
        denom = 1.0 + ((1.0 / q) * k) + k_sqr
        b0 = (1.0 + ((v0 / q) * k) + k_sqr) / denom
        b1 = (2.0 * (k_sqr - 1.0)) / denom
        b2 = (1.0 - ((v0 / q) * k) + k_sqr) / denom
        a2 = (1.0 - ((1.0 / q) * k) + k_sqr) / denom
    else:
        # Cut
        denom = 1.0 + ((v0 / q) * k) + k_sqr
        b0 = (1.0 + ((1.0 / q) * k) + k_sqr) / denom
        b1 = (2.0 * (k_sqr - 1.0)) / denom
        b2 = (1.0 - ((1.0 / q) * k) + k_sqr) / denom
        a2 = (1.0 - ((v0 / q) * k) + k_sqr) / denom

    return CoefficientSet(b0, b1, b2, 1.0, b1, a2)
