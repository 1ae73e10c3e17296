"""
BiquadFilter - Direct Form I second order IIR filter
- RBJ cookbook coefficients via coefficients.derive()
- O(1) per-sample step, state continuity across buffers
- Live coefficient changes keep history (may click; not smoothed)
- NaN/inf inputs propagate per IEEE 754, no sanitizing
"""

import logging
from typing import Optional

import numpy as np

from .base import ProcessingBlock, Samples
from ..coefficients import CoefficientSet, derive
from ..params import FilterParameters

logger = logging.getLogger(__name__)


class BiquadFilter(ProcessingBlock):
    """
    Direct Form I (DF1) biquad filter.

    y[n] = b0*x[n] + b1*x[n-1] + b2*x[n-2] - a1*y[n-1] - a2*y[n-2]

    Coefficients are held normalized (a0 = 1).
    """

    def __init__(self, coeffs: CoefficientSet):
        super().__init__()

        # DF1 state: x[n-1], x[n-2], y[n-1], y[n-2]
        self._x1 = 0.0
        self._x2 = 0.0
        self._y1 = 0.0
        self._y2 = 0.0

        self.set_coefficients(coeffs)

    @classmethod
    def from_params(cls, params: FilterParameters) -> "BiquadFilter":
        """
        Derive coefficients and build a filter.

        Raises:
            FilterError: On invalid parameters
        """
        return cls(derive(params))

    @classmethod
    def design(cls, kind, sample_rate: float, frequency: float,
               q_factor: Optional[float] = None, gain_db: float = 0.0,
               shelf_slope: Optional[float] = None) -> "BiquadFilter":
        """
        Build a filter straight from its parameters.

        Args:
            kind: FilterKind or its name ("lowpass", "peak", ...)
            sample_rate: Sample rate in Hz
            frequency: Cutoff/center frequency in Hz
            q_factor: Q (Butterworth 1/sqrt(2) if omitted)
            gain_db: Gain for peak and shelving kinds
            shelf_slope: Optional shelf slope S

        Raises:
            FilterError: On invalid parameters
        """
        fields = dict(kind=kind, sample_rate=sample_rate, frequency=frequency,
                      gain_db=gain_db, shelf_slope=shelf_slope)
        if q_factor is not None:
            fields["q_factor"] = q_factor
        return cls.from_params(FilterParameters(**fields))

    @property
    def coefficients(self) -> CoefficientSet:
        return self._coeffs

    def set_coefficients(self, coeffs: CoefficientSet) -> None:
        """
        Replace coefficients without touching history.

        Unnormalized sets are normalized here. Swapping coefficients
        mid-stream can produce a transient.
        """
        coeffs = coeffs.normalized()
        self._coeffs = coeffs

        # Plain floats for the inner loop
        self._b0 = float(coeffs.b0)
        self._b1 = float(coeffs.b1)
        self._b2 = float(coeffs.b2)
        self._a1 = float(coeffs.a1)
        self._a2 = float(coeffs.a2)
        logger.debug("%s coefficients set: %s", self.name, coeffs)

    def reset(self) -> None:
        """Zero the history, coefficients unchanged."""
        self._x1 = 0.0
        self._x2 = 0.0
        self._y1 = 0.0
        self._y2 = 0.0

    def process(self, x: float) -> float:
        x = float(x)
        y = (self._b0 * x + self._b1 * self._x1 + self._b2 * self._x2
             - self._a1 * self._y1 - self._a2 * self._y2)

        self._x2 = self._x1
        self._x1 = x
        self._y2 = self._y1
        self._y1 = y
        return y

    def process_buffer(self, samples: Samples,
                       out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Apply the filter sample-by-sample.

        Same arithmetic as process(), with coefficients and state in
        locals for the duration of the buffer.
        """
        values, out = self._prepare_buffers(samples, out)

        b0, b1, b2 = self._b0, self._b1, self._b2
        a1, a2 = self._a1, self._a2
        x1, x2, y1, y2 = self._x1, self._x2, self._y1, self._y2

        for i, x in enumerate(values):
            y = b0 * x + b1 * x1 + b2 * x2 - a1 * y1 - a2 * y2
            x2 = x1
            x1 = x
            y2 = y1
            y1 = y
            out[i] = y

        self._x1, self._x2, self._y1, self._y2 = x1, x2, y1, y2
        return out

    def get_state(self) -> dict:
        """Get current filter state for debugging."""
        state = super().get_state()
        state.update({
            "coefficients": {
                "b0": self._b0,
                "b1": self._b1,
                "b2": self._b2,
                "a1": self._a1,
                "a2": self._a2,
            },
            "state_vars": {
                "x1": self._x1,
                "x2": self._x2,
                "y1": self._y1,
                "y2": self._y2,
            }
        })
        return state

    def __repr__(self) -> str:
        c = self._coeffs
        return (f"{self.name}(b=[{c.b0:.6g}, {c.b1:.6g}, {c.b2:.6g}], "
                f"a=[1, {c.a1:.6g}, {c.a2:.6g}])")
