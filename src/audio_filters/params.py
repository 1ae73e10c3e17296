"""
Filter parameter records

Provides the FilterKind tag and the FilterParameters record that every
coefficient derivation starts from. Validation raises the typed errors
from errors.py instead of clamping: an invalid configuration must never
turn into a filter.
"""

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .config import DEFAULT_Q
from .errors import (
    InvalidFilterKind,
    InvalidFrequency,
    InvalidGain,
    InvalidQFactor,
    InvalidSampleRate,
    InvalidShelfSlope,
)


class FilterKind(Enum):
    """Supported BiQuad responses"""
    LOWPASS = "lowpass"
    HIGHPASS = "highpass"
    BANDPASS = "bandpass"
    ALLPASS = "allpass"
    PEAK = "peak"
    LOWSHELF = "lowshelf"
    HIGHSHELF = "highshelf"
    NOTCH = "notch"
    PEAK_EQ = "peak_eq"  # Constant-Q peaking EQ (Zolzer)

    @classmethod
    def parse(cls, value: Union["FilterKind", str]) -> "FilterKind":
        """
        Accept a FilterKind or its name ("lowpass", "LowShelf", ...).

        Raises:
            InvalidFilterKind: If the name is unknown
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(k.value for k in cls)
            raise InvalidFilterKind(
                f"Unknown filter kind {value!r}. Available: {names}"
            ) from None

    @property
    def uses_gain(self) -> bool:
        return self in _GAIN_KINDS

    @property
    def is_shelf(self) -> bool:
        return self in (FilterKind.LOWSHELF, FilterKind.HIGHSHELF)


_GAIN_KINDS = frozenset({
    FilterKind.PEAK,
    FilterKind.PEAK_EQ,
    FilterKind.LOWSHELF,
    FilterKind.HIGHSHELF,
})


@dataclass(frozen=True)
class FilterParameters:
    """
    Human-meaningful description of one BiQuad stage.

    Attributes:
        kind: Filter response (FilterKind or its name)
        sample_rate: Sample rate in Hz
        frequency: Cutoff / center / corner frequency in Hz
        q_factor: Resonance; for shelves used only when shelf_slope is None
        gain_db: Gain in dB (peak, peak_eq and shelving kinds)
        shelf_slope: Optional cookbook shelf slope S (shelving kinds)
    """
    kind: FilterKind
    sample_rate: float
    frequency: float
    q_factor: float = DEFAULT_Q
    gain_db: float = 0.0
    shelf_slope: Optional[float] = None

    def __post_init__(self):
        # Frozen record: normalize the kind tag in place
        object.__setattr__(self, "kind", FilterKind.parse(self.kind))

    @property
    def nyquist(self) -> float:
        return self.sample_rate * 0.5

    def validate(self) -> "FilterParameters":
        """
        Check the parameters describe a stable filter.

        Returns:
            self, so calls can be chained

        Raises:
            InvalidSampleRate: sample_rate <= 0 or not finite
            InvalidFrequency: frequency <= 0 or >= Nyquist
            InvalidQFactor: q_factor <= 0 or not finite
            InvalidGain: gain_db not finite, or too large for a linear gain
            InvalidShelfSlope: shelf_slope <= 0 or not finite
        """
        if not (math.isfinite(self.sample_rate) and self.sample_rate > 0):
            raise InvalidSampleRate(
                f"Sample rate must be positive, got {self.sample_rate}"
            )

        if not (0.0 < self.frequency < self.nyquist):
            raise InvalidFrequency(
                f"Frequency must be between 0.0 and {self.nyquist} Hz "
                f"(exclusive), got {self.frequency}"
            )

        if not (math.isfinite(self.q_factor) and self.q_factor > 0):
            raise InvalidQFactor(
                f"Q-factor must be positive, got {self.q_factor}"
            )

        if not math.isfinite(self.gain_db):
            raise InvalidGain(f"Gain must be finite, got {self.gain_db}")

        if self.kind.uses_gain:
            # Linear gain (and its inverse for cuts) must be a nonzero finite float
            try:
                linear = 10.0 ** (abs(self.gain_db) / 20.0)
            except OverflowError:
                linear = math.inf
            if not math.isfinite(linear):
                raise InvalidGain(
                    f"Gain {self.gain_db} dB is outside the representable range"
                )

        if self.shelf_slope is not None:
            if not (math.isfinite(self.shelf_slope) and self.shelf_slope > 0):
                raise InvalidShelfSlope(
                    f"Shelf slope must be positive, got {self.shelf_slope}"
                )

        return self

    def replace(self, **changes) -> "FilterParameters":
        """Copy with some fields changed"""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        """
        Convert parameters to dictionary for serialization.

        Returns:
            Dictionary representation
        """
        return {
            "kind": self.kind.value,
            "sample_rate": self.sample_rate,
            "frequency": self.frequency,
            "q_factor": self.q_factor,
            "gain_db": self.gain_db,
            "shelf_slope": self.shelf_slope,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FilterParameters":
        """
        Create FilterParameters from dictionary.

        Args:
            data: Dictionary representation

        Returns:
            FilterParameters instance
        """
        return cls(
            kind=FilterKind.parse(data["kind"]),
            sample_rate=data["sample_rate"],
            frequency=data["frequency"],
            q_factor=data.get("q_factor", DEFAULT_Q),
            gain_db=data.get("gain_db", 0.0),
            shelf_slope=data.get("shelf_slope"),
        )
