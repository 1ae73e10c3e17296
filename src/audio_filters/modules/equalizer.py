"""
Equalizer - Multi-band parametric EQ from cascaded peak filters

Every band is an independent BiQuad stage at a fixed center frequency;
all bands share the sample rate and Q (constant-Q design). The band
layout is plain data handed to the constructor.

See:
    Making an EQ from cascading filters
    https://dsp.stackexchange.com/questions/10309/making-an-eq-from-cascading-filters
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .biquad_filter import BiquadFilter
from .filter_chain import FilterChain
from ..coefficients import derive
from ..config import DEFAULT_EQ_Q, get_config
from ..errors import InvalidGain
from ..params import FilterKind, FilterParameters

logger = logging.getLogger(__name__)

# Octave spaced centers of the GStreamer 10 band equalizer (Hz)
TEN_BAND_FREQUENCIES = (
    29.0,
    59.0,
    119.0,
    237.0,
    474.0,
    947.0,
    1889.0,
    3770.0,
    7523.0,
    15011.0,
)

DEFAULT_GAIN_RANGE = (-24.0, 12.0)  # dB


class Equalizer(FilterChain):
    """
    Cascade of peak filters, one per (center_frequency, gain_db) band.

    Bands are fixed after construction; only their gains change.
    """

    def __init__(self, sample_rate: float,
                 bands: Sequence[Tuple[float, float]],
                 q_factor: float = DEFAULT_EQ_Q,
                 gain_range: Tuple[float, float] = DEFAULT_GAIN_RANGE,
                 band_kind: FilterKind = FilterKind.PEAK):
        """
        Args:
            sample_rate: Sample rate in Hz shared by all bands
            bands: (center_frequency_hz, gain_db) pairs, low to high
            q_factor: Shared Q of every band
            gain_range: (min_db, max_db) allowed band gains
            band_kind: PEAK (cookbook) or PEAK_EQ (constant-Q, Zolzer)

        Raises:
            ValueError: If there are no bands or gain_range is inverted
            InvalidGain: If a band gain is outside gain_range
            FilterError: If a band cannot be derived (e.g. above Nyquist)
        """
        super().__init__()

        if len(bands) == 0:
            raise ValueError("Equalizer needs at least one band")

        gain_min, gain_max = gain_range
        if gain_min > gain_max:
            raise ValueError(f"Invalid gain range [{gain_min}, {gain_max}]")

        band_kind = FilterKind.parse(band_kind)
        if band_kind not in (FilterKind.PEAK, FilterKind.PEAK_EQ):
            raise ValueError(f"Equalizer bands must be peak filters, got {band_kind.value}")

        self.sample_rate = sample_rate
        self.q_factor = q_factor
        self.gain_range = (float(gain_min), float(gain_max))
        self.band_kind = band_kind

        self._frequencies: List[float] = []
        self._gains: List[float] = []

        for frequency, gain_db in bands:
            self._check_gain(gain_db)
            stage = BiquadFilter(derive(self._band_params(frequency, gain_db)))
            FilterChain.add_stage(self, stage)
            self._frequencies.append(float(frequency))
            self._gains.append(float(gain_db))

        logger.debug("%s: %d bands, fs=%s, Q=%.3f, kind=%s", self.name,
                     len(self._frequencies), sample_rate, q_factor, band_kind.value)

    def add_stage(self, stage):
        raise TypeError("Equalizer bands are fixed at construction")

    def _band_params(self, frequency: float, gain_db: float) -> FilterParameters:
        return FilterParameters(
            kind=self.band_kind,
            sample_rate=self.sample_rate,
            frequency=frequency,
            q_factor=self.q_factor,
            gain_db=gain_db,
        )

    def _check_gain(self, gain_db: float) -> None:
        gain_min, gain_max = self.gain_range
        if not (math.isfinite(gain_db) and gain_min <= gain_db <= gain_max):
            raise InvalidGain(
                f"Invalid gain value {gain_db}, must be in the interval "
                f"[{gain_min}, {gain_max}]"
            )

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._frequencies):
            raise IndexError(
                f"Band index {index} out of range (0..{len(self._frequencies) - 1})"
            )

    @property
    def num_bands(self) -> int:
        return len(self._frequencies)

    @property
    def bands(self) -> List[Tuple[float, float]]:
        return list(zip(self._frequencies, self._gains))

    @property
    def frequencies(self) -> List[float]:
        return list(self._frequencies)

    @property
    def gains(self) -> List[float]:
        return list(self._gains)

    def band_frequency(self, index: int) -> float:
        self._check_index(index)
        return self._frequencies[index]

    def band_gain(self, index: int) -> float:
        self._check_index(index)
        return self._gains[index]

    def set_band_gain(self, index: int, gain_db: float) -> None:
        """
        Change one band's gain.

        The band's coefficients are swapped in place; its history is kept,
        so the change is heard without a reset (and may click).

        Raises:
            IndexError: If index is not a band
            InvalidGain: If gain_db is outside gain_range
        """
        self._check_index(index)
        self._check_gain(gain_db)

        coeffs = derive(self._band_params(self._frequencies[index], gain_db))
        self._stages[index].set_coefficients(coeffs)
        self._gains[index] = float(gain_db)
        logger.debug("%s: band %d (%.0f Hz) -> %.1f dB", self.name, index,
                     self._frequencies[index], gain_db)

    def set_gains(self, gains: Sequence[float]) -> None:
        """
        Set every band gain at once.

        All gains are checked before any band changes.
        """
        if len(gains) != self.num_bands:
            raise ValueError(f"Expected {self.num_bands} gains, got {len(gains)}")
        for gain_db in gains:
            self._check_gain(gain_db)
        for index, gain_db in enumerate(gains):
            self.set_band_gain(index, gain_db)

    def get_state(self) -> dict:
        state = super().get_state()
        state.update({
            "sample_rate": self.sample_rate,
            "q_factor": self.q_factor,
            "band_kind": self.band_kind.value,
            "bands": self.bands,
        })
        return state

    def __repr__(self) -> str:
        bands = ", ".join(f"{f:g}Hz:{g:+g}dB" for f, g in self.bands)
        return f"{self.name}({bands})"


def make_equalizer_10_band(sample_rate: Optional[float] = None,
                           gains: Optional[Sequence[float]] = None,
                           band_kind: FilterKind = FilterKind.PEAK) -> Equalizer:
    """
    Build the 10 band octave equalizer (29 Hz ... 15011 Hz).

    Q and the allowed gain range come from get_config()
    (2*sqrt(2) and [-24, +12] dB unless overridden).

    Args:
        sample_rate: Sample rate in Hz (AUDIO_FILTERS_SAMPLE_RATE if omitted)
        gains: Ten band gains in dB (all 0 dB if omitted)
        band_kind: PEAK or PEAK_EQ

    Returns:
        Equalizer with ten bands
    """
    config = get_config()
    if sample_rate is None:
        sample_rate = config['sample_rate']
    if gains is None:
        gains = [0.0] * len(TEN_BAND_FREQUENCIES)
    if len(gains) != len(TEN_BAND_FREQUENCIES):
        raise ValueError(f"Expected {len(TEN_BAND_FREQUENCIES)} gains, got {len(gains)}")

    return Equalizer(
        sample_rate,
        list(zip(TEN_BAND_FREQUENCIES, gains)),
        q_factor=config['eq_q_factor'],
        gain_range=(config['eq_gain_min_db'], config['eq_gain_max_db']),
        band_kind=band_kind,
    )
