"""
Convenience builders, one per filter kind

    >>> lowpass = make_lowpass(1000, 48000)
    >>> y = lowpass.process(1.0)

q_factor defaults to AUDIO_FILTERS_Q (1/sqrt(2), Butterworth) when omitted.
"""

from typing import Optional

from .config import get_config
from .modules.biquad_filter import BiquadFilter
from .params import FilterKind


def _build(kind: FilterKind, frequency: float, sample_rate: float,
           q_factor: Optional[float], gain_db: float = 0.0,
           shelf_slope: Optional[float] = None) -> BiquadFilter:
    if q_factor is None:
        q_factor = get_config()['q_factor']
    return BiquadFilter.design(kind, sample_rate, frequency, q_factor=q_factor,
                               gain_db=gain_db, shelf_slope=shelf_slope)


def make_lowpass(frequency: float, sample_rate: float,
                 q_factor: Optional[float] = None) -> BiquadFilter:
    return _build(FilterKind.LOWPASS, frequency, sample_rate, q_factor)


def make_highpass(frequency: float, sample_rate: float,
                  q_factor: Optional[float] = None) -> BiquadFilter:
    return _build(FilterKind.HIGHPASS, frequency, sample_rate, q_factor)


def make_bandpass(frequency: float, sample_rate: float,
                  q_factor: Optional[float] = None) -> BiquadFilter:
    return _build(FilterKind.BANDPASS, frequency, sample_rate, q_factor)


def make_allpass(frequency: float, sample_rate: float,
                 q_factor: Optional[float] = None) -> BiquadFilter:
    return _build(FilterKind.ALLPASS, frequency, sample_rate, q_factor)


def make_notch(frequency: float, sample_rate: float,
               q_factor: Optional[float] = None) -> BiquadFilter:
    return _build(FilterKind.NOTCH, frequency, sample_rate, q_factor)


def make_peak(frequency: float, sample_rate: float, gain_db: float,
              q_factor: Optional[float] = None) -> BiquadFilter:
    return _build(FilterKind.PEAK, frequency, sample_rate, q_factor, gain_db)


def make_peak_eq_constant_q(frequency: float, sample_rate: float, gain_db: float,
                            q_factor: Optional[float] = None) -> BiquadFilter:
    """Constant-Q peaking EQ, gain taken at -3 dB like an analog EQ"""
    return _build(FilterKind.PEAK_EQ, frequency, sample_rate, q_factor, gain_db)


def make_lowshelf(frequency: float, sample_rate: float, gain_db: float,
                  q_factor: Optional[float] = None,
                  shelf_slope: Optional[float] = None) -> BiquadFilter:
    return _build(FilterKind.LOWSHELF, frequency, sample_rate, q_factor,
                  gain_db, shelf_slope)


def make_highshelf(frequency: float, sample_rate: float, gain_db: float,
                   q_factor: Optional[float] = None,
                   shelf_slope: Optional[float] = None) -> BiquadFilter:
    return _build(FilterKind.HIGHSHELF, frequency, sample_rate, q_factor,
                  gain_db, shelf_slope)
