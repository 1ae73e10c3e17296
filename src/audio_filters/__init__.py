"""
Audio Filters - BiQuad IIR filters for 1-D sampled signals
Low-pass, high-pass, band-pass, all-pass, peak, shelves, notch and a
cascaded parametric equalizer (RBJ Audio-EQ-Cookbook)
"""

__version__ = "0.1.0"

from .errors import (
    FilterError,
    InvalidSampleRate,
    InvalidFrequency,
    InvalidQFactor,
    InvalidGain,
    InvalidShelfSlope,
    InvalidFilterKind,
)
from .params import FilterKind, FilterParameters
from .coefficients import CoefficientSet, derive, derive_unnormalized, available_kinds
from .modules import (
    ProcessingBlock,
    BiquadFilter,
    FilterChain,
    Equalizer,
    make_equalizer_10_band,
)

__all__ = [
    'FilterError', 'InvalidSampleRate', 'InvalidFrequency', 'InvalidQFactor',
    'InvalidGain', 'InvalidShelfSlope', 'InvalidFilterKind',
    'FilterKind', 'FilterParameters',
    'CoefficientSet', 'derive', 'derive_unnormalized', 'available_kinds',
    'ProcessingBlock', 'BiquadFilter', 'FilterChain', 'Equalizer',
    'make_equalizer_10_band',
]
