"""
Sample processors: single BiQuad stages and chains of them
"""

from .base import ProcessingBlock
from .biquad_filter import BiquadFilter
from .filter_chain import FilterChain
from .equalizer import Equalizer, make_equalizer_10_band, TEN_BAND_FREQUENCIES

__all__ = [
    'ProcessingBlock',
    'BiquadFilter',
    'FilterChain',
    'Equalizer',
    'make_equalizer_10_band',
    'TEN_BAND_FREQUENCIES',
]
