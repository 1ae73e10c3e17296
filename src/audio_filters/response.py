"""
Frequency and impulse response of filters and chains

Evaluates H(e^jw) directly from coefficients; nothing here runs the
recursion except impulse_response(), which works on a copy.
"""

import copy
from typing import Iterable, List, Union

import numpy as np

from .coefficients import CoefficientSet
from .modules.base import ProcessingBlock
from .modules.biquad_filter import BiquadFilter
from .modules.filter_chain import FilterChain


def frequency_response(coeffs: CoefficientSet, frequencies, sample_rate: float) -> np.ndarray:
    """
    Complex response of one stage.

    H(e^jw) = (b0 + b1 e^-jw + b2 e^-2jw) / (a0 + a1 e^-jw + a2 e^-2jw)

    Args:
        coeffs: Stage coefficients (normalized or not)
        frequencies: Frequencies in Hz (scalar or array)
        sample_rate: Sample rate in Hz

    Returns:
        Complex array, same shape as frequencies
    """
    w = 2.0 * np.pi * np.asarray(frequencies, dtype=np.float64) / sample_rate
    z1 = np.exp(-1j * w)
    z2 = z1 * z1

    num = coeffs.b0 + coeffs.b1 * z1 + coeffs.b2 * z2
    den = coeffs.a0 + coeffs.a1 * z1 + coeffs.a2 * z2
    return num / den


def chain_response(coeff_sets: Iterable[CoefficientSet], frequencies,
                   sample_rate: float) -> np.ndarray:
    """Complex response of cascaded stages (product of stage responses)"""
    h = np.ones_like(np.asarray(frequencies, dtype=np.float64), dtype=np.complex128)
    for coeffs in coeff_sets:
        h = h * frequency_response(coeffs, frequencies, sample_rate)
    return h


def block_coefficients(block: Union[BiquadFilter, FilterChain]) -> List[CoefficientSet]:
    """
    Flatten a filter or (nested) chain into its stage coefficients.

    Raises:
        TypeError: For blocks without BiQuad coefficients
    """
    if isinstance(block, BiquadFilter):
        return [block.coefficients]
    if isinstance(block, FilterChain):
        coeffs = []
        for stage in block:
            coeffs.extend(block_coefficients(stage))
        return coeffs
    raise TypeError(f"No coefficients for {type(block).__name__}")


def block_response(block: Union[BiquadFilter, FilterChain], frequencies,
                   sample_rate: float) -> np.ndarray:
    """Complex response of a filter or chain"""
    return chain_response(block_coefficients(block), frequencies, sample_rate)


def gain_db(h) -> np.ndarray:
    """Magnitude in dB (-inf at exact zeros)"""
    with np.errstate(divide='ignore'):
        return 20.0 * np.log10(np.abs(h))


def phase(h, degrees: bool = False, unwrap: bool = False) -> np.ndarray:
    """
    Phase angle of a response.

    Args:
        h: Complex response
        degrees: Return degrees instead of radians
        unwrap: Remove 2*pi jumps along the last axis
    """
    angle = np.angle(h)
    if unwrap:
        angle = np.unwrap(angle)
    if degrees:
        angle = np.degrees(angle)
    return angle


def log_frequencies(sample_rate: float, num: int = 512, start: float = 20.0) -> np.ndarray:
    """Log spaced sweep from start up to (not including) Nyquist"""
    return np.geomspace(start, sample_rate / 2.0, num, endpoint=False)


def impulse_response(block: ProcessingBlock, length: int = 512) -> np.ndarray:
    """
    Excite a copy of the block with a unit (Dirac) impulse.

    The copy starts from zero state; the caller's block is not touched.

    Args:
        block: Filter or chain
        length: Number of output samples

    Returns:
        float64 array of length samples
    """
    probe = copy.deepcopy(block)
    probe.reset()

    impulse = np.zeros(length, dtype=np.float64)
    if length > 0:
        impulse[0] = 1.0
    return probe.process_buffer(impulse)
