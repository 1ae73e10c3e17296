"""
Unit tests for the cascaded peak-filter Equalizer
"""

import math

import numpy as np
import pytest
from scipy import signal

from audio_filters.coefficients import derive
from audio_filters.errors import InvalidFrequency, InvalidGain
from audio_filters.modules.equalizer import (
    Equalizer,
    TEN_BAND_FREQUENCIES,
    make_equalizer_10_band,
)
from audio_filters.params import FilterKind, FilterParameters
from audio_filters.response import (
    block_coefficients,
    block_response,
    frequency_response,
    gain_db,
    log_frequencies,
)


SAMPLE_RATE = 48000
EQ_Q = 2.0 * math.sqrt(2.0)

# 29 Hz / -10 dB ... 15011 Hz / +12 dB
GAINS = [-10.0, 0.0, -5.0, 5.0, 0.0, -5.0, 0.0, 5.0, 10.0, 12.0]


def textbook_peak_response(frequencies, centre, gain, q_factor=EQ_Q, sample_rate=SAMPLE_RATE):
    """Unnormalized cookbook peak written out longhand, evaluated with scipy"""
    big_a = 10.0 ** (gain / 40.0)
    w0 = 2.0 * np.pi * centre / sample_rate
    alpha = np.sin(w0) / (2.0 * q_factor)
    b = [1.0 + alpha * big_a, -2.0 * np.cos(w0), 1.0 - alpha * big_a]
    a = [1.0 + alpha / big_a, -2.0 * np.cos(w0), 1.0 - alpha / big_a]
    _, h = signal.freqz(b, a, worN=frequencies, fs=sample_rate)
    return h


@pytest.fixture
def eq():
    return make_equalizer_10_band(SAMPLE_RATE, GAINS)


class TestConstruction:

    def test_ten_band_layout(self, eq):
        assert eq.num_bands == 10
        assert len(eq) == 10
        assert eq.frequencies == list(TEN_BAND_FREQUENCIES)
        assert eq.gains == GAINS
        assert eq.q_factor == pytest.approx(EQ_Q)
        assert eq.band_frequency(6) == 1889.0
        assert eq.band_gain(9) == 12.0

    def test_bands_are_cookbook_peaks(self, eq):
        for stage, (frequency, gain) in zip(eq, eq.bands):
            expected = derive(FilterParameters(FilterKind.PEAK, SAMPLE_RATE, frequency,
                                               q_factor=EQ_Q, gain_db=gain))
            assert stage.coefficients == expected

    def test_custom_layout(self):
        """Band tables are plain data"""
        eq = Equalizer(44100, [(100.0, 3.0), (1000.0, -3.0), (10000.0, 1.5)], q_factor=1.0)
        assert eq.bands == [(100.0, 3.0), (1000.0, -3.0), (10000.0, 1.5)]
        assert eq.sample_rate == 44100

    def test_default_gains_are_flat(self):
        eq = make_equalizer_10_band(SAMPLE_RATE)
        assert eq.gains == [0.0] * 10
        x = np.random.default_rng(0).standard_normal(2048)
        np.testing.assert_allclose(eq.process_buffer(x), x, atol=1e-9)

    def test_band_above_nyquist(self):
        # 15011 Hz does not fit below 22050 / 2
        with pytest.raises(InvalidFrequency):
            make_equalizer_10_band(22050)

    def test_invalid_construction(self):
        with pytest.raises(ValueError):
            Equalizer(SAMPLE_RATE, [])
        with pytest.raises(ValueError):
            Equalizer(SAMPLE_RATE, [(1000.0, 0.0)], gain_range=(12.0, -12.0))
        with pytest.raises(ValueError):
            Equalizer(SAMPLE_RATE, [(1000.0, 0.0)], band_kind=FilterKind.LOWPASS)
        with pytest.raises(InvalidGain):
            Equalizer(SAMPLE_RATE, [(1000.0, 30.0)])
        with pytest.raises(ValueError):
            make_equalizer_10_band(SAMPLE_RATE, [0.0] * 9)

    def test_bands_are_fixed(self, eq):
        with pytest.raises(TypeError):
            eq.add_stage(eq[0])


class TestBandGain:

    def test_set_band_gain(self, eq):
        eq.set_band_gain(3, -12.0)
        assert eq.band_gain(3) == -12.0
        expected = derive(FilterParameters(FilterKind.PEAK, SAMPLE_RATE, 237.0,
                                           q_factor=EQ_Q, gain_db=-12.0))
        assert eq[3].coefficients == expected

    def test_set_band_gain_keeps_history(self, eq):
        eq.process_buffer(np.ones(100))
        before = eq[5].get_state()["state_vars"]
        eq.set_band_gain(5, 6.0)
        assert eq[5].get_state()["state_vars"] == before

    def test_gain_limits(self, eq):
        eq.set_band_gain(0, -24.0)
        eq.set_band_gain(0, 12.0)
        with pytest.raises(InvalidGain):
            eq.set_band_gain(0, 12.5)
        with pytest.raises(InvalidGain):
            eq.set_band_gain(0, -30.0)
        with pytest.raises(InvalidGain):
            eq.set_band_gain(0, float('nan'))
        assert eq.band_gain(0) == 12.0

    def test_band_index(self, eq):
        with pytest.raises(IndexError):
            eq.set_band_gain(10, 0.0)
        with pytest.raises(IndexError):
            eq.band_frequency(-1)

    def test_set_gains_is_all_or_nothing(self, eq):
        with pytest.raises(InvalidGain):
            eq.set_gains([0.0] * 9 + [40.0])
        assert eq.gains == GAINS

        eq.set_gains([1.0] * 10)
        assert eq.gains == [1.0] * 10

    def test_configured_gain_range(self, monkeypatch):
        monkeypatch.setenv("AUDIO_FILTERS_EQ_GAIN_MAX", "6")
        eq = make_equalizer_10_band(SAMPLE_RATE)
        assert eq.gain_range == (-24.0, 6.0)
        with pytest.raises(InvalidGain):
            eq.set_band_gain(0, 10.0)


class TestResponse:

    def test_chain_response_matches_freqz(self, eq):
        """Cascade response equals the product of scipy's per-section responses"""
        freqs = log_frequencies(SAMPLE_RATE, num=256)
        expected = np.ones(len(freqs), dtype=complex)
        for coeffs in block_coefficients(eq):
            _, h = signal.freqz(coeffs.b, coeffs.a, worN=freqs, fs=SAMPLE_RATE)
            expected *= h

        np.testing.assert_allclose(block_response(eq, freqs, SAMPLE_RATE), expected,
                                   rtol=1e-9, atol=1e-12)

    def test_designed_gain_at_own_centre(self, eq):
        """Each cookbook peak hits its designed gain exactly at its centre"""
        for stage, (frequency, gain) in zip(eq, eq.bands):
            h = frequency_response(stage.coefficients, frequency, SAMPLE_RATE)
            assert gain_db(h) == pytest.approx(gain, abs=1e-9)

    def test_band_centre_levels(self, eq):
        """Combined dB at every band centre, against the textbook peak formula"""
        centres = np.array(TEN_BAND_FREQUENCIES)
        combined = gain_db(block_response(eq, centres, SAMPLE_RATE))

        expected = np.ones(len(centres), dtype=complex)
        for frequency, gain in zip(TEN_BAND_FREQUENCIES, GAINS):
            expected *= textbook_peak_response(centres, frequency, gain)

        np.testing.assert_allclose(combined, gain_db(expected), rtol=0, atol=1e-9)

    def test_leakage_regression(self, eq):
        """Neighbouring bands leak into each centre"""
        combined = gain_db(block_response(eq, np.array(TEN_BAND_FREQUENCIES), SAMPLE_RATE))
        leakage = combined - np.array(GAINS)
        # Neighbours are an octave away; leakage stays small but nonzero
        assert np.all(np.abs(leakage) < 3.0)
        assert np.any(np.abs(leakage) > 0.01)

    def test_time_domain_matches_transfer_function(self, eq):
        """A steady sinusoid comes out scaled by |H| at its frequency"""
        frequency = 1889.0
        n = SAMPLE_RATE
        t = np.arange(n) / SAMPLE_RATE
        x = np.sin(2 * np.pi * frequency * t)

        y = eq.process_buffer(x)

        h = block_response(eq, frequency, SAMPLE_RATE)
        steady = np.abs(h) * np.sin(2 * np.pi * frequency * t + np.angle(h))
        np.testing.assert_allclose(y[-4800:], steady[-4800:], atol=1e-6)

    def test_matches_sosfilt(self, eq):
        sos = np.array([list(c.b) + list(c.a) for c in block_coefficients(eq)])
        x = np.random.default_rng(5).standard_normal(8192)
        np.testing.assert_allclose(eq.process_buffer(x), signal.sosfilt(sos, x),
                                   rtol=1e-7, atol=1e-9)


class TestConstantQBands:

    def test_peak_eq_bands(self):
        eq = make_equalizer_10_band(SAMPLE_RATE, GAINS, band_kind=FilterKind.PEAK_EQ)
        assert eq.band_kind is FilterKind.PEAK_EQ
        for stage, (frequency, gain) in zip(eq, eq.bands):
            h = frequency_response(stage.coefficients, frequency, SAMPLE_RATE)
            assert gain_db(h) == pytest.approx(gain, abs=1e-6)
