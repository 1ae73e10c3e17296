"""
Unit tests for filter parameter records
"""

import unittest

from audio_filters.config import DEFAULT_Q
from audio_filters.errors import InvalidFilterKind, InvalidFrequency, InvalidShelfSlope
from audio_filters.params import FilterKind, FilterParameters


class TestFilterKind(unittest.TestCase):

    def test_parse_names(self):
        self.assertIs(FilterKind.parse("lowpass"), FilterKind.LOWPASS)
        self.assertIs(FilterKind.parse(" HighShelf "), FilterKind.HIGHSHELF)
        self.assertIs(FilterKind.parse(FilterKind.NOTCH), FilterKind.NOTCH)

    def test_unknown_name(self):
        with self.assertRaises(InvalidFilterKind):
            FilterKind.parse("butterworth")

    def test_gain_kinds(self):
        self.assertTrue(FilterKind.PEAK.uses_gain)
        self.assertTrue(FilterKind.LOWSHELF.uses_gain)
        self.assertFalse(FilterKind.LOWPASS.uses_gain)
        self.assertTrue(FilterKind.HIGHSHELF.is_shelf)
        self.assertFalse(FilterKind.PEAK.is_shelf)


class TestFilterParameters(unittest.TestCase):

    def test_defaults(self):
        p = FilterParameters(kind="lowpass", sample_rate=48000, frequency=1000.0)
        self.assertIs(p.kind, FilterKind.LOWPASS)
        self.assertEqual(p.q_factor, DEFAULT_Q)
        self.assertEqual(p.gain_db, 0.0)
        self.assertIsNone(p.shelf_slope)
        self.assertEqual(p.nyquist, 24000.0)

    def test_unknown_kind_rejected_at_construction(self):
        with self.assertRaises(InvalidFilterKind):
            FilterParameters(kind="comb", sample_rate=48000, frequency=1000.0)

    def test_validate_returns_self(self):
        p = FilterParameters(kind=FilterKind.PEAK, sample_rate=44100, frequency=440.0, gain_db=3.0)
        self.assertIs(p.validate(), p)

    def test_validate_nyquist(self):
        p = FilterParameters(kind=FilterKind.LOWPASS, sample_rate=44100, frequency=22050.0)
        with self.assertRaises(InvalidFrequency):
            p.validate()

    def test_validate_shelf_slope(self):
        p = FilterParameters(kind=FilterKind.LOWSHELF, sample_rate=44100,
                             frequency=200.0, shelf_slope=0.0)
        with self.assertRaises(InvalidShelfSlope):
            p.validate()

    def test_replace(self):
        p = FilterParameters(kind=FilterKind.PEAK, sample_rate=48000, frequency=1000.0)
        louder = p.replace(gain_db=6.0)
        self.assertEqual(louder.gain_db, 6.0)
        self.assertEqual(p.gain_db, 0.0)
        self.assertEqual(louder.frequency, p.frequency)

    def test_frozen(self):
        p = FilterParameters(kind=FilterKind.PEAK, sample_rate=48000, frequency=1000.0)
        with self.assertRaises(AttributeError):
            p.frequency = 2000.0

    def test_serialization(self):
        p = FilterParameters(kind=FilterKind.HIGHSHELF, sample_rate=48000,
                             frequency=8000.0, gain_db=-4.5, shelf_slope=0.8)
        data = p.to_dict()
        self.assertEqual(data["kind"], "highshelf")
        self.assertEqual(FilterParameters.from_dict(data), p)

    def test_from_dict_defaults(self):
        p = FilterParameters.from_dict({"kind": "bandpass", "sample_rate": 8000, "frequency": 440})
        self.assertIs(p.kind, FilterKind.BANDPASS)
        self.assertEqual(p.q_factor, DEFAULT_Q)


if __name__ == '__main__':
    unittest.main()
