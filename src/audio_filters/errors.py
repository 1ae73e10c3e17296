"""
Filter errors

All configuration problems are reported when coefficients are derived
(or when an equalizer band is changed). Processing never raises.

FilterError subclasses ValueError so existing `except ValueError`
handlers keep catching bad parameters.
"""


class FilterError(ValueError):
    """Base class for invalid filter configuration"""


class InvalidSampleRate(FilterError):
    """Sample rate is not a positive, finite number"""


class InvalidFrequency(FilterError):
    """Frequency is not strictly between 0 Hz and Nyquist"""


class InvalidQFactor(FilterError):
    """Q-factor is not a positive, finite number"""


class InvalidGain(FilterError):
    """Gain is not finite, or falls outside an allowed range"""


class InvalidShelfSlope(FilterError):
    """Shelf slope gives no real, positive shelf alpha"""


class InvalidFilterKind(FilterError):
    """Unknown filter kind name"""
