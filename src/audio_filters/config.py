"""
Configuration for audio_filters
Defaults come from AUDIO_FILTERS_* environment variables
"""

import logging
import math
import os
from typing import Dict, Any

# Butterworth response for a single second order section
DEFAULT_Q = 1.0 / math.sqrt(2.0)

# Constant-Q value for octave spaced equalizer bands (~2.828)
DEFAULT_EQ_Q = 2.0 * math.sqrt(2.0)

DEFAULT_SAMPLE_RATE = 48000

ENV_PREFIX = "AUDIO_FILTERS_"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_float(name: str, default: float) -> float:
    key = ENV_PREFIX + name
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{key} must be a number, got {value!r}") from e


def _env_int(name: str, default: int) -> int:
    key = ENV_PREFIX + name
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{key} must be an integer, got {value!r}") from e


def get_config() -> Dict[str, Any]:
    """Get parsed configuration values"""
    config = {
        # Filters
        'sample_rate': _env_int('SAMPLE_RATE', DEFAULT_SAMPLE_RATE),
        'q_factor': _env_float('Q', DEFAULT_Q),

        # Equalizer
        'eq_q_factor': _env_float('EQ_Q', DEFAULT_EQ_Q),
        'eq_gain_min_db': _env_float('EQ_GAIN_MIN', -24.0),
        'eq_gain_max_db': _env_float('EQ_GAIN_MAX', 12.0),

        # Debug
        'log_level': os.environ.get(ENV_PREFIX + 'LOG_LEVEL', 'INFO').strip().upper(),
    }

    return config


def setup_logging(level: str = None) -> None:
    """
    Configure root logging for applications embedding the filters.

    Library modules only create loggers; call this once from the host
    application if no other logging configuration is in place.

    Args:
        level: Level name, defaults to AUDIO_FILTERS_LOG_LEVEL (INFO)
    """
    if level is None:
        level = get_config()['log_level']
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
