# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Utility functions used by DSP blocks."""

import math
import numbers

import numpy as np

from iir_dsp.dsp.errors import ConfigurationError

FLT_MIN = np.finfo(float).tiny


def db(input):
    """Convert an amplitude to decibels (20*log10(abs(x)))."""
    out = 20 * np.log10(np.abs(input) + FLT_MIN)
    return out


def db_pow(input):
    """Convert a power to decibels (10*log10(abs(x)))."""
    out = 10 * np.log10(np.abs(input) + FLT_MIN)
    return out


def db2gain(input):
    """Convert from decibels to amplitude (10^(x/20))."""
    out = 10 ** (input / 20)
    return out


def frame_signal(signal, buffer_len, step_size):
    """Split a signal into overlapping frames. Each frame is buffer_len
    long, and there are step_size samples between frames.
    """
    n_samples = signal.shape[1]
    n_frames = int(np.floor((n_samples - buffer_len) / step_size) + 1)
    output = []

    for n in range(n_frames):
        output.append(np.copy(signal[:, n * step_size : n * step_size + buffer_len]))

    return output


def check_finite(value, name: str) -> float:
    """Check a parameter is a finite real number, and return it as a
    float.

    Raises
    ------
    ConfigurationError
        If the value is not a real number, or is NaN or infinite.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value}")
    return value


def check_positive(value, name: str) -> float:
    """Check a parameter is finite and greater than zero."""
    value = check_finite(value, name)
    if value <= 0:
        raise ConfigurationError(f"{name} must be greater than 0, got {value}")
    return value


def check_order(order, max_order: int) -> int:
    """Check the filter order is an integer in ``[1, max_order]``."""
    if isinstance(order, bool) or not isinstance(order, numbers.Integral):
        raise ConfigurationError(f"order must be an integer, got {order!r}")
    if not 1 <= order <= max_order:
        raise ConfigurationError(f"order must be between 1 and {max_order}, got {order}")
    return int(order)


def check_filter_freq(filter_freq, fs) -> float:
    """Check a filter frequency lies strictly between 0 and fs/2.

    Raises
    ------
    ConfigurationError
        If the frequency is <= 0 or >= the Nyquist frequency.
    """
    fs = check_positive(fs, "fs")
    filter_freq = check_finite(filter_freq, "filter_freq")
    if not 0 < filter_freq < fs / 2:
        raise ConfigurationError(
            f"filter_freq must be between 0 and fs/2 ({fs / 2:g} Hz), got {filter_freq:g} Hz"
        )
    return filter_freq


def check_band(centre_freq, width_freq, fs) -> tuple[float, float]:
    """Check a band given by its centre and width fits between 0 and
    fs/2 without the edges crossing over.

    Returns
    -------
    tuple[float, float]
        The lower and upper band edges in Hz.
    """
    centre_freq = check_filter_freq(centre_freq, fs)
    width_freq = check_positive(width_freq, "width_freq")

    low = centre_freq - width_freq / 2
    high = centre_freq + width_freq / 2
    if low <= 0 or high >= fs / 2:
        raise ConfigurationError(
            f"band edges ({low:g} Hz, {high:g} Hz) must lie between 0 and fs/2 ({fs / 2:g} Hz)"
        )

    return low, high


def check_count(value, name: str) -> int:
    """Check a parameter is an integer of at least 1, such as a channel
    count or a maximum order.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {value}")
    return int(value)
