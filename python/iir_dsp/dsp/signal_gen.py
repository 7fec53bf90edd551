# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Test signals for exercising filters.

All signals are floating point, scaled between -1 and 1.
"""

import numpy as np
import scipy.signal as spsig


def impulse(length: int, index: int = 0, amplitude: float = 1.0) -> np.ndarray:
    """
    Generate a unit impulse sequence.

    The sequence is ``amplitude`` at ``index`` and 0 elsewhere. Running
    it through a filter's ``process`` method gives the filter's impulse
    response, delayed by ``index`` samples.

    Parameters
    ----------
    length : int
        The number of samples in the sequence.
    index : int, optional
        The position of the impulse, by default 0.
    amplitude : float, optional
        The height of the impulse, by default 1.0.

    Returns
    -------
    np.ndarray
        The impulse sequence.
    """
    if not 0 <= index < length:
        raise ValueError(f"impulse index {index} is outside a sequence of length {length}")
    signal = np.zeros(length)
    signal[index] = amplitude
    return signal


def log_chirp(
    fs: float, length: float, amplitude: float, start: float = 20, stop: float = 20000
) -> np.ndarray:
    """
    Generate a logarithmic sine sweep.

    Parameters
    ----------
    fs : float
        The sample rate of the signal.
    length : float
        The duration of the signal in seconds.
    amplitude : float
        The amplitude of the signal.
    start : float, optional
        The starting frequency of the sweep in Hz. Default is 20 Hz.
    stop : float, optional
        The ending frequency of the sweep in Hz, limited to the Nyquist
        frequency. Default is 20000 Hz.

    Returns
    -------
    np.ndarray
        The sweep.
    """
    stop = min(stop, fs / 2)
    t = np.arange(int(fs * length)) / fs
    return amplitude * spsig.chirp(t, start, length, stop, "log", phi=-90)


def white_noise(fs: float, length: float, amplitude: float, normal: bool = True) -> np.ndarray:
    """
    Generate a white noise signal.

    Parameters
    ----------
    fs : float
        The sample rate of the signal.
    length : float
        The duration of the signal in seconds.
    amplitude : float
        The amplitude of the signal.
    normal : bool, optional
        If True, generate normally distributed white noise. If False,
        generate uniformly distributed white noise. Default is True.

    Returns
    -------
    np.ndarray
        The noise.
    """
    if normal:
        # normally distributed noise is unbounded, clip at 6 sigma
        sigma = 6
        signal = 2 / sigma * amplitude * np.random.randn(round(length * fs))
        return np.clip(signal, -1, 1)
    return amplitude * (2 * np.random.rand(round(length * fs)) - 1)
