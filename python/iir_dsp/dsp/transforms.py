# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
Frequency transforms and the bilinear transform.

The analog prototypes are designed for a cutoff of 1 rad/s. These
functions move a prototype layout to the requested shape and cutoff in
the s-plane, then map it to the z-plane with the bilinear transform.
All cutoff frequencies are prewarped so the digital filter has its
edges exactly at the requested frequencies.

Highpass, bandstop and highshelf shapes are made by the same
transforms as their low counterparts. A highshelf is a lowshelf put
through the highpass transform, and a bandshelf is a lowshelf put
through the bandpass transform.
"""

import cmath
import math

from iir_dsp.dsp import utils as utils
from iir_dsp.dsp.errors import ConfigurationError
from iir_dsp.dsp.layout import INFINITY, is_infinite, layout

SHAPES = ("lowpass", "highpass", "bandpass", "bandstop", "lowshelf", "highshelf", "bandshelf")
BAND_SHAPES = ("bandpass", "bandstop", "bandshelf")
SHELF_SHAPES = ("lowshelf", "highshelf", "bandshelf")


def check_shape(shape: str) -> str:
    """Check shape is one of SHAPES."""
    if shape not in SHAPES:
        raise ConfigurationError(f"unknown filter shape {shape!r}, expected one of {SHAPES}")
    return shape


def prewarp(freq: float, fs: float) -> float:
    """Return the analog frequency in rad/s that the bilinear transform
    maps to freq Hz.
    """
    return 2 * fs * math.tan(math.pi * freq / fs)


def _map_layout(analog: layout, mapping, domain="analog") -> layout:
    # apply a one to one point mapping to every pole and zero
    out = layout(analog.n_poles, domain)
    for pair in analog:
        if pair.is_single:
            out.add(mapping(pair.poles[0]), mapping(pair.zeros[0]))
        else:
            out.add_pair(
                (mapping(pair.poles[0]), mapping(pair.poles[1])),
                (mapping(pair.zeros[0]), mapping(pair.zeros[1])),
            )
    return out


def lowpass_transform(analog: layout, wc: float) -> layout:
    """Scale a normalised layout to a cutoff of wc rad/s, s -> s/wc."""

    def scale(c):
        return INFINITY if is_infinite(c) else c * wc

    out = _map_layout(analog, scale)
    out.set_normal(analog.normal_w * wc, analog.normal_gain)
    return out


def highpass_transform(analog: layout, wc: float) -> layout:
    """Turn a normalised lowpass layout into a highpass with a cutoff
    of wc rad/s, s -> wc/s. DC and infinity swap places.
    """

    def invert(c):
        if is_infinite(c):
            return 0j
        if c == 0:
            return INFINITY
        return wc / c

    out = _map_layout(analog, invert)
    out.set_normal(math.inf if analog.normal_w == 0 else 0.0, analog.normal_gain)
    return out


def _band_edges(fs, low, high):
    w1 = prewarp(low, fs)
    w2 = prewarp(high, fs)
    return math.sqrt(w1 * w2), w2 - w1


def _far_edge(w0, fs):
    # whichever of DC and Nyquist is further from the band centre
    return math.inf if w0 < 2 * fs else 0.0


def _quadratic_roots(b, c):
    # roots of s^2 - b*s + c with the small root found from the product
    d = cmath.sqrt(b * b - 4 * c)
    r1 = (b + d) / 2 if abs(b + d) >= abs(b - d) else (b - d) / 2
    if r1 == 0:
        return 0j, 0j
    return r1, c / r1


def _map_pairs(analog: layout, mapping) -> layout:
    # each point maps to two points, so each pair becomes two pairs
    out = layout(2 * analog.n_poles)
    for pair in analog:
        if pair.is_single:
            out.add_pair(mapping(pair.poles[0]), mapping(pair.zeros[0]))
        else:
            s1, s2 = mapping(pair.poles[0])
            t1, t2 = mapping(pair.zeros[0])
            out.add_conjugate_pairs(s1, t1)
            out.add_conjugate_pairs(s2, t2)
    return out


def bandpass_transform(analog: layout, fs: float, low: float, high: float) -> layout:
    """
    Turn a normalised lowpass layout into a bandpass between low and
    high Hz, s -> (s^2 + w0^2)/(s*BW).

    Each pole becomes two, so the order doubles. DC of the prototype
    moves to the band centre.
    """
    w0, bw = _band_edges(fs, low, high)

    def band(c):
        if is_infinite(c):
            return 0j, INFINITY
        return _quadratic_roots(c * bw, w0 * w0)

    out = _map_pairs(analog, band)
    out.set_normal(w0 if analog.normal_w == 0 else _far_edge(w0, fs), analog.normal_gain)
    return out


def bandstop_transform(analog: layout, fs: float, low: float, high: float) -> layout:
    """
    Turn a normalised lowpass layout into a bandstop between low and
    high Hz, s -> s*BW/(s^2 + w0^2).

    Each pole becomes two, so the order doubles. Infinity of the
    prototype moves to the band centre.
    """
    w0, bw = _band_edges(fs, low, high)

    def stop(c):
        if is_infinite(c):
            return complex(0, w0), complex(0, -w0)
        return _quadratic_roots(bw / c, w0 * w0)

    out = _map_pairs(analog, stop)
    out.set_normal(_far_edge(w0, fs) if analog.normal_w == 0 else w0, analog.normal_gain)
    return out


def bilinear_transform(analog: layout, fs: float) -> layout:
    """
    Map an s-plane layout to the z-plane, z = (2fs + s)/(2fs - s).

    Infinity maps to z = -1. The gain of the digital layout is set so
    the magnitude at the reference frequency is the layout's
    ``normal_gain``.

    Raises
    ------
    ConfigurationError
        If the response at the reference frequency is zero or not
        finite, so can't be normalised.
    """

    def bilinear(c):
        if is_infinite(c):
            return complex(-1, 0)
        return (2 * fs + c) / (2 * fs - c)

    digital = _map_layout(analog, bilinear, "digital")
    digital.set_normal(2 * math.atan(analog.normal_w / (2 * fs)), analog.normal_gain)

    z = cmath.exp(1j * digital.normal_w)
    response = complex(1, 0)
    for pole, zero in zip(digital.poles(), digital.zeros()):
        response *= (z - zero) / (z - pole)

    magnitude = abs(response)
    if magnitude == 0 or not math.isfinite(magnitude):
        raise ConfigurationError(
            f"can't normalise the response at {digital.normal_w:.4g} rad/sample, "
            "the filter has a pole or zero there"
        )
    digital.gain = digital.normal_gain / magnitude
    return digital


def analog_to_digital(
    analog: layout,
    shape: str,
    fs: float,
    filter_freq: float,
    width_freq: float | None = None,
) -> layout:
    """
    Move a normalised prototype to the requested shape and frequency,
    then map it to the z-plane.

    Parameters
    ----------
    analog : layout
        The normalised lowpass or lowshelf prototype.
    shape : str
        One of SHAPES. Shelf shapes expect a lowshelf prototype.
    fs : float
        Sampling frequency in Hz.
    filter_freq : float
        The cutoff frequency in Hz, or the band centre for band shapes.
    width_freq : float, optional
        The width of the band in Hz, only used for band shapes.

    Returns
    -------
    layout
        The digital layout, with the normalisation gain set.
    """
    check_shape(shape)
    if shape in BAND_SHAPES:
        if width_freq is None:
            raise ConfigurationError(f"{shape} filters need a width_freq")
        low, high = utils.check_band(filter_freq, width_freq, fs)
        if shape == "bandstop":
            moved = bandstop_transform(analog, fs, low, high)
        else:
            moved = bandpass_transform(analog, fs, low, high)
    else:
        wc = prewarp(utils.check_filter_freq(filter_freq, fs), fs)
        if shape in ("highpass", "highshelf"):
            moved = highpass_transform(analog, wc)
        else:
            moved = lowpass_transform(analog, wc)

    return bilinear_transform(moved, fs)
