# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
Second order section cascades.

A cascade holds the normalised coefficients of up to ``max_stages``
biquad sections. Each section is stored as ``[b0, b1, b2, a0, a1, a2]``
with a0 = 1, which is the same row layout as ``scipy.signal`` uses for
its ``sos`` arrays. The overall gain of a designed filter is folded into
the b coefficients of the first section.
"""

import math

import numpy as np
import scipy.signal as spsig

from iir_dsp.dsp.errors import ConfigurationError, InstabilityRisk
from iir_dsp.dsp.layout import layout

BYPASS = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


def normalise_sos(coeffs) -> list[float]:
    """
    Normalise a section so that a0 = 1.

    Parameters
    ----------
    coeffs : list[float]
        The section coefficients ``[b0, b1, b2, a0, a1, a2]``.

    Returns
    -------
    list[float]
        The coefficients divided by a0.

    Raises
    ------
    ConfigurationError
        If there aren't 6 coefficients, or a0 is 0.
    """
    coeffs = [float(c) for c in coeffs]
    if len(coeffs) != 6:
        raise ConfigurationError(f"a biquad section needs 6 coefficients, got {len(coeffs)}")
    a0 = coeffs[3]
    if a0 == 0:
        raise ConfigurationError("a0 of a biquad section can't be 0")
    return [c / a0 for c in coeffs]


def layout_to_sos(digital: layout) -> list[list[float]]:
    """
    Convert a z-plane layout to second order sections.

    Each pole/zero pair becomes one section. A single real pole and zero
    becomes a first order section with b2 = a2 = 0. The layout gain
    scales the first section.
    """
    if digital.domain != "digital":
        raise ValueError("only z-plane layouts can be turned into sections")

    sos = []
    for pair in digital:
        if pair.is_single:
            pole = pair.poles[0]
            zero = pair.zeros[0]
            b = [1.0, -zero.real, 0.0]
            a = [1.0, -pole.real, 0.0]
        else:
            p1, p2 = pair.poles
            z1, z2 = pair.zeros
            b = [1.0, -(z1 + z2).real, (z1 * z2).real]
            a = [1.0, -(p1 + p2).real, (p1 * p2).real]
        sos.append(b + a)

    if sos:
        sos[0][:3] = [c * digital.gain for c in sos[0][:3]]
    return sos


def check_stability(sos) -> None:
    """
    Check a list of normalised sections can be run safely.

    Raises
    ------
    InstabilityRisk
        If any coefficient is not finite, or any section has a pole on
        or outside the unit circle.
    """
    for n, section in enumerate(sos):
        if not all(math.isfinite(c) for c in section):
            raise InstabilityRisk(f"section {n} has non-finite coefficients {list(section)}")
        poles = np.roots(section[3:])
        if np.any(np.abs(poles) >= 1.0):
            raise InstabilityRisk(
                f"section {n} has poles on or outside the unit circle: {poles}"
            )


class sos_cascade:
    """
    Storage for the coefficients of a cascade of biquad sections.

    The storage is allocated once for ``max_stages`` sections. Updating
    the coefficients validates the whole new set before any of it is
    written, so a failed update leaves the previous coefficients in
    place.

    Parameters
    ----------
    max_stages : int
        The largest number of sections the cascade can hold.

    Attributes
    ----------
    coeffs : list[list[float]]
        One row of 6 coefficients per section. Rows past ``n_stages``
        are bypass sections.
    n_stages : int
        The number of sections in use.
    """

    def __init__(self, max_stages: int):
        if max_stages < 1:
            raise ConfigurationError(f"max_stages must be at least 1, got {max_stages}")
        self.max_stages = max_stages
        self.coeffs = [list(BYPASS) for _ in range(max_stages)]
        self.n_stages = 0

    def set_sos(self, sos_list):
        """Validate and store a new list of sections."""
        if len(sos_list) > self.max_stages:
            raise ConfigurationError(
                f"cascade can hold at most {self.max_stages} sections, got {len(sos_list)}"
            )
        new_sos = [normalise_sos(section) for section in sos_list]
        check_stability(new_sos)

        for n in range(self.max_stages):
            self.coeffs[n][:] = new_sos[n] if n < len(new_sos) else BYPASS
        self.n_stages = len(new_sos)

    def set_layout(self, digital: layout):
        """Store the sections for a z-plane layout."""
        self.set_sos(layout_to_sos(digital))

    @property
    def sos(self) -> np.ndarray:
        """The sections in use as an (n_stages, 6) array."""
        return np.array(self.coeffs[: self.n_stages], dtype=float).reshape(-1, 6)

    def response(self, w) -> np.ndarray:
        """
        Evaluate the complex response at normalised frequencies w in
        rad/sample.
        """
        w = np.atleast_1d(np.asarray(w, dtype=float))
        z_1 = np.exp(-1j * w)
        z_2 = z_1 * z_1
        h = np.ones_like(z_1)
        for b0, b1, b2, a0, a1, a2 in self.coeffs[: self.n_stages]:
            h *= (b0 + b1 * z_1 + b2 * z_2) / (a0 + a1 * z_1 + a2 * z_2)
        return h

    def freq_response(self, fs: float, nfft: int = 512):
        """
        Calculate the frequency response of the cascade.

        Returns
        -------
        tuple
            The frequencies in Hz and the complex response.
        """
        f, h_all = spsig.freqz(1.0, 1.0, worN=nfft, fs=fs)
        for b0, b1, b2, a0, a1, a2 in self.coeffs[: self.n_stages]:
            _, h = spsig.freqz([b0, b1, b2], [a0, a1, a2], worN=nfft, fs=fs)
            h_all = h_all * h
        return f, h_all
