# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
Elliptic (Cauer) prototypes and the Jacobi elliptic functions they need.

The elliptic functions are evaluated with the descending Landen
transformation, which converges quadratically, so a handful of
iterations reach machine precision for any modulus below 1. The design
equations are those of Orfanidis, with the arguments of ``cde`` and
``sne`` normalised to the quarter period K.

The selectivity of the filter is set by the ``rolloff`` parameter
rather than by a stopband attenuation. Larger rolloff values give a
wider transition band and a deeper stopband.

References
----------
- Orfanidis, S. J. (2006). Lecture Notes on Elliptic Filter Design.
  https://www.ece.rutgers.edu/~orfanidi/ece521/notes.pdf
"""

import cmath
import math

import numpy as np

from iir_dsp.dsp import utils as utils
from iir_dsp.dsp.errors import ConfigurationError, NumericNonConvergence
from iir_dsp.dsp.layout import INFINITY, layout
from iir_dsp.dsp.prototypes import add_pairs_by_q, analog_prototype, ripple_eps

MAX_LANDEN_ITERATIONS = 20
LANDEN_TOL = np.finfo(float).eps

ROLLOFF_MIN = -10.0
ROLLOFF_MAX = 20.0


def landen(k: float, max_iterations: int = MAX_LANDEN_ITERATIONS) -> list[float]:
    """
    Calculate the descending Landen sequence of elliptic moduli.

    Parameters
    ----------
    k : float
        The starting modulus, 0 <= k < 1.
    max_iterations : int, optional
        The number of steps allowed before giving up.

    Returns
    -------
    list[float]
        The moduli k_1, k_2, ... until they fall below machine epsilon.

    Raises
    ------
    NumericNonConvergence
        If the sequence hasn't converged after max_iterations steps.
    """
    if not 0 <= k < 1:
        raise ConfigurationError(f"elliptic modulus must be in [0, 1), got {k}")

    v = []
    kp = math.sqrt((1 - k) * (1 + k))
    while k > LANDEN_TOL:
        if len(v) >= max_iterations:
            raise NumericNonConvergence(
                f"Landen sequence for modulus {v[0] if v else k} did not converge in {max_iterations} steps"
            )
        k = (1 - kp) / (1 + kp)
        # 1 - k = 2kp/(1 + kp), keeps the complement accurate when k is near 1
        kp = math.sqrt(2 * kp / (1 + kp) * (1 + k))
        v.append(k)
    return v


def ellipk(k: float) -> float:
    """Complete elliptic integral of the first kind K(k), where k is
    the modulus (not the parameter m = k^2).
    """
    v = landen(k)
    return math.pi / 2 * math.prod(1 + vn for vn in v)


def _descend(w: complex, v: list[float]) -> complex:
    for vn in reversed(v):
        w = (1 + vn) * w / (1 + vn * w * w)
    return w


def cde(u: complex, k: float) -> complex:
    """Jacobi elliptic function cd(uK, k), for complex u."""
    return _descend(cmath.cos(u * math.pi / 2), landen(k))


def sne(u: complex, k: float) -> complex:
    """Jacobi elliptic function sn(uK, k), for complex u."""
    return _descend(cmath.sin(u * math.pi / 2), landen(k))


def asne(w: complex, k: float) -> complex:
    """
    Inverse of :py:func:`sne`, returns u such that sn(uK, k) = w.

    The inverse is found by running the Landen sequence upwards, then
    taking the arcsine.
    """
    v = landen(k)
    w = complex(w)
    for n, vn in enumerate(v):
        v1 = k if n == 0 else v[n - 1]
        w = w / (1 + cmath.sqrt(1 - w * w * v1 * v1)) * 2 / (1 + vn)
    return 2 * cmath.asin(w) / math.pi


def selectivity_modulus(rolloff: float) -> float:
    """Return the elliptic modulus k = Wp/Ws for a given rolloff."""
    xi = 5 * math.exp(rolloff - 1) + 1
    return 1 / xi


def degree_modulus(order: int, k: float) -> float:
    """
    Solve the degree equation for the discrimination modulus k1.

    For an order N filter with selectivity modulus k, this is
    k1 = k^N * prod(sn(u_i K, k)^4), for u_i = (2i - 1)/N.
    """
    k1 = k**order
    for i in range(1, order // 2 + 1):
        k1 *= sne((2 * i - 1) / order, k).real ** 4
    return k1


def stopband_attenuation(order: int, ripple_db: float, rolloff: float) -> float:
    """
    Calculate the stopband attenuation of an elliptic design.

    Parameters
    ----------
    order : int
        The filter order.
    ripple_db : float
        The passband ripple in dB.
    rolloff : float
        The rolloff parameter, between ROLLOFF_MIN and ROLLOFF_MAX.

    Returns
    -------
    float
        The minimum attenuation in the stopband, in dB.
    """
    eps_p = ripple_eps(ripple_db)
    k1 = degree_modulus(order, selectivity_modulus(rolloff))
    if k1 == 0:
        return math.inf
    return 20 * math.log10(math.hypot(1, eps_p / k1))


class elliptic_prototype(analog_prototype):
    """
    Elliptic prototypes, equiripple in both the passband and the
    stopband.

    The passband ripples between 0 dB and -ripple_db up to the cutoff.
    The stopband edge and depth are set by ``rolloff``, see
    :py:func:`stopband_attenuation`.
    """

    name = "elliptic"
    params = ("ripple_db", "rolloff")

    def _check_param(self, name, value):
        if name == "rolloff":
            value = utils.check_finite(value, name)
            if not ROLLOFF_MIN <= value <= ROLLOFF_MAX:
                raise ConfigurationError(
                    f"rolloff must be between {ROLLOFF_MIN:g} and {ROLLOFF_MAX:g}, got {value:g}"
                )
            return value
        return super()._check_param(name, value)

    def lowpass(self, order, ripple_db=None, rolloff=None, **params):
        analog = layout(order)
        eps_p = ripple_eps(ripple_db)
        k = selectivity_modulus(rolloff)
        k1 = degree_modulus(order, k)

        # imaginary shift that puts the poles on the ripple contour
        v0 = (-1j * asne(1j / eps_p, k1) / order).real

        pairs = []
        for i in range(1, order // 2 + 1):
            u = (2 * i - 1) / order
            zero = 1j / (k * cde(u, k))
            pole = 1j * cde(u - 1j * v0, k)
            pairs.append((pole, zero))
        add_pairs_by_q(analog, pairs)

        if order & 1:
            analog.add((1j * sne(1j * v0, k)).real, INFINITY)

        analog.set_normal(0.0, 1.0 if order & 1 else utils.db2gain(-ripple_db))
        return analog
