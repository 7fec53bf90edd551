# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
Analog lowpass and lowshelf prototypes.

Each response family is a small strategy object that designs a
normalised s-plane layout with a cutoff of 1 rad/s. The layouts are
then moved to the requested shape and frequency by
:py:mod:`iir_dsp.dsp.transforms`.

The shelf designs follow Orfanidis, where the squared magnitude of a
shelf with gain G and bandwidth gain Gb is

    |H(W)|^2 = (G^2 + eps^2 F(W)^2) / (1 + eps^2 F(W)^2)

with F(W) = W^N for Butterworth, T_N(W) for Chebyshev I and
1/T_N(1/W) for Chebyshev II.

References
----------
- Orfanidis, S. J. (2005). High-Order Digital Parametric Equalizer
  Design. J. Audio Eng. Soc., 53(11).
- https://www.dsprelated.com/showarticle/1137.php
"""

import math
import cmath

from iir_dsp.dsp import utils as utils
from iir_dsp.dsp.errors import ConfigurationError
from iir_dsp.dsp.layout import INFINITY, layout


def _pole_q(pole: complex) -> float:
    # Q of a conjugate pole pair, real poles sort first
    if pole.imag == 0:
        return 0.0
    return abs(pole) / (-2 * pole.real)


def add_pairs_by_q(analog: layout, pairs: list[tuple[complex, complex]]):
    """Add conjugate pole/zero pairs to a layout in order of increasing
    pole Q.

    The highest Q sections go last in the cascade to minimise the chance
    of clipping in the early stages.
    """
    for pole, zero in sorted(pairs, key=lambda pair: _pole_q(pair[0])):
        analog.add_conjugate_pairs(pole, zero)


def ripple_eps(ripple_db: float, name: str = "ripple_db") -> float:
    """
    Return eps = sqrt(10^(ripple_db/10) - 1) for a ripple in dB.

    Raises
    ------
    ConfigurationError
        If eps rounds to 0 or overflows.
    """
    try:
        eps = math.sqrt(math.expm1(ripple_db * math.log(10) / 10))
    except OverflowError:
        eps = math.inf
    if not 0 < eps < math.inf:
        raise ConfigurationError(
            f"{name} of {ripple_db:g} dB is outside the range that can be designed"
        )
    return eps


def _chebyshev_point(v: float, phi: float) -> complex:
    # point on the Chebyshev ellipse with hyperbolic angle v
    return complex(-math.sinh(v) * math.sin(phi), math.cosh(v) * math.cos(phi))


def _shelf_eps(gain_db: float, ripple_db: float, band_gain_db: float) -> tuple[float, float]:
    """Return G and eps for a shelf with gain_db, where the ripple
    reaches band_gain_db.
    """
    if ripple_db >= abs(gain_db):
        raise ConfigurationError(
            f"ripple ({ripple_db:g} dB) must be smaller than the shelf gain ({abs(gain_db):g} dB)"
        )
    G = utils.db2gain(gain_db)
    Gb = utils.db2gain(band_gain_db)
    eps = math.sqrt((G * G - Gb * Gb) / (Gb * Gb - 1))
    return G, eps


class analog_prototype:
    """
    Base class for the analog prototype strategies.

    Subclasses set ``name``, the names of their family specific
    parameters in ``params``, and implement :py:meth:`lowpass`. Families
    with a shelving variant also set ``supports_shelf`` and implement
    :py:meth:`lowshelf`.
    """

    name = ""
    params = ()
    supports_shelf = False

    def check_params(self, **params) -> dict:
        """
        Check the family specific parameters are all present and valid.

        Returns
        -------
        dict
            The parameters converted to floats.

        Raises
        ------
        ConfigurationError
            If a parameter is missing, unexpected or out of range.
        """
        missing = [p for p in self.params if params.get(p) is None]
        if missing:
            raise ConfigurationError(f"{self.name} filters need {', '.join(missing)}")
        extra = [p for p in params if p not in self.params and params[p] is not None]
        if extra:
            raise ConfigurationError(f"{self.name} filters don't take {', '.join(extra)}")

        return {p: self._check_param(p, params[p]) for p in self.params}

    def _check_param(self, name, value):
        value = utils.check_positive(value, name)
        if name in ("ripple_db", "stopband_db"):
            ripple_eps(value, name)
        return value

    def lowpass(self, order: int, **params) -> layout:
        """Design the normalised analog lowpass prototype."""
        raise NotImplementedError

    def lowshelf(self, order: int, gain_db: float, **params) -> layout:
        """Design the normalised analog lowshelf prototype, with a gain
        of gain_db in the shelf and unity gain away from it.
        """
        raise ConfigurationError(f"{self.name} filters have no shelving variant")


class butterworth_prototype(analog_prototype):
    """Butterworth prototypes, with poles equally spaced on the unit
    circle.
    """

    name = "butterworth"
    supports_shelf = True

    def lowpass(self, order, **params):
        analog = layout(order)
        n2 = 2 * order
        pairs = []
        for i in range(order // 2):
            pole = cmath.rect(1.0, math.pi / 2 + (2 * i + 1) * math.pi / n2)
            pairs.append((pole, INFINITY))
        add_pairs_by_q(analog, pairs)

        if order & 1:
            analog.add(-1.0, INFINITY)

        analog.set_normal(0.0, 1.0)
        return analog

    def lowshelf(self, order, gain_db, **params):
        # poles on a circle of radius 1/g and zeros on radius g, so the
        # DC gain is g^(2N) and the gain at infinity is 1
        analog = layout(order)
        n2 = 2 * order
        g = utils.db2gain(gain_db) ** (1 / n2)
        gp = -1.0 / g
        gz = -g
        pairs = []
        for i in range(1, order // 2 + 1):
            theta = math.pi * (0.5 - (2 * i - 1) / n2)
            pairs.append((cmath.rect(gp, theta), cmath.rect(gz, theta)))
        add_pairs_by_q(analog, pairs)

        if order & 1:
            analog.add(gp, gz)

        analog.set_normal(math.inf, 1.0)
        return analog


class chebyshev1_prototype(analog_prototype):
    """
    Chebyshev type I prototypes, with an equiripple passband.

    The passband ripples between 0 dB and -ripple_db, and the response
    is -ripple_db at the cutoff frequency.
    """

    name = "chebyshev1"
    params = ("ripple_db",)
    supports_shelf = True

    def lowpass(self, order, ripple_db=None, **params):
        analog = layout(order)
        eps = ripple_eps(ripple_db)
        v0 = math.asinh(1 / eps) / order
        pairs = []
        for i in range(1, order // 2 + 1):
            phi = (2 * i - 1) * math.pi / (2 * order)
            pairs.append((_chebyshev_point(v0, phi), INFINITY))
        add_pairs_by_q(analog, pairs)

        if order & 1:
            analog.add(-math.sinh(v0), INFINITY)

        # even orders start at the bottom of the ripple
        analog.set_normal(0.0, 1.0 if order & 1 else utils.db2gain(-ripple_db))
        return analog

    def lowshelf(self, order, gain_db, ripple_db=None, **params):
        if gain_db == 0:
            return butterworth_prototype().lowshelf(order, 0.0)

        analog = layout(order)
        # the ripple sits between G and Gb inside the shelf
        G, eps = _shelf_eps(gain_db, ripple_db, gain_db - math.copysign(ripple_db, gain_db))

        # poles from 1 + eps^2 T^2 = 0, zeros from G^2 + eps^2 T^2 = 0
        v_pole = math.asinh(1 / eps) / order
        v_zero = math.asinh(G / eps) / order
        pairs = []
        for i in range(1, order // 2 + 1):
            phi = (2 * i - 1) * math.pi / (2 * order)
            pairs.append((_chebyshev_point(v_pole, phi), _chebyshev_point(v_zero, phi)))
        add_pairs_by_q(analog, pairs)

        if order & 1:
            analog.add(-math.sinh(v_pole), -math.sinh(v_zero))

        analog.set_normal(math.inf, 1.0)
        return analog


class chebyshev2_prototype(analog_prototype):
    """
    Chebyshev type II (inverse Chebyshev) prototypes, with a flat
    passband and an equiripple stopband.

    The stopband starts at the cutoff frequency, where the response
    first reaches -stopband_db.
    """

    name = "chebyshev2"
    params = ("stopband_db",)
    supports_shelf = True

    def lowpass(self, order, stopband_db=None, **params):
        analog = layout(order)
        eps = 1 / ripple_eps(stopband_db, "stopband_db")
        v0 = math.asinh(1 / eps) / order
        pairs = []
        for i in range(1, order // 2 + 1):
            phi = (2 * i - 1) * math.pi / (2 * order)
            # poles are the reciprocals of the Chebyshev I poles, zeros
            # sit on the jw axis at the reciprocal of cos(phi)
            pole = 1 / _chebyshev_point(v0, phi)
            zero = complex(0.0, 1 / math.cos(phi))
            pairs.append((pole, zero))
        add_pairs_by_q(analog, pairs)

        if order & 1:
            analog.add(-1 / math.sinh(v0), INFINITY)

        analog.set_normal(0.0, 1.0)
        return analog

    def lowshelf(self, order, gain_db, stopband_db=None, **params):
        if gain_db == 0:
            return butterworth_prototype().lowshelf(order, 0.0)

        analog = layout(order)
        # the ripple sits between 1 and Gb away from the shelf
        G, eps = _shelf_eps(gain_db, stopband_db, math.copysign(stopband_db, gain_db))

        # with T = T_N(1/W), poles from T^2 + eps^2 = 0 and zeros from
        # G^2 T^2 + eps^2 = 0, mapped back through s -> 1/s
        v_pole = math.asinh(eps) / order
        v_zero = math.asinh(eps / G) / order
        pairs = []
        for i in range(1, order // 2 + 1):
            phi = (2 * i - 1) * math.pi / (2 * order)
            pairs.append((1 / _chebyshev_point(v_pole, phi), 1 / _chebyshev_point(v_zero, phi)))
        add_pairs_by_q(analog, pairs)

        if order & 1:
            analog.add(-1 / math.sinh(v_pole), -1 / math.sinh(v_zero))

        # the ripple is away from DC, so normalise there
        analog.set_normal(0.0, G)
        return analog
