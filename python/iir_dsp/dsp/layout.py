# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
Pole/zero layouts.

A layout is the list of pole/zero pairs of a filter, either in the
s-plane (analog prototypes and their frequency transforms) or in the
z-plane (after the bilinear transform). Each pair becomes one second
order section when the cascade is assembled, so a layout of order N
always has ceil(N/2) pairs, and only the last one may hold a single
real pole.
"""

import cmath
import math

from iir_dsp.dsp.errors import ConfigurationError

# sentinel for poles and zeros at infinity in the s-plane
INFINITY = complex(math.inf, 0.0)


def is_infinite(c: complex) -> bool:
    """Return True if c is the point at infinity."""
    return cmath.isinf(c)


def conj(c: complex) -> complex:
    """Complex conjugate that leaves the point at infinity alone."""
    if is_infinite(c):
        return INFINITY
    return c.conjugate()


class pole_zero_pair:
    """
    Two poles and two zeros that make up one second order section, or a
    single real pole and zero for the first order section of an odd
    order filter.

    Parameters
    ----------
    pole_1, zero_1 : complex
        The first pole and zero.
    pole_2, zero_2 : complex, optional
        The second pole and zero. Leave both as None for a single pole.

    Attributes
    ----------
    poles : tuple[complex, ...]
        The poles of the pair, one or two values.
    zeros : tuple[complex, ...]
        The zeros of the pair, one or two values.
    """

    def __init__(self, pole_1, zero_1, pole_2=None, zero_2=None):
        if (pole_2 is None) != (zero_2 is None):
            raise ValueError("a pair needs the same number of poles and zeros")
        if pole_2 is None:
            self.poles = (complex(pole_1),)
            self.zeros = (complex(zero_1),)
        else:
            self.poles = (complex(pole_1), complex(pole_2))
            self.zeros = (complex(zero_1), complex(zero_2))

    @property
    def is_single(self) -> bool:
        """True for a single real pole and zero."""
        return len(self.poles) == 1

    def __repr__(self):
        return f"pole_zero_pair(poles={self.poles}, zeros={self.zeros})"


class layout:
    """
    An ordered list of pole/zero pairs, with the gain needed to
    normalise the response.

    The response is normalised so that its magnitude at the reference
    frequency ``normal_w`` is ``normal_gain``. In the analog domain
    ``normal_w`` is in rad/s and may be ``math.inf``. In the digital
    domain it is in rad/sample, between 0 and pi.

    Parameters
    ----------
    max_poles : int
        The largest number of poles the layout may hold.
    domain : {"analog", "digital"}
        Whether the poles and zeros are in the s-plane or z-plane.

    Attributes
    ----------
    pairs : list[pole_zero_pair]
        The pole/zero pairs, one per second order section.
    n_poles : int
        The total number of poles, equal to the filter order.
    normal_w : float
        The reference frequency for normalisation.
    normal_gain : float
        The target magnitude at the reference frequency.
    gain : float
        The scalar gain applied to the monic pole/zero product so that
        the response at ``normal_w`` is ``normal_gain``. Set by the
        bilinear transform, 1.0 before that.
    """

    def __init__(self, max_poles: int, domain: str = "analog"):
        if domain not in ("analog", "digital"):
            raise ValueError(f"unknown layout domain {domain!r}")
        self.max_poles = max_poles
        self.domain = domain
        self.pairs = []
        self.n_poles = 0
        self.normal_w = 0.0
        self.normal_gain = 1.0
        self.gain = 1.0

    def reset(self):
        """Remove all the pairs and reset the normalisation."""
        self.pairs = []
        self.n_poles = 0
        self.normal_w = 0.0
        self.normal_gain = 1.0
        self.gain = 1.0

    def _check_add(self, n_new: int):
        if self.n_poles & 1:
            raise ConfigurationError("can't add poles after a single pole")
        if self.n_poles + n_new > self.max_poles:
            raise ConfigurationError(
                f"layout can hold at most {self.max_poles} poles, got {self.n_poles + n_new}"
            )

    def add(self, pole: complex, zero: complex):
        """Add a single real pole and zero, for odd order filters."""
        self._check_add(1)
        self.pairs.append(pole_zero_pair(pole, zero))
        self.n_poles += 1

    def add_conjugate_pairs(self, pole: complex, zero: complex):
        """Add a pole and a zero along with their complex conjugates."""
        self._check_add(2)
        self.pairs.append(pole_zero_pair(pole, zero, conj(pole), conj(zero)))
        self.n_poles += 2

    def add_pair(self, poles: tuple, zeros: tuple):
        """Add two poles and two zeros as one section. Each should be
        either a conjugate pair or two real values.
        """
        self._check_add(2)
        self.pairs.append(pole_zero_pair(poles[0], zeros[0], poles[1], zeros[1]))
        self.n_poles += 2

    def set_normal(self, w: float, gain: float):
        """Set the reference frequency and the target gain there."""
        self.normal_w = w
        self.normal_gain = gain

    @property
    def n_pairs(self) -> int:
        """The number of pairs, i.e. ceil(n_poles/2)."""
        return len(self.pairs)

    def __getitem__(self, index: int) -> pole_zero_pair:
        return self.pairs[index]

    def __iter__(self):
        return iter(self.pairs)

    def __len__(self):
        return len(self.pairs)

    def poles(self) -> list[complex]:
        """Return all the poles as a flat list."""
        return [p for pair in self.pairs for p in pair.poles]

    def zeros(self) -> list[complex]:
        """Return all the zeros as a flat list."""
        return [z for pair in self.pairs for z in pair.zeros]
