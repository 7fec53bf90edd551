# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
Bessel prototypes, with a maximally flat group delay.

The poles are the roots of the reverse Bessel polynomial, normalised so
the group delay at DC is 1 second. This is the same normalisation as
``scipy.signal.bessel(..., norm="delay")``.
"""

import math
import warnings

import numpy as np

from iir_dsp.dsp.layout import INFINITY, layout
from iir_dsp.dsp.prototypes import add_pairs_by_q, analog_prototype

MAX_NEWTON_ITERATIONS = 20
NEWTON_TOL = 1e-12
# relative step below which a root counts as settled once the steps
# stop shrinking, polyval is down to rounding noise there
SETTLED_TOL = 1e-6


def reverse_bessel_coeffs(order: int) -> np.ndarray:
    """
    Return the coefficients of the reverse Bessel polynomial of a given
    order, highest power first.

    The coefficient of s^j is (2n - j)! / (2^(n - j) j! (n - j)!), found
    here by working down from the monic s^n term.
    """
    coeffs = np.zeros(order + 1)
    coeffs[0] = 1.0
    for j in range(order, 0, -1):
        coeffs[order - j + 1] = coeffs[order - j] * j * (2 * order - j + 1) / (2 * (order - j + 1))
    return coeffs


def _polish(coeffs: np.ndarray, root: complex) -> complex:
    # Newton refinement of a root found by the companion matrix
    deriv = np.polyder(coeffs)
    last_step = math.inf
    for _ in range(MAX_NEWTON_ITERATIONS):
        step = np.polyval(coeffs, root) / np.polyval(deriv, root)
        scale = max(1.0, abs(root))
        if abs(step) >= abs(last_step) and abs(step) <= SETTLED_TOL * scale:
            return root
        root -= step
        if abs(step) <= NEWTON_TOL * scale:
            return root
        last_step = step

    warnings.warn(
        f"Bessel root {root:.6g} did not settle after {MAX_NEWTON_ITERATIONS} iterations",
        UserWarning,
    )
    return root


def bessel_roots(order: int) -> tuple[list[complex], float | None]:
    """
    Find the poles of the Bessel prototype.

    Returns
    -------
    tuple[list[complex], float | None]
        The poles in the upper half plane, one per conjugate pair, and
        the real pole for odd orders (None for even orders).
    """
    coeffs = reverse_bessel_coeffs(order)
    roots = np.roots(coeffs)

    real_root = None
    if order & 1:
        index = np.argmin(np.abs(roots.imag))
        real_root = float(_polish(coeffs, complex(roots[index].real)).real)
        roots = np.delete(roots, index)

    upper = [_polish(coeffs, complex(r)) for r in roots if r.imag > 0]
    return upper, real_root


class bessel_prototype(analog_prototype):
    """Bessel prototypes. The magnitude response has no ripple and a
    gentle rolloff, the cutoff is where the delay normalisation puts it
    rather than at -3 dB.
    """

    name = "bessel"

    def lowpass(self, order, **params):
        analog = layout(order)
        upper, real_root = bessel_roots(order)
        add_pairs_by_q(analog, [(p, INFINITY) for p in upper])

        if real_root is not None:
            analog.add(real_root, INFINITY)

        analog.set_normal(0.0, 1.0)
        return analog
