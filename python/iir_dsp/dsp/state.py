# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
Per channel filter state for the three supported biquad structures.

All three structures give the same output in exact arithmetic, they
differ in how many delay registers they keep and how rounding errors
build up. The state is sized once for the largest cascade, so changing
the number of sections in use never reallocates, and reconfiguring a
filter keeps the history of the sections it still uses.

The ``process`` methods are the hot path. They take the coefficient
rows of a :py:class:`iir_dsp.dsp.cascade.sos_cascade` and never raise.
"""

from iir_dsp.dsp.errors import ConfigurationError

STRUCTURES = ("direct_form_1", "direct_form_2", "transposed_direct_form_2")


class _state:
    """Base class for biquad cascade state."""

    n_registers = 0

    def __init__(self, max_stages: int, n_chans: int = 1):
        self.max_stages = max_stages
        self.n_chans = n_chans
        self.reset()

    def reset(self):
        """Set every register of every channel to zero."""
        self._state = [
            [[0.0] * self.n_registers for _ in range(self.max_stages)]
            for _ in range(self.n_chans)
        ]

    def process(self, coeffs, n_stages: int, sample: float, channel: int = 0) -> float:
        """
        Run one sample through the first n_stages sections.

        Parameters
        ----------
        coeffs : list
            Coefficient rows ``[b0, b1, b2, a0, a1, a2]`` with a0 = 1.
        n_stages : int
            The number of sections to run.
        sample : float
            The input sample.
        channel : int, optional
            The channel to run on, by default 0.

        Returns
        -------
        float
            The output of the last section.
        """
        raise NotImplementedError


class direct_form_1(_state):
    """
    Direct form I, with separate input and output delay lines.

        y[n] = b0*x[n] + b1*x[n-1] + b2*x[n-2] - a1*y[n-1] - a2*y[n-2]
    """

    n_registers = 4

    def process(self, coeffs, n_stages, sample, channel=0):
        state = self._state[channel]
        for n in range(n_stages):
            b0, b1, b2, _, a1, a2 = coeffs[n]
            x1, x2, y1, y2 = state[n]
            y = b0 * sample + b1 * x1 + b2 * x2 - a1 * y1 - a2 * y2
            state[n][:] = (sample, x1, y, y1)
            sample = y
        return sample


class direct_form_2(_state):
    """
    Direct form II, with one shared delay line.

        w[n] = x[n] - a1*w[n-1] - a2*w[n-2]
        y[n] = b0*w[n] + b1*w[n-1] + b2*w[n-2]
    """

    n_registers = 2

    def process(self, coeffs, n_stages, sample, channel=0):
        state = self._state[channel]
        for n in range(n_stages):
            b0, b1, b2, _, a1, a2 = coeffs[n]
            v1, v2 = state[n]
            w = sample - a1 * v1 - a2 * v2
            sample = b0 * w + b1 * v1 + b2 * v2
            state[n][:] = (w, v1)
        return sample


class transposed_direct_form_2(_state):
    """
    Transposed direct form II.

        y[n] = b0*x[n] + s1
        s1 = b1*x[n] - a1*y[n] + s2
        s2 = b2*x[n] - a2*y[n]
    """

    n_registers = 2

    def process(self, coeffs, n_stages, sample, channel=0):
        state = self._state[channel]
        for n in range(n_stages):
            b0, b1, b2, _, a1, a2 = coeffs[n]
            s1, s2 = state[n]
            y = b0 * sample + s1
            state[n][:] = (b1 * sample - a1 * y + s2, b2 * sample - a2 * y)
            sample = y
        return sample


_STATE_TYPES = {
    "direct_form_1": direct_form_1,
    "direct_form_2": direct_form_2,
    "transposed_direct_form_2": transposed_direct_form_2,
}


def make_state(structure: str, max_stages: int, n_chans: int = 1) -> _state:
    """
    Create the state for a cascade with the given structure.

    Raises
    ------
    ConfigurationError
        If the structure isn't one of STRUCTURES.
    """
    try:
        state_type = _STATE_TYPES[structure]
    except KeyError:
        raise ConfigurationError(
            f"unknown filter structure {structure!r}, expected one of {STRUCTURES}"
        ) from None
    return state_type(max_stages, n_chans)
