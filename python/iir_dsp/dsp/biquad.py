# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The biquad DSP block and the cookbook biquad designs."""

import numpy as np
import numpy.typing as npt
import scipy.signal as spsig

from iir_dsp.dsp import utils as utils
from iir_dsp.dsp import generic as dspg
from iir_dsp.dsp.cascade import normalise_sos, sos_cascade
from iir_dsp.dsp.state import make_state


class biquad(dspg.dsp_block):
    """
    A second order biquadratic filter instance.

    This implements a single biquad section using the coefficients
    provided at initialisation:
    `a0*y[n] = b0*x[n] + b1*x[n-1] + b2*x[n-2] - a1*y[n-1] - a2*y[n-2]`

    The coefficients are normalised by a0 when they are set. Updating
    the coefficients keeps the filter state, so the filter can be
    retuned while it is running.

    Parameters
    ----------
    coeffs : list[float]
        List of biquad coefficients in the form
        `[b0, b1, b2, a0, a1, a2]`.
    structure : str, optional
        The filter structure, one of
        :py:data:`iir_dsp.dsp.state.STRUCTURES`. Default is
        "direct_form_2".

    Attributes
    ----------
    coeffs : list[float]
        List of normalised biquad coefficients in the form
        `[b0, b1, b2, 1, a1, a2]`.
    structure : str
        The filter structure.
    """

    def __init__(
        self,
        coeffs: list[float],
        fs: float,
        n_chans: int = 1,
        structure: str = "direct_form_2",
    ):
        super().__init__(utils.check_positive(fs, "fs"), utils.check_count(n_chans, "n_chans"))
        self.structure = structure
        self._state = make_state(structure, 1, n_chans)
        self._cascade = sos_cascade(1)
        self._cascade.set_sos([coeffs])

    @property
    def coeffs(self) -> list[float]:
        return list(self._cascade.coeffs[0])

    def update_coeffs(self, new_coeffs: list[float]):
        """Update the saved coefficients to the input values.

        The new coefficients are checked before anything is changed, and
        the filter state is kept.

        Parameters
        ----------
        new_coeffs : list[float]
            The new coefficients to be updated, in the form
            `[b0, b1, b2, a0, a1, a2]`.

        Raises
        ------
        InstabilityRisk
            If the new poles are on or outside the unit circle.
        """
        self._cascade.set_sos([new_coeffs])

    def process(self, sample: float, channel: int = 0) -> float:
        """
        Filter a single sample using the biquad.

        Parameters
        ----------
        sample : float
            The input sample to be processed.
        channel : int
            The channel index to process the sample on.

        Returns
        -------
        float
            The processed sample.
        """
        return self._state.process(self._cascade.coeffs, 1, sample, channel)

    def freq_response(
        self, nfft: int = 1024
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.complex128]]:
        """
        Calculate the frequency response of the biquad filter.

        Parameters
        ----------
        nfft : int
            The number of points to compute in the frequency response,
            by default 1024.

        Returns
        -------
        tuple[npt.NDArray[np.float64], npt.NDArray[np.complex128]]
            A tuple containing the frequency vector and the complex
            frequency response.
        """
        b0, b1, b2, a0, a1, a2 = self.coeffs
        f, h = spsig.freqz([b0, b1, b2], [a0, a1, a2], worN=nfft, fs=self.fs)
        return f, h

    def reset_state(self):
        """Reset the biquad saved states to zero."""
        self._state.reset()


def biquad_bypass(fs: float, n_chans: int) -> biquad:
    """Return a biquad object with `b0 = 1`, i.e. output=input."""
    coeffs = make_biquad_bypass(fs)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_gain(fs: float, n_chans: int, gain_db: float) -> biquad:
    """Return a biquad object with a fixed linear gain."""
    coeffs = make_biquad_gain(fs, gain_db)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_lowpass(fs: float, n_chans: int, filter_freq: float, q_factor: float) -> biquad:
    """Return a biquad object with lowpass filter coefficients."""
    coeffs = make_biquad_lowpass(fs, filter_freq, q_factor)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_highpass(fs: float, n_chans: int, filter_freq: float, q_factor: float) -> biquad:
    """Return a biquad object with highpass filter coefficients."""
    coeffs = make_biquad_highpass(fs, filter_freq, q_factor)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_bandpass(fs: float, n_chans: int, filter_freq: float, bw: float) -> biquad:
    """Return a biquad object with bandpass filter coefficients. The
    bandwidth is in octaves.
    """
    coeffs = make_biquad_bandpass(fs, filter_freq, bw)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_bandstop(fs: float, n_chans: int, filter_freq: float, bw: float) -> biquad:
    """Return a biquad object with bandstop filter coefficients. The
    bandwidth is in octaves.
    """
    coeffs = make_biquad_bandstop(fs, filter_freq, bw)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_notch(fs: float, n_chans: int, filter_freq: float, q_factor: float) -> biquad:
    """Return a biquad object with notch filter coefficients."""
    coeffs = make_biquad_notch(fs, filter_freq, q_factor)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_allpass(fs: float, n_chans: int, filter_freq: float, q_factor: float) -> biquad:
    """Return a biquad object with allpass filter coefficients."""
    coeffs = make_biquad_allpass(fs, filter_freq, q_factor)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_peaking(
    fs: float, n_chans: int, filter_freq: float, q_factor: float, boost_db: float
) -> biquad:
    """Return a biquad object with peaking filter coefficients."""
    coeffs = make_biquad_peaking(fs, filter_freq, q_factor, boost_db)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_constant_q(
    fs: float, n_chans: int, filter_freq: float, q_factor: float, boost_db: float
) -> biquad:
    """Return a biquad object with constant Q peaking filter coefficients."""
    coeffs = make_biquad_constant_q(fs, filter_freq, q_factor, boost_db)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_lowshelf(
    fs: float, n_chans: int, filter_freq: float, q_factor: float, gain_db: float
) -> biquad:
    """Return a biquad object with low shelf filter coefficients."""
    coeffs = make_biquad_lowshelf(fs, filter_freq, q_factor, gain_db)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_highshelf(
    fs: float, n_chans: int, filter_freq: float, q_factor: float, gain_db: float
) -> biquad:
    """Return a biquad object with high shelf filter coefficients."""
    coeffs = make_biquad_highshelf(fs, filter_freq, q_factor, gain_db)
    return biquad(coeffs, fs, n_chans=n_chans)


def biquad_linkwitz(fs: float, n_chans: int, f0: float, q0: float, fp: float, qp: float) -> biquad:
    """Return a biquad object with Linkwitz transform filter coefficients."""
    coeffs = make_biquad_linkwitz(fs, f0, q0, fp, qp)
    return biquad(coeffs, fs, n_chans=n_chans)


def make_biquad_bypass(fs: float) -> list[float]:
    """
    Create a bypass biquad filter. Only the b0 and a0 coefficients are
    set.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.
    """
    utils.check_positive(fs, "fs")
    return [1.0, 0.0, 0.0, 1.0, 0.0, 0.0]


def make_biquad_gain(fs: float, gain_db: float) -> list[float]:
    """
    Calculate the coefficients for a biquad filter with a specified
    linear gain.

    Parameters
    ----------
    fs : float
        The sampling frequency in Hz.
    gain_db : float
        The desired gain in decibels.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.
    """
    coeffs = make_biquad_bypass(fs)
    coeffs[0] = float(utils.db2gain(utils.check_finite(gain_db, "gain_db")))
    return coeffs


def make_biquad_lowpass(fs: float, filter_freq: float, q_factor: float) -> list[float]:
    """Create coefficients for a lowpass biquad filter.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.
    filter_freq : float
        The cutoff frequency of the filter.
    q_factor : float
        The Q factor of the filter.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.

    Raises
    ------
    ConfigurationError
        If the filter frequency is not between 0 and fs/2, or the Q
        factor is not positive.

    """
    filter_freq = utils.check_filter_freq(filter_freq, fs)
    q_factor = utils.check_positive(q_factor, "q_factor")

    w0 = 2.0 * np.pi * filter_freq / fs
    alpha = np.sin(w0) / (2 * q_factor)

    b0 = (+1.0 - np.cos(w0)) / 2.0
    b1 = +1.0 - np.cos(w0)
    b2 = (+1.0 - np.cos(w0)) / 2.0
    a0 = +1.0 + alpha
    a1 = -2.0 * np.cos(w0)
    a2 = +1.0 - alpha

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs


def make_biquad_highpass(fs: float, filter_freq: float, q_factor: float) -> list[float]:
    """Create coefficients for a highpass biquad filter.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.
    filter_freq : float
        The cutoff frequency of the filter.
    q_factor : float
        The Q factor of the filter.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.

    Raises
    ------
    ConfigurationError
        If the filter frequency is not between 0 and fs/2, or the Q
        factor is not positive.

    """
    filter_freq = utils.check_filter_freq(filter_freq, fs)
    q_factor = utils.check_positive(q_factor, "q_factor")

    w0 = 2.0 * np.pi * filter_freq / fs
    alpha = np.sin(w0) / (2 * q_factor)

    b0 = (1.0 + np.cos(w0)) / 2.0
    b1 = -(1.0 + np.cos(w0))
    b2 = (1.0 + np.cos(w0)) / 2.0
    a0 = +1.0 + alpha
    a1 = -2.0 * np.cos(w0)
    a2 = +1.0 - alpha

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs


def _bandwidth_alpha(w0, bw):
    # alpha for a bandwidth in octaves, measured between the -3 dB points
    return np.sin(w0) * np.sinh(np.log(2) / 2 * bw * w0 / np.sin(w0))


def make_biquad_bandpass(fs: float, filter_freq: float, bw: float) -> list[float]:
    """Create coefficients for a bandpass biquad filter with 0 dB peak
    gain.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.
    filter_freq : float
        The center frequency of the bandpass filter.
    bw : float
        The bandwidth of the bandpass filter in octaves.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.
    """
    filter_freq = utils.check_filter_freq(filter_freq, fs)
    bw = utils.check_positive(bw, "bw")

    w0 = 2.0 * np.pi * filter_freq / fs
    alpha = _bandwidth_alpha(w0, bw)

    b0 = alpha
    b1 = +0.0
    b2 = -alpha
    a0 = +1.0 + alpha
    a1 = -2.0 * np.cos(w0)
    a2 = +1.0 - alpha

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs


def make_biquad_bandstop(fs: float, filter_freq: float, bw: float) -> list[float]:
    """Create coefficients for a bandstop biquad filter.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.
    filter_freq : float
        The center frequency of the bandstop filter.
    bw : float
        The bandwidth of the bandstop filter in octaves.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.
    """
    filter_freq = utils.check_filter_freq(filter_freq, fs)
    bw = utils.check_positive(bw, "bw")

    w0 = 2.0 * np.pi * filter_freq / fs
    alpha = _bandwidth_alpha(w0, bw)

    b0 = +1.0
    b1 = -2.0 * np.cos(w0)
    b2 = +1.0
    a0 = +1.0 + alpha
    a1 = -2.0 * np.cos(w0)
    a2 = +1.0 - alpha

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs


def make_biquad_notch(fs: float, filter_freq: float, q_factor: float) -> list[float]:
    """Create coefficients for a notch biquad filter.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.
    filter_freq : float
        The center frequency of the notch filter.
    q_factor : float
        The Q factor of the notch filter.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.
    """
    filter_freq = utils.check_filter_freq(filter_freq, fs)
    q_factor = utils.check_positive(q_factor, "q_factor")

    w0 = 2.0 * np.pi * filter_freq / fs
    alpha = np.sin(w0) / (2.0 * q_factor)

    b0 = +1.0
    b1 = -2.0 * np.cos(w0)
    b2 = +1.0
    a0 = +1.0 + alpha
    a1 = -2.0 * np.cos(w0)
    a2 = +1.0 - alpha

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs


def make_biquad_allpass(fs: float, filter_freq: float, q_factor: float) -> list[float]:
    """Create coefficients for an allpass biquad filter.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.
    filter_freq : float
        The center frequency of the allpass filter, where the phase
        shift is 180 degrees.
    q_factor : float
        The Q factor of the allpass filter.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.
    """
    filter_freq = utils.check_filter_freq(filter_freq, fs)
    q_factor = utils.check_positive(q_factor, "q_factor")

    w0 = 2.0 * np.pi * filter_freq / fs
    alpha = np.sin(w0) / (2.0 * q_factor)

    b0 = +1.0 - alpha
    b1 = -2.0 * np.cos(w0)
    b2 = +1.0 + alpha
    a0 = +1.0 + alpha
    a1 = -2.0 * np.cos(w0)
    a2 = +1.0 - alpha

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs


def make_biquad_peaking(
    fs: float, filter_freq: float, q_factor: float, boost_db: float
) -> list[float]:
    """Create coefficients for a peaking biquad filter.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.
    filter_freq : float
        The center frequency of the peaking filter.
    q_factor : float
        The Q factor of the peaking filter.
    boost_db : float
        The boost in decibels applied by the filter at the center
        frequency. Negative values give a cut.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.
    """
    filter_freq = utils.check_filter_freq(filter_freq, fs)
    q_factor = utils.check_positive(q_factor, "q_factor")
    boost_db = utils.check_finite(boost_db, "boost_db")

    A = np.sqrt(10 ** (boost_db / 20))
    w0 = 2.0 * np.pi * filter_freq / fs
    alpha = np.sin(w0) / (2.0 * q_factor)

    b0 = +1.0 + alpha * A
    b1 = -2.0 * np.cos(w0)
    b2 = +1.0 - alpha * A
    a0 = +1.0 + alpha / A
    a1 = -2.0 * np.cos(w0)
    a2 = +1.0 - alpha / A

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs


def make_biquad_constant_q(
    fs: float, filter_freq: float, q_factor: float, boost_db: float
) -> list[float]:
    """Create coefficients for a biquad peaking filter with constant Q.

    Constant Q means that the bandwidth of the filter remains constant
    as the gain varies. It is commonly used for graphic equalisers.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.
    filter_freq : float
        The center frequency of the filter in Hz.
    q_factor : float
        The Q factor of the filter.
    boost_db : float
        The boost in decibels applied to the filter.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.

    References
    ----------
    - Zoelzer, U. (2011). DAFX: Digital Audio Effects. John Wiley & Sons, Table 2.4
    - https://www.musicdsp.org/en/latest/Filters/37-zoelzer-biquad-filters.html

    """
    filter_freq = utils.check_filter_freq(filter_freq, fs)
    q_factor = utils.check_positive(q_factor, "q_factor")
    boost_db = utils.check_finite(boost_db, "boost_db")

    V = 10 ** (boost_db / 20)
    w0 = 2.0 * np.pi * filter_freq / fs
    K = np.tan(w0 / 2)

    if boost_db > 0:
        b0 = 1 + V * K / q_factor + K**2
        b1 = 2 * (K**2 - 1)
        b2 = 1 - V * K / q_factor + K**2
        a0 = 1 + K / q_factor + K**2
        a1 = 2 * (K**2 - 1)
        a2 = 1 - K / q_factor + K**2
    else:
        V = 1 / V
        b0 = 1 + (K / q_factor) + K**2
        b1 = 2 * (K**2 - 1)
        b2 = 1 - (K / q_factor) + K**2
        a0 = 1 + (V * K / q_factor) + K**2
        a1 = 2 * (K**2 - 1)
        a2 = 1 - (V * K / q_factor) + K**2

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs


def make_biquad_lowshelf(
    fs: float, filter_freq: float, q_factor: float, gain_db: float
) -> list[float]:
    """Create coefficients for a lowshelf biquad filter.

    The Q factor is defined in a similar way to standard low pass, i.e.
    Q > 0.707 will yield peakiness. The level of the shelf is given by
    gain_db, and the response at filter_freq is half of this.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.
    filter_freq : float
        The cutoff frequency of the filter.
    q_factor : float
        The Q factor of the filter.
    gain_db : float
        The gain of the shelf in decibels.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.

    References
    ----------
    - https://www.w3.org/TR/audio-eq-cookbook/

    """
    filter_freq = utils.check_filter_freq(filter_freq, fs)
    q_factor = utils.check_positive(q_factor, "q_factor")
    gain_db = utils.check_finite(gain_db, "gain_db")

    A = 10.0 ** (gain_db / 40.0)
    w0 = 2.0 * np.pi * filter_freq / fs
    alpha = np.sin(w0) / (2 * q_factor)

    b0 = A * ((A + 1) - (A - 1) * np.cos(w0) + 2 * np.sqrt(A) * alpha)
    b1 = 2 * A * ((A - 1) - (A + 1) * np.cos(w0))
    b2 = A * ((A + 1) - (A - 1) * np.cos(w0) - 2 * np.sqrt(A) * alpha)
    a0 = (A + 1) + (A - 1) * np.cos(w0) + 2 * np.sqrt(A) * alpha
    a1 = -2 * ((A - 1) + (A + 1) * np.cos(w0))
    a2 = (A + 1) + (A - 1) * np.cos(w0) - 2 * np.sqrt(A) * alpha

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs


def make_biquad_highshelf(
    fs: float, filter_freq: float, q_factor: float, gain_db: float
) -> list[float]:
    """Create coefficients for a highshelf biquad filter.

    The Q factor is defined in a similar way to standard high pass, i.e.
    Q > 0.707 will yield peakiness. The level of the shelf is given by
    gain_db, and the response at filter_freq is half of this.

    Parameters
    ----------
    fs : float
        The sample rate of the audio signal.
    filter_freq : float
        The cutoff frequency of the filter.
    q_factor : float
        The Q factor of the filter.
    gain_db : float
        The gain of the shelf in decibels.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.

    References
    ----------
    - https://www.w3.org/TR/audio-eq-cookbook/

    """
    filter_freq = utils.check_filter_freq(filter_freq, fs)
    q_factor = utils.check_positive(q_factor, "q_factor")
    gain_db = utils.check_finite(gain_db, "gain_db")

    A = 10.0 ** (gain_db / 40.0)
    w0 = 2.0 * np.pi * filter_freq / fs
    alpha = np.sin(w0) / (2 * q_factor)

    b0 = A * ((A + 1) + (A - 1) * np.cos(w0) + 2 * np.sqrt(A) * alpha)
    b1 = -2 * A * ((A - 1) + (A + 1) * np.cos(w0))
    b2 = A * ((A + 1) + (A - 1) * np.cos(w0) - 2 * np.sqrt(A) * alpha)
    a0 = (A + 1) - (A - 1) * np.cos(w0) + 2 * np.sqrt(A) * alpha
    a1 = 2 * ((A - 1) - (A + 1) * np.cos(w0))
    a2 = (A + 1) - (A - 1) * np.cos(w0) - 2 * np.sqrt(A) * alpha

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs


def make_biquad_linkwitz(fs: float, f0: float, q0: float, fp: float, qp: float) -> list[float]:
    """
    Create coefficients for a Linkwitz Transform biquad filter.

    The Linkwitz Transform is commonly used to change the low frequency
    roll off slope of a loudspeaker. When applied to a loudspeaker, it
    will change the cutoff frequency from f0 to fp, and the quality
    factor from q0 to qp.

    Parameters
    ----------
    fs : float
        The sampling frequency of the audio signal.
    f0 : float
        The original cutoff frequency of the filter.
    q0 : float
        The original quality factor of the filter at f0.
    fp : float
        The target cutoff frequency for the filter.
    qp : float
        The target quality factor for the filter.

    Returns
    -------
    list[float]
        The coefficients of the biquad filter in the order
        [b0, b1, b2, a0, a1, a2]. The coefficients are normalised by a0
        such that ``a0 = 1``.

    References
    ----------
    - Linkwitz Transform: https://www.linkwitzlab.com/filters.htm#9

    """
    f0 = utils.check_filter_freq(f0, fs)
    fp = utils.check_filter_freq(fp, fs)
    q0 = utils.check_positive(q0, "q0")
    qp = utils.check_positive(qp, "qp")

    fc = (f0 + fp) / 2

    d0i = (2 * np.pi * f0) ** 2
    d1i = (2 * np.pi * f0) / q0

    c0i = (2 * np.pi * fp) ** 2
    c1i = (2 * np.pi * fp) / qp

    gn = (2 * np.pi * fc) / (np.tan(np.pi * fc / fs))
    cci = c0i + gn * c1i + (gn**2)

    a0 = cci
    a1 = 2 * (c0i - (gn**2))
    a2 = c0i - gn * c1i + (gn**2)

    b0 = d0i + gn * d1i + (gn**2)
    b1 = 2 * (d0i - (gn**2))
    b2 = d0i - gn * d1i + (gn**2)

    coeffs = [b0, b1, b2, a0, a1, a2]
    coeffs = normalise_sos(coeffs)

    return coeffs
