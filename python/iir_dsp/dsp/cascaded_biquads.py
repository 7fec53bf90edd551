# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
Cascaded biquad DSP blocks and the high order IIR filter designs built
on them.
"""

import numpy as np

from iir_dsp.dsp import biquad as bq
from iir_dsp.dsp import generic as dspg
from iir_dsp.dsp import transforms as transforms
from iir_dsp.dsp import utils as utils
from iir_dsp.dsp.bessel import bessel_prototype
from iir_dsp.dsp.cascade import sos_cascade
from iir_dsp.dsp.elliptic import elliptic_prototype
from iir_dsp.dsp.errors import ConfigurationError
from iir_dsp.dsp.prototypes import (
    butterworth_prototype,
    chebyshev1_prototype,
    chebyshev2_prototype,
)
from iir_dsp.dsp.state import make_state

PROTOTYPES = {
    p.name: p
    for p in (
        butterworth_prototype(),
        chebyshev1_prototype(),
        chebyshev2_prototype(),
        elliptic_prototype(),
        bessel_prototype(),
    )
}


class cascaded_biquads(dspg.dsp_block):
    """A class representing a cascade of biquad filters.

    This can be used to either implement a parametric equaliser or a
    higher order filter built out of second order sections.

    Storage for ``max_stages`` sections is allocated up front. If there
    are fewer sections in use, the rest are skipped. Updating the
    coefficients keeps the state of the sections, so the cascade can be
    retuned while it is running.

    Parameters
    ----------
    coeffs_list : list
        List of coefficients for each biquad in the cascade, each in the
        form `[b0, b1, b2, a0, a1, a2]`.
    max_stages : int, optional
        The largest number of sections the cascade can hold. Defaults to
        the length of coeffs_list.
    structure : str, optional
        The filter structure, one of
        :py:data:`iir_dsp.dsp.state.STRUCTURES`. Default is
        "direct_form_2".

    Attributes
    ----------
    max_stages : int
        The largest number of sections the cascade can hold.
    structure : str
        The filter structure.
    """

    def __init__(
        self, coeffs_list, fs, n_chans=1, max_stages=None, structure="direct_form_2"
    ):
        super().__init__(utils.check_positive(fs, "fs"), utils.check_count(n_chans, "n_chans"))
        if max_stages is None:
            max_stages = max(len(coeffs_list), 1)
        self.max_stages = max_stages
        self.structure = structure
        self._state = make_state(structure, max_stages, n_chans)
        self._cascade = sos_cascade(max_stages)
        if len(coeffs_list):
            self._cascade.set_sos(coeffs_list)

    @property
    def n_stages(self) -> int:
        """The number of sections in use."""
        return self._cascade.n_stages

    @property
    def sos(self) -> np.ndarray:
        """The sections in use as an (n_stages, 6) array, in the same
        format as ``scipy.signal`` second order sections.
        """
        return self._cascade.sos

    def update_coeffs(self, coeffs_list):
        """Update the coefficients of the cascade. The state is kept.

        Raises
        ------
        ConfigurationError
            If there are more sections than max_stages.
        InstabilityRisk
            If any section is unstable.
        """
        self._cascade.set_sos(coeffs_list)

    def process(self, sample, channel=0):
        """Process the input sample through the cascaded biquads using
        floating point maths.

        Parameters
        ----------
        sample : float
            The input sample to be processed.
        channel : int
            The channel index to process the sample on.

        Returns
        -------
        float
            The processed output sample.
        """
        return self._state.process(self._cascade.coeffs, self._cascade.n_stages, sample, channel)

    def response(self, w):
        """Evaluate the complex response at normalised frequencies w in
        rad/sample.
        """
        return self._cascade.response(w)

    def freq_response(self, nfft=512):
        """
        Calculate the frequency response of the cascaded biquad filters.

        The stages are combined by multiplying the complex frequency
        responses of each section.

        Parameters
        ----------
        nfft : int
            The number of points to compute in the frequency response,
            by default 512.

        Returns
        -------
        tuple[npt.NDArray[np.float64], npt.NDArray[np.complex128]]
            A tuple containing the frequency vector and the complex
            frequency response.

        """
        return self._cascade.freq_response(self.fs, nfft)

    def reset_state(self):
        """
        Reset the biquad saved states to zero.
        """
        self._state.reset()

        return


class iir_filter(cascaded_biquads):
    """
    A high order IIR filter designed from an analog prototype.

    The filter is sized when it is created and designed when
    :py:meth:`setup` is called. Until then it passes samples through
    unchanged. A failed setup leaves the previous design running.

    Parameters
    ----------
    family : str
        The response family, one of the keys of PROTOTYPES.
    shape : str
        The filter shape, one of
        :py:data:`iir_dsp.dsp.transforms.SHAPES`.
    max_order : int, optional
        The largest order the filter can be set up with. Default is
        DEFAULT_MAX_ORDER.

    Attributes
    ----------
    family : str
        The response family.
    shape : str
        The filter shape.
    max_order : int
        The largest order the filter can be set up with.
    order : int
        The order of the current design, 0 before setup.
    layout : layout or None
        The digital pole/zero layout of the current design.
    """

    def __init__(
        self,
        fs,
        family,
        shape,
        n_chans=1,
        max_order=dspg.DEFAULT_MAX_ORDER,
        structure="direct_form_2",
    ):
        try:
            self.prototype = PROTOTYPES[family]
        except KeyError:
            raise ConfigurationError(
                f"unknown filter family {family!r}, expected one of {tuple(PROTOTYPES)}"
            ) from None
        transforms.check_shape(shape)
        if shape in transforms.SHELF_SHAPES and not self.prototype.supports_shelf:
            raise ConfigurationError(f"{family} filters have no {shape} variant")

        max_order = utils.check_count(max_order, "max_order")
        # band shapes double the order of the prototype
        if shape in transforms.BAND_SHAPES:
            max_stages = max_order
        else:
            max_stages = (max_order + 1) // 2

        super().__init__([], fs, n_chans, max_stages, structure)
        self.family = family
        self.shape = shape
        self.max_order = max_order
        self.order = 0
        self.layout = None

    def setup(self, order=None, filter_freq=None, width_freq=None, gain_db=None, **params):
        """
        Design the filter and load the new sections.

        The new design is calculated and checked before anything is
        changed, and the filter state is kept.

        Parameters
        ----------
        order : int, optional
            The order of the prototype, between 1 and max_order. Band
            shapes have twice this many poles. Default is max_order.
        filter_freq : float
            The cutoff frequency in Hz, or the centre frequency for band
            shapes.
        width_freq : float, optional
            The width of the band in Hz, needed for band shapes.
        gain_db : float, optional
            The shelf gain in dB, needed for shelf shapes.
        **params
            The family specific parameters, e.g. ``ripple_db``.

        Raises
        ------
        ConfigurationError
            If any parameter is invalid.
        NumericNonConvergence
            If an elliptic function evaluation doesn't converge.
        InstabilityRisk
            If the designed sections are not stable.
        """
        if order is None:
            order = self.max_order
        if filter_freq is None:
            raise ConfigurationError("filter_freq must be given")
        order = utils.check_order(order, self.max_order)
        family_params = self.prototype.check_params(**params)

        if self.shape in transforms.SHELF_SHAPES:
            if gain_db is None:
                raise ConfigurationError(f"{self.shape} filters need a gain_db")
            gain_db = utils.check_finite(gain_db, "gain_db")
            analog = self.prototype.lowshelf(order, gain_db, **family_params)
        else:
            if gain_db is not None:
                raise ConfigurationError(f"{self.shape} filters don't take a gain_db")
            analog = self.prototype.lowpass(order, **family_params)

        if self.shape not in transforms.BAND_SHAPES and width_freq is not None:
            raise ConfigurationError(f"{self.shape} filters don't take a width_freq")

        digital = transforms.analog_to_digital(analog, self.shape, self.fs, filter_freq, width_freq)
        self._cascade.set_layout(digital)

        self.order = order
        self.layout = digital


class butterworth(iir_filter):
    """A Butterworth filter, maximally flat in the passband."""

    def __init__(
        self, fs, shape, n_chans=1, max_order=dspg.DEFAULT_MAX_ORDER, structure="direct_form_2"
    ):
        super().__init__(fs, "butterworth", shape, n_chans, max_order, structure)


class chebyshev1(iir_filter):
    """A Chebyshev type I filter, set up with a ``ripple_db``
    parameter.
    """

    def __init__(
        self, fs, shape, n_chans=1, max_order=dspg.DEFAULT_MAX_ORDER, structure="direct_form_2"
    ):
        super().__init__(fs, "chebyshev1", shape, n_chans, max_order, structure)


class chebyshev2(iir_filter):
    """A Chebyshev type II filter, set up with a ``stopband_db``
    parameter.
    """

    def __init__(
        self, fs, shape, n_chans=1, max_order=dspg.DEFAULT_MAX_ORDER, structure="direct_form_2"
    ):
        super().__init__(fs, "chebyshev2", shape, n_chans, max_order, structure)


class elliptic(iir_filter):
    """An elliptic filter, set up with ``ripple_db`` and ``rolloff``
    parameters. There are no shelf shapes.
    """

    def __init__(
        self, fs, shape, n_chans=1, max_order=dspg.DEFAULT_MAX_ORDER, structure="direct_form_2"
    ):
        super().__init__(fs, "elliptic", shape, n_chans, max_order, structure)


class bessel(iir_filter):
    """A Bessel filter, with maximally flat group delay. There are no
    shelf shapes.
    """

    def __init__(
        self, fs, shape, n_chans=1, max_order=dspg.DEFAULT_MAX_ORDER, structure="direct_form_2"
    ):
        super().__init__(fs, "bessel", shape, n_chans, max_order, structure)


class butterworth_lowpass(butterworth):
    """A Butterworth lowpass filter implementation using cascaded
    biquads.

    Parameters
    ----------
    N : int
        The order of the Butterworth filter.
    fc : float
        The cutoff frequency of the filter.
    """

    def __init__(self, fs, n_chans, N, fc, structure="direct_form_2"):
        super().__init__(fs, "lowpass", n_chans, structure=structure)
        self.setup(N, fc)


class butterworth_highpass(butterworth):
    """A Butterworth highpass filter implementation using cascaded
    biquads.

    Parameters
    ----------
    N : int
        The order of the Butterworth filter.
    fc : float
        The cutoff frequency of the filter.
    """

    def __init__(self, fs, n_chans, N, fc, structure="direct_form_2"):
        super().__init__(fs, "highpass", n_chans, structure=structure)
        self.setup(N, fc)


class parametric_eq(cascaded_biquads):
    """A parametric equalizer made of cookbook biquads.

    Parameters
    ----------
    filter_spec : list
        A list of tuples specifying the filter parameters for each band.
        Each tuple should contain the filter type as a string (e.g.,
        'lowpass', 'highpass', 'peaking'), followed by the filter
        parameters specific to that type.
    """

    def __init__(self, fs, n_chans, filter_spec, structure="direct_form_2"):
        coeffs_list = []
        for spec in filter_spec:
            class_name = f"make_biquad_{spec[0]}"
            class_handle = getattr(bq, class_name, None)
            if class_handle is None:
                raise ConfigurationError(f"unknown biquad type {spec[0]!r}")
            coeffs_list.append(class_handle(fs, *spec[1:]))

        super().__init__(coeffs_list, fs, n_chans, structure=structure)


def make_butterworth_lowpass(N, fc, fs):
    """
    Generate ceil(N/2) sets of biquad coefficients for a Butterworth
    lowpass filter.

    Returns
    -------
    list[list[float]]
        The coefficients of each section in the form
        `[b0, b1, b2, a0, a1, a2]`.
    """
    return butterworth_lowpass(fs, 1, N, fc).sos.tolist()


def make_butterworth_highpass(N, fc, fs):
    """
    Generate ceil(N/2) sets of biquad coefficients for a Butterworth
    highpass filter.

    Returns
    -------
    list[list[float]]
        The coefficients of each section in the form
        `[b0, b1, b2, a0, a1, a2]`.
    """
    return butterworth_highpass(fs, 1, N, fc).sos.tolist()
