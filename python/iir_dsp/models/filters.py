# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Pydantic models of the high order IIR filter designs."""

from typing import Annotated, Literal, Optional, Union

import annotated_types
from pydantic import BaseModel, Field, model_validator

from iir_dsp.dsp import biquad as bq
from iir_dsp.dsp import cascaded_biquads as cbq
from iir_dsp.dsp.elliptic import ROLLOFF_MAX, ROLLOFF_MIN
from iir_dsp.dsp.generic import DEFAULT_MAX_ORDER
from iir_dsp.dsp.transforms import BAND_SHAPES, SHELF_SHAPES
from iir_dsp.models.fields import BIQUAD_TYPES, DEFAULT_FILTER_FREQ, FilterParameters

SHAPE = Literal["lowpass", "highpass", "bandpass", "bandstop", "lowshelf", "highshelf", "bandshelf"]
NO_SHELF_SHAPE = Literal["lowpass", "highpass", "bandpass", "bandstop"]
STRUCTURE = Literal["direct_form_1", "direct_form_2", "transposed_direct_form_2"]

DEFAULT_RIPPLE_DB = 1.0
DEFAULT_STOPBAND_DB = 48.0
DEFAULT_ROLLOFF = 0.1

DECIBELS = Annotated[float, annotated_types.Gt(0)]
ROLLOFF = Annotated[float, annotated_types.Interval(ge=ROLLOFF_MIN, le=ROLLOFF_MAX)]


class FilterConfig(BaseModel, extra="forbid"):
    """The settings fixed when a filter is created."""

    n_chans: int = Field(default=1, ge=1, description="Number of channels to filter.")
    max_order: int = Field(
        default=DEFAULT_MAX_ORDER,
        ge=1,
        description="Largest order the filter can be set up with.",
    )
    structure: STRUCTURE = Field(
        default="direct_form_2", description="Structure used to run each biquad section."
    )


class iir_parameters(FilterParameters):
    """
    Parameters shared by all of the IIR filter families.

    Band shapes need a ``width_freq``, shelf shapes need a ``gain_db``,
    and neither may be given for shapes that don't use them.
    """

    shape: SHAPE = "lowpass"
    order: int = Field(default=4, ge=1, description="Order of the analog prototype.")
    filter_freq: float = DEFAULT_FILTER_FREQ(
        description="Cutoff frequency in Hz, or the centre frequency of band shapes."
    )
    width_freq: Optional[float] = Field(
        default=None, gt=0, allow_inf_nan=False, description="Width of the band in Hz."
    )
    gain_db: Optional[float] = Field(
        default=None, allow_inf_nan=False, description="Gain of the shelf in dB."
    )

    @model_validator(mode="after")
    def _check_shape(self):
        if self.shape in BAND_SHAPES and self.width_freq is None:
            raise ValueError(f"{self.shape} filters need a width_freq")
        if self.shape not in BAND_SHAPES and self.width_freq is not None:
            raise ValueError(f"{self.shape} filters don't take a width_freq")
        if self.shape in SHELF_SHAPES and self.gain_db is None:
            raise ValueError(f"{self.shape} filters need a gain_db")
        if self.shape not in SHELF_SHAPES and self.gain_db is not None:
            raise ValueError(f"{self.shape} filters don't take a gain_db")
        return self

    def family_params(self) -> dict:
        """Return the family specific parameters, to pass to
        :py:meth:`iir_dsp.dsp.cascaded_biquads.iir_filter.setup`.
        """
        common = set(iir_parameters.model_fields) | {"family"}
        return self.model_dump(exclude=common)


class butterworth_parameters(iir_parameters):
    """Parameters for a Butterworth filter."""

    family: Literal["butterworth"] = "butterworth"


class chebyshev1_parameters(iir_parameters):
    """Parameters for a Chebyshev type I filter."""

    family: Literal["chebyshev1"] = "chebyshev1"
    ripple_db: DECIBELS = Field(
        default=DEFAULT_RIPPLE_DB, allow_inf_nan=False, description="Passband ripple in dB."
    )


class chebyshev2_parameters(iir_parameters):
    """Parameters for a Chebyshev type II filter."""

    family: Literal["chebyshev2"] = "chebyshev2"
    stopband_db: DECIBELS = Field(
        default=DEFAULT_STOPBAND_DB,
        allow_inf_nan=False,
        description="Stopband attenuation in dB, or the ripple away from the shelf.",
    )


class elliptic_parameters(iir_parameters):
    """Parameters for an elliptic filter."""

    family: Literal["elliptic"] = "elliptic"
    shape: NO_SHELF_SHAPE = "lowpass"
    ripple_db: DECIBELS = Field(
        default=DEFAULT_RIPPLE_DB, allow_inf_nan=False, description="Passband ripple in dB."
    )
    rolloff: ROLLOFF = Field(
        default=DEFAULT_ROLLOFF,
        description="Transition band rolloff, larger values give a deeper stopband.",
    )


class bessel_parameters(iir_parameters):
    """Parameters for a Bessel filter."""

    family: Literal["bessel"] = "bessel"
    shape: NO_SHELF_SHAPE = "lowpass"


FILTER_TYPES = Annotated[
    Union[
        butterworth_parameters,
        chebyshev1_parameters,
        chebyshev2_parameters,
        elliptic_parameters,
        bessel_parameters,
    ],
    Field(discriminator="family"),
]


def make_filter(fs: float, parameters: iir_parameters, config: FilterConfig | None = None):
    """
    Create an IIR filter and set it up with the given parameters.

    Parameters
    ----------
    fs : float
        Sampling frequency in Hz.
    parameters : FILTER_TYPES
        The design parameters.
    config : FilterConfig, optional
        The construction settings, defaults to FilterConfig().

    Returns
    -------
    iir_dsp.dsp.cascaded_biquads.iir_filter
        The designed filter.
    """
    config = config or FilterConfig()
    filt = cbq.iir_filter(
        fs,
        parameters.family,
        parameters.shape,
        n_chans=config.n_chans,
        max_order=config.max_order,
        structure=config.structure,
    )
    filt.setup(
        parameters.order,
        parameters.filter_freq,
        width_freq=parameters.width_freq,
        gain_db=parameters.gain_db,
        **parameters.family_params(),
    )
    return filt


def make_biquad(fs: float, parameters: BIQUAD_TYPES, config: FilterConfig | None = None):
    """Create a cookbook biquad from its parameters. Only the n_chans
    and structure of the config are used.
    """
    config = config or FilterConfig()
    return bq.biquad(
        parameters.coeffs(fs), fs, n_chans=config.n_chans, structure=config.structure
    )


class FilterDesign(BaseModel, extra="forbid"):
    """
    A complete filter description, suitable for loading from JSON.

    Examples
    --------
    >>> design = FilterDesign.model_validate_json(
    ...     '{"fs": 48000, "parameters": {"family": "butterworth", "order": 2}}'
    ... )
    >>> filt = design.make()
    """

    fs: float = Field(gt=0, allow_inf_nan=False, description="Sampling frequency in Hz.")
    config: FilterConfig = Field(default_factory=FilterConfig)
    parameters: FILTER_TYPES

    def make(self):
        """Create and set up the filter."""
        return make_filter(self.fs, self.parameters, self.config)
