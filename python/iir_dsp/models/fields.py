# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Pydantic models of the different biquad types."""

from functools import partial
from typing import Literal, Union

from pydantic import BaseModel, Field

from iir_dsp.dsp import biquad as bq

DEFAULT_Q = partial(Field, default=0.707, gt=0, le=10, description="Q factor of the filter.")
DEFAULT_FILTER_FREQ = partial(
    Field, default=1000, gt=0, allow_inf_nan=False, description="Frequency of the filter in Hz."
)
DEFAULT_BW = partial(
    Field, default=1, gt=0, le=10, description="Bandwidth of the filter in octaves."
)
DEFAULT_BOOST_DB = partial(
    Field, default=0.0, ge=-24, le=24, description="Gain of the filter in dB."
)


class FilterParameters(BaseModel, extra="forbid"):
    """The pydantic model defining the runtime configurable parameters
    of a filter.
    """

    pass


class _biquad_parameters(FilterParameters):
    type: str

    def coeffs(self, fs: float) -> list[float]:
        """Calculate the normalised coefficients for these parameters
        at a sample rate of fs.
        """
        make_coeffs = getattr(bq, f"make_biquad_{self.type}")
        return make_coeffs(fs, **self.model_dump(exclude={"type"}))


class biquad_allpass(_biquad_parameters):
    """Parameters for a Biquad configured to allpass."""

    type: Literal["allpass"] = "allpass"
    filter_freq: float = DEFAULT_FILTER_FREQ()
    q_factor: float = DEFAULT_Q()


class biquad_bandpass(_biquad_parameters):
    """Parameters for a Biquad configured to bandpass."""

    type: Literal["bandpass"] = "bandpass"
    filter_freq: float = DEFAULT_FILTER_FREQ()
    bw: float = DEFAULT_BW()


class biquad_bandstop(_biquad_parameters):
    """Parameters for a Biquad configured to bandstop."""

    type: Literal["bandstop"] = "bandstop"
    filter_freq: float = DEFAULT_FILTER_FREQ()
    bw: float = DEFAULT_BW()


class biquad_bypass(_biquad_parameters):
    """Parameters for a Biquad configured to bypass."""

    type: Literal["bypass"] = "bypass"


class biquad_constant_q(_biquad_parameters):
    """Parameters for a Biquad configured to constant_q."""

    type: Literal["constant_q"] = "constant_q"
    filter_freq: float = DEFAULT_FILTER_FREQ()
    q_factor: float = DEFAULT_Q()
    boost_db: float = DEFAULT_BOOST_DB()


class biquad_gain(_biquad_parameters):
    """Parameters for a Biquad configured to gain."""

    type: Literal["gain"] = "gain"
    gain_db: float = DEFAULT_BOOST_DB()


class biquad_highpass(_biquad_parameters):
    """Parameters for a Biquad configured to highpass."""

    type: Literal["highpass"] = "highpass"
    filter_freq: float = DEFAULT_FILTER_FREQ()
    q_factor: float = DEFAULT_Q()


class biquad_highshelf(_biquad_parameters):
    """Parameters for a Biquad configured to highshelf."""

    type: Literal["highshelf"] = "highshelf"
    filter_freq: float = DEFAULT_FILTER_FREQ()
    q_factor: float = DEFAULT_Q()
    gain_db: float = DEFAULT_BOOST_DB()


class biquad_linkwitz(_biquad_parameters):
    """Parameters for a Biquad configured to linkwitz."""

    type: Literal["linkwitz"] = "linkwitz"
    f0: float = DEFAULT_FILTER_FREQ()
    q0: float = DEFAULT_Q()
    fp: float = DEFAULT_FILTER_FREQ()
    qp: float = DEFAULT_Q()


class biquad_lowpass(_biquad_parameters):
    """Parameters for a Biquad configured to lowpass."""

    type: Literal["lowpass"] = "lowpass"
    filter_freq: float = DEFAULT_FILTER_FREQ()
    q_factor: float = DEFAULT_Q()


class biquad_lowshelf(_biquad_parameters):
    """Parameters for a Biquad configured to lowshelf."""

    type: Literal["lowshelf"] = "lowshelf"
    filter_freq: float = DEFAULT_FILTER_FREQ()
    q_factor: float = DEFAULT_Q()
    gain_db: float = DEFAULT_BOOST_DB()


class biquad_notch(_biquad_parameters):
    """Parameters for a Biquad configured to notch."""

    type: Literal["notch"] = "notch"
    filter_freq: float = DEFAULT_FILTER_FREQ()
    q_factor: float = DEFAULT_Q()


class biquad_peaking(_biquad_parameters):
    """Parameters for a Biquad configured to peaking."""

    type: Literal["peaking"] = "peaking"
    filter_freq: float = DEFAULT_FILTER_FREQ()
    q_factor: float = DEFAULT_Q()
    boost_db: float = DEFAULT_BOOST_DB()


BIQUAD_TYPES = Union[
    biquad_allpass,
    biquad_bandpass,
    biquad_bandstop,
    biquad_bypass,
    biquad_constant_q,
    biquad_gain,
    biquad_highpass,
    biquad_highshelf,
    biquad_linkwitz,
    biquad_lowpass,
    biquad_lowshelf,
    biquad_notch,
    biquad_peaking,
]
