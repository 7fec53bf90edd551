# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
import pytest
import numpy as np
from pydantic import TypeAdapter, ValidationError

import iir_dsp.dsp.biquad as bq
import iir_dsp.dsp.cascaded_biquads as cbq
from iir_dsp.dsp.errors import ConfigurationError
from iir_dsp.models import (
    BIQUAD_TYPES,
    FILTER_TYPES,
    FilterConfig,
    FilterDesign,
    make_biquad,
    make_filter,
)
from iir_dsp.models.filters import (
    bessel_parameters,
    butterworth_parameters,
    chebyshev1_parameters,
    chebyshev2_parameters,
    elliptic_parameters,
)

FS = 48000


def test_defaults():
    config = FilterConfig()
    assert config.n_chans == 1
    assert config.max_order == 16
    assert config.structure == "direct_form_2"

    params = butterworth_parameters()
    assert params.shape == "lowpass"
    assert params.order == 4
    assert params.family_params() == {}

    assert chebyshev1_parameters().family_params() == {"ripple_db": 1.0}
    assert chebyshev2_parameters().family_params() == {"stopband_db": 48.0}
    assert elliptic_parameters().family_params() == {"ripple_db": 1.0, "rolloff": 0.1}
    assert bessel_parameters().family_params() == {}


@pytest.mark.parametrize("kwargs", [{"shape": "bandpass"},
                                    {"shape": "lowshelf"},
                                    {"shape": "lowpass", "width_freq": 100},
                                    {"shape": "highpass", "gain_db": 6},
                                    {"order": 0},
                                    {"filter_freq": -1},
                                    {"filter_freq": float("nan")},
                                    {"ripple_db": 1}])
def test_bad_butterworth(kwargs):
    with pytest.raises(ValidationError):
        butterworth_parameters(**kwargs)


def test_no_shelf_for_elliptic_and_bessel():
    with pytest.raises(ValidationError):
        elliptic_parameters(shape="lowshelf", gain_db=6)
    with pytest.raises(ValidationError):
        bessel_parameters(shape="bandshelf", width_freq=100, gain_db=6)
    with pytest.raises(ValidationError):
        elliptic_parameters(rolloff=30)


def test_config_checks():
    with pytest.raises(ValidationError):
        FilterConfig(n_chans=0)
    with pytest.raises(ValidationError):
        FilterConfig(structure="lattice")


@pytest.mark.parametrize("params, direct", [
    (butterworth_parameters(order=5, filter_freq=2000),
     lambda: cbq.butterworth(FS, "lowpass")),
    (chebyshev1_parameters(shape="bandpass", width_freq=500, ripple_db=0.5),
     lambda: cbq.chebyshev1(FS, "bandpass")),
    (chebyshev2_parameters(shape="highshelf", gain_db=-9, stopband_db=2),
     lambda: cbq.chebyshev2(FS, "highshelf")),
    (elliptic_parameters(shape="bandstop", order=3, width_freq=200, rolloff=1.0),
     lambda: cbq.elliptic(FS, "bandstop")),
    (bessel_parameters(shape="highpass", order=6),
     lambda: cbq.bessel(FS, "highpass")),
])
def test_make_filter(params, direct):
    filt = make_filter(FS, params)

    ref = direct()
    ref.setup(
        params.order,
        params.filter_freq,
        width_freq=params.width_freq,
        gain_db=params.gain_db,
        **params.family_params(),
    )
    assert filt.family == ref.family
    assert filt.shape == ref.shape
    np.testing.assert_array_equal(filt.sos, ref.sos)


def test_make_filter_config():
    config = FilterConfig(n_chans=2, max_order=6, structure="transposed_direct_form_2")
    filt = make_filter(FS, butterworth_parameters(order=6), config)
    assert filt.n_chans == 2
    assert filt.max_order == 6
    assert filt.structure == "transposed_direct_form_2"

    with pytest.raises(ConfigurationError):
        make_filter(FS, butterworth_parameters(order=7), config)


def test_filter_types_discriminator():
    adapter = TypeAdapter(FILTER_TYPES)
    params = adapter.validate_python({"family": "chebyshev2", "stopband_db": 60})
    assert isinstance(params, chebyshev2_parameters)

    with pytest.raises(ValidationError):
        adapter.validate_python({"family": "chebyshev3"})


def test_filter_design_json():
    design = FilterDesign.model_validate_json(
        '{"fs": 44100, "config": {"n_chans": 2},'
        ' "parameters": {"family": "elliptic", "shape": "highpass", "order": 5,'
        ' "filter_freq": 200, "ripple_db": 0.5}}'
    )
    assert isinstance(design.parameters, elliptic_parameters)

    filt = design.make()
    assert filt.fs == 44100
    assert filt.n_chans == 2
    assert filt.order == 5
    assert filt.n_stages == 3

    # a round trip through JSON gives the same design
    again = FilterDesign.model_validate_json(design.model_dump_json())
    np.testing.assert_array_equal(again.make().sos, filt.sos)


def test_filter_design_checks():
    with pytest.raises(ValidationError):
        FilterDesign.model_validate({"fs": 0, "parameters": {"family": "bessel"}})
    with pytest.raises(ValidationError):
        FilterDesign.model_validate({"fs": 48000})

    # the frequency is only checked against fs when the filter is made
    design = FilterDesign.model_validate(
        {"fs": 8000, "parameters": {"family": "butterworth", "filter_freq": 5000}}
    )
    with pytest.raises(ConfigurationError):
        design.make()


@pytest.mark.parametrize("params", [
    {"type": "lowpass", "filter_freq": 500, "q_factor": 0.5},
    {"type": "peaking", "filter_freq": 2000, "q_factor": 2, "boost_db": -6},
    {"type": "highshelf", "filter_freq": 8000, "q_factor": 0.707, "gain_db": 3},
    {"type": "bandpass", "filter_freq": 1000, "bw": 2},
    {"type": "linkwitz", "f0": 50, "q0": 0.5, "fp": 30, "qp": 0.707},
    {"type": "gain", "gain_db": -3},
    {"type": "bypass"},
])
def test_biquad_models(params):
    model = TypeAdapter(BIQUAD_TYPES).validate_python(params)
    filt_type = params.pop("type")
    coeffs = getattr(bq, f"make_biquad_{filt_type}")(FS, **params)
    assert model.coeffs(FS) == coeffs

    filt = make_biquad(FS, model, FilterConfig(n_chans=3))
    assert filt.n_chans == 3
    assert filt.coeffs == coeffs


def test_bad_biquad_models():
    adapter = TypeAdapter(BIQUAD_TYPES)
    with pytest.raises(ValidationError):
        adapter.validate_python({"type": "lowpass", "q_factor": 0})
    with pytest.raises(ValidationError):
        adapter.validate_python({"type": "peaking", "boost_db": 30})
    with pytest.raises(ValidationError):
        adapter.validate_python({"type": "notch", "gain_db": 3})
