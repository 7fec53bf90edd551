# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
import pytest
import numpy as np
import scipy.signal as spsig

import iir_dsp.dsp.cascaded_biquads as cbq
import iir_dsp.dsp.signal_gen as gen
import iir_dsp.dsp.utils as utils
from iir_dsp.dsp.elliptic import stopband_attenuation
from iir_dsp.dsp.errors import ConfigurationError
from iir_dsp.dsp.state import STRUCTURES

FS = 48000
FC = 1000
WIDTH = 400

FAMILY_PARAMS = {
    "butterworth": {},
    "chebyshev1": {"ripple_db": 1.0},
    "chebyshev2": {"stopband_db": 40.0},
    "elliptic": {"ripple_db": 0.5, "rolloff": 0.0},
    "bessel": {},
}


def sos_response_db(sos, w):
    # magnitude of a cascade of sections at w rad/sample
    z_1 = np.exp(-1j * np.asarray(w, dtype=float))
    h = np.ones_like(z_1)
    for b0, b1, b2, a0, a1, a2 in sos:
        h *= (b0 + b1 * z_1 + b2 * z_1**2) / (a0 + a1 * z_1 + a2 * z_1**2)
    return utils.db(h)


def run(filter, signal, channel=0):
    output = np.zeros(len(signal))
    for n in range(len(signal)):
        output[n] = filter.process(signal[n], channel)
    return output


def scipy_design(family, order, btype, wn, params):
    if family == "butterworth":
        return spsig.butter(order, wn, btype, fs=FS, output="sos")
    if family == "chebyshev1":
        return spsig.cheby1(order, params["ripple_db"], wn, btype, fs=FS, output="sos")
    if family == "chebyshev2":
        return spsig.cheby2(order, params["stopband_db"], wn, btype, fs=FS, output="sos")
    if family == "elliptic":
        rs = stopband_attenuation(order, params["ripple_db"], params["rolloff"])
        return spsig.ellip(order, params["ripple_db"], rs, wn, btype, fs=FS, output="sos")
    return spsig.bessel(order, wn, btype, norm="delay", fs=FS, output="sos")


def make_filter(family, shape, order, **kwargs):
    filt = cbq.iir_filter(FS, family, shape)
    width = WIDTH if shape in ("bandpass", "bandstop") else None
    filt.setup(order, FC, width_freq=width, **FAMILY_PARAMS[family], **kwargs)
    return filt


@pytest.mark.parametrize("family", list(FAMILY_PARAMS))
@pytest.mark.parametrize("shape", ["lowpass", "highpass", "bandpass", "bandstop"])
@pytest.mark.parametrize("order", [1, 2, 3, 4, 5, 6])
def test_matches_scipy(family, shape, order):
    filt = make_filter(family, shape, order)

    if shape in ("bandpass", "bandstop"):
        wn = [FC - WIDTH / 2, FC + WIDTH / 2]
        assert filt.n_stages == order
    else:
        wn = FC
        assert filt.n_stages == (order + 1) // 2
    sos_ref = scipy_design(family, order, shape, wn, FAMILY_PARAMS[family])

    w = np.linspace(0, np.pi, 2001)
    ref_db = sos_response_db(sos_ref, w)
    flt_db = utils.db(filt.response(w))

    # ignore the stopband, where small absolute errors are large in dB
    mask = ref_db > -50
    tol = 0.05 if family == "elliptic" else 0.01
    np.testing.assert_allclose(flt_db[mask], ref_db[mask], atol=tol)


@pytest.mark.parametrize("order", [2, 3, 4, 5])
@pytest.mark.parametrize("ripple_db", [0.1, 1.0, 3.0])
@pytest.mark.parametrize("rolloff", [-1.0, 0.0, 1.0])
def test_elliptic_rolloff_matches_scipy(order, ripple_db, rolloff):
    params = {"ripple_db": ripple_db, "rolloff": rolloff}
    filt = cbq.elliptic(FS, "lowpass")
    filt.setup(order, FC, **params)

    sos_ref = scipy_design("elliptic", order, "lowpass", FC, params)
    w = np.linspace(0, np.pi, 2001)
    ref_db = sos_response_db(sos_ref, w)
    flt_db = utils.db(filt.response(w))

    mask = ref_db > -50
    np.testing.assert_allclose(flt_db[mask], ref_db[mask], atol=0.05)


@pytest.mark.parametrize("order", [1, 2, 3, 4, 8])
@pytest.mark.parametrize("shape", ["lowpass", "highpass"])
def test_cutoff_gains(order, shape):
    w = 2 * np.pi * FC / FS

    filt = make_filter("butterworth", shape, order)
    np.testing.assert_allclose(utils.db(filt.response(w)), -10 * np.log10(2), atol=1e-6)

    filt = make_filter("chebyshev1", shape, order)
    np.testing.assert_allclose(utils.db(filt.response(w)), -1.0, atol=1e-6)

    filt = make_filter("chebyshev2", shape, order)
    np.testing.assert_allclose(utils.db(filt.response(w)), -40.0, atol=1e-6)


@pytest.mark.parametrize("family", list(FAMILY_PARAMS))
@pytest.mark.parametrize("shape", ["lowpass", "highpass", "bandpass", "bandstop"])
@pytest.mark.parametrize("order", [1, 2, 5])
def test_reference_gain(family, shape, order):
    filt = make_filter(family, shape, order)
    digital = filt.layout
    np.testing.assert_allclose(
        np.abs(filt.response(digital.normal_w)), digital.normal_gain, rtol=1e-9
    )


@pytest.mark.parametrize("order", [1, 2, 3, 4, 7])
@pytest.mark.parametrize("gain_db", [-12, -6, 6, 12])
def test_butterworth_shelves(order, gain_db):
    fc_w = 2 * np.pi * FC / FS

    filt = cbq.butterworth(FS, "lowshelf")
    filt.setup(order, FC, gain_db=gain_db)
    np.testing.assert_allclose(utils.db(filt.response([0, fc_w, np.pi])),
                               [gain_db, gain_db / 2, 0], atol=1e-6)

    filt = cbq.butterworth(FS, "highshelf")
    filt.setup(order, FC, gain_db=gain_db)
    np.testing.assert_allclose(utils.db(filt.response([0, fc_w, np.pi])),
                               [0, gain_db / 2, gain_db], atol=1e-6)

    # the band edges of a band shelf are at half the gain
    filt = cbq.butterworth(FS, "bandshelf")
    filt.setup(order, FC, width_freq=WIDTH, gain_db=gain_db)
    edges_w = 2 * np.pi * np.array([FC - WIDTH / 2, FC + WIDTH / 2]) / FS
    np.testing.assert_allclose(utils.db(filt.response(edges_w)), gain_db / 2, atol=1e-6)
    np.testing.assert_allclose(utils.db(filt.response([0, np.pi])), 0, atol=1e-6)


@pytest.mark.parametrize("order", [1, 2, 3, 4, 5])
@pytest.mark.parametrize("gain_db", [-12, 12])
def test_chebyshev1_shelf(order, gain_db):
    ripple_db = 1.0
    band_db = gain_db - np.copysign(ripple_db, gain_db)
    filt = cbq.chebyshev1(FS, "lowshelf")
    filt.setup(order, FC, gain_db=gain_db, ripple_db=ripple_db)

    # odd orders reach the full gain at DC, even orders sit on the ripple
    dc_db = gain_db if order & 1 else band_db
    fc_w = 2 * np.pi * FC / FS
    np.testing.assert_allclose(utils.db(filt.response([0, fc_w, np.pi])),
                               [dc_db, band_db, 0], atol=1e-6)


@pytest.mark.parametrize("order", [1, 2, 3, 4, 5])
@pytest.mark.parametrize("gain_db", [-12, 12])
def test_chebyshev2_shelf(order, gain_db):
    stopband_db = 1.0
    band_db = np.copysign(stopband_db, gain_db)
    filt = cbq.chebyshev2(FS, "lowshelf")
    filt.setup(order, FC, gain_db=gain_db, stopband_db=stopband_db)

    nyquist_db = 0 if order & 1 else band_db
    fc_w = 2 * np.pi * FC / FS
    np.testing.assert_allclose(utils.db(filt.response([0, fc_w, np.pi])),
                               [gain_db, band_db, nyquist_db], atol=1e-6)


@pytest.mark.parametrize("family", ["butterworth", "chebyshev1", "chebyshev2"])
def test_flat_shelf(family):
    params = {k: 1.0 for k in FAMILY_PARAMS[family]}
    filt = cbq.iir_filter(FS, family, "lowshelf")
    filt.setup(4, FC, gain_db=0, **params)
    w = np.linspace(0, np.pi, 101)
    np.testing.assert_allclose(utils.db(filt.response(w)), 0, atol=1e-6)


def test_shelf_ripple_too_big():
    filt = cbq.chebyshev1(FS, "lowshelf")
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC, gain_db=3, ripple_db=3)
    filt = cbq.chebyshev2(FS, "highshelf")
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC, gain_db=-6, stopband_db=12)


@pytest.mark.parametrize("family", ["elliptic", "bessel"])
@pytest.mark.parametrize("shape", ["lowshelf", "highshelf", "bandshelf"])
def test_no_shelf_variant(family, shape):
    with pytest.raises(ConfigurationError):
        cbq.iir_filter(FS, family, shape)


def test_bandstop_impulse():
    fs = 1000
    filt = cbq.butterworth(fs, "bandstop")
    filt.setup(4, 100, width_freq=20)
    assert filt.n_stages == 4

    signal = gen.impulse(1000, 10)
    output = run(filt, signal)

    # causal, and the response dies away
    np.testing.assert_array_equal(output[:10], 0)
    assert output[10] != 0
    assert np.max(np.abs(output[-100:])) < 1e-6

    w = 2 * np.pi * np.linspace(90, 110, 201) / fs
    stop_db = utils.db(filt.response(w))
    assert np.max(stop_db) <= -3.0
    assert np.min(stop_db) < -60


@pytest.mark.parametrize("family", list(FAMILY_PARAMS))
def test_impulse_decays(family):
    filt = make_filter(family, "lowpass", 5)
    output = run(filt, gen.impulse(4800))
    assert np.max(np.abs(output[-100:])) < 1e-6 * np.max(np.abs(output))

    filt.reset_state()
    np.testing.assert_array_equal(run(filt, np.zeros(100)), 0)


@pytest.mark.parametrize("family", list(FAMILY_PARAMS))
@pytest.mark.parametrize("shape", ["lowpass", "bandpass"])
def test_structures_agree(family, shape):
    signal = gen.white_noise(FS, 0.01, 0.5)
    outputs = []
    for structure in STRUCTURES:
        filt = cbq.iir_filter(FS, family, shape, structure=structure)
        width = WIDTH if shape == "bandpass" else None
        filt.setup(4, FC, width_freq=width, **FAMILY_PARAMS[family])
        outputs.append(run(filt, signal))

    np.testing.assert_allclose(outputs[0], outputs[1], atol=1e-9)
    np.testing.assert_allclose(outputs[0], outputs[2], atol=1e-9)


@pytest.mark.parametrize("family", list(FAMILY_PARAMS))
def test_max_order(family):
    filt = make_filter(family, "lowpass", 16)
    assert filt.n_stages == 8
    assert filt.order == 16

    with pytest.raises(ConfigurationError):
        filt.setup(17, FC, **FAMILY_PARAMS[family])
    assert filt.order == 16


def test_band_max_order():
    filt = cbq.butterworth(FS, "bandpass", max_order=8)
    filt.setup(8, 4000, width_freq=2000)
    assert filt.n_stages == 8
    assert filt.max_stages == 8


@pytest.mark.parametrize("order", [0, -1, 2.5, True])
def test_bad_order(order):
    filt = cbq.butterworth(FS, "lowpass")
    with pytest.raises(ConfigurationError):
        filt.setup(order, FC)


@pytest.mark.parametrize("filter_freq", [0, -100, FS / 2, FS, np.nan, np.inf])
def test_bad_filter_freq(filter_freq):
    filt = cbq.chebyshev1(FS, "highpass")
    with pytest.raises(ConfigurationError):
        filt.setup(4, filter_freq, ripple_db=1)


@pytest.mark.parametrize("centre, width", [(100, 250),
                                           (23900, 400),
                                           (1000, 0),
                                           (1000, -10),
                                           (1000, np.nan)])
def test_bad_band(centre, width):
    filt = cbq.butterworth(FS, "bandpass")
    with pytest.raises(ConfigurationError):
        filt.setup(4, centre, width_freq=width)


def test_bad_params():
    filt = cbq.butterworth(FS, "lowpass")
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC, ripple_db=1)
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC, gain_db=6)
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC, width_freq=100)

    filt = cbq.butterworth(FS, "bandpass")
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC)

    filt = cbq.butterworth(FS, "lowshelf")
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC)

    filt = cbq.chebyshev1(FS, "lowpass")
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC)
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC, ripple_db=0)

    filt = cbq.elliptic(FS, "lowpass")
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC, ripple_db=1, rolloff=25)


def test_unknown_family_and_shape():
    with pytest.raises(ConfigurationError):
        cbq.iir_filter(FS, "chebyshev3", "lowpass")
    with pytest.raises(ConfigurationError):
        cbq.iir_filter(FS, "butterworth", "allpass")
    with pytest.raises(ConfigurationError):
        cbq.iir_filter(FS, "butterworth", "lowpass", max_order=0)


def test_failed_setup_keeps_design():
    filt = make_filter("chebyshev1", "lowpass", 4)
    sos = filt.sos.copy()
    layout = filt.layout

    with pytest.raises(ConfigurationError):
        filt.setup(6, FS, ripple_db=1)
    with pytest.raises(ConfigurationError):
        filt.setup(6, FC, ripple_db=-1)

    np.testing.assert_array_equal(filt.sos, sos)
    assert filt.layout is layout
    assert filt.order == 4


def test_unconfigured_passes_through():
    filt = cbq.elliptic(FS, "bandstop")
    assert filt.n_stages == 0
    assert filt.order == 0
    assert filt.layout is None

    signal = gen.log_chirp(FS, 0.01, 0.5)
    np.testing.assert_array_equal(run(filt, signal), signal)


def test_setup_keeps_state():
    signal = gen.white_noise(FS, 0.01, 0.5)
    half = len(signal) // 2

    filt = cbq.butterworth(FS, "lowpass")
    filt.setup(4, 1000)
    sos_1 = filt.sos
    output = run(filt, signal[:half])
    filt.setup(4, 1500)
    sos_2 = filt.sos
    output = np.concatenate([output, run(filt, signal[half:])])

    # a plain cascade updated the same way has the same history
    ref = cbq.cascaded_biquads(sos_1, FS, max_stages=filt.max_stages)
    output_ref = run(ref, signal[:half])
    ref.update_coeffs(sos_2)
    output_ref = np.concatenate([output_ref, run(ref, signal[half:])])

    np.testing.assert_allclose(output, output_ref, rtol=1e-12, atol=1e-15)


def test_setup_changes_order():
    filt = cbq.chebyshev2(FS, "highpass")
    filt.setup(8, FC, stopband_db=60)
    assert filt.n_stages == 4
    filt.setup(3, FC, stopband_db=60)
    assert filt.n_stages == 2
    assert filt.layout.n_poles == 3


def test_sections_ordered_by_q():
    filt = make_filter("chebyshev1", "lowpass", 8)

    # pole radius grows with Q, so the last section is the sharpest
    radii = [np.max(np.abs(np.roots(section[3:]))) for section in filt.sos]
    assert radii == sorted(radii)


@pytest.mark.parametrize("family", list(FAMILY_PARAMS))
@pytest.mark.parametrize("shape", ["lowpass", "highpass", "bandpass", "bandstop"])
@pytest.mark.parametrize("order", [2, 5, 8])
def test_gain_on_first_section(family, shape, order):
    filt = make_filter(family, shape, order)
    np.testing.assert_array_equal(filt.sos[:, 3], 1)
    np.testing.assert_array_equal(filt.sos[1:, 0], 1)


@pytest.mark.parametrize("structure", STRUCTURES)
@pytest.mark.parametrize("value", [np.nan, np.inf, -np.inf])
def test_non_finite_input(structure, value):
    # bad samples are filtered like any other, there's no check on input
    filt = cbq.butterworth(FS, "lowpass", structure=structure)
    filt.setup(4, FC)
    output = run(filt, [0.1, value, 0.1])
    assert np.isfinite(output[0])
    assert not np.isfinite(output[1])
    assert not np.isfinite(output[2])

    filt.reset_state()
    assert np.all(np.isfinite(run(filt, [0.1, 0.1])))


@pytest.mark.parametrize("family, param", [("chebyshev1", "ripple_db"),
                                           ("chebyshev2", "stopband_db"),
                                           ("elliptic", "ripple_db")])
@pytest.mark.parametrize("value", [4000.0, 5e-324])
def test_ripple_out_of_range(family, param, value):
    # positive, but too big or small to turn into a ripple factor
    filt = cbq.iir_filter(FS, family, "lowpass")
    params = dict(FAMILY_PARAMS[family])
    params[param] = value
    with pytest.raises(ConfigurationError):
        filt.setup(4, FC, **params)
    assert filt.n_stages == 0


def test_tiny_ripple():
    filt = cbq.chebyshev1(FS, "lowpass")
    filt.setup(4, FC, ripple_db=1e-20)
    assert np.all(np.isfinite(filt.sos))
    assert abs(sos_response_db(filt.sos, 0)) < 1e-6


def test_default_order():
    filt = cbq.butterworth(FS, "lowpass", max_order=6)
    filt.setup(filter_freq=FC)
    assert filt.order == 6
    assert filt.n_stages == 3

    with pytest.raises(ConfigurationError):
        filt.setup()
    assert filt.order == 6


if __name__ == "__main__":
    test_bandstop_impulse()
